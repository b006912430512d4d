"""
Configuration and site-model schemas for SitePress.

Pydantic describes both the prepared site model (pages, head tags, output
directory) and the build options read from ``sitepress.yaml``.
"""
from __future__ import annotations

import errno
import json
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

_TAG_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9-]*$")

DEFAULT_TITLE = "SitePress"
DEFAULT_LANG = "en"


class HeadTagSpec(BaseModel):
    """One element destined for the document ``<head>``."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    tag: str
    attrs: Dict[str, str] = Field(default_factory=dict)
    inner_html: Optional[str] = Field(None, alias="innerHTML")

    @field_validator("tag")
    def _check_tag_name(cls, v: str) -> str:
        if not _TAG_NAME_RE.match(v):
            raise ValueError(f"invalid HTML tag name: {v!r}")
        return v


class Page(BaseModel):
    """A single site page, as produced by the content loader."""
    model_config = ConfigDict(frozen=True)

    path: str
    frontmatter: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("path")
    def _check_leading_slash(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError(f"page path must start with '/': {v!r}")
        return v

    @property
    def meta(self) -> Optional[List[Dict[str, str]]]:
        return self.frontmatter.get("meta")


class SiteConfig(BaseModel):
    """User site configuration; only ``head`` is read by the build."""
    model_config = ConfigDict(frozen=True, extra="allow")

    head: List[HeadTagSpec] = Field(default_factory=list)


class SiteOptions(BaseModel):
    """Prepared site model. Immutable for the duration of a build."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    out_dir: Path = Field(..., alias="outDir")
    site_config: SiteConfig = Field(default_factory=SiteConfig, alias="siteConfig")
    pages: List[Page] = Field(default_factory=list)


class BuildOptions(BaseModel):
    """Settings for one build run."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    bundler_command: List[str] = Field(..., min_length=1, description="Bundler argv.")
    renderer_command: List[str] = Field(..., min_length=1, description="Page renderer argv.")
    out_dir: Optional[Path] = Field(None, description="Overrides the site's output directory.")
    production: bool = Field(True, description="Compile both targets in production mode.")
    concurrency: Optional[int] = Field(
        None, ge=1, description="Upper bound on in-flight page renders; None means unbounded."
    )
    title: str = Field(DEFAULT_TITLE, description="Document title passed to every render.")
    lang: str = Field(DEFAULT_LANG, min_length=1, description="Document language.")
    strict: bool = Field(False, description="Fail the build if any page failed to render.")
    stitch_target: str = Field("client", min_length=1, description="Target whose chunks get stitched.")
    template: Optional[Path] = Field(None, description="Custom HTML shell template.")


_DEFAULT_CFG = Path("sitepress.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def read_mapping(path: Path) -> dict[str, Any]:
    """Read a YAML or JSON mapping, choosing the parser by file suffix."""
    suffix = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _read_yaml(path)
    if suffix == ".json":
        return _read_json(path)
    raise ValueError(f"Unsupported config format: {suffix}")


def load_config(path: Union[str, Path, None]) -> BuildOptions:
    """
    Read YAML or JSON and return validated BuildOptions.
    Raises FileNotFoundError when the file (or the default one) is missing.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(_DEFAULT_CFG))
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    data = read_mapping(path_obj)
    return BuildOptions(**data)


__all__ = [
    "DEFAULT_LANG",
    "DEFAULT_TITLE",
    "BuildOptions",
    "HeadTagSpec",
    "Page",
    "SiteConfig",
    "SiteOptions",
    "ValidationError",
    "load_config",
    "read_mapping",
]
