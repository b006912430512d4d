"""
Loads the prepared site model for a source directory.

Content discovery and parsing happen upstream; this step only reads the
resulting model file (``site.yaml``, ``site.yml`` or ``site.json``).
"""
from __future__ import annotations

import errno
import os
from pathlib import Path
from typing import Union

from sitepress.config import SiteOptions, read_mapping
from sitepress.logger import logger

SITE_FILES = ("site.yaml", "site.yml", "site.json")
DEFAULT_OUT_DIR = "dist"


def find_site_file(source_dir: Path) -> Path:
    for name in SITE_FILES:
        candidate = source_dir / name
        if candidate.is_file():
            return candidate
    raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(source_dir / SITE_FILES[0]))


def prepare(source_dir: Union[str, Path]) -> SiteOptions:
    """
    Return the SiteOptions described by the model file in *source_dir*.

    A relative ``outDir`` is resolved against the source directory; when it
    is absent the output goes to ``<source_dir>/dist``.
    """
    source = Path(source_dir).expanduser().resolve()
    site_file = find_site_file(source)
    data = read_mapping(site_file)

    out_dir = Path(data.pop("outDir", data.pop("out_dir", DEFAULT_OUT_DIR)))
    if not out_dir.is_absolute():
        out_dir = source / out_dir

    options = SiteOptions(out_dir=out_dir, **data)
    logger.debug("Prepared %d pages from %s", len(options.pages), site_file)
    return options


__all__ = ["prepare", "find_site_file", "SITE_FILES", "DEFAULT_OUT_DIR"]
