"""sitepress.errors: exceptions raised by the build pipeline.

Everything derived from :class:`BuildError` except :class:`RenderError`
aborts the build. ``RenderError`` is recovered per page by the emitter.
"""
from __future__ import annotations

from pathlib import Path
from typing import List, Sequence, Union


class BuildError(RuntimeError):
    """Base class for build failures reported to the caller."""


class CompileError(BuildError):
    """The bundler could not be invoked, or a target reported errors."""

    def __init__(self, message: str, errors: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.errors: List[str] = list(errors)


class ManifestMissing(BuildError):
    """A manifest the compiler should have written is not on disk."""

    def __init__(self, path: Union[str, Path]) -> None:
        super().__init__(f"Manifest not found: {path}")
        self.path = Path(path)


class AssetContractViolation(BuildError):
    """No emitted asset matched an expected chunk name pattern."""

    def __init__(self, pattern: str, target: str) -> None:
        super().__init__(f"No asset matching {pattern!r} in the {target} target output")
        self.pattern = pattern
        self.target = target


class RenderError(BuildError):
    """Rendering a single page failed; ``detail`` holds the traceback text."""

    def __init__(self, message: str, detail: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail or message


class PageRenderFailures(BuildError):
    """Raised after emission in strict mode when any page failed to render."""

    def __init__(self, paths: Sequence[str]) -> None:
        super().__init__(f"{len(paths)} page(s) failed to render: {', '.join(paths)}")
        self.paths: List[str] = list(paths)


__all__ = [
    "BuildError",
    "CompileError",
    "ManifestMissing",
    "AssetContractViolation",
    "RenderError",
    "PageRenderFailures",
]
