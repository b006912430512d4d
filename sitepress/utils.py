"""sitepress.utils: filesystem primitives used by the build steps.

Blocking calls run in worker threads so that concurrent page writes
interleave on the event loop.
"""

from __future__ import annotations

import asyncio
import os
import shutil
from pathlib import Path
from typing import Sequence, Union

from sitepress.logger import logger

__all__: Sequence[str] = (
    "remove_tree",
    "remove_file",
    "ensure_dir",
    "read_text",
    "write_text",
    "resolve_within",
    "display_path",
)


def _rmtree(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        path.unlink()


async def remove_tree(path: Union[str, Path]) -> None:
    """Recursively delete *path*; a missing path is not an error."""
    p = Path(path)
    await asyncio.to_thread(_rmtree, p)
    logger.debug("Removed %s", p)


async def remove_file(path: Union[str, Path]) -> None:
    await asyncio.to_thread(Path(path).unlink)


async def ensure_dir(path: Union[str, Path]) -> Path:
    """Create *path* and every missing parent."""
    p = Path(path)
    await asyncio.to_thread(p.mkdir, parents=True, exist_ok=True)
    return p


async def read_text(path: Union[str, Path]) -> str:
    return await asyncio.to_thread(Path(path).read_text, encoding="utf-8")


async def write_text(path: Union[str, Path], content: str) -> None:
    await asyncio.to_thread(Path(path).write_text, content, encoding="utf-8")


def resolve_within(root: Union[str, Path], relative: str) -> Path:
    """Join *relative* onto *root*, refusing results outside of *root*."""
    base = Path(root).resolve()
    target = (base / relative).resolve()
    if target != base and base not in target.parents:
        raise ValueError(f"{relative!r} resolves outside of {base}")
    return target


def display_path(path: Union[str, Path]) -> str:
    """*path* relative to the working directory, or as-is across drives."""
    try:
        return os.path.relpath(path)
    except ValueError:
        return str(path)
