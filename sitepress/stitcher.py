"""
Workaround for the empty style chunk emitted by CSS extraction.

The extractor emits ``styles.<hash>.js`` as a separate chunk, but the
bundler runtime only resolves modules correctly when that code runs before
``app.<hash>.js``. The style chunk is removed and its code prepended to the
app chunk.
"""
from __future__ import annotations

import re
from pathlib import Path
from typing import Union

from sitepress.compiler import Asset, CompileReport
from sitepress.errors import AssetContractViolation
from sitepress.logger import logger
from sitepress.utils import read_text, remove_file, write_text

STYLE_CHUNK_RE = re.compile(r"styles\.\w{8}\.js$")
APP_CHUNK_RE = re.compile(r"app\.\w{8}\.js$")


def find_asset(report: CompileReport, target: str, pattern: re.Pattern[str]) -> Asset:
    """Return the first asset of *target* whose name matches *pattern*."""
    try:
        assets = report.target(target).assets
    except KeyError:
        raise AssetContractViolation(pattern.pattern, target) from None
    for asset in assets:
        if pattern.search(asset.name):
            return asset
    raise AssetContractViolation(pattern.pattern, target)


class AssetStitcher:
    def __init__(self, target: str = "client") -> None:
        self.target = target

    async def stitch(self, report: CompileReport, out_dir: Union[str, Path]) -> Path:
        """Merge the style chunk into the app chunk and return the app chunk path."""
        out = Path(out_dir)
        style_chunk = find_asset(report, self.target, STYLE_CHUNK_RE)
        app_chunk = find_asset(report, self.target, APP_CHUNK_RE)

        style_path = out / style_chunk.name
        style_content = await read_text(style_path)
        await remove_file(style_path)

        # the style code must run first
        app_path = out / app_chunk.name
        app_content = await read_text(app_path)
        await write_text(app_path, style_content + app_content)

        logger.debug("Merged %s into %s", style_chunk.name, app_chunk.name)
        return app_path


__all__ = ["STYLE_CHUNK_RE", "APP_CHUNK_RE", "AssetStitcher", "find_asset"]
