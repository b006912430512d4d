"""sitepress.emitter: renders every page and writes the HTML files."""

from __future__ import annotations

import asyncio
import contextlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Union

from sitepress.config import DEFAULT_LANG, DEFAULT_TITLE, Page
from sitepress.errors import RenderError
from sitepress.head import render_page_meta
from sitepress.logger import logger
from sitepress.renderer import RenderContext, SSRRenderer
from sitepress.utils import ensure_dir, resolve_within, write_text

__all__ = ["NOT_FOUND_PATH", "EmitResult", "PageEmitter", "output_path", "with_not_found_page"]

NOT_FOUND_PATH = "/404.html"


@dataclass(slots=True)
class EmitResult:
    written: List[Path] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


def output_path(out_dir: Union[str, Path], page_path: str) -> Path:
    """``/`` maps to ``index.html``; other paths drop the leading slash."""
    filename = "index.html" if page_path == "/" else page_path.removeprefix("/")
    return resolve_within(out_dir, filename)


def with_not_found_page(pages: Sequence[Page]) -> List[Page]:
    """Append a synthetic 404 page unless the site defines one."""
    result = list(pages)
    if not any(p.path == NOT_FOUND_PATH for p in result):
        result.append(Page(path=NOT_FOUND_PATH))
    return result


class PageEmitter:
    """Renders pages concurrently; a failed page is logged and skipped.

    All renders are launched together. ``concurrency`` caps how many are
    in flight at once; ``None`` leaves them unbounded.
    """

    def __init__(
        self,
        renderer: SSRRenderer,
        out_dir: Union[str, Path],
        user_head_tags: str = "",
        *,
        title: str = DEFAULT_TITLE,
        lang: str = DEFAULT_LANG,
        concurrency: Optional[int] = None,
    ) -> None:
        self.renderer = renderer
        self.out_dir = Path(out_dir)
        self.user_head_tags = user_head_tags
        self.title = title
        self.lang = lang
        self._semaphore = asyncio.Semaphore(concurrency) if concurrency else None

    def context_for(self, page: Page) -> RenderContext:
        return RenderContext(
            url=page.path,
            user_head_tags=self.user_head_tags,
            page_meta=render_page_meta(page.meta),
            title=self.title,
            lang=self.lang,
        )

    async def render_page(self, page: Page) -> Optional[Path]:
        """Render and write one page; return the written path, or None if rendering failed."""
        guard = self._semaphore if self._semaphore is not None else contextlib.nullcontext()
        async with guard:
            try:
                html = await self.renderer.render_to_string(self.context_for(page))
            except RenderError as exc:
                logger.error("Error rendering %s:\n%s", page.path, exc.detail)
                return None

            file_path = output_path(self.out_dir, page.path)
            await ensure_dir(file_path.parent)
            await write_text(file_path, html)
            logger.debug("Wrote %s", file_path)
            return file_path

    async def emit(self, pages: Sequence[Page]) -> EmitResult:
        """Render *pages* plus the fallback 404 page and wait for all of them."""
        pages = with_not_found_page(pages)
        paths = await asyncio.gather(*(self.render_page(p) for p in pages))

        result = EmitResult()
        for page, path in zip(pages, paths):
            if path is None:
                result.failed.append(page.path)
            else:
                result.written.append(path)
        return result
