"""sitepress.renderer: server-side rendering of a single page to HTML.

The application markup comes from an :class:`AppRenderer` bound to the
server bundle; :class:`SSRRenderer` places it into the HTML shell together
with the head tags and the client's initial assets.
"""
from __future__ import annotations

import asyncio
import json
import traceback
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import List, Optional, Protocol, Sequence, Union

from jinja2 import Environment, FileSystemLoader, PackageLoader, Template, select_autoescape

from sitepress.errors import RenderError
from sitepress.manifest import ClientManifest, Manifests, ServerBundle

__all__ = [
    "RenderContext",
    "AppRenderer",
    "CommandAppRenderer",
    "SSRRenderer",
    "load_template",
]

SHELL_TEMPLATE = "index.ssr.html"


@dataclass(frozen=True, slots=True)
class RenderContext:
    """Everything one page render receives."""

    url: str
    user_head_tags: str
    page_meta: str
    title: str
    lang: str


class AppRenderer(Protocol):
    async def render(self, bundle: ServerBundle, context: RenderContext) -> str:
        ...


class CommandAppRenderer:
    """Renders the application markup for a page in an external process.

    Receives ``{"bundle": ..., "context": ...}`` on stdin and prints the
    markup on stdout.
    """

    def __init__(self, command: Sequence[str], cwd: Optional[str] = None) -> None:
        if not command:
            raise ValueError("renderer command must not be empty")
        self.command = list(command)
        self.cwd = cwd

    async def render(self, bundle: ServerBundle, context: RenderContext) -> str:
        payload = json.dumps({"bundle": bundle.data, "context": asdict(context)}).encode("utf-8")
        proc = await asyncio.create_subprocess_exec(
            *self.command,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=self.cwd,
        )
        stdout, stderr = await proc.communicate(payload)
        if proc.returncode != 0:
            message = stderr.decode("utf-8", "replace").strip()
            raise RuntimeError(f"renderer exited with status {proc.returncode}: {message}")
        return stdout.decode("utf-8")


def load_template(path: Union[str, Path, None] = None) -> Template:
    """Load the HTML shell, either the packaged one or a custom file."""
    if path is None:
        loader = PackageLoader("sitepress", "templates")
        name = SHELL_TEMPLATE
    else:
        p = Path(path)
        loader = FileSystemLoader(str(p.parent))
        name = p.name
    env = Environment(loader=loader, autoescape=select_autoescape(["html", "xml"]))
    return env.get_template(name)


def _asset_tags(manifest: ClientManifest) -> tuple[str, str, str]:
    hints: List[str] = []
    styles: List[str] = []
    scripts: List[str] = []
    for file in manifest.initial:
        href = manifest.public_path + file
        if file.endswith(".css"):
            hints.append(f'<link rel="preload" href="{href}" as="style">')
            styles.append(f'<link rel="stylesheet" href="{href}">')
        elif file.endswith(".js"):
            hints.append(f'<link rel="preload" href="{href}" as="script">')
            scripts.append(f'<script src="{href}" defer></script>')
    return "".join(hints), "".join(styles), "".join(scripts)


class SSRRenderer:
    """Built once per build; safe to call concurrently."""

    def __init__(self, manifests: Manifests, app_renderer: AppRenderer, template: Template) -> None:
        self.bundle = manifests.server
        self.client_manifest = manifests.client
        self.app_renderer = app_renderer
        self.template = template
        self._resource_hints, self._styles, self._scripts = _asset_tags(manifests.client)

    async def render_to_string(self, context: RenderContext) -> str:
        try:
            app_html = await self.app_renderer.render(self.bundle, context)
            return self.template.render(
                lang=context.lang,
                title=context.title,
                user_head_tags=context.user_head_tags,
                page_meta=context.page_meta,
                resource_hints=self._resource_hints,
                styles=self._styles,
                app_html=app_html,
                scripts=self._scripts,
            )
        except Exception as exc:
            raise RenderError(str(exc) or type(exc).__name__, traceback.format_exc()) from exc
