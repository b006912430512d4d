"""String rendering of ``<head>`` elements.

Values come from the site configuration and are trusted: nothing is
escaped. Only ``link`` and ``meta`` are written without a closing tag.
"""
from __future__ import annotations

from typing import Iterable, Mapping, Optional

from sitepress.config import HeadTagSpec

_NO_CLOSING_TAG = frozenset({"link", "meta"})


def needs_closing(tag: str) -> bool:
    return tag not in _NO_CLOSING_TAG


def render_attrs(attrs: Optional[Mapping[str, str]] = None) -> str:
    if not attrs:
        return ""
    return " " + " ".join(f'{name}="{value}"' for name, value in attrs.items())


def render_head_tag(spec: HeadTagSpec) -> str:
    """``<tag attrs>innerHTML</tag>``; void-like tags get no closing tag."""
    closing = f"</{spec.tag}>" if needs_closing(spec.tag) else ""
    return f"<{spec.tag}{render_attrs(spec.attrs)}>{spec.inner_html or ''}{closing}"


def render_head_tags(specs: Iterable[HeadTagSpec]) -> str:
    return "\n  ".join(render_head_tag(s) for s in specs)


def render_page_meta(meta: Optional[Iterable[Mapping[str, str]]]) -> str:
    """Concatenate one ``<meta ...>`` per mapping; empty string when absent."""
    if not meta:
        return ""
    return "".join(f"<meta{render_attrs(m)}>" for m in meta)


__all__ = ["needs_closing", "render_attrs", "render_head_tag", "render_head_tags", "render_page_meta"]
