# File: tests/conftest.py
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence

import pytest
import yaml

from sitepress.config import BuildOptions
from sitepress.logger import LOGGER_NAME
from sitepress.manifest import ServerBundle
from sitepress.renderer import RenderContext
from sitepress.targets import CLIENT_FILENAME

STYLE_HASH = "ab12cd34"
APP_HASH = "ef56gh78"
CSS_ASSET = "assets/css/styles.ab12cd34.css"


def chunk_name(filename: str, name: str, chunkhash: str) -> str:
    """Expand a bundler file name template the way the bundler would."""
    return filename.replace("[name]", name).replace("[chunkhash:8]", chunkhash[:8])


STYLE_CHUNK = chunk_name(CLIENT_FILENAME, "styles", STYLE_HASH)
APP_CHUNK = chunk_name(CLIENT_FILENAME, "app", APP_HASH)


class FakeBundler:
    """
    Stands in for the external bundler: writes the emitted chunks (named
    from the client config's file name template) and both manifests under
    the client output path and returns stats.
    """

    def __init__(self, errors: Sequence[str] = (), skip: Sequence[str] = ()) -> None:
        self.errors = list(errors)
        self.skip = set(skip)
        self.calls: List[Sequence[Mapping[str, Any]]] = []

    async def run(self, configs: Sequence[Mapping[str, Any]]) -> Dict[str, Any]:
        self.calls.append(configs)
        client = configs[0]
        out = Path(client["outputPath"])
        style_chunk = chunk_name(client["filename"], "styles", STYLE_HASH)
        app_chunk = chunk_name(client["filename"], "app", APP_HASH)
        files = {
            style_chunk: "S",
            app_chunk: "A",
            CSS_ASSET: "body{}",
            "manifest/server.json": json.dumps({"entry": "server-bundle.js", "files": {"server-bundle.js": ""}}),
            "manifest/client.json": json.dumps({"publicPath": "/", "initial": [app_chunk, CSS_ASSET], "async": []}),
        }
        if not self.errors:
            for name, content in files.items():
                if name in self.skip:
                    continue
                (out / name).parent.mkdir(parents=True, exist_ok=True)
                (out / name).write_text(content, encoding="utf-8")
        return {
            "errors": [],
            "children": [
                {
                    "name": "client",
                    "assets": [{"name": n} for n in (style_chunk, app_chunk, CSS_ASSET) if n not in self.skip],
                    "errors": list(self.errors),
                    "modules": [{"id": 1, "source": "..."}],
                },
                {
                    "name": "server",
                    "assets": [{"name": "server-bundle.js"}],
                    "errors": [],
                    "modules": [],
                },
            ],
        }


class FakeAppRenderer:
    """Renders ``<div id="app">URL</div>``; raises for URLs listed in ``fail_on``."""

    def __init__(self, fail_on: Sequence[str] = ()) -> None:
        self.fail_on = set(fail_on)
        self.contexts: List[RenderContext] = []

    async def render(self, bundle: ServerBundle, context: RenderContext) -> str:
        self.contexts.append(context)
        if context.url in self.fail_on:
            raise RuntimeError(f"component threw while rendering {context.url}")
        return f'<div id="app">{context.url}</div>'


@pytest.fixture()
def build_options() -> BuildOptions:
    return BuildOptions(bundler_command=["bundle"], renderer_command=["render"])


@pytest.fixture()
def site_dir(tmp_path) -> Path:
    """
    Source directory with a prepared site model of three pages.
    """
    source = tmp_path / "docs"
    source.mkdir()
    site = {
        "outDir": "dist",
        "siteConfig": {
            "head": [
                {"tag": "link", "attrs": {"rel": "icon", "href": "/favicon.ico"}},
                {"tag": "script", "attrs": {}, "innerHTML": "window.x = 1"},
            ]
        },
        "pages": [
            {"path": "/"},
            {"path": "/guide/intro.html", "frontmatter": {"meta": [{"name": "description", "content": "Intro"}]}},
            {"path": "/about.html"},
        ],
    }
    (source / "site.yaml").write_text(yaml.safe_dump(site), encoding="utf-8")
    return source


@pytest.fixture()
def log_records(caplog):
    """Capture records of the project logger, which does not propagate."""
    lg = logging.getLogger(LOGGER_NAME)
    lg.addHandler(caplog.handler)
    caplog.set_level(logging.DEBUG, logger=LOGGER_NAME)
    yield caplog
    lg.removeHandler(caplog.handler)
