import asyncio

import pytest

from sitepress.config import Page
from sitepress.emitter import PageEmitter, output_path, with_not_found_page
from sitepress.manifest import ClientManifest, Manifests, ServerBundle
from sitepress.renderer import SSRRenderer, load_template

from conftest import FakeAppRenderer


def make_renderer(app_renderer):
    manifests = Manifests(server=ServerBundle({}), client=ClientManifest({}))
    return SSRRenderer(manifests, app_renderer, load_template())


def html_files(root):
    return sorted(p.relative_to(root).as_posix() for p in root.rglob("*.html"))


class BarrierRenderer(FakeAppRenderer):
    """Blocks every render until *expected* renders have started."""

    def __init__(self, expected):
        super().__init__()
        self.expected = expected
        self.started = 0
        self.in_flight = 0
        self.max_in_flight = 0
        self.all_started = asyncio.Event()

    async def render(self, bundle, context):
        self.started += 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        if self.started >= self.expected:
            self.all_started.set()
        await self.all_started.wait()
        self.in_flight -= 1
        return await super().render(bundle, context)


class SlowRenderer(FakeAppRenderer):
    def __init__(self):
        super().__init__()
        self.in_flight = 0
        self.max_in_flight = 0

    async def render(self, bundle, context):
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        await asyncio.sleep(0.01)
        self.in_flight -= 1
        return await super().render(bundle, context)


def test_output_path(tmp_path):
    assert output_path(tmp_path, "/") == (tmp_path / "index.html").resolve()
    assert output_path(tmp_path, "/foo/bar.html") == (tmp_path / "foo" / "bar.html").resolve()
    assert output_path(tmp_path, "/404.html") == (tmp_path / "404.html").resolve()


def test_output_path_cannot_escape(tmp_path):
    with pytest.raises(ValueError):
        output_path(tmp_path / "out", "/../secret.html")


def test_not_found_page_added_once():
    pages = [Page(path="/"), Page(path="/a.html")]
    assert [p.path for p in with_not_found_page(pages)] == ["/", "/a.html", "/404.html"]

    custom = [Page(path="/404.html", frontmatter={"title": "Lost"}), Page(path="/")]
    assert with_not_found_page(custom) == custom


@pytest.mark.asyncio()
async def test_emit_writes_every_page_and_404(tmp_path):
    app = FakeAppRenderer()
    emitter = PageEmitter(make_renderer(app), tmp_path, '<meta charset="utf-8">', title="T", lang="fr")
    pages = [Page(path="/"), Page(path="/foo/bar.html"), Page(path="/baz.html")]

    result = await emitter.emit(pages)

    assert html_files(tmp_path) == ["404.html", "baz.html", "foo/bar.html", "index.html"]
    assert len(result.written) == 4
    assert result.failed == []
    assert '<div id="app">/foo/bar.html</div>' in (tmp_path / "foo" / "bar.html").read_text(encoding="utf-8")
    assert {c.user_head_tags for c in app.contexts} == {'<meta charset="utf-8">'}
    assert {(c.title, c.lang) for c in app.contexts} == {("T", "fr")}


@pytest.mark.asyncio()
async def test_context_carries_page_meta(tmp_path):
    app = FakeAppRenderer()
    emitter = PageEmitter(make_renderer(app), tmp_path)
    page = Page(path="/m.html", frontmatter={"meta": [{"name": "keywords", "content": "a,b"}]})

    await emitter.emit([page, Page(path="/404.html")])

    by_url = {c.url: c for c in app.contexts}
    assert by_url["/m.html"].page_meta == '<meta name="keywords" content="a,b">'
    assert by_url["/404.html"].page_meta == ""
    assert html_files(tmp_path) == ["404.html", "m.html"]


@pytest.mark.asyncio()
async def test_failed_page_is_skipped_and_logged(tmp_path, log_records):
    emitter = PageEmitter(make_renderer(FakeAppRenderer(fail_on=["/two.html"])), tmp_path)
    pages = [Page(path="/one.html"), Page(path="/two.html"), Page(path="/three.html")]

    result = await emitter.emit(pages)

    assert html_files(tmp_path) == ["404.html", "one.html", "three.html"]
    assert result.failed == ["/two.html"]
    errors = [r.getMessage() for r in log_records.records if r.levelname == "ERROR"]
    assert len(errors) == 1
    assert "Error rendering /two.html" in errors[0]
    assert "component threw" in errors[0]


@pytest.mark.asyncio()
async def test_existing_file_is_overwritten(tmp_path):
    (tmp_path / "index.html").write_text("stale", encoding="utf-8")
    await PageEmitter(make_renderer(FakeAppRenderer()), tmp_path).emit([Page(path="/")])
    assert "stale" not in (tmp_path / "index.html").read_text(encoding="utf-8")


@pytest.mark.asyncio()
async def test_all_pages_render_concurrently(tmp_path):
    pages = [Page(path=f"/p{i}.html") for i in range(10)]
    app = BarrierRenderer(expected=11)
    emitter = PageEmitter(make_renderer(app), tmp_path)

    await asyncio.wait_for(emitter.emit(pages), timeout=5)

    assert app.max_in_flight == 11
    assert len(html_files(tmp_path)) == 11


@pytest.mark.asyncio()
async def test_concurrency_limit(tmp_path):
    pages = [Page(path=f"/p{i}.html") for i in range(12)]
    app = SlowRenderer()
    emitter = PageEmitter(make_renderer(app), tmp_path, concurrency=3)

    result = await emitter.emit(pages)

    assert app.max_in_flight <= 3
    assert len(result.written) == 13
