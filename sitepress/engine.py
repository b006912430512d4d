# File: sitepress/engine.py
"""sitepress.engine: orchestration of a full static build."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Union

from sitepress.compiler import Bundler, CommandBundler, CompileReport, DualTargetCompiler
from sitepress.config import BuildOptions, SiteOptions
from sitepress.emitter import PageEmitter
from sitepress.errors import PageRenderFailures
from sitepress.head import render_head_tags
from sitepress.logger import logger
from sitepress.manifest import ManifestLoader
from sitepress.prepare import prepare
from sitepress.renderer import AppRenderer, CommandAppRenderer, SSRRenderer, load_template
from sitepress.stitcher import AssetStitcher
from sitepress.targets import create_target_configs
from sitepress.utils import display_path, remove_tree

__all__ = ["BuildResult", "BuildPipeline", "start_build"]

Preparer = Callable[[Union[str, Path]], SiteOptions]


@dataclass(slots=True)
class BuildResult:
    """Outcome of a successful build."""

    out_dir: Path
    report: CompileReport
    written: List[Path] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


class BuildPipeline:
    """Sequences prepare → clean → compile → manifests → stitch → render."""

    def __init__(
        self,
        options: BuildOptions,
        *,
        bundler: Optional[Bundler] = None,
        app_renderer: Optional[AppRenderer] = None,
        preparer: Preparer = prepare,
        manifest_loader: Optional[ManifestLoader] = None,
        stitcher: Optional[AssetStitcher] = None,
    ) -> None:
        self.options = options
        self.compiler = DualTargetCompiler(bundler or CommandBundler(options.bundler_command))
        self.app_renderer = app_renderer or CommandAppRenderer(options.renderer_command)
        self.preparer = preparer
        self.manifest_loader = manifest_loader or ManifestLoader()
        self.stitcher = stitcher or AssetStitcher(options.stitch_target)

    def prepare_site(self, source_dir: Union[str, Path]) -> SiteOptions:
        site = self.preparer(source_dir)
        if self.options.out_dir is not None:
            site = site.model_copy(update={"out_dir": Path(self.options.out_dir).expanduser().resolve()})
        return site

    async def run(self, source_dir: Union[str, Path]) -> BuildResult:
        site = self.prepare_site(source_dir)
        out_dir = site.out_dir
        logger.info("Building %d pages into %s", len(site.pages), out_dir)

        await remove_tree(out_dir)

        configs = create_target_configs(site, production=self.options.production)
        report = await self.compiler.compile(configs)

        manifests = await self.manifest_loader.load(out_dir)
        await self.stitcher.stitch(report, out_dir)

        renderer = SSRRenderer(manifests, self.app_renderer, load_template(self.options.template))
        emitter = PageEmitter(
            renderer,
            out_dir,
            render_head_tags(site.site_config.head),
            title=self.options.title,
            lang=self.options.lang,
            concurrency=self.options.concurrency,
        )
        emitted = await emitter.emit(site.pages)

        if emitted.failed and self.options.strict:
            raise PageRenderFailures(emitted.failed)

        logger.debug("Wrote %d pages to %s", len(emitted.written), display_path(out_dir))
        return BuildResult(out_dir=out_dir, report=report, written=emitted.written, failed=emitted.failed)


async def start_build(source_dir: Union[str, Path], options: BuildOptions) -> BuildResult:
    """Run a build with the command-line collaborators configured in *options*."""
    return await BuildPipeline(options).run(source_dir)
