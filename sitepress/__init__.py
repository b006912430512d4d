"""
SitePress package initializer.
Defines package version and exposes the CLI and the build entry point.
"""
__version__ = "0.1.0"

from sitepress.cli import cli
from sitepress.engine import BuildPipeline, BuildResult, start_build

__all__ = ["__version__", "cli", "BuildPipeline", "BuildResult", "start_build"]
