# === FILE: sitepress/cli.py ===
#!/usr/bin/env python3
"""
Command-line entry point for SitePress.

Commands:
  build SOURCE_DIR   Compile the site and pre-render every page
  config             Show the resolved build configuration

Global options:
  --config PATH       Build configuration (default: sitepress.yaml)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stderr only when omitted)
  --log-format FORMAT Logging format string

Build options:
  --out-dir DIR       Override the site's output directory
  --concurrency N     Maximum number of pages rendered at once
  --strict            Fail when any page fails to render
  --dev               Compile in development mode

Example:
  sitepress --config sitepress.yaml build docs --out-dir public
"""
import asyncio
import sys
from pathlib import Path

import click

from sitepress import __version__
from sitepress.config import load_config
from sitepress.engine import start_build
from sitepress.errors import BuildError
from sitepress.logger import init_logging, configure
from sitepress.utils import display_path

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SitePress, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to the build configuration (YAML or JSON). Defaults to ./sitepress.yaml.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Log file (stderr only when omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default=None,
    help='Logging format string'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """SitePress command group."""
    if log_format:
        configure(level=log_level, log_file=log_file, log_format=log_format)
    else:
        init_logging(level=log_level, log_file=log_file)
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Failed to load configuration: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('build', context_settings=CONTEXT_SETTINGS)
@click.argument(
    'source_dir',
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
@click.option(
    '--out-dir', '-d', 'out_dir',
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help="Override the site's output directory"
)
@click.option(
    '--concurrency', '-j', 'concurrency',
    type=click.IntRange(min=1),
    default=None,
    help='Maximum number of pages rendered at once'
)
@click.option('--strict', is_flag=True, help='Fail when any page fails to render')
@click.option('--dev', is_flag=True, help='Compile in development mode')
@click.pass_context
def build(ctx, source_dir, out_dir, concurrency, strict, dev):
    """Compile the site and write the pre-rendered pages."""
    cfg = ctx.obj['config']
    overrides = {}
    if out_dir is not None:
        overrides['out_dir'] = out_dir
    if concurrency is not None:
        overrides['concurrency'] = concurrency
    if strict:
        overrides['strict'] = True
    if dev:
        overrides['production'] = False
    if overrides:
        cfg = cfg.model_copy(update=overrides)

    try:
        result = asyncio.run(start_build(source_dir, cfg))
    except BuildError as e:
        print_error(f'Build failed: {e}')
    except OSError as e:
        print_error(f'Filesystem error: {e}')

    relative_dir = display_path(result.out_dir)
    click.echo(f"\n{click.style('Success!', fg='green')} Generated static files in {click.style(relative_dir, fg='cyan')}.")
    if result.failed:
        click.secho(f'{len(result.failed)} page(s) failed to render: {", ".join(result.failed)}', fg='yellow', err=True)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Print the build configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


# expose for test monkey-patching
cli.start_build = start_build

if __name__ == "__main__":
    cli()
