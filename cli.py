# cli.py

"""
Script entry point for running SitePress from a source checkout.

Equivalent to the installed ``sitepress`` command:
- Loading the build configuration (Pydantic)
- Logging setup
- Running the asynchronous build (BuildPipeline)

Example:
    python cli.py --config sitepress.yaml build docs --out-dir public
"""
from sitepress.cli import cli

if __name__ == "__main__":
    cli()
