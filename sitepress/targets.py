"""
Configurations for the two compilation targets.

The bundler receives these mappings verbatim. Both targets write into the
site output directory; the manifests land under ``manifest/`` and are
removed again once loaded.
"""
from __future__ import annotations

from typing import Any, Dict, Tuple

from sitepress.config import SiteOptions

CLIENT_MANIFEST = "manifest/client.json"
SERVER_MANIFEST = "manifest/server.json"
# hashed in every mode; the style-chunk workaround matches on the hash
CLIENT_FILENAME = "assets/js/[name].[chunkhash:8].js"


def _mode(production: bool) -> str:
    return "production" if production else "development"


def create_client_config(options: SiteOptions, *, production: bool) -> Dict[str, Any]:
    return {
        "name": "client",
        "target": "web",
        "mode": _mode(production),
        "entry": {"app": "app/clientEntry"},
        "outputPath": str(options.out_dir),
        "publicPath": "/",
        "filename": CLIENT_FILENAME,
        "manifest": CLIENT_MANIFEST,
    }


def create_server_config(options: SiteOptions, *, production: bool) -> Dict[str, Any]:
    return {
        "name": "server",
        "target": "node",
        "mode": _mode(production),
        "entry": {"app": "app/serverEntry"},
        "outputPath": str(options.out_dir / "manifest"),
        "libraryTarget": "commonjs2",
        "manifest": SERVER_MANIFEST,
    }


def create_target_configs(
    options: SiteOptions, *, production: bool
) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Return ``(client, server)`` configurations, in compilation order."""
    return (
        create_client_config(options, production=production),
        create_server_config(options, production=production),
    )


__all__ = [
    "CLIENT_FILENAME",
    "CLIENT_MANIFEST",
    "SERVER_MANIFEST",
    "create_client_config",
    "create_server_config",
    "create_target_configs",
]
