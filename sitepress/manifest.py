"""
Loading of the two build manifests written by the compiler.

The manifests are opaque JSON owned by the page renderer. They are wrapped
in small tagged types so the pipeline cannot mix them up, and only the
fields the HTML shell needs are exposed.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Union

from sitepress.errors import ManifestMissing
from sitepress.logger import logger
from sitepress.targets import CLIENT_MANIFEST, SERVER_MANIFEST
from sitepress.utils import read_text, remove_tree

MANIFEST_DIR = "manifest"


@dataclass(frozen=True, slots=True)
class ServerBundle:
    """Server-side bundle manifest, passed through untouched."""

    data: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ClientManifest:
    """Client manifest; exposes the initial assets for the HTML shell."""

    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def public_path(self) -> str:
        return str(self.data.get("publicPath") or "/")

    @property
    def initial(self) -> List[str]:
        return [str(f) for f in self.data.get("initial") or []]


@dataclass(frozen=True, slots=True)
class Manifests:
    server: ServerBundle
    client: ClientManifest


async def _read_manifest(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        raise ManifestMissing(path)
    try:
        data = json.loads(await read_text(path))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Manifest {path} must be a mapping, got {type(data).__name__}")
    return data


class ManifestLoader:
    """Reads ``manifest/server.json`` and ``manifest/client.json``, then deletes ``manifest/``."""

    async def load(self, out_dir: Union[str, Path]) -> Manifests:
        out = Path(out_dir)
        server = await _read_manifest(out / SERVER_MANIFEST)
        client = await _read_manifest(out / CLIENT_MANIFEST)

        await remove_tree(out / MANIFEST_DIR)
        logger.debug("Loaded manifests from %s", out / MANIFEST_DIR)
        return Manifests(server=ServerBundle(server), client=ClientManifest(client))


__all__ = ["MANIFEST_DIR", "ServerBundle", "ClientManifest", "Manifests", "ManifestLoader"]
