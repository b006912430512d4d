"""sitepress.compiler: runs the bundler for the client and server targets."""

from __future__ import annotations

import asyncio
import json
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

from sitepress.errors import CompileError
from sitepress.logger import logger

__all__ = [
    "Asset",
    "TargetResult",
    "CompileReport",
    "Bundler",
    "CommandBundler",
    "DualTargetCompiler",
]

TARGET_NAMES = ("client", "server")


@dataclass(slots=True)
class Asset:
    """One emitted file, relative to the target's output path."""

    name: str
    size: Optional[int] = None


@dataclass(slots=True)
class TargetResult:
    """Outcome of compiling one target."""

    name: str
    assets: List[Asset] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


@dataclass(slots=True)
class CompileReport:
    """Per-target results of a compilation, without module-level detail."""

    targets: List[TargetResult] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @classmethod
    def from_stats(cls, stats: Mapping[str, Any]) -> CompileReport:
        """Build a report from bundler stats, dropping everything but assets and errors."""
        targets: List[TargetResult] = []
        for index, child in enumerate(stats.get("children") or []):
            default_name = TARGET_NAMES[index] if index < len(TARGET_NAMES) else f"target{index}"
            targets.append(
                TargetResult(
                    name=str(child.get("name") or default_name),
                    assets=[
                        Asset(name=a["name"], size=a.get("size"))
                        for a in child.get("assets") or []
                    ],
                    errors=[_format_error(e) for e in child.get("errors") or []],
                )
            )
        return cls(targets=targets, errors=[_format_error(e) for e in stats.get("errors") or []])

    @property
    def has_errors(self) -> bool:
        return bool(self.errors) or any(t.errors for t in self.targets)

    def all_errors(self) -> List[str]:
        """Top-level errors first, then each target's, in target order."""
        collected = list(self.errors)
        for target in self.targets:
            for err in target.errors:
                if err not in collected:
                    collected.append(err)
        return collected

    def target(self, name: str) -> TargetResult:
        for t in self.targets:
            if t.name == name:
                return t
        raise KeyError(name)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def json(self, *, pretty: bool = False) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2 if pretty else None)


def _format_error(error: Any) -> str:
    if isinstance(error, Mapping):
        return str(error.get("message") or error)
    return str(error)


class Bundler(Protocol):
    """Anything that can compile several configurations in one call and return stats."""

    async def run(self, configs: Sequence[Mapping[str, Any]]) -> Mapping[str, Any]:
        ...


class CommandBundler:
    """Invokes an external bundler process.

    The configurations are written to stdin as ``{"configs": [...]}``; the
    process prints its stats as one JSON document on stdout.
    """

    def __init__(self, command: Sequence[str], cwd: Optional[str] = None) -> None:
        if not command:
            raise ValueError("bundler command must not be empty")
        self.command = list(command)
        self.cwd = cwd

    async def run(self, configs: Sequence[Mapping[str, Any]]) -> Mapping[str, Any]:
        payload = json.dumps({"configs": list(configs)}).encode("utf-8")
        logger.debug("Running bundler: %s", " ".join(self.command))
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
            raise RuntimeError(f"bundler exited with status {proc.returncode}: {message}")
        try:
            stats = json.loads(stdout.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise RuntimeError(f"bundler printed invalid stats: {exc}") from exc
        if not isinstance(stats, dict):
            raise RuntimeError(f"bundler stats must be a mapping, got {type(stats).__name__}")
        return stats


class DualTargetCompiler:
    """Compiles the client and server configurations in a single bundler call."""

    def __init__(self, bundler: Bundler) -> None:
        self.bundler = bundler

    async def compile(self, configs: Sequence[Mapping[str, Any]]) -> CompileReport:
        try:
            stats = await self.bundler.run(configs)
        except Exception as exc:
            logger.error("Bundler invocation failed: %s", exc)
            raise CompileError(f"Failed to run the bundler: {exc}", [str(exc)]) from exc

        report = CompileReport.from_stats(stats)
        if report.has_errors:
            errors = report.all_errors()
            for err in errors:
                logger.error(err)
            raise CompileError("Failed to compile with errors.", errors)

        logger.debug(
            "Compiled %s",
            ", ".join(f"{t.name} ({len(t.assets)} assets)" for t in report.targets),
        )
        return report
