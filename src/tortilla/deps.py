"""Dependency coordinates and installation onto the import path."""

from __future__ import annotations

import importlib
import re
import subprocess
import sys
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence

import structlog

from tortilla.exceptions import DependencyResolutionError

log = structlog.get_logger()

_BRACKETED_RE = re.compile(r'^\[\s*(?P<name>[^\s"\[\]]+)\s+"(?P<version>[^"]*)"\s*\]$')


@dataclass(frozen=True)
class Coordinate:
    group: str
    artifact: str
    version: str

    @property
    def requirement(self) -> str:
        if not self.version:
            return self.artifact
        return f"{self.artifact}=={self.version}"

    def __str__(self) -> str:
        return f'[{self.group}/{self.artifact} "{self.version}"]'


def _coordinate(name: str, version: str, raw: str) -> Coordinate:
    group, _, artifact = name.rpartition("/")
    if not artifact:
        raise ValueError(f"missing artifact in coordinate: {raw!r}")
    return Coordinate(group=group or artifact, artifact=artifact, version=version)


def parse_coords(raw: str) -> Coordinate:
    """Parse ``[group/artifact "version"]`` or ``group:artifact:version``.

    The group part is optional in both forms and defaults to the artifact.
    """
    text = raw.strip()
    if text.startswith("["):
        match = _BRACKETED_RE.match(text)
        if match is None:
            raise ValueError(f"malformed coordinate: {raw!r}")
        return _coordinate(match.group("name"), match.group("version"), raw)
    parts = text.split(":")
    if len(parts) < 2 or not all(parts):
        raise ValueError(f"malformed coordinate: {raw!r}")
    return _coordinate("/".join(parts[:-1]), parts[-1], raw)


def fetch_dependencies(
    coords: Sequence[Coordinate],
    target: Path | None = None,
    *,
    run_fn: Callable[..., subprocess.CompletedProcess[str]] = subprocess.run,
) -> Path:
    """Install `coords` into `target` and put it at the front of `sys.path`."""
    if target is None:
        target = Path(tempfile.mkdtemp(prefix="tortilla-deps-"))
    requirements = [coord.requirement for coord in coords]
    log.info("deps.install", requirements=requirements, target=str(target))
    command = [
        sys.executable,
        "-m",
        "pip",
        "install",
        "--quiet",
        "--disable-pip-version-check",
        "--target",
        str(target),
        *requirements,
    ]
    try:
        proc = run_fn(command, check=False, capture_output=True, text=True)
    except OSError as exc:
        raise DependencyResolutionError(coords, str(exc)) from exc
    if proc.returncode != 0:
        reason = (proc.stderr or "").strip() or f"pip exited with status {proc.returncode}"
        raise DependencyResolutionError(coords, reason)
    entry = str(target)
    if entry not in sys.path:
        sys.path.insert(0, entry)
    importlib.invalidate_caches()
    return target
