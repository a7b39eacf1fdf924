"""Filesystem scanner — find dependency directories under the build and deps roots."""

from __future__ import annotations

import glob
from pathlib import Path

import structlog

from depclean.models import ProjectConfig, Scope

log = structlog.get_logger("depclean.scanner")


def expand(pattern: str | Path) -> list[Path]:
    """Expand a path pattern with wildcard segments into existing paths.

    Returns a sorted list; no match is an empty list, not an error.
    """
    return sorted(Path(hit) for hit in glob.glob(str(pattern)))


def build_pattern(config: ProjectConfig, scope: Scope) -> Path:
    """Pattern matching every scoped ``lib`` directory under the build root.

    ``_build/*/lib`` without a scope, ``_build/*prod/lib`` with ``--only prod``
    (which also catches target-prefixed dirs such as ``_build/rpi_prod``).
    """
    return Path(glob.escape(str(config.build_root))) / scope.wildcard / "lib"


def dependency_pattern(pattern: Path, app: str) -> Path:
    return pattern / glob.escape(app)


def discover(pattern: Path, deps_path: Path, app: str) -> set[str]:
    """Names of dependency directories present on disk.

    Immediate subdirectories of every path matching *pattern* and of
    *deps_path*, minus the project's own *app* name.
    """
    roots = [Path(glob.escape(str(deps_path))), pattern]
    names = {
        path.name
        for root in roots
        for path in expand(root / "*")
        if path.is_dir()
    }
    names.discard(app)
    log.debug("scanner.discovered", count=len(names), pattern=str(pattern))
    return names
