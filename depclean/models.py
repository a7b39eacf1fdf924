"""Data models for project configuration, dependencies and cleanup results."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from depclean.exceptions import ConfigError

# Env and target names end up inside a glob pattern, so keep them plain.
_SCOPE_NAME = re.compile(r"^[A-Za-z0-9_.-]+$")


@dataclass(frozen=True)
class ProjectConfig:
    """Resolved project settings, read once from the manifest."""

    app: str
    root: Path
    manifest: Path
    build_root: Path  # e.g. <root>/_build, holds <env>/lib/<dep>
    deps_path: Path  # e.g. <root>/deps, holds <dep>
    lockfile: Path
    lock_dir: Path  # advisory lock files for the build and deps scopes


@dataclass(frozen=True)
class DependencySpec:
    """One converged dependency of the project."""

    app: str
    fetchable: bool = True  # False for path dependencies
    only: tuple[str, ...] = ()  # envs the dependency is restricted to
    targets: tuple[str, ...] = ()
    path: str | None = None
    version: str | None = None


class SelectionMode(str, Enum):
    EXPLICIT = "explicit"
    ALL = "all"
    UNUSED = "unused"


@dataclass(frozen=True)
class Scope:
    """Environment/target scope given with ``--only``.

    Validated once on construction; ``wildcard`` is the build root segment
    that matches the scoped build directories.
    """

    env: str | None = None
    target: str | None = None

    def __post_init__(self) -> None:
        for label, value in (("env", self.env), ("target", self.target)):
            if value is not None and not _SCOPE_NAME.match(value):
                raise ConfigError(f"invalid {label} name {value!r}")

    @property
    def wildcard(self) -> str:
        return f"*{self.env or ''}"


class Phase(str, Enum):
    BUILD = "build"
    SOURCE = "source"


class OutcomeStatus(str, Enum):
    REMOVED = "removed"
    ABSENT = "absent"  # source directory already gone
    MISSING = "missing"  # no build directory matched
    SKIPPED = "skipped"  # --build or path dependency
    FAILED = "failed"


@dataclass(frozen=True)
class DeletionOutcome:
    app: str
    phase: Phase
    status: OutcomeStatus
    path: str | None = None
    reason: str | None = None

    @property
    def warning(self) -> str | None:
        """Human-readable warning, or None when the outcome is benign."""
        if self.status is OutcomeStatus.MISSING:
            return f"the dependency {self.app} is not present in the build directory"
        if self.status is OutcomeStatus.FAILED:
            return f"could not delete file {_relative_to_cwd(self.path)}, reason: {self.reason}"
        return None


@dataclass
class CleanupReport:
    """Result of one cleanup run."""

    targets: tuple[str, ...]
    outcomes: list[DeletionOutcome] = field(default_factory=list)
    unlocked: list[str] = field(default_factory=list)

    @property
    def warnings(self) -> list[str]:
        return [o.warning for o in self.outcomes if o.warning is not None]

    @property
    def failures(self) -> list[DeletionOutcome]:
        return [o for o in self.outcomes if o.status is OutcomeStatus.FAILED]

    def removed(self, phase: Phase | None = None) -> list[str]:
        return [
            o.path
            for o in self.outcomes
            if o.status is OutcomeStatus.REMOVED
            and o.path is not None
            and (phase is None or o.phase is phase)
        ]


def _relative_to_cwd(path: str | None) -> str:
    if path is None:
        return ""
    try:
        rel = os.path.relpath(path)
    except ValueError:
        # Different drive on Windows
        return path
    return path if rel.startswith("..") else rel
