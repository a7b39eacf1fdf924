"""Dependency cleanup pipeline — select targets, then run both deletion phases."""

from __future__ import annotations

from collections.abc import Callable, Iterable

import structlog

from depclean.executor import CleanupExecutor
from depclean.lockfile import read_lock
from depclean.lockfile import unlock as unlock_lockfile
from depclean.locks import LockCoordinator
from depclean.models import CleanupReport, ProjectConfig, Scope, SelectionMode
from depclean.policy import Selection, resolve
from depclean.scanner import build_pattern, discover
from depclean.snapshot import Converger, ManifestConverger

log = structlog.get_logger("depclean.clean")

Unlocker = Callable[[ProjectConfig, Iterable[str]], list[str]]


def unlock_targets(config: ProjectConfig, names: Iterable[str]) -> list[str]:
    """Default unlock step: drop *names* from the lock file."""
    return unlock_lockfile(config.lockfile, names)


def select_unlock(
    config: ProjectConfig,
    selection: Selection,
    converger: Converger,
    targets: Iterable[str] = (),
) -> list[str]:
    """Lock entries the selection asks to unlock.

    Explicit names unlock *targets* (the names themselves when empty),
    ``--all`` every locked entry and ``--unused`` every locked entry no
    converged dependency claims, whether or not it has a directory on disk.
    Must run under the deps lock.
    """
    if selection.mode is SelectionMode.EXPLICIT:
        return list(targets or selection.names)
    locked = read_lock(config.lockfile)
    if selection.mode is SelectionMode.ALL:
        return sorted(locked)
    claimed = {dep.app for dep in converger.converge(Scope())}
    return sorted(set(locked) - claimed)


def clean_deps(
    config: ProjectConfig,
    selection: Selection,
    *,
    scope: Scope | None = None,
    build_only: bool = False,
    unlock: bool = False,
    converger: Converger | None = None,
    locks: LockCoordinator | None = None,
    unlocker: Unlocker = unlock_targets,
    on_progress: Callable[[str], None] | None = None,
    on_warning: Callable[[str], None] | None = None,
) -> CleanupReport:
    """Delete the selected dependencies' build artifacts and sources.

    The target set is fixed before any lock is taken. The build phase runs
    under the build lock, then the source phase (and the optional unlock)
    runs under the deps lock; the two scopes are never held together.
    """
    scope = scope or Scope()
    converger = converger or ManifestConverger(config)
    locks = locks or LockCoordinator(config)
    executor = CleanupExecutor(on_progress=on_progress, on_warning=on_warning)

    pattern = build_pattern(config, scope)
    snapshot = converger.converge(scope)
    discovered = (
        discover(pattern, config.deps_path, config.app) if selection.needs_discovery else set()
    )
    targets = resolve(selection, discovered, snapshot)
    report = CleanupReport(targets=targets)
    log.info("clean.start", mode=selection.mode.value, env=scope.env, targets=len(targets))

    with locks.build_lock():
        report.outcomes.extend(executor.clean_build(targets, pattern))

    with locks.deps_lock():
        report.outcomes.extend(
            executor.clean_source(targets, snapshot, config.deps_path, build_only)
        )
        if unlock:
            report.unlocked = unlocker(
                config, select_unlock(config, selection, converger, targets)
            )

    log.info(
        "clean.done",
        removed=len(report.removed()),
        warnings=len(report.warnings),
        unlocked=len(report.unlocked),
    )
    return report


def unlock_deps(
    config: ProjectConfig,
    selection: Selection,
    *,
    converger: Converger | None = None,
    locks: LockCoordinator | None = None,
) -> list[str]:
    """Drop entries from the lock file without touching any directory.

    ``--all`` drops every entry, ``--unused`` the entries no converged
    dependency claims any more.
    """
    converger = converger or ManifestConverger(config)
    locks = locks or LockCoordinator(config)

    with locks.deps_lock():
        names = select_unlock(config, selection, converger)
        return unlock_lockfile(config.lockfile, names)
