"""Cleanup executor — delete build artifacts and fetched sources per dependency.

Every filesystem problem is confined to the path it happened on: it becomes
a ``DeletionOutcome`` (and a warning), and the batch carries on with the next
path and the next dependency.
"""

from __future__ import annotations

import shutil
from collections.abc import Callable, Iterable
from pathlib import Path

import structlog

from depclean.exceptions import DeletionError
from depclean.models import DeletionOutcome, DependencySpec, OutcomeStatus, Phase
from depclean.scanner import dependency_pattern, expand

log = structlog.get_logger("depclean.clean")


def remove_tree(path: Path) -> bool:
    """Recursively remove *path* (directory, file or symlink).

    Symlinks are unlinked, never followed. Returns False when the path was
    already gone; raises DeletionError when removal fails.
    """
    try:
        if path.is_symlink() or not path.is_dir():
            path.unlink()
        else:
            shutil.rmtree(path)
    except FileNotFoundError:
        return False
    except OSError as e:
        failed = e.filename if e.filename is not None else path
        raise DeletionError(str(failed), e.strerror or str(e)) from e
    return True


class CleanupExecutor:
    """Runs the build and source deletion phases over a target set."""

    def __init__(
        self,
        on_progress: Callable[[str], None] | None = None,
        on_warning: Callable[[str], None] | None = None,
    ) -> None:
        self._on_progress = on_progress
        self._on_warning = on_warning

    def clean_build(self, targets: Iterable[str], pattern: Path) -> list[DeletionOutcome]:
        """Remove ``<pattern>/<app>`` for every target across all matching envs."""
        outcomes: list[DeletionOutcome] = []
        for app in targets:
            self._progress(f"* Cleaning {app}")
            paths = expand(dependency_pattern(pattern, app))
            if not paths:
                log.info("clean.build_missing", app=app)
                missing = DeletionOutcome(app, Phase.BUILD, OutcomeStatus.MISSING)
                outcomes.append(self._warn(missing))
                continue
            for path in paths:
                outcomes.append(self._warn(self._remove(app, Phase.BUILD, path)))
        return outcomes

    def clean_source(
        self,
        targets: Iterable[str],
        snapshot: Iterable[DependencySpec],
        deps_path: Path,
        build_only: bool = False,
    ) -> list[DeletionOutcome]:
        """Remove ``<deps_path>/<app>`` for every target.

        Skipped for everything when *build_only* is set, and always skipped
        for path dependencies: their sources are not ours to delete.
        """
        local = {dep.app for dep in snapshot if not dep.fetchable}
        outcomes: list[DeletionOutcome] = []
        for app in targets:
            if build_only or app in local:
                log.debug("clean.source_skipped", app=app, local=app in local)
                outcomes.append(DeletionOutcome(app, Phase.SOURCE, OutcomeStatus.SKIPPED))
                continue
            outcomes.append(self._warn(self._remove(app, Phase.SOURCE, deps_path / app)))
        return outcomes

    def _remove(self, app: str, phase: Phase, path: Path) -> DeletionOutcome:
        try:
            removed = remove_tree(path)
        except DeletionError as e:
            log.info(
                "clean.delete_failed",
                app=app,
                phase=phase.value,
                path=e.path,
                reason=e.reason,
            )
            return DeletionOutcome(app, phase, OutcomeStatus.FAILED, e.path, e.reason)

        status = OutcomeStatus.REMOVED if removed else OutcomeStatus.ABSENT
        log.debug("clean.path", app=app, phase=phase.value, path=str(path), status=status.value)
        return DeletionOutcome(app, phase, status, str(path))

    def _warn(self, outcome: DeletionOutcome) -> DeletionOutcome:
        if outcome.warning is not None and self._on_warning is not None:
            self._on_warning(outcome.warning)
        return outcome

    def _progress(self, message: str) -> None:
        if self._on_progress is not None:
            self._on_progress(message)
