"""Process-wide advisory locks shared with every command that touches the roots."""

from __future__ import annotations

import fcntl
import time
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from pathlib import Path
from typing import TypeVar

import structlog

from depclean.models import ProjectConfig

log = structlog.get_logger("depclean.locks")

T = TypeVar("T")

BUILD_LOCK_NAME = "build.lock"
DEPS_LOCK_NAME = "deps.lock"


@contextmanager
def file_lock(path: Path) -> Iterator[None]:
    """Hold an exclusive ``flock`` on *path* for the duration of the block.

    Blocks until the lock is free. The lock is released on every exit path,
    including when the block raises.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a") as handle:
        started = time.monotonic()
        fcntl.flock(handle.fileno(), fcntl.LOCK_EX)
        log.debug(
            "locks.acquired",
            path=str(path),
            waited=round(time.monotonic() - started, 3),
        )
        try:
            yield
        finally:
            fcntl.flock(handle.fileno(), fcntl.LOCK_UN)
            log.debug("locks.released", path=str(path))


class LockCoordinator:
    """Grants the build-root lock and the deps-root lock independently."""

    def __init__(self, config: ProjectConfig) -> None:
        self.build_lock_path = config.lock_dir / BUILD_LOCK_NAME
        self.deps_lock_path = config.lock_dir / DEPS_LOCK_NAME

    def build_lock(self) -> AbstractContextManager[None]:
        return file_lock(self.build_lock_path)

    def deps_lock(self) -> AbstractContextManager[None]:
        """Guards the deps root and the lock file."""
        return file_lock(self.deps_lock_path)

    def with_build_lock(self, fn: Callable[[], T]) -> T:
        with self.build_lock():
            return fn()

    def with_deps_lock(self, fn: Callable[[], T]) -> T:
        with self.deps_lock():
            return fn()
