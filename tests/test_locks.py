"""Tests for the advisory file locks."""

from __future__ import annotations

import fcntl
from pathlib import Path

import pytest

from depclean.locks import LockCoordinator, file_lock


def _try_lock(path: Path) -> bool:
    with open(path, "a") as handle:
        try:
            fcntl.flock(handle.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError:
            return False
        fcntl.flock(handle.fileno(), fcntl.LOCK_UN)
        return True


class TestFileLock:
    def test_held_inside_block(self, tmp_path: Path):
        lock_path = tmp_path / "locks" / "build.lock"
        with file_lock(lock_path):
            assert lock_path.exists()
            assert not _try_lock(lock_path)
        assert _try_lock(lock_path)

    def test_released_when_block_raises(self, tmp_path: Path):
        lock_path = tmp_path / "build.lock"
        with pytest.raises(RuntimeError):
            with file_lock(lock_path):
                raise RuntimeError("boom")
        assert _try_lock(lock_path)


class TestLockCoordinator:
    def test_independent_scopes(self, make_project):
        locks = LockCoordinator(make_project())

        with locks.build_lock():
            # The deps scope is not blocked by the build scope.
            assert _try_lock(locks.deps_lock_path)
            assert not _try_lock(locks.build_lock_path)

    def test_lock_files_live_in_lock_dir(self, make_project):
        config = make_project()
        locks = LockCoordinator(config)
        assert locks.build_lock_path == config.lock_dir / "build.lock"
        assert locks.deps_lock_path == config.lock_dir / "deps.lock"

    def test_callback_forms_return_result(self, make_project):
        locks = LockCoordinator(make_project())
        assert locks.with_build_lock(lambda: 1) == 1
        assert locks.with_deps_lock(lambda: "ok") == "ok"

    def test_callback_releases_on_error(self, make_project):
        locks = LockCoordinator(make_project())

        def fail():
            raise ValueError("boom")

        with pytest.raises(ValueError):
            locks.with_deps_lock(fail)
        assert _try_lock(locks.deps_lock_path)
