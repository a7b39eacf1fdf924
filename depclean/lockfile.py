"""JSON lock file access and the unlock step."""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import structlog

from depclean.exceptions import ConfigError

log = structlog.get_logger("depclean.lockfile")


def read_lock(lock_path: Path) -> dict[str, dict[str, Any]]:
    """Return the ``packages`` table of the lock file.

    A missing lock file reads as an empty lock (fresh project).
    """
    try:
        raw = lock_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError as e:
        raise ConfigError(f"cannot read lock file {lock_path}: {e}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid lock file {lock_path}: {e}") from e

    packages = data.get("packages", {}) if isinstance(data, dict) else None
    if not isinstance(packages, dict):
        raise ConfigError(f"invalid lock file {lock_path}: 'packages' must be an object")

    for name, entry in packages.items():
        if not isinstance(entry, dict):
            raise ConfigError(f"invalid lock file {lock_path}: entry {name!r} must be an object")
        children = entry.get("dependencies", [])
        if not isinstance(children, list) or not all(isinstance(c, str) for c in children):
            raise ConfigError(
                f"invalid lock file {lock_path}: {name!r} dependencies must be a list of names"
            )
    return packages


def write_lock(lock_path: Path, packages: dict[str, dict[str, Any]]) -> None:
    try:
        lock_path.write_text(
            json.dumps({"packages": packages}, indent=2, sort_keys=True) + "\n",
            encoding="utf-8",
        )
    except OSError as e:
        raise ConfigError(f"cannot write lock file {lock_path}: {e}") from e


def unlock(lock_path: Path, names: Iterable[str]) -> list[str]:
    """Drop *names* from the lock file and return the ones actually removed.

    The file is only rewritten when something changed; a missing lock file
    is left missing.
    """
    if not lock_path.exists():
        log.debug("lockfile.missing", path=str(lock_path))
        return []

    packages = read_lock(lock_path)
    removed = [name for name in dict.fromkeys(names) if name in packages]
    if not removed:
        return []

    for name in removed:
        del packages[name]
    write_lock(lock_path, packages)
    log.info("lockfile.unlocked", path=str(lock_path), names=removed)
    return removed
