"""Load the project configuration from ``project.toml``."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from depclean.exceptions import ConfigError
from depclean.models import ProjectConfig

DEFAULT_MANIFEST = "project.toml"

_DEFAULTS = {
    "build_path": "_build",
    "deps_path": "deps",
    "lockfile": "project.lock",
    "lock_dir": ".depclean",
}


def read_manifest(manifest_path: Path) -> dict[str, Any]:
    """Parse the manifest, raising ConfigError on a missing or broken file."""
    try:
        content = manifest_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"manifest not found: {manifest_path}") from None
    except OSError as e:
        raise ConfigError(f"cannot read manifest {manifest_path}: {e}") from e
    try:
        return tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"invalid manifest {manifest_path}: {e}") from e


def load_project(manifest_path: str | Path = DEFAULT_MANIFEST) -> ProjectConfig:
    """Build a :class:`ProjectConfig` from the ``[project]`` table.

    Relative paths in the manifest are resolved against the manifest's
    own directory, not the current working directory.
    """
    manifest_path = Path(manifest_path).resolve()
    data = read_manifest(manifest_path)

    project = data.get("project")
    if not isinstance(project, dict):
        raise ConfigError(f"{manifest_path.name} has no [project] table")

    app = project.get("name")
    if not isinstance(app, str) or not app:
        raise ConfigError(f"{manifest_path.name}: project.name must be a non-empty string")

    root = manifest_path.parent
    paths: dict[str, Path] = {}
    for key, default in _DEFAULTS.items():
        value = project.get(key, default)
        if not isinstance(value, str) or not value:
            raise ConfigError(f"{manifest_path.name}: project.{key} must be a non-empty string")
        paths[key] = root / value

    return ProjectConfig(
        app=app,
        root=root,
        manifest=manifest_path,
        build_root=paths["build_path"],
        deps_path=paths["deps_path"],
        lockfile=paths["lockfile"],
        lock_dir=paths["lock_dir"],
    )
