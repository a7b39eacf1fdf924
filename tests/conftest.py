"""Shared pytest fixtures for depclean tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from depclean.project import load_project


def _touch_dirs(root: Path, *rel_paths: str) -> None:
    for rel in rel_paths:
        path = root / rel
        path.mkdir(parents=True, exist_ok=True)
        (path / "artifact").write_text("x")


@pytest.fixture
def touch_dirs():
    """Create directories with one file inside, like a real build output."""
    return _touch_dirs


@pytest.fixture
def make_project(tmp_path: Path):
    """Write project.toml (and optionally project.lock) and load the config."""

    def _make(dependencies: str = "", lock: dict | None = None, name: str = "my_app"):
        (tmp_path / "project.toml").write_text(
            f'[project]\nname = "{name}"\n\n[dependencies]\n{dependencies}'
        )
        if lock is not None:
            (tmp_path / "project.lock").write_text(json.dumps({"packages": lock}))
        return load_project(tmp_path / "project.toml")

    return _make
