"""depclean: dependency build artifact and source cleanup."""

__version__ = "0.1.0"

from depclean.cleaner import clean_deps, unlock_deps
from depclean.executor import CleanupExecutor, remove_tree
from depclean.locks import LockCoordinator, file_lock
from depclean.models import (
    CleanupReport,
    DeletionOutcome,
    DependencySpec,
    OutcomeStatus,
    Phase,
    ProjectConfig,
    Scope,
    SelectionMode,
)
from depclean.policy import Selection, resolve
from depclean.project import load_project
from depclean.scanner import discover, expand
from depclean.snapshot import Converger, ManifestConverger

__all__ = [
    "CleanupExecutor",
    "CleanupReport",
    "Converger",
    "DeletionOutcome",
    "DependencySpec",
    "LockCoordinator",
    "ManifestConverger",
    "OutcomeStatus",
    "Phase",
    "ProjectConfig",
    "Scope",
    "Selection",
    "SelectionMode",
    "clean_deps",
    "discover",
    "expand",
    "file_lock",
    "load_project",
    "remove_tree",
    "resolve",
    "unlock_deps",
]
