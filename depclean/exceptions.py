"""Custom exceptions for depclean."""


class DepCleanError(Exception):
    """Base exception for all depclean errors."""


class UsageError(DepCleanError):
    """Raised when no dependency selection was given on the command line."""


class ConfigError(DepCleanError):
    """Raised when the manifest, lock file or scope cannot be used."""


class DeletionError(DepCleanError):
    """Raised when removing a path from disk fails."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"could not delete {path}: {reason}")
