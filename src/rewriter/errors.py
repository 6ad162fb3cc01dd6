"""Error types raised by the rewrite engine.

PruneFailure has no type: the pruner is best-effort and only logs.
"""
from __future__ import annotations

from pathlib import Path


class RewriteError(Exception):
    """Base class for rewrite failures."""


class ConfigError(RewriteError, ValueError):
    """Invalid rewrite.toml content."""


class DiscoveryError(RewriteError):
    """Walking the project tree failed. No partial file list is returned."""


class ClassificationError(RewriteError):
    """Reserved. The baseline classifier is a pure comparison and cannot fail."""


class RecipeError(RewriteError):
    """A recipe failed while transforming one file."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


class ApplicationError(RewriteError):
    """A write, delete or rename failed while applying changes."""

    def __init__(self, action: str, path: Path, cause: OSError | None = None) -> None:
        msg = f"failed to {action} {path}"
        if cause is not None:
            msg = f"{msg}: {cause}"
        super().__init__(msg)
        self.action = action
        self.path = path
        self.cause = cause
