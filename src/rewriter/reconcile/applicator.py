"""Apply classified changes to the project tree.

Buckets are processed in a fixed order: created, deleted, moved, edited in
place. Directory creation from the first and third happens before the
pruner runs. A failure stops the apply; earlier changes are not rolled back.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from ..errors import ApplicationError
from ..models import ReconciliationResult, SourceFile
from ..paths import is_within
from .pruner import prune_empty_dirs

logger = logging.getLogger(__name__)


@dataclass
class ApplyOutcome:
    """What an apply actually did to the filesystem."""

    files_created: int = 0
    files_deleted: int = 0
    files_moved: int = 0
    files_edited: int = 0
    # (before, after) pairs that needed write-then-delete instead of a rename
    fallback_moves: list[tuple[str, str]] = field(default_factory=list)
    removed_dirs: list[Path] = field(default_factory=list)


def _target(root: Path, rel_path: str) -> Path:
    p = root / rel_path
    if not is_within(root, p):
        raise ApplicationError("touch path outside project root", p)
    return p


def _mkdir_parent(path: Path) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ApplicationError("create directory", path.parent, e) from e


def write_source(root: Path, source: SourceFile) -> Path:
    """Write a snapshot to disk, creating parent directories as needed."""
    path = _target(root, source.path)
    _mkdir_parent(path)
    try:
        with path.open("w", encoding=source.charset, newline="") as f:
            f.write(source.content)
    except OSError as e:
        raise ApplicationError("write", path, e) from e
    return path


def delete_source(root: Path, source: SourceFile) -> bool:
    """Delete a snapshot's file. Returns False if it was already gone."""
    path = _target(root, source.path)
    try:
        path.unlink()
    except FileNotFoundError:
        logger.debug(f"Already gone: {path}")
        return False
    except OSError as e:
        raise ApplicationError("delete", path, e) from e
    return True


def move_source(root: Path, before: SourceFile, after: SourceFile) -> bool:
    """Rename `before` to `after`, falling back to write-then-delete.

    Returns True if the fallback was used. Until the delete completes both
    paths exist on disk.
    """
    src = _target(root, before.path)
    dst = _target(root, after.path)
    _mkdir_parent(dst)
    try:
        os.replace(src, dst)
    except OSError as e:
        if isinstance(e, FileNotFoundError) and not src.exists():
            # already moved by an earlier apply
            logger.debug(f"Already moved: {before.path} -> {after.path}")
            write_source(root, after)
            return False
        logger.warning(
            f"Rename {before.path} -> {after.path} failed ({e}); "
            f"writing {after.path} then deleting {before.path}. "
            f"Both files exist until the delete completes."
        )
        write_source(root, after)
        delete_source(root, before)
        return True
    if after.content != before.content:
        # rename moved the old bytes; the new content still has to land
        write_source(root, after)
    return False


def apply_changes(root: Path, result: ReconciliationResult, prune: bool = True) -> ApplyOutcome:
    """Apply every bucket of `result` under `root`.

    Raises:
        ApplicationError: on the first I/O failure other than deleting a
            file that is already gone
    """
    root = Path(root)
    outcome = ApplyOutcome()

    for change in result.created:
        write_source(root, change.after)
        outcome.files_created += 1

    for change in result.deleted:
        delete_source(root, change.before)
        outcome.files_deleted += 1

    for change in result.moved:
        if move_source(root, change.before, change.after):
            outcome.fallback_moves.append((change.before.path, change.after.path))
        outcome.files_moved += 1

    for change in result.edited_in_place:
        write_source(root, change.after)
        outcome.files_edited += 1

    if prune:
        outcome.removed_dirs = prune_empty_dirs(root, result)

    logger.info(
        f"Applied {outcome.files_created} created, {outcome.files_deleted} deleted, "
        f"{outcome.files_moved} moved, {outcome.files_edited} edited"
    )
    return outcome
