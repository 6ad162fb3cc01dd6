from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Optional, Union

@dataclass(frozen=True)
class SourceFile:
    """A file's path and content at one instant.

    `path` is relative to the project root, with forward slashes.
    """
    path: str
    content: str
    charset: str = "UTF-8"
    modified: bool = False

    def same_as(self, other: SourceFile) -> bool:
        return self.path == other.path and self.content == other.content

@dataclass(frozen=True)
class Created:
    after: SourceFile
    caused_by: tuple[str, ...] = ()
    estimated_effort: timedelta = timedelta(0)

    @property
    def before(self) -> None:
        return None

@dataclass(frozen=True)
class Deleted:
    before: SourceFile
    caused_by: tuple[str, ...] = ()
    estimated_effort: timedelta = timedelta(0)

    @property
    def after(self) -> None:
        return None

@dataclass(frozen=True)
class Moved:
    before: SourceFile
    after: SourceFile
    caused_by: tuple[str, ...] = ()
    estimated_effort: timedelta = timedelta(0)

@dataclass(frozen=True)
class EditedInPlace:
    before: SourceFile
    after: SourceFile
    caused_by: tuple[str, ...] = ()
    estimated_effort: timedelta = timedelta(0)

Change = Union[Created, Deleted, Moved, EditedInPlace]

@dataclass
class ReconciliationResult:
    """Classified changes for one discovery pass, bucketed by kind.

    `first_error` keeps the first per-file failure; later files are still
    processed.
    """
    root: Path
    created: list[Created] = field(default_factory=list)
    deleted: list[Deleted] = field(default_factory=list)
    moved: list[Moved] = field(default_factory=list)
    edited_in_place: list[EditedInPlace] = field(default_factory=list)
    first_error: Optional[Exception] = None

    def add(self, change: Change) -> None:
        if isinstance(change, Created):
            self.created.append(change)
        elif isinstance(change, Deleted):
            self.deleted.append(change)
        elif isinstance(change, Moved):
            self.moved.append(change)
        elif isinstance(change, EditedInPlace):
            self.edited_in_place.append(change)
        else:
            raise TypeError(f"Not a change: {change!r}")

    def record_error(self, error: Exception) -> None:
        if self.first_error is None:
            self.first_error = error

    def changes(self) -> list[Change]:
        """All changes in apply order: created, deleted, moved, edited."""
        return [*self.created, *self.deleted, *self.moved, *self.edited_in_place]

    def counts(self) -> dict[str, int]:
        return {
            "created": len(self.created),
            "deleted": len(self.deleted),
            "moved": len(self.moved),
            "edited_in_place": len(self.edited_in_place),
        }

    def is_not_empty(self) -> bool:
        return bool(self.created or self.deleted or self.moved or self.edited_in_place)
