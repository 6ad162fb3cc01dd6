from __future__ import annotations

from datetime import timedelta
from typing import Iterable, Optional

from ..models import Change, Created, Deleted, EditedInPlace, Moved, ReconciliationResult, SourceFile

# Nominal effort a human would have spent on one change.
DEFAULT_EFFORT = timedelta(minutes=1)

def classify(
    before: Optional[SourceFile],
    after: Optional[SourceFile],
    caused_by: Iterable[str] = (),
    estimated_effort: timedelta = DEFAULT_EFFORT,
) -> Optional[Change]:
    """Work out what happened to a file between two snapshots.

    Returns None when there is nothing to do: both sides absent, or same
    path and same content.
    """
    if estimated_effort < timedelta(0):
        raise ValueError(f"estimated_effort must not be negative: {estimated_effort}")
    recipes = tuple(caused_by)

    if before is None and after is None:
        return None
    if before is None:
        return Created(after=after, caused_by=recipes, estimated_effort=estimated_effort)
    if after is None:
        return Deleted(before=before, caused_by=recipes, estimated_effort=estimated_effort)
    if before.path != after.path:
        return Moved(before=before, after=after, caused_by=recipes, estimated_effort=estimated_effort)
    if before.content != after.content:
        return EditedInPlace(before=before, after=after, caused_by=recipes, estimated_effort=estimated_effort)
    return None

def classify_into(
    result: ReconciliationResult,
    before: Optional[SourceFile],
    after: Optional[SourceFile],
    caused_by: Iterable[str] = (),
    estimated_effort: timedelta = DEFAULT_EFFORT,
) -> Optional[Change]:
    """Classify and, unless it is a no-op, add the change to `result`."""
    change = classify(before, after, caused_by, estimated_effort)
    if change is not None:
        result.add(change)
    return change
