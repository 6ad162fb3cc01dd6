from __future__ import annotations

import logging
from pathlib import Path

from ..models import ReconciliationResult
from ..paths import depth

logger = logging.getLogger(__name__)

def candidate_dirs(root: Path, result: ReconciliationResult) -> list[Path]:
    """Parents of every deleted or moved-away file, deepest first."""
    seen: set[Path] = set()
    for change in [*result.deleted, *result.moved]:
        parent = (root / change.before.path).parent
        if parent != root:
            seen.add(parent)
    return sorted(seen, key=lambda d: (-depth(root, d), str(d)))

def prune_empty_dirs(root: Path, result: ReconciliationResult) -> list[Path]:
    """Remove candidate directories that are now empty.

    Only direct parents of deleted/moved files are considered; a grandparent
    emptied by pruning its child stays in place. The root is never removed.
    Failures are logged and ignored.
    """
    root = Path(root)
    removed: list[Path] = []
    for d in candidate_dirs(root, result):
        try:
            if any(d.iterdir()):
                continue
            d.rmdir()
        except OSError as e:
            logger.debug(f"Could not prune {d}: {e}")
            continue
        removed.append(d)

    if removed:
        logger.info(f"Removed {len(removed)} empty directories:")
        for d in removed:
            logger.info(f"  {d.relative_to(root).as_posix()}")
    return removed
