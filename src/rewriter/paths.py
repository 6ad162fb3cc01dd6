from __future__ import annotations

from pathlib import Path

def relpath(root: Path, path: Path) -> str:
    """Root-relative POSIX path, computed without following symlinks."""
    return Path(path).relative_to(root).as_posix()

def is_within(root: Path, path: Path) -> bool:
    try:
        path.resolve().relative_to(root.resolve())
        return True
    except ValueError:
        return False

def depth(root: Path, path: Path) -> int:
    """Number of path segments below `root` (root itself is 0)."""
    try:
        return len(path.relative_to(root).parts)
    except ValueError:
        return len(path.parts)
