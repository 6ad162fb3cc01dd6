from __future__ import annotations

from fnmatch import fnmatchcase
from typing import Iterable

_WILDCARDS = ("*", "?", "[")


def _glob_match(path: str, pattern: str) -> bool:
    """Whole-path glob where `*` and `?` never cross a `/`."""
    path_parts = path.split("/")
    pattern_parts = pattern.split("/")
    if len(path_parts) != len(pattern_parts):
        return False
    return all(fnmatchcase(p, pat) for p, pat in zip(path_parts, pattern_parts))


def _literal_in_order(path: str, parts: list[str]) -> bool:
    # first part anchors the start, last part anchors the end, the rest must
    # appear in between in order
    head, *middle, tail = parts
    if not path.startswith(head) or not path.endswith(tail):
        return False
    pos = len(head)
    end = len(path) - len(tail)
    if end < pos:
        return False
    for literal in middle:
        found = path.find(literal, pos, end)
        if found < 0:
            return False
        pos = found + len(literal)
    return True


def matches(path: str, pattern: str) -> bool:
    """Check whether a root-relative path matches a pattern.

    Two forms are supported:
    - plain globs (`*`, `?`, `[...]`) matched case-sensitively against the
      whole path, segment by segment
    - `**` patterns: with exactly one `**` the pattern is a literal prefix
      and suffix, e.g. "src/**.java" matches "src/a/b/C.java"

    A pattern with several `**` is matched as literals in order
    ("**/target/**"). Either `**` form only applies when the other parts
    hold no wildcards. Otherwise only the glob form is tried, which usually
    matches one directory level deep.

    Args:
        path: Relative path from the project root (forward slashes)
        pattern: Pattern to match against

    Returns:
        True if the path matches
    """
    path = path.replace("\\", "/")
    pattern = pattern.replace("\\", "/")

    if _glob_match(path, pattern):
        return True

    if "**" in pattern:
        parts = pattern.split("**")
        if any(w in part for part in parts for w in _WILDCARDS):
            return False
        if len(parts) == 2:
            prefix, suffix = parts
            return path.startswith(prefix) and path.endswith(suffix) and len(path) >= len(prefix) + len(suffix)
        return _literal_in_order(path, parts)

    return False


def matches_any(path: str, patterns: Iterable[str]) -> bool:
    return any(matches(path, pattern) for pattern in patterns)
