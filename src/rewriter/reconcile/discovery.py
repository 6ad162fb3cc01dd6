from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable

from ..config import RewriteConfig
from ..errors import DiscoveryError
from ..matching import matches_any

logger = logging.getLogger(__name__)

SOURCE_EXTENSIONS = frozenset({
    ".java", ".kt", ".groovy", ".scala",
    ".js", ".ts", ".jsx", ".tsx",
    ".go", ".rs", ".py", ".rb",
    ".c", ".cpp", ".h", ".hpp",
    ".cs", ".vb", ".php",
    ".xml", ".json", ".yaml", ".yml",
    ".properties", ".toml", ".hcl",
})

def is_source_file(rel_path: str) -> bool:
    return os.path.splitext(rel_path)[1].lower() in SOURCE_EXTENSIONS

def _raise(err: OSError) -> None:
    raise err

def discover(
    root: Path,
    size_threshold_bytes: int,
    exclusions: Iterable[str],
    plain_text_patterns: Iterable[str],
) -> list[Path]:
    """Walk `root` depth-first and return candidate files.

    Only regular files are considered; symlinks are skipped and symlinked
    directories are not descended into. A file is kept when it is no larger than `size_threshold_bytes`, its
    root-relative path matches no exclusion, and it either matches a
    plain-text pattern or has a recognised source extension.

    Raises:
        DiscoveryError: if any part of the walk fails
    """
    exclusions = list(exclusions)
    plain_text_patterns = list(plain_text_patterns)
    found: list[Path] = []
    try:
        for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
            dirnames.sort()
            for name in sorted(filenames):
                p = Path(dirpath) / name
                if p.is_symlink():
                    logger.debug(f"Skipping symlink {p}")
                    continue
                if not p.is_file():
                    continue
                if p.stat().st_size > size_threshold_bytes:
                    logger.debug(f"Skipping {p}: larger than {size_threshold_bytes} bytes")
                    continue
                rel = str(p.relative_to(root)).replace("\\", "/")
                if matches_any(rel, exclusions):
                    continue
                if matches_any(rel, plain_text_patterns) or is_source_file(rel):
                    found.append(p)
    except OSError as e:
        raise DiscoveryError(f"Failed to walk {root}: {e}") from e
    return found

def discover_from_config(cfg: RewriteConfig) -> list[Path]:
    return discover(
        cfg.root,
        cfg.size_threshold_bytes,
        cfg.effective_exclusions(),
        cfg.effective_plain_text_masks(),
    )
