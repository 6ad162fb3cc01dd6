from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

from .config import RewriteConfig
from .errors import RecipeError
from .models import ReconciliationResult, SourceFile
from .paths import relpath
from .recipes import Environment
from .reconcile.applicator import apply_changes
from .reconcile.classifier import classify_into
from .reconcile.discovery import discover_from_config
from .report import apply_report, preview_report

logger = logging.getLogger(__name__)

def read_source(root: Path, path: Path, charset: str = "UTF-8") -> SourceFile:
    content = path.read_bytes().decode(charset, errors="replace")
    return SourceFile(path=relpath(root, path), content=content, charset=charset)

@dataclass
class RunStats:
    """Statistics from a run or dry run."""

    files_scanned: int = 0
    created: int = 0
    deleted: int = 0
    moved: int = 0
    edited_in_place: int = 0
    dirs_removed: int = 0
    fallback_moves: list[tuple[str, str]] = field(default_factory=list)
    applied: bool = False
    elapsed_seconds: float = 0.0

@dataclass
class Runner:
    cfg: RewriteConfig
    env: Environment

    def collect(self) -> tuple[ReconciliationResult, int]:
        """Discover files, run the recipes and classify the results.

        Per-file failures are logged and the first one is kept on the
        result. Returns the result and the number of files scanned.
        """
        root = self.cfg.root
        result = ReconciliationResult(root=root)
        paths = discover_from_config(self.cfg)
        logger.info(f"Found {len(paths)} source files to process")

        existing: set[str] = set()
        for p in paths:
            try:
                before = read_source(root, p)
                existing.add(before.path)
                after, caused_by = self.env.apply(before)
            except (OSError, ValueError, RecipeError) as e:
                logger.warning(f"Failed to process {p}: {e}")
                result.record_error(e)
                continue
            classify_into(result, before, after, caused_by)

        try:
            generated = self.env.generate(existing)
        except RecipeError as e:
            logger.warning(f"Failed to generate files: {e}")
            result.record_error(e)
            generated = []
        for after, caused_by in generated:
            target = root / after.path
            if target.is_file():
                # already on disk: an overwrite, not a new file
                try:
                    before = read_source(root, target, after.charset)
                except OSError as e:
                    result.record_error(e)
                    continue
                classify_into(result, before, after, caused_by)
            else:
                classify_into(result, None, after, caused_by)

        return result, len(paths)

    def _stats(self, result: ReconciliationResult, scanned: int, start: float) -> RunStats:
        counts = result.counts()
        return RunStats(
            files_scanned=scanned,
            created=counts["created"],
            deleted=counts["deleted"],
            moved=counts["moved"],
            edited_in_place=counts["edited_in_place"],
            elapsed_seconds=time.time() - start,
        )

    def run(self) -> RunStats:
        """Collect changes, report them and apply them to disk.

        Raises:
            RecipeError | OSError: the first per-file failure, before anything is applied
            ApplicationError: if a write, delete or rename fails
        """
        if self.cfg.skip:
            logger.info("Skipping execution")
            return RunStats()
        start = time.time()
        logger.info(f"Processing project at: {self.cfg.root}")
        result, scanned = self.collect()

        if result.first_error is not None:
            logger.error(f"The recipe produced an error: {result.first_error}")
            raise result.first_error

        stats = self._stats(result, scanned, start)
        if not result.is_not_empty():
            logger.info("No changes were made")
            return stats

        for line in apply_report(result):
            logger.info(line)
        outcome = apply_changes(self.cfg.root, result)
        stats.dirs_removed = len(outcome.removed_dirs)
        stats.fallback_moves = list(outcome.fallback_moves)
        stats.applied = True
        stats.elapsed_seconds = time.time() - start
        return stats

    def dry_run(self) -> RunStats:
        """Collect and report changes without touching the filesystem."""
        if self.cfg.skip:
            logger.info("Skipping dry run execution")
            return RunStats()
        start = time.time()
        logger.info(f"Dry run - processing project at: {self.cfg.root}")
        result, scanned = self.collect()

        if result.first_error is not None:
            logger.error(f"The recipe produced an error: {result.first_error}")
            raise result.first_error

        if result.is_not_empty():
            for line in preview_report(result):
                logger.info(line)
        else:
            logger.info("No changes would be made")
        return self._stats(result, scanned, start)
