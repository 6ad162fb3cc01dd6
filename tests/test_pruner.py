"""Tests for empty directory pruning."""
from __future__ import annotations

from pathlib import Path

import pytest

from rewriter.models import ReconciliationResult, SourceFile
from rewriter.reconcile.applicator import apply_changes
from rewriter.reconcile.classifier import classify_into
from rewriter.reconcile.pruner import candidate_dirs, prune_empty_dirs


def sf(path: str, content: str = "x") -> SourceFile:
    return SourceFile(path=path, content=content)


@pytest.fixture
def root(tmp_path: Path) -> Path:
    r = tmp_path / "project"
    r.mkdir()
    return r


def _touch(root: Path, rel: str) -> None:
    p = root / rel
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text("x")


class TestCandidates:

    def test_parents_of_deleted_and_moved_only(self, root: Path):
        result = ReconciliationResult(root=root)
        classify_into(result, sf("d/x.txt"), None)
        classify_into(result, sf("m/y.txt"), sf("n/y.txt"))
        classify_into(result, None, sf("c/z.txt"))
        classify_into(result, sf("e/w.txt", "1"), sf("e/w.txt", "2"))

        names = {d.name for d in candidate_dirs(root, result)}

        assert names == {"d", "m"}

    def test_deduplicated_and_deepest_first(self, root: Path):
        result = ReconciliationResult(root=root)
        classify_into(result, sf("a/f.txt"), None)
        classify_into(result, sf("a/b/c/f1.txt"), None)
        classify_into(result, sf("a/b/c/f2.txt"), None)
        classify_into(result, sf("a/b/f.txt"), None)

        dirs = [d.relative_to(root).as_posix() for d in candidate_dirs(root, result)]

        assert dirs == ["a/b/c", "a/b", "a"]

    def test_root_is_never_a_candidate(self, root: Path):
        result = ReconciliationResult(root=root)
        classify_into(result, sf("top.txt"), None)
        assert candidate_dirs(root, result) == []


class TestPrune:

    def test_removes_only_direct_parent(self, root: Path):
        _touch(root, "a/b/c/file1.txt")
        _touch(root, "a/b/c/file2.txt")
        result = ReconciliationResult(root=root)
        classify_into(result, sf("a/b/c/file1.txt"), None)
        classify_into(result, sf("a/b/c/file2.txt"), None)

        outcome = apply_changes(root, result)

        assert not (root / "a" / "b" / "c").exists()
        assert (root / "a" / "b").is_dir()
        assert (root / "a").is_dir()
        assert outcome.removed_dirs == [root / "a" / "b" / "c"]

    def test_cascades_through_direct_candidates(self, root: Path):
        _touch(root, "a/b/c/f1.txt")
        _touch(root, "a/b/f2.txt")
        result = ReconciliationResult(root=root)
        classify_into(result, sf("a/b/c/f1.txt"), None)
        classify_into(result, sf("a/b/f2.txt"), None)

        apply_changes(root, result)

        # a/b was itself a parent of a deleted file, and is evaluated after a/b/c
        assert not (root / "a" / "b").exists()
        assert (root / "a").is_dir()

    def test_keeps_directories_with_content(self, root: Path):
        _touch(root, "a/gone.txt")
        _touch(root, "a/stays.txt")
        result = ReconciliationResult(root=root)
        classify_into(result, sf("a/gone.txt"), None)

        apply_changes(root, result)

        assert (root / "a" / "stays.txt").exists()

    def test_move_source_dir_pruned_target_kept(self, root: Path):
        _touch(root, "old/f.txt")
        result = ReconciliationResult(root=root)
        classify_into(result, sf("old/f.txt"), sf("new/f.txt"))

        apply_changes(root, result)

        assert not (root / "old").exists()
        assert (root / "new" / "f.txt").exists()

    def test_root_survives(self, root: Path):
        _touch(root, "only.txt")
        result = ReconciliationResult(root=root)
        classify_into(result, sf("only.txt"), None)

        apply_changes(root, result)

        assert root.is_dir()

    def test_missing_candidate_tolerated(self, root: Path):
        result = ReconciliationResult(root=root)
        classify_into(result, sf("nowhere/f.txt"), None)

        assert prune_empty_dirs(root, result) == []

    def test_rmdir_failure_tolerated(self, root: Path, monkeypatch):
        (root / "a").mkdir()
        result = ReconciliationResult(root=root)
        classify_into(result, sf("a/f.txt"), None)

        def broken_rmdir(self):
            raise PermissionError(13, "Permission denied", str(self))

        monkeypatch.setattr(Path, "rmdir", broken_rmdir)

        assert prune_empty_dirs(root, result) == []
        assert (root / "a").is_dir()
