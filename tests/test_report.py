"""Tests for the apply and preview reports."""
from __future__ import annotations

from datetime import timedelta
from pathlib import Path

import pytest

from rewriter.models import ReconciliationResult, SourceFile
from rewriter.reconcile.classifier import classify_into
from rewriter.report import apply_report, format_duration, preview_report, total_effort


def sf(path: str, content: str = "x") -> SourceFile:
    return SourceFile(path=path, content=content)


@pytest.fixture
def result() -> ReconciliationResult:
    r = ReconciliationResult(root=Path("/project"))
    classify_into(r, None, sf("new.txt"), caused_by=["example.Create"])
    classify_into(r, sf("old.txt"), None, caused_by=["example.Delete"])
    classify_into(r, sf("a/m.txt"), sf("b/m.txt"), caused_by=["example.Move"])
    classify_into(r, sf("e.txt", "1"), sf("e.txt", "2"), caused_by=["example.Edit", "example.Other"])
    return r


class TestFormatDuration:

    @pytest.mark.parametrize("d,expected", [
        (timedelta(0), "< 1 second"),
        (timedelta(milliseconds=500), "< 1 second"),
        (timedelta(seconds=45), "45 seconds"),
        (timedelta(minutes=4), "4 minutes"),
        (timedelta(minutes=59, seconds=59), "59 minutes"),
        (timedelta(minutes=90), "1.5 hours"),
        (timedelta(hours=3), "3.0 hours"),
    ])
    def test_units(self, d, expected):
        assert format_duration(d) == expected


class TestApplyReport:

    def test_lists_every_change_with_recipes(self, result: ReconciliationResult):
        lines = apply_report(result)
        text = "\n".join(lines)
        assert "Generated new file new.txt by:" in text
        assert "Deleted file old.txt by:" in text
        assert "File has been moved from a/m.txt to b/m.txt by:" in text
        assert "Changes have been made to e.txt by:" in text
        assert "    example.Other" in lines

    def test_effort_total(self, result: ReconciliationResult):
        assert total_effort(result) == timedelta(minutes=4)
        assert apply_report(result)[-1] == "Estimate time saved: 4 minutes"

    def test_empty_result(self):
        lines = apply_report(ReconciliationResult(root=Path("/project")))
        assert lines[-1] == "Estimate time saved: < 1 second"


class TestPreviewReport:

    def test_counts_and_markers(self, result: ReconciliationResult):
        lines = preview_report(result)
        assert "Would generate 1 new files:" in lines
        assert "  + new.txt" in lines
        assert "Would delete 1 files:" in lines
        assert "  - old.txt" in lines
        assert "Would move 1 files:" in lines
        assert "  a/m.txt -> b/m.txt" in lines
        assert "Would modify 1 files:" in lines
        assert "  ~ e.txt" in lines

    def test_empty_buckets_omitted(self):
        r = ReconciliationResult(root=Path("/project"))
        classify_into(r, None, sf("only.txt"))
        text = "\n".join(preview_report(r))
        assert "Would delete" not in text
        assert "Would move" not in text

    def test_report_has_no_side_effects(self, result: ReconciliationResult, tmp_path: Path):
        result.root = tmp_path
        preview_report(result)
        apply_report(result)
        assert list(tmp_path.iterdir()) == []
