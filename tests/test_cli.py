"""Tests for the typer command line."""
from __future__ import annotations

import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from rewriter import __version__
from rewriter.cli import app

runner = CliRunner()

CONFIG = """
[project]
root = "."
exclusions = ["rewrite.toml"]

[[recipes]]
name = "todo"
type = "text.FindAndReplace"
find = "TODO"
replace = "FIXME"

[[recipes]]
name = "drop-tmp"
type = "file.Delete"
file_pattern = "tmp/**"
"""


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger = logging.getLogger("rewriter")
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "Main.java").write_text("// TODO\n")
    (tmp_path / "tmp").mkdir()
    (tmp_path / "tmp" / "scratch.py").write_text("x = 1\n")
    (tmp_path / "rewrite.toml").write_text(CONFIG)
    return tmp_path


def _config(project: Path) -> str:
    return str(project / "rewrite.toml")


class TestInit:

    def test_writes_starter_config(self, tmp_path: Path):
        out = tmp_path / "rewrite.toml"
        result = runner.invoke(app, ["init", "--out", str(out)])
        assert result.exit_code == 0
        assert "[project]" in out.read_text()
        assert "text.FindAndReplace" in out.read_text()


class TestRun:

    def test_applies_changes(self, project: Path):
        result = runner.invoke(app, ["run", "--config", _config(project)])

        assert result.exit_code == 0, result.output
        assert "Changed 2 files" in result.output
        assert (project / "src" / "Main.java").read_text() == "// FIXME\n"
        assert not (project / "tmp").exists()

    def test_dry_run_flag(self, project: Path):
        result = runner.invoke(app, ["run", "--config", _config(project), "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "Would change 2 files" in result.output
        assert (project / "tmp" / "scratch.py").exists()

    def test_active_recipes_option(self, project: Path):
        result = runner.invoke(app, ["run", "--config", _config(project), "--active-recipes", "todo"])

        assert result.exit_code == 0, result.output
        assert "Changed 1 files" in result.output
        assert (project / "tmp" / "scratch.py").exists()

    def test_skip(self, project: Path):
        result = runner.invoke(app, ["run", "--config", _config(project), "--skip"])
        assert result.exit_code == 0
        assert "Skipped." in result.output
        assert (project / "src" / "Main.java").read_text() == "// TODO\n"

    def test_bad_config_exits_nonzero(self, tmp_path: Path):
        cfg = tmp_path / "rewrite.toml"
        cfg.write_text("[[recipes]]\nname = 'x'\ntype = 'does.not.Exist'\n")
        result = runner.invoke(app, ["run", "--config", str(cfg)])
        assert result.exit_code == 1
        assert "Unknown recipe type" in result.output

    def test_invalid_regex_exits_nonzero(self, tmp_path: Path):
        cfg = tmp_path / "rewrite.toml"
        cfg.write_text("[[recipes]]\nname = 'x'\ntype = 'text.FindAndReplace'\nfind = '('\nregex = true\n")
        result = runner.invoke(app, ["run", "--config", str(cfg)])
        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "invalid regex" in result.output

    def test_bad_value_type_is_a_usage_error(self, tmp_path: Path):
        cfg = tmp_path / "rewrite.toml"
        cfg.write_text("[project]\nsize_threshold_mb = 'ten'\n")
        result = runner.invoke(app, ["run", "--config", str(cfg)])
        assert result.exit_code == 2
        assert not isinstance(result.exception, ValueError)


class TestDryRun:

    def test_does_not_touch_disk(self, project: Path):
        result = runner.invoke(app, ["dry-run", "--config", _config(project)])
        assert result.exit_code == 0, result.output
        assert (project / "src" / "Main.java").read_text() == "// TODO\n"


class TestListing:

    def test_discover_lists_recipes(self, project: Path):
        result = runner.invoke(app, ["discover", "--config", _config(project)])
        assert result.exit_code == 0
        assert "text.FindAndReplace" in result.output
        assert "todo (text.FindAndReplace)" in result.output

    def test_files(self, project: Path):
        result = runner.invoke(app, ["files", "--config", _config(project)])
        assert result.exit_code == 0
        assert "src/Main.java" in result.output
        assert "2 files" in result.output

    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.output
