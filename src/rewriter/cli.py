from __future__ import annotations

import dataclasses
import logging
from pathlib import Path

import typer

from . import __version__
from .config import RewriteConfig, load_config
from .errors import RewriteError
from .recipes import Environment, default_registry
from .reconcile.discovery import discover_from_config
from .runner import Runner, RunStats

app = typer.Typer(add_completion=False, no_args_is_help=True)

def _setup_logging(log_file: str | None, log_level: str, verbose: bool) -> None:
    """Configure the rewriter logger for console (and optionally file) output."""
    level = logging.DEBUG if verbose else getattr(logging, log_level.upper(), logging.INFO)

    fmt = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"

    handlers: list[logging.Handler] = []

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(fmt, datefmt))
    handlers.append(console)

    if log_file:
        from logging.handlers import RotatingFileHandler
        file_handler = RotatingFileHandler(
            log_file, maxBytes=10 * 1024 * 1024, backupCount=5
        )
        file_handler.setFormatter(logging.Formatter(fmt, datefmt))
        handlers.append(file_handler)

    logger = logging.getLogger("rewriter")
    logger.setLevel(level)
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    for h in handlers:
        logger.addHandler(h)

def _cfg(config: str, base_dir: str | None, active_recipes: list[str] | None, skip: bool) -> RewriteConfig:
    try:
        cfg = load_config(config, root=base_dir)
    except RewriteError as e:
        raise typer.BadParameter(str(e), param_hint="--config") from e
    if active_recipes:
        names = [n for item in active_recipes for n in item.split(",")]
        cfg = dataclasses.replace(cfg, active_recipes=names)
    if skip:
        cfg = dataclasses.replace(cfg, skip=True)
    return cfg

def _execute(cfg: RewriteConfig, dry_run: bool, log_file: str | None, log_level: str | None,
             verbose: bool) -> RunStats:
    _setup_logging(log_file or cfg.log_file, log_level or cfg.log_level, verbose)
    try:
        runner = Runner(cfg, Environment.load(cfg))
        return runner.dry_run() if dry_run else runner.run()
    except (RewriteError, OSError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

def _summary(stats: RunStats, dry_run: bool) -> None:
    verb = "Would change" if dry_run else "Changed"
    total = stats.created + stats.deleted + stats.moved + stats.edited_in_place
    typer.echo(f"{verb} {total} files ({stats.files_scanned} scanned): "
               f"{stats.created} created, {stats.deleted} deleted, "
               f"{stats.moved} moved, {stats.edited_in_place} edited")
    if stats.dirs_removed:
        typer.echo(f"  ({stats.dirs_removed} empty directories removed)")
    for before, after in stats.fallback_moves:
        typer.echo(f"  (moved {before} -> {after} by copy and delete)")

@app.command()
def init(out: str = typer.Option("rewrite.toml", help="Write example config to this path"),
         root: str = typer.Option(".", help="Project root")):
    """Write a starter rewrite.toml."""
    outp = Path(out)
    outp.write_text(f"""[project]
root = "{root}"
exclusions = ["**/target/**", "**/build/**", "**/.git/**", "**/node_modules/**"]
# Leave empty to use the default masks plus additional_plain_text_masks
plain_text_masks = []
additional_plain_text_masks = ["**/Makefile", "**/.dockerignore"]
size_threshold_mb = 10
skip = false
# Empty means every recipe declared below
active_recipes = []
fail_on_invalid_active_recipes = false

[logging]
level = "INFO"

[[recipes]]
name = "example.TodoToFixme"
type = "text.FindAndReplace"
find = "TODO"
replace = "FIXME"
regex = false
""", encoding="utf-8")
    typer.echo(f"Wrote {outp}")

@app.command()
def run(config: str = typer.Option("rewrite.toml", help="Config file"),
        base_dir: str = typer.Option(None, "--base-dir", help="Project root (overrides config)"),
        active_recipes: list[str] = typer.Option(None, "--active-recipes", help="Recipes to activate"),
        dry_run: bool = typer.Option(False, "--dry-run", help="Preview changes without applying them"),
        skip: bool = typer.Option(False, "--skip", help="Skip execution"),
        log_file: str = typer.Option(None, "--log-file", "-l", help="Log file path"),
        log_level: str = typer.Option(None, "--log-level", help="Log level: DEBUG, INFO, WARNING, ERROR"),
        verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose (DEBUG) logging")):
    """Run recipes and apply the changes to disk."""
    cfg = _cfg(config, base_dir, active_recipes, skip)
    stats = _execute(cfg, dry_run, log_file, log_level, verbose)
    if cfg.skip:
        typer.echo("Skipped.")
        return
    _summary(stats, dry_run)

@app.command(name="dry-run")
def dry_run_cmd(config: str = typer.Option("rewrite.toml", help="Config file"),
                base_dir: str = typer.Option(None, "--base-dir", help="Project root (overrides config)"),
                active_recipes: list[str] = typer.Option(None, "--active-recipes", help="Recipes to activate"),
                skip: bool = typer.Option(False, "--skip", help="Skip execution"),
                log_file: str = typer.Option(None, "--log-file", "-l", help="Log file path"),
                log_level: str = typer.Option(None, "--log-level", help="Log level: DEBUG, INFO, WARNING, ERROR"),
                verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose (DEBUG) logging")):
    """Preview changes without applying them."""
    cfg = _cfg(config, base_dir, active_recipes, skip)
    stats = _execute(cfg, True, log_file, log_level, verbose)
    if cfg.skip:
        typer.echo("Skipped.")
        return
    _summary(stats, True)

@app.command()
def discover(config: str = typer.Option("rewrite.toml", help="Config file"),
             base_dir: str = typer.Option(None, "--base-dir", help="Project root (overrides config)")):
    """List recipe types and the recipes declared in the config."""
    cfg = _cfg(config, base_dir, None, False)
    typer.echo("Available recipe types:")
    for t in default_registry().types():
        typer.echo(f"  - {t}")
    typer.echo(f"\nLoaded {len(cfg.recipes)} recipes from configuration:")
    active = set(cfg.effective_active_recipes())
    for spec in cfg.recipes:
        mark = "*" if not active or spec.name in active else " "
        typer.echo(f"  [{mark}] {spec.name} ({spec.type})")

@app.command()
def files(config: str = typer.Option("rewrite.toml", help="Config file"),
          base_dir: str = typer.Option(None, "--base-dir", help="Project root (overrides config)")):
    """List the files a run would consider."""
    cfg = _cfg(config, base_dir, None, False)
    try:
        paths = discover_from_config(cfg)
    except RewriteError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    for p in paths:
        typer.echo(p.relative_to(cfg.root).as_posix())
    typer.echo(f"{len(paths)} files")

@app.command()
def version():
    """Print the version number."""
    typer.echo(f"rewriter version {__version__}")

if __name__ == "__main__":
    app()
