from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
import os
import tomllib
from typing import Any, Iterable

from .errors import ConfigError

def _expand(p: str) -> str:
    return os.path.expandvars(os.path.expanduser(p))

DEFAULT_PLAIN_TEXT_MASKS: tuple[str, ...] = (
    "**/*.adoc",
    "**/*.aj",
    "**/*.bash",
    "**/*.bat",
    "**/CODEOWNERS",
    "**/*.css",
    "**/*.config",
    "**/[dD]ockerfile*",
    "**/*.[dD]ockerfile",
    "**/*[cC]ontainerfile*",
    "**/*.[cC]ontainerfile",
    "**/*.env",
    "**/.gitattributes",
    "**/.gitignore",
    "**/*.htm*",
    "**/gradlew",
    "**/.java-version",
    "**/*.jelly",
    "**/*.jsp",
    "**/*.ksh",
    "**/*.lock",
    "**/lombok.config",
    "**/*.md",
    "**/*.mf",
    "**/META-INF/services/**",
    "**/META-INF/spring/**",
    "**/META-INF/spring.factories",
    "**/mvnw",
    "**/mvnw.cmd",
    "**/*.qute.java",
    "**/.sdkmanrc",
    "**/*.sh",
    "**/*.sql",
    "**/*.svg",
    "**/*.tsx",
    "**/*.txt",
    "**/*.py",
)

def clean_list(values: Iterable[str] | None) -> list[str]:
    """Trim entries, drop blanks and duplicates, keep first-seen order."""
    cleaned: list[str] = []
    for v in values or ():
        v = str(v).strip()
        if v and v not in cleaned:
            cleaned.append(v)
    return cleaned

def _list_option(section: dict[str, Any], key: str) -> list[str]:
    value = section.get(key, [])
    if not isinstance(value, list):
        raise ConfigError(f"Invalid {key}: expected a list, got {type(value).__name__} {value!r}")
    return clean_list(value)

@dataclass(frozen=True)
class RecipeSpec:
    """A recipe declared in rewrite.toml."""
    name: str
    type: str = "text.NoOp"
    options: dict[str, Any] = field(default_factory=dict)

@dataclass(frozen=True)
class RewriteConfig:
    """Configuration for one rewrite run.

    Passed explicitly to discovery, the runner and the CLI; nothing reads
    global state.
    """

    root: Path

    exclusions: list[str] = field(default_factory=list)
    plain_text_masks: list[str] = field(default_factory=list)
    additional_plain_text_masks: list[str] = field(default_factory=list)
    size_threshold_mb: int = 10

    skip: bool = False
    active_recipes: list[str] = field(default_factory=list)
    fail_on_invalid_active_recipes: bool = False
    recipes: list[RecipeSpec] = field(default_factory=list)

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    def __post_init__(self):
        """Convert string paths to Path objects and expand ~ and environment variables."""
        if isinstance(self.root, str):
            object.__setattr__(self, 'root', Path(_expand(self.root)))

    @property
    def size_threshold_bytes(self) -> int:
        return self.size_threshold_mb * 1024 * 1024

    def effective_plain_text_masks(self) -> list[str]:
        """Explicit masks win; otherwise the defaults plus the additional masks."""
        if self.plain_text_masks:
            return clean_list(self.plain_text_masks)
        return clean_list([*DEFAULT_PLAIN_TEXT_MASKS, *self.additional_plain_text_masks])

    def effective_exclusions(self) -> list[str]:
        return clean_list(self.exclusions)

    def effective_active_recipes(self) -> list[str]:
        return clean_list(self.active_recipes)

    @staticmethod
    def from_toml(path: str | Path, root: str | Path | None = None) -> "RewriteConfig":
        """Load rewrite.toml. `root` overrides `[project].root`.

        A relative `[project].root` is resolved against the config file's directory.
        """
        path = Path(path)
        try:
            data = tomllib.loads(path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {path}: {e}") from e
        return RewriteConfig.from_dict(data, base_dir=path.parent, root=root)

    @staticmethod
    def from_dict(data: dict[str, Any], base_dir: Path | None = None,
                  root: str | Path | None = None) -> "RewriteConfig":
        project = data.get("project", {})
        logging_cfg = data.get("logging", {})

        if root is not None:
            project_root = Path(_expand(str(root))).resolve()
        else:
            project_root = Path(_expand(str(project.get("root", "."))))
            if not project_root.is_absolute():
                project_root = (base_dir or Path.cwd()) / project_root
            project_root = project_root.resolve()

        try:
            size_threshold_mb = int(project.get("size_threshold_mb", 10))
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid size_threshold_mb: {project.get('size_threshold_mb')!r}. "
                              f"Must be an integer.") from e
        if size_threshold_mb <= 0 or size_threshold_mb > 10000:
            raise ConfigError(f"Invalid size_threshold_mb: {size_threshold_mb}. Must be between 1 and 10000.")

        recipes: list[RecipeSpec] = []
        for entry in data.get("recipes", []):
            if not isinstance(entry, dict) or not str(entry.get("name", "")).strip():
                raise ConfigError(f"Recipe entry needs a name: {entry!r}")
            options = {k: v for k, v in entry.items() if k not in ("name", "type")}
            recipes.append(RecipeSpec(
                name=str(entry["name"]).strip(),
                type=str(entry.get("type", "text.NoOp")),
                options=options,
            ))

        log_level = str(logging_cfg.get("level", "INFO")).upper()
        if log_level not in ("DEBUG", "INFO", "WARNING", "ERROR"):
            raise ConfigError(f"Invalid log level: {log_level}. Must be one of DEBUG, INFO, WARNING, ERROR.")

        return RewriteConfig(
            root=project_root,
            exclusions=_list_option(project, "exclusions"),
            plain_text_masks=_list_option(project, "plain_text_masks"),
            additional_plain_text_masks=_list_option(project, "additional_plain_text_masks"),
            size_threshold_mb=size_threshold_mb,
            skip=bool(project.get("skip", False)),
            active_recipes=_list_option(project, "active_recipes"),
            fail_on_invalid_active_recipes=bool(project.get("fail_on_invalid_active_recipes", False)),
            recipes=recipes,
            log_level=log_level,
            log_file=logging_cfg.get("file"),
        )

def load_config(path: str | Path, root: str | Path | None = None) -> RewriteConfig:
    """Load `path` if it exists, otherwise defaults rooted at `root` (or the cwd)."""
    p = Path(path)
    if p.is_file():
        return RewriteConfig.from_toml(p, root=root)
    return RewriteConfig(root=Path(_expand(str(root))).resolve() if root is not None else Path.cwd())
