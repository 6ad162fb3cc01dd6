from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Protocol

from ..config import RecipeSpec, RewriteConfig
from ..errors import ConfigError, RecipeError
from ..models import SourceFile

logger = logging.getLogger(__name__)

class Recipe(Protocol):
    name: str

    def visit(self, source: SourceFile) -> Optional[SourceFile]:
        """Return the transformed file, the same file, or None to delete it."""
        ...

    def generate(self, existing: set[str]) -> list[SourceFile]:
        """New files to add, given the root-relative paths already present."""
        ...

RecipeFactory = Callable[[str, dict[str, Any]], Recipe]

class RecipeRegistry:
    def __init__(self) -> None:
        self._by_type: dict[str, RecipeFactory] = {}

    def register(self, type_name: str, factory: RecipeFactory) -> None:
        self._by_type[type_name] = factory

    def types(self) -> list[str]:
        return sorted(self._by_type)

    def create(self, spec: RecipeSpec) -> Recipe:
        factory = self._by_type.get(spec.type)
        if factory is None:
            raise ConfigError(f"Unknown recipe type '{spec.type}' for recipe '{spec.name}'. "
                              f"Known types: {', '.join(self.types())}")
        try:
            return factory(spec.name, dict(spec.options))
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigError(f"Invalid options for recipe '{spec.name}': {e}") from e

def default_registry() -> RecipeRegistry:
    from .text import CreateTextFile, DeleteFiles, FindAndReplace, MoveFiles, NoOp

    reg = RecipeRegistry()
    reg.register("text.NoOp", NoOp.from_options)
    reg.register("text.FindAndReplace", FindAndReplace.from_options)
    reg.register("text.CreateTextFile", CreateTextFile.from_options)
    reg.register("file.Delete", DeleteFiles.from_options)
    reg.register("file.Move", MoveFiles.from_options)
    return reg

@dataclass
class Environment:
    """Active recipes for a run, applied in declaration order."""

    recipes: list[Recipe] = field(default_factory=list)

    @staticmethod
    def load(cfg: RewriteConfig, registry: RecipeRegistry | None = None) -> "Environment":
        registry = registry or default_registry()
        specs = cfg.recipes
        active = cfg.effective_active_recipes()
        if active:
            declared = {s.name for s in specs}
            unknown = [name for name in active if name not in declared]
            if unknown:
                msg = f"Active recipes not declared in config: {', '.join(unknown)}"
                if cfg.fail_on_invalid_active_recipes:
                    raise ConfigError(msg)
                logger.warning(msg)
            specs = [s for s in specs if s.name in active]
        return Environment(recipes=[registry.create(s) for s in specs])

    @property
    def names(self) -> list[str]:
        return [r.name for r in self.recipes]

    def apply(self, source: SourceFile) -> tuple[Optional[SourceFile], list[str]]:
        """Run every recipe over `source`.

        Returns the final snapshot (None if a recipe deleted the file) and the
        names of recipes that changed something.
        """
        current = source
        caused_by: list[str] = []
        for recipe in self.recipes:
            try:
                out = recipe.visit(current)
            except Exception as e:
                raise RecipeError(source.path, f"recipe {recipe.name} failed: {e}") from e
            if out is None:
                caused_by.append(recipe.name)
                return None, caused_by
            if not out.same_as(current):
                caused_by.append(recipe.name)
                current = dataclasses.replace(out, modified=True)
        return current, caused_by

    def generate(self, existing: set[str]) -> list[tuple[SourceFile, list[str]]]:
        generated: list[tuple[SourceFile, list[str]]] = []
        for recipe in self.recipes:
            try:
                files = recipe.generate(existing)
            except Exception as e:
                raise RecipeError("<generate>", f"recipe {recipe.name} failed: {e}") from e
            for f in files:
                generated.append((dataclasses.replace(f, modified=True), [recipe.name]))
        return generated
