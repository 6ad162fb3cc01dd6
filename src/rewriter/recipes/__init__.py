from .base import Environment, Recipe, RecipeRegistry, default_registry

__all__ = ["Environment", "Recipe", "RecipeRegistry", "default_registry"]
