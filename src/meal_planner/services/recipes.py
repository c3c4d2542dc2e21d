"""Read-only access to the recipe catalog."""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from meal_planner.domain.errors import RecipeNotFound
from meal_planner.domain.recipes import RecipeRef


class RecipeRepository(Protocol):
    """Persistence interface for catalog recipes."""

    def get_recipe(self, recipe_id: UUID) -> RecipeRef | None:
        """Return a recipe by id, if present."""


@dataclass
class RecipeCatalog:
    """Resolves recipe references for the planner and shopping lists."""

    repository: RecipeRepository

    def get_recipe(self, recipe_id: UUID) -> RecipeRef:
        """Return a recipe or raise RecipeNotFound."""
        recipe = self.repository.get_recipe(recipe_id)
        if recipe is None:
            raise RecipeNotFound(f"Recipe not found: {recipe_id}")
        return recipe

    def get_many(self, recipe_ids: Iterable[UUID]) -> dict[UUID, RecipeRef]:
        """Resolve every distinct id once, raising on the first missing one."""
        resolved: dict[UUID, RecipeRef] = {}
        for recipe_id in recipe_ids:
            if recipe_id not in resolved:
                resolved[recipe_id] = self.get_recipe(recipe_id)
        return resolved
