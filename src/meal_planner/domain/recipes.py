"""Recipe catalog domain models."""

from dataclasses import dataclass, field
from enum import StrEnum
from uuid import UUID

from meal_planner.domain.nutrition import MacroProfile


class MealSlot(StrEnum):
    """Meal slot a recipe or planner entry belongs to."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


@dataclass(frozen=True)
class Ingredient:
    """Single ingredient line of a recipe."""

    name: str
    quantity: float | None
    unit: str | None = None


@dataclass(frozen=True)
class RecipeRef:
    """Read-only view of a catalog recipe."""

    id: UUID
    title: str
    meal_slot: MealSlot | None
    per_serving: MacroProfile
    ingredients: list[Ingredient] = field(default_factory=list)
    servings: float = 1.0
    image: str | None = None
