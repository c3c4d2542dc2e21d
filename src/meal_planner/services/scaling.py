"""Serving-size scaling for recipes.

Two modes are supported: a fixed multiplier chosen by the user, and an
automatic multiplier that fits a single recipe's calories into whatever
residual budget the caller passes in. Auto-scaling never looks at other
recipes; callers that plan several recipes for one day thread the shrinking
budget from one call to the next.
"""

import math
from dataclasses import dataclass

from meal_planner.domain.errors import InvalidMultiplier
from meal_planner.domain.nutrition import MacroProfile
from meal_planner.domain.recipes import Ingredient, RecipeRef

MIN_AUTO_MULTIPLIER = 0.25
MAX_AUTO_MULTIPLIER = 3.0
_MULTIPLIER_PRECISION = 100


@dataclass(frozen=True)
class ScaledItem:
    """Recipe scaled to a concrete portion."""

    recipe: RecipeRef
    multiplier: float
    macros: MacroProfile
    ingredients: list[Ingredient]


def validate_multiplier(value: object) -> float:
    """Return value as a float, raising InvalidMultiplier unless it is > 0."""
    if isinstance(value, bool):
        raise InvalidMultiplier
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError as exc:
            raise InvalidMultiplier from exc
    if not isinstance(value, int | float):
        raise InvalidMultiplier
    multiplier = float(value)
    if not math.isfinite(multiplier) or multiplier <= 0:
        raise InvalidMultiplier
    return multiplier


def scale(recipe: RecipeRef, multiplier: object) -> ScaledItem:
    """Scale every macro and ingredient quantity by a fixed multiplier."""
    factor = validate_multiplier(multiplier)
    return ScaledItem(
        recipe=recipe,
        multiplier=factor,
        macros=recipe.per_serving.scaled(factor),
        ingredients=scale_ingredients(recipe.ingredients, factor),
    )


def auto_scale(recipe: RecipeRef, residual: MacroProfile | None) -> ScaledItem:
    """Scale a recipe so its calories fit the residual budget."""
    return scale(recipe, pick_multiplier(recipe.per_serving, residual))


def pick_multiplier(per_serving: MacroProfile, residual: MacroProfile | None) -> float:
    """Return the largest clamped multiplier that keeps calories within budget."""
    calories = per_serving.calories
    if residual is None or not calories or calories <= 0:
        return 1.0
    raw = max(residual.calories, 0.0) / calories
    # Round down so the rounded portion never overshoots the budget.
    rounded = math.floor(raw * _MULTIPLIER_PRECISION + 1e-9) / _MULTIPLIER_PRECISION
    return min(max(rounded, MIN_AUTO_MULTIPLIER), MAX_AUTO_MULTIPLIER)


def scale_ingredients(
    ingredients: list[Ingredient], factor: float
) -> list[Ingredient]:
    """Return ingredients with quantities multiplied by factor."""
    return [
        Ingredient(
            name=ingredient.name,
            quantity=(
                ingredient.quantity * factor
                if ingredient.quantity is not None
                else None
            ),
            unit=ingredient.unit,
        )
        for ingredient in ingredients
    ]
