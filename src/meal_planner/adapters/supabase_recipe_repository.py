"""Supabase-backed recipe catalog."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from meal_planner.domain.nutrition import MacroProfile
from meal_planner.domain.recipes import Ingredient, MealSlot, RecipeRef
from meal_planner.services.recipes import RecipeRepository

_COLUMNS = "id, title, meal_type, per_serving, ingredients, servings, image"


@dataclass
class SupabaseRecipeRepository(RecipeRepository):
    """Supabase implementation of the read-only recipe catalog."""

    client: Client

    def get_recipe(self, recipe_id: UUID) -> RecipeRef | None:
        """Return a recipe by id, if present."""
        response = (
            self.client.table("recipes")
            .select(_COLUMNS)
            .eq("id", str(recipe_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_recipe(response.data[0])


def parse_recipe(row: dict[str, object]) -> RecipeRef:
    """Parse a recipe row into a domain model."""
    per = row.get("per_serving") or {}
    meal_type = row.get("meal_type")
    servings = _to_float(row.get("servings"))
    return RecipeRef(
        id=UUID(str(row["id"])),
        title=str(row.get("title") or "Recipe"),
        meal_slot=(
            MealSlot(meal_type)
            if meal_type in {slot.value for slot in MealSlot}
            else None
        ),
        per_serving=MacroProfile(
            calories=_to_float(per.get("calories")) or 0.0,
            protein_g=_to_float(per.get("protein_g")) or 0.0,
            carbs_g=_to_float(per.get("carbs_g")) or 0.0,
            fat_g=_to_float(per.get("fat_g")) or 0.0,
        ),
        ingredients=[
            ingredient
            for ingredient in (
                _parse_ingredient(raw) for raw in row.get("ingredients") or []
            )
            if ingredient is not None
        ],
        servings=servings if servings and servings > 0 else 1.0,
        image=row.get("image"),
    )


def _parse_ingredient(raw: object) -> Ingredient | None:
    """Read an ingredient row written by any of the recipe editors."""
    if not isinstance(raw, dict):
        return None
    name = str(raw.get("name") or raw.get("ingredient") or raw.get("title") or "")
    if not name.strip():
        return None
    quantity = None
    for key in ("qty", "quantity", "amount", "grams"):
        if raw.get(key) is not None:
            quantity = _to_float(raw[key]) or 0.0
            break
    unit = raw.get("unit") or raw.get("uom")
    if not unit and raw.get("grams") is not None:
        unit = "g"
    return Ingredient(name=name.strip(), quantity=quantity, unit=unit or None)


def _to_float(value: object) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None
