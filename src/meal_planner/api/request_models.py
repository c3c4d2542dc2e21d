"""Request bodies accepted by the HTTP API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AssignRequest(BaseModel):
    """Assign a plan template to the caller's calendar."""

    plan_id: str
    start_date: Any = None
    weeks: Any = None
    overwrite: bool = False
    auto_scale: bool = False


class AddItemRequest(BaseModel):
    """Add a recipe to a day."""

    model_config = ConfigDict(populate_by_name=True)

    date: Any = None
    recipe_id: str = Field(alias="recipeId")
    meal_type: str
    auto_scale: bool = Field(default=False, alias="autoScale")
    multiplier: Any = 1.0


class UpdateItemRequest(BaseModel):
    """Change a planner entry's portion."""

    model_config = ConfigDict(populate_by_name=True)

    date: Any = None
    item_id: str = Field(alias="itemId")
    multiplier: Any = None


class RemoveItemRequest(BaseModel):
    """Remove a planner entry."""

    model_config = ConfigDict(populate_by_name=True)

    date: Any = None
    item_id: str = Field(alias="itemId")


class PlanSelectionModel(BaseModel):
    """Recipe chosen from a plan with an optional portion override."""

    recipe_id: str
    multiplier: Any = None


class AddPlanToDayRequest(BaseModel):
    """Copy plan items onto a single day."""

    plan_id: str
    date: Any = None
    selection: list[PlanSelectionModel] | None = None


class RecipeSelectionModel(BaseModel):
    """Recipe and multiplier for aggregation."""

    recipe_id: str
    multiplier: Any = 1.0


class AggregateRequest(BaseModel):
    """Selections to merge into shopping rows."""

    selections: list[RecipeSelectionModel]


class CreateListRequest(BaseModel):
    """Create a shopping list."""

    name: str = "Shopping list"


class FoodModel(BaseModel):
    """Free-form food row."""

    name: str
    qty: float | None = None
    unit: str | None = None


class AddFoodsRequest(BaseModel):
    """Free-form foods to merge into a list."""

    foods: list[FoodModel]


class RecipeServingsModel(BaseModel):
    """Recipe and the number of people to shop for."""

    recipe_id: str
    people: Any = 1


class AddRecipesRequest(BaseModel):
    """Recipes to expand into a list."""

    items: list[RecipeServingsModel]


class UpdateListItemRequest(BaseModel):
    """Tick or untick a list item."""

    done: bool


class ShoppingFromPlanRequest(BaseModel):
    """Build a shopping list from a plan over a date range."""

    plan_id: str | None = None
    start_date: Any = None
    end_date: Any = None
    people: Any = 1
    list_id: str | None = None


class ShoppingFromDayRequest(BaseModel):
    """Build a shopping list from one date's planner items."""

    date: Any = None
    list_id: str | None = None
