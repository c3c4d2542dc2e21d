"""Shopping list endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status

from meal_planner.api.dependencies import get_container, parse_id, require_user
from meal_planner.api.request_models import (
    AddFoodsRequest,
    AddRecipesRequest,
    AggregateRequest,
    CreateListRequest,
    ShoppingFromDayRequest,
    ShoppingFromPlanRequest,
    UpdateListItemRequest,
)
from meal_planner.api.serializers import (
    serialize_list,
    serialize_list_detail,
    serialize_list_item,
    serialize_row,
)
from meal_planner.containers import AppContainer
from meal_planner.domain.errors import (
    ItemNotFound,
    ListNotFound,
    PlanNotFound,
    RecipeNotFound,
)
from meal_planner.domain.shopping import MergeOutcome, ShoppingRow
from meal_planner.services.shopping import RecipeSelection, RecipeServings

router = APIRouter(prefix="/shopping", tags=["shopping"])


@router.post("/aggregate", dependencies=[Depends(require_user)])
async def aggregate(
    body: AggregateRequest,
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Merge the ingredients of several scaled recipes."""
    selections = [
        RecipeSelection(
            recipe_id=parse_id(choice.recipe_id, RecipeNotFound()),
            multiplier=choice.multiplier,
        )
        for choice in body.selections
    ]
    rows = container.shopping_service.aggregate(selections)
    return {"items": [serialize_row(row) for row in rows]}


@router.get("/lists")
async def list_lists(
    user_id: UUID = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return the caller's shopping lists."""
    lists = container.shopping_service.list_lists(user_id)
    return {"lists": [serialize_list(item) for item in lists]}


@router.post("/lists", status_code=status.HTTP_201_CREATED)
async def create_list(
    body: CreateListRequest,
    user_id: UUID = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Create a shopping list."""
    created = container.shopping_service.create_list(user_id, body.name)
    return {"ok": True, "list": serialize_list(created)}


@router.get("/lists/{list_id}")
async def get_list(
    list_id: str,
    user_id: UUID = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return a list with its items and recipes."""
    detail = container.shopping_service.get_list(
        user_id, parse_id(list_id, ListNotFound())
    )
    return serialize_list_detail(detail)


@router.delete("/lists/{list_id}")
async def delete_list(
    list_id: str,
    user_id: UUID = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Delete a list and everything attached to it."""
    container.shopping_service.delete_list(user_id, parse_id(list_id, ListNotFound()))
    return {"ok": True}


@router.post("/lists/{list_id}/foods")
async def add_foods(
    list_id: str,
    body: AddFoodsRequest,
    user_id: UUID = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Merge free-form foods into a list."""
    outcome = container.shopping_service.add_foods(
        user_id,
        parse_id(list_id, ListNotFound()),
        [
            ShoppingRow(name=food.name, qty=food.qty, unit=food.unit)
            for food in body.foods
        ],
    )
    return _merge_response(outcome)


@router.post("/lists/{list_id}/recipes")
async def add_recipes(
    list_id: str,
    body: AddRecipesRequest,
    user_id: UUID = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Scale recipes to a people count and merge them into a list."""
    requests = [
        RecipeServings(
            recipe_id=parse_id(item.recipe_id, RecipeNotFound()),
            people=item.people,
        )
        for item in body.items
    ]
    outcome = container.shopping_service.add_recipes(
        user_id, parse_id(list_id, ListNotFound()), requests
    )
    return _merge_response(outcome)


@router.patch("/lists/{list_id}/items/{item_id}")
async def update_list_item(
    list_id: str,
    item_id: str,
    body: UpdateListItemRequest,
    user_id: UUID = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Tick or untick a list item."""
    container.shopping_service.set_item_done(
        user_id,
        parse_id(list_id, ListNotFound()),
        parse_id(item_id, ItemNotFound()),
        body.done,
    )
    return {"ok": True}


@router.delete("/lists/{list_id}/items/{item_id}")
async def delete_list_item(
    list_id: str,
    item_id: str,
    user_id: UUID = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Remove a list item; unknown ids succeed."""
    container.shopping_service.remove_item(
        user_id,
        parse_id(list_id, ListNotFound()),
        parse_id(item_id, ItemNotFound()),
    )
    return {"ok": True}


@router.post("/from-plan")
async def shopping_from_plan(
    body: ShoppingFromPlanRequest,
    user_id: UUID = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Build or extend a list from the recipes a plan schedules in a date range."""
    shopping_list, outcome = container.shopping_service.shopping_from_plan(
        user_id=user_id,
        start_date=body.start_date,
        end_date=body.end_date,
        people=body.people,
        template_id=parse_id(body.plan_id, PlanNotFound()) if body.plan_id else None,
        list_id=parse_id(body.list_id, ListNotFound()) if body.list_id else None,
    )
    return {
        "ok": True,
        "list": serialize_list(shopping_list),
        "added": outcome.added,
        "updated": outcome.updated,
    }


@router.post("/from-day")
async def shopping_from_day(
    body: ShoppingFromDayRequest,
    user_id: UUID = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Build or extend a list from a date's planner items at their multipliers."""
    shopping_list, outcome = container.shopping_service.shopping_from_day(
        user_id=user_id,
        day=body.date,
        list_id=parse_id(body.list_id, ListNotFound()) if body.list_id else None,
    )
    return {
        "ok": True,
        "list": serialize_list(shopping_list),
        "added": outcome.added,
        "updated": outcome.updated,
    }


def _merge_response(outcome: MergeOutcome) -> dict[str, object]:
    return {
        "ok": True,
        "added": outcome.added,
        "updated": outcome.updated,
        "items": [serialize_list_item(item) for item in outcome.items],
    }
