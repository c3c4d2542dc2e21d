"""Meal planner endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status

from meal_planner.api.dependencies import get_container, parse_id, require_user
from meal_planner.api.request_models import (
    AddItemRequest,
    AddPlanToDayRequest,
    AssignRequest,
    RemoveItemRequest,
    UpdateItemRequest,
)
from meal_planner.api.serializers import (
    serialize_assignment_result,
    serialize_current_week,
    serialize_day_item,
    serialize_day_plan,
    serialize_template,
)
from meal_planner.containers import AppContainer
from meal_planner.domain.errors import (
    ItemNotFound,
    PlannerError,
    PlanNotFound,
    RecipeNotFound,
)
from meal_planner.domain.plans import PlanTier
from meal_planner.services.assignments import PlanSelection
from meal_planner.services.dates import parse_ymd
from meal_planner.services.day_planner import AUTO

router = APIRouter(prefix="/mealplan", tags=["mealplan"])


@router.post("/assign")
async def assign_plan(
    body: AssignRequest,
    user_id: UUID = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Assign a plan template to the caller's calendar."""
    result = container.scheduler.assign(
        user_id=user_id,
        template_id=parse_id(body.plan_id, PlanNotFound()),
        start_date=body.start_date,
        weeks=body.weeks,
        overwrite=body.overwrite,
        auto_scale_portions=body.auto_scale,
    )
    return serialize_assignment_result(result)


@router.post("/add")
async def add_item(
    body: AddItemRequest,
    user_id: UUID = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Add a recipe to a day."""
    recipe_id = parse_id(body.recipe_id, PlannerError("recipeId invalid"))
    try:
        item = container.day_planner.add_item(
            user_id=user_id,
            day=body.date,
            meal_slot=body.meal_type,
            recipe_id=recipe_id,
            multiplier=AUTO if body.auto_scale else body.multiplier,
        )
    except RecipeNotFound as exc:
        raise PlannerError(exc.message) from exc
    return {"ok": True, "item": serialize_day_item(item)}


@router.post("/update")
async def update_item(
    body: UpdateItemRequest,
    user_id: UUID = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Change a planner entry's multiplier."""
    if body.date is not None:
        parse_ymd(body.date)
    item = container.day_planner.update_multiplier(
        user_id, parse_id(body.item_id, ItemNotFound()), body.multiplier
    )
    return {"ok": True, "item": serialize_day_item(item)}


@router.post("/remove")
async def remove_item(
    body: RemoveItemRequest,
    user_id: UUID = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Remove a planner entry; unknown ids succeed."""
    if body.date is not None:
        parse_ymd(body.date)
    container.day_planner.remove_item(
        user_id, parse_id(body.item_id, PlannerError("itemId invalid"))
    )
    return {"ok": True}


@router.get("/day")
async def get_day(
    date: str | None = None,
    user_id: UUID = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return a day's items, totals and targets."""
    return serialize_day_plan(container.day_planner.get_day(user_id, date))


@router.get("/current")
async def current_week(
    user_id: UUID = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return the active assignment and this week's plan items."""
    return serialize_current_week(container.scheduler.current_week(user_id))


@router.get("/library")
async def list_library(
    tier: str | None = None,
    user_id: UUID = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return plan templates with a locked flag for the caller."""
    tier_filter = None
    if tier:
        try:
            tier_filter = PlanTier(tier.strip().lower())
        except ValueError as exc:
            raise PlannerError("tier must be 'free' or 'premium'") from exc
    listings = container.template_service.list_for_user(user_id, tier_filter)
    return {
        "plans": [
            serialize_template(listing.template, locked=listing.locked)
            for listing in listings
        ],
        "isPremium": container.profile_service.is_premium(user_id),
    }


@router.get("/library/{plan_id}")
async def get_library_plan(
    plan_id: str,
    user_id: UUID = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return one plan template."""
    template = container.template_service.get_template(
        parse_id(plan_id, PlanNotFound())
    )
    locked = not container.profile_service.can_use_tier(user_id, template.tier)
    return serialize_template(template, locked=locked)


@router.post("/library/add-to-day", status_code=status.HTTP_201_CREATED)
async def add_plan_to_day(
    body: AddPlanToDayRequest,
    user_id: UUID = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Copy a plan's recipes (or a selection of them) onto one day."""
    selection = None
    if body.selection:
        selection = [
            PlanSelection(
                recipe_id=parse_id(choice.recipe_id, PlannerError("recipe_id invalid")),
                multiplier=choice.multiplier,
            )
            for choice in body.selection
        ]
    items = container.scheduler.add_plan_to_day(
        user_id,
        parse_id(body.plan_id, PlanNotFound()),
        body.date,
        selection,
    )
    return {"ok": True, "items": [serialize_day_item(item) for item in items]}
