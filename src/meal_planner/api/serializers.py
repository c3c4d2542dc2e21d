"""JSON shapes returned by the API."""

from meal_planner.domain.planner import CurrentWeek, DayItem, DayPlan
from meal_planner.domain.plans import PlanAssignment, PlanTemplate
from meal_planner.domain.shopping import (
    ShoppingList,
    ShoppingListDetail,
    ShoppingListItem,
    ShoppingRow,
)
from meal_planner.services.assignments import AssignmentResult


def serialize_day_item(item: DayItem) -> dict[str, object]:
    return {
        "id": str(item.id),
        "date": item.day.isoformat(),
        "meal_type": item.meal_slot.value,
        "recipe_id": str(item.recipe_id),
        "title": item.title,
        "image": item.image,
        "multiplier": item.multiplier,
        "per_serving": item.per_serving.as_dict(),
        "scaled": item.scaled.as_dict(),
        "added_at": item.added_at.isoformat(),
        "source": (
            {
                "type": item.source.type,
                "plan_id": str(item.source.plan_id) if item.source.plan_id else None,
            }
            if item.source
            else None
        ),
    }


def serialize_day_plan(plan: DayPlan) -> dict[str, object]:
    return {
        "date": plan.day.isoformat(),
        "items": [serialize_day_item(item) for item in plan.items],
        "totals": plan.totals.as_dict(),
        "targets": plan.targets.as_dict() if plan.targets else None,
    }


def serialize_assignment(assignment: PlanAssignment) -> dict[str, object]:
    return {
        "id": str(assignment.id),
        "plan_id": str(assignment.template_id),
        "start_date": assignment.start_date.isoformat(),
        "end_date": assignment.end_date.isoformat(),
        "overwrite": assignment.overwrite,
        "created_at": assignment.created_at.isoformat(),
    }


def serialize_assignment_result(result: AssignmentResult) -> dict[str, object]:
    return {
        "ok": result.complete,
        "assignment": serialize_assignment(result.assignment),
        "report": {
            "created": len(result.created),
            "replaced": result.replaced,
            "skipped": [
                {"date": slot.day.isoformat(), "meal_type": slot.meal_slot.value}
                for slot in result.skipped
            ],
            "failed": [
                {
                    "date": failure.day.isoformat(),
                    "meal_type": failure.meal_slot.value,
                    "recipe_id": str(failure.recipe_id),
                    "error": failure.error,
                }
                for failure in result.failed
            ],
        },
    }


def serialize_template(
    template: PlanTemplate, locked: bool | None = None
) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": str(template.id),
        "title": template.title,
        "tier": template.tier.value,
        "description": template.description,
        "image": template.image,
        "items": [
            {
                "day": item.day,
                "meal_type": item.meal_slot.value,
                "recipe_id": str(item.recipe_id),
                "default_multiplier": item.default_multiplier,
            }
            for item in template.items
        ],
    }
    if locked is not None:
        payload["locked"] = locked
    return payload


def serialize_current_week(current: CurrentWeek | None) -> dict[str, object]:
    if current is None:
        return {"assignment": None, "plan": None, "week": []}
    return {
        "assignment": serialize_assignment(current.assignment),
        "plan": serialize_template(current.template) if current.template else None,
        "week": [
            {
                "ymd": day.day.isoformat(),
                "day": day.day_name,
                "items": [serialize_day_item(item) for item in day.items],
            }
            for day in current.week
        ],
    }


def serialize_row(row: ShoppingRow) -> dict[str, object]:
    return {"name": row.name, "qty": row.qty, "unit": row.unit}


def serialize_list(shopping_list: ShoppingList) -> dict[str, object]:
    return {
        "id": str(shopping_list.id),
        "name": shopping_list.name,
        "created_at": shopping_list.created_at.isoformat(),
        "updated_at": shopping_list.updated_at.isoformat(),
    }


def serialize_list_item(item: ShoppingListItem) -> dict[str, object]:
    return {
        "id": str(item.id),
        "name": item.name,
        "qty": item.qty,
        "unit": item.unit,
        "done": item.done,
    }


def serialize_list_detail(detail: ShoppingListDetail) -> dict[str, object]:
    return {
        **serialize_list(detail.shopping_list),
        "items": [serialize_list_item(item) for item in detail.items],
        "recipes": [
            {
                "id": str(recipe.id),
                "recipe_id": str(recipe.recipe_id),
                "title": recipe.title,
                "people": recipe.people,
            }
            for recipe in detail.recipes
        ],
    }
