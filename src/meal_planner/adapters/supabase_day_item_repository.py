"""Supabase repository for planner entries."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID

from supabase import Client

from meal_planner.domain.nutrition import MacroProfile
from meal_planner.domain.planner import DayItem, DayItemDraft, ItemSource
from meal_planner.domain.recipes import MealSlot
from meal_planner.services.day_planner import DayItemRepository

_COLUMNS = (
    "id, user_id, date, meal_type, recipe_id, title, multiplier, per_serving, "
    "image, source_type, source_plan_id, added_at"
)


@dataclass
class SupabaseDayItemRepository(DayItemRepository):
    """Supabase implementation for planner entries."""

    client: Client

    def list_items(self, user_id: UUID, day: date) -> list[DayItem]:
        """Return a day's items ordered by added_at."""
        response = (
            self.client.table("meal_plan_items")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .eq("date", day.isoformat())
            .order("added_at", desc=False)
            .execute()
        )
        return [_parse_item(row) for row in response.data or []]

    def list_items_between(
        self, user_id: UUID, start: date, end: date, plan_id: UUID | None
    ) -> list[DayItem]:
        """Return items dated within [start, end]."""
        request = (
            self.client.table("meal_plan_items")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("date", start.isoformat())
            .lte("date", end.isoformat())
        )
        if plan_id is not None:
            request = request.eq("source_plan_id", str(plan_id))
        response = request.order("added_at", desc=False).execute()
        return [_parse_item(row) for row in response.data or []]

    def create_item(self, draft: DayItemDraft) -> DayItem:
        """Insert a planner entry."""
        response = (
            self.client.table("meal_plan_items")
            .insert(
                {
                    "user_id": str(draft.user_id),
                    "date": draft.day.isoformat(),
                    "meal_type": draft.meal_slot.value,
                    "recipe_id": str(draft.recipe_id),
                    "title": draft.title,
                    "multiplier": draft.multiplier,
                    "per_serving": draft.per_serving.as_dict(),
                    "image": draft.image,
                    "source_type": draft.source.type if draft.source else None,
                    "source_plan_id": (
                        str(draft.source.plan_id)
                        if draft.source and draft.source.plan_id
                        else None
                    ),
                    "added_at": datetime.now(tz=UTC).isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create meal plan item")
        return _parse_item(response.data[0])

    def update_multiplier(
        self, user_id: UUID, item_id: UUID, multiplier: float
    ) -> DayItem | None:
        """Replace an item's multiplier."""
        response = (
            self.client.table("meal_plan_items")
            .update({"multiplier": multiplier})
            .eq("user_id", str(user_id))
            .eq("id", str(item_id))
            .execute()
        )
        if not response.data:
            return None
        return _parse_item(response.data[0])

    def delete_item(self, user_id: UUID, item_id: UUID) -> None:
        """Delete an item; a missing row is not an error."""
        self.client.table("meal_plan_items").delete().eq("user_id", str(user_id)).eq(
            "id", str(item_id)
        ).execute()

    def delete_slot(self, user_id: UUID, day: date, meal_slot: MealSlot) -> int:
        """Delete every item at a date and meal slot."""
        response = (
            self.client.table("meal_plan_items")
            .delete()
            .eq("user_id", str(user_id))
            .eq("date", day.isoformat())
            .eq("meal_type", meal_slot.value)
            .execute()
        )
        return len(response.data or [])


def _parse_item(row: dict[str, object]) -> DayItem:
    per = row.get("per_serving") or {}
    source_type = row.get("source_type")
    plan_id = row.get("source_plan_id")
    return DayItem(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        day=date.fromisoformat(str(row["date"])[:10]),
        meal_slot=MealSlot(str(row["meal_type"])),
        recipe_id=UUID(str(row["recipe_id"])),
        title=str(row.get("title") or "Recipe"),
        multiplier=float(row.get("multiplier", 1.0)),
        per_serving=MacroProfile(
            calories=float(per.get("calories", 0.0)),
            protein_g=float(per.get("protein_g", 0.0)),
            carbs_g=float(per.get("carbs_g", 0.0)),
            fat_g=float(per.get("fat_g", 0.0)),
        ),
        added_at=datetime.fromisoformat(str(row["added_at"])),
        image=row.get("image"),
        source=(
            ItemSource(
                type=str(source_type), plan_id=UUID(str(plan_id)) if plan_id else None
            )
            if source_type
            else None
        ),
    )
