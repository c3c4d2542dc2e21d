"""Per-day meal planner."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Literal, Protocol
from uuid import UUID

from meal_planner.domain.errors import ItemNotFound
from meal_planner.domain.nutrition import MacroProfile
from meal_planner.domain.planner import DayItem, DayItemDraft, DayPlan, ItemSource
from meal_planner.domain.recipes import MealSlot
from meal_planner.services.dates import parse_meal_slot, parse_ymd
from meal_planner.services.profiles import ProfileService
from meal_planner.services.recipes import RecipeCatalog
from meal_planner.services.scaling import (
    ScaledItem,
    auto_scale,
    scale,
    validate_multiplier,
)

AUTO = "auto"

_logger = logging.getLogger(__name__)


class DayItemRepository(Protocol):
    """Persistence interface for planner entries."""

    def list_items(self, user_id: UUID, day: date) -> list[DayItem]:
        """Return a day's items ordered by added_at."""

    def list_items_between(
        self, user_id: UUID, start: date, end: date, plan_id: UUID | None
    ) -> list[DayItem]:
        """Return items dated within [start, end], optionally for one plan."""

    def create_item(self, draft: DayItemDraft) -> DayItem:
        """Persist a new item and return it."""

    def update_multiplier(
        self, user_id: UUID, item_id: UUID, multiplier: float
    ) -> DayItem | None:
        """Replace an item's multiplier, returning None if it does not exist."""

    def delete_item(self, user_id: UUID, item_id: UUID) -> None:
        """Delete an item; missing items are ignored."""

    def delete_slot(self, user_id: UUID, day: date, meal_slot: MealSlot) -> int:
        """Delete every item at a date and meal slot, returning the count."""


@dataclass
class DayPlanner:
    """Owns a user's per-date planner entries and their totals."""

    repository: DayItemRepository
    catalog: RecipeCatalog
    profiles: ProfileService

    def add_item(  # noqa: PLR0913
        self,
        user_id: UUID,
        day: date | str,
        meal_slot: MealSlot | str,
        recipe_id: UUID,
        multiplier: float | Literal["auto"] = 1.0,
        source: ItemSource | None = None,
    ) -> DayItem:
        """Add a recipe to a day at a fixed or macro-tailored portion."""
        planned_day = parse_ymd(day)
        slot = parse_meal_slot(meal_slot)
        if multiplier == AUTO:
            recipe = self.catalog.get_recipe(recipe_id)
            scaled = auto_scale(recipe, self.residual_budget(user_id, planned_day))
        else:
            factor = validate_multiplier(multiplier)
            scaled = scale(self.catalog.get_recipe(recipe_id), factor)
        return self.add_scaled(user_id, planned_day, slot, scaled, source)

    def add_scaled(
        self,
        user_id: UUID,
        day: date,
        meal_slot: MealSlot,
        scaled: ScaledItem,
        source: ItemSource | None = None,
    ) -> DayItem:
        """Persist an already scaled recipe."""
        return self.repository.create_item(
            DayItemDraft(
                user_id=user_id,
                day=day,
                meal_slot=meal_slot,
                recipe_id=scaled.recipe.id,
                title=scaled.recipe.title or "Recipe",
                multiplier=scaled.multiplier,
                per_serving=scaled.recipe.per_serving,
                image=scaled.recipe.image,
                source=source,
            )
        )

    def update_multiplier(
        self, user_id: UUID, item_id: UUID, multiplier: object
    ) -> DayItem:
        """Change an item's portion size."""
        factor = validate_multiplier(multiplier)
        item = self.repository.update_multiplier(user_id, item_id, factor)
        if item is None:
            raise ItemNotFound
        return item

    def remove_item(self, user_id: UUID, item_id: UUID) -> None:
        """Remove an item. Removing a missing item succeeds."""
        self.repository.delete_item(user_id, item_id)

    def clear_slot(self, user_id: UUID, day: date, meal_slot: MealSlot) -> int:
        """Remove every item at a date and meal slot."""
        removed = self.repository.delete_slot(user_id, day, meal_slot)
        if removed:
            _logger.info(
                "Cleared planner slot",
                extra={"user_id": str(user_id), "day": day.isoformat()},
            )
        return removed

    def slot_items(
        self, user_id: UUID, day: date, meal_slot: MealSlot
    ) -> list[DayItem]:
        """Return the items occupying a date and meal slot."""
        return [
            item
            for item in self.repository.list_items(user_id, day)
            if item.meal_slot == meal_slot
        ]

    def daily_totals(self, user_id: UUID, day: date | str) -> MacroProfile:
        """Sum the scaled macros of every item on a date."""
        return _sum_scaled(self.repository.list_items(user_id, parse_ymd(day)))

    def residual_budget(self, user_id: UUID, day: date | str) -> MacroProfile | None:
        """Return targets minus the day's totals, or None when unconstrained."""
        targets = self.profiles.get_targets(user_id)
        if targets is None:
            return None
        return targets.minus(self.daily_totals(user_id, day))

    def get_day(self, user_id: UUID, day: date | str) -> DayPlan:
        """Return a day's items with fresh totals and targets."""
        planned_day = parse_ymd(day)
        items = self.repository.list_items(user_id, planned_day)
        return DayPlan(
            day=planned_day,
            items=items,
            totals=_sum_scaled(items),
            targets=self.profiles.get_targets(user_id),
        )


def _sum_scaled(items: list[DayItem]) -> MacroProfile:
    total = MacroProfile.zero()
    for item in items:
        total = total.plus(item.scaled)
    return total
