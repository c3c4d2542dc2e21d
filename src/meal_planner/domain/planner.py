"""Domain models for the per-day meal planner."""

from dataclasses import dataclass, field
from datetime import date, datetime
from uuid import UUID

from meal_planner.domain.nutrition import MacroProfile
from meal_planner.domain.plans import PlanAssignment, PlanTemplate
from meal_planner.domain.recipes import MealSlot


@dataclass(frozen=True)
class ItemSource:
    """Where a planner entry came from."""

    type: str
    plan_id: UUID | None = None


@dataclass(frozen=True)
class DayItemDraft:
    """Planner entry that has not been persisted yet."""

    user_id: UUID
    day: date
    meal_slot: MealSlot
    recipe_id: UUID
    title: str
    multiplier: float
    per_serving: MacroProfile
    image: str | None = None
    source: ItemSource | None = None


@dataclass(frozen=True)
class DayItem:
    """Scaled recipe placed on a date and meal slot."""

    id: UUID
    user_id: UUID
    day: date
    meal_slot: MealSlot
    recipe_id: UUID
    title: str
    multiplier: float
    per_serving: MacroProfile
    added_at: datetime
    image: str | None = None
    source: ItemSource | None = None

    @property
    def scaled(self) -> MacroProfile:
        """Macros for the planned portion, derived on read."""
        return self.per_serving.scaled(self.multiplier)


@dataclass(frozen=True)
class DayPlan:
    """Items for a date with fresh totals and optional targets."""

    day: date
    items: list[DayItem]
    totals: MacroProfile
    targets: MacroProfile | None


@dataclass(frozen=True)
class WeekDay:
    """Plan-sourced items for one day of the current week."""

    day: date
    day_name: str
    items: list[DayItem]


@dataclass(frozen=True)
class CurrentWeek:
    """Active assignment with its template and this week's items."""

    assignment: PlanAssignment
    template: PlanTemplate | None
    week: list[WeekDay] = field(default_factory=list)
