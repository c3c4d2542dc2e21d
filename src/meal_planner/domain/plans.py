"""Domain models for plan templates and assignments."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from uuid import UUID

from meal_planner.domain.recipes import MealSlot

DAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


class PlanTier(StrEnum):
    """Access tier of a plan template."""

    FREE = "free"
    PREMIUM = "premium"


@dataclass(frozen=True)
class PlanItem:
    """One recipe placed on a weekday and meal slot of a template."""

    day: str
    meal_slot: MealSlot
    recipe_id: UUID
    default_multiplier: float = 1.0

    @property
    def weekday(self) -> int:
        """Return the weekday index (Monday is 0)."""
        return DAY_NAMES.index(self.day)


@dataclass(frozen=True)
class PlanTemplate:
    """Reusable weekly meal-plan blueprint."""

    id: UUID
    title: str
    tier: PlanTier
    items: list[PlanItem] = field(default_factory=list)
    description: str | None = None
    image: str | None = None


@dataclass(frozen=True)
class PlanAssignment:
    """Binding of a template to a user's calendar window."""

    id: UUID
    user_id: UUID
    template_id: UUID
    start_date: date
    end_date: date
    overwrite: bool
    created_at: datetime

    def is_active(self, today: date) -> bool:
        """Return True when today falls inside [start_date, end_date)."""
        return self.start_date <= today < self.end_date

    def overlaps(self, start: date, end: date) -> bool:
        """Return True when the inclusive range [start, end] touches this window."""
        return self.start_date <= end and start < self.end_date
