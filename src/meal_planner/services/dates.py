"""Parsing helpers for request-level values."""

import re
from datetime import date

from meal_planner.domain.errors import InvalidRange, PlannerError
from meal_planner.domain.recipes import MealSlot

_YMD = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_ymd(value: date | str, field: str = "date") -> date:
    """Parse a YYYY-MM-DD calendar date, raising InvalidRange when invalid."""
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _YMD.match(value.strip()):
        raise InvalidRange(f"{field} (YYYY-MM-DD) required")
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise InvalidRange(f"{field} is not a valid calendar date") from exc


def parse_meal_slot(value: MealSlot | str) -> MealSlot:
    """Parse a meal slot name."""
    try:
        return MealSlot(str(value).strip().lower())
    except ValueError as exc:
        raise PlannerError("meal_type invalid") from exc
