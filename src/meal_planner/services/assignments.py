"""Plan assignment scheduler.

Expands a weekly template across a user's calendar. All validation (range,
template, access tier, recipe references, multipliers) runs before the first
write. Writes are then applied one at a time in ascending date order and, for
a given date, in template order; each write is retried a bounded number of
times and any write that still fails is reported instead of aborting the
rest of the expansion.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from typing import Protocol, TypeVar
from uuid import UUID

from meal_planner.domain.errors import InvalidRange, PlannerError
from meal_planner.domain.planner import CurrentWeek, DayItem, ItemSource, WeekDay
from meal_planner.domain.plans import DAY_NAMES, PlanAssignment, PlanItem, PlanTemplate
from meal_planner.domain.recipes import MealSlot, RecipeRef
from meal_planner.services.dates import parse_ymd
from meal_planner.services.day_planner import DayPlanner
from meal_planner.services.recipes import RecipeCatalog
from meal_planner.services.scaling import auto_scale, scale, validate_multiplier
from meal_planner.services.templates import TemplateService

MIN_WEEKS = 1
MAX_WEEKS = 12
DAYS_PER_WEEK = 7

PLAN_ASSIGNMENT_SOURCE = "plan-assignment"
PLAN_LIBRARY_SOURCE = "plan-library"

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class AssignmentRepository(Protocol):
    """Persistence interface for the single current assignment per user."""

    def get_current(self, user_id: UUID) -> PlanAssignment | None:
        """Return the user's stored assignment, if any."""

    def save_current(  # noqa: PLR0913
        self,
        user_id: UUID,
        template_id: UUID,
        start_date: date,
        end_date: date,
        overwrite: bool,
        created_at: datetime,
    ) -> PlanAssignment:
        """Store an assignment, replacing the user's previous one."""


@dataclass(frozen=True)
class PendingWrite:
    """One (date, template item) pair produced by expansion."""

    day: date
    item: PlanItem


@dataclass(frozen=True)
class SlotRef:
    """A date and meal slot touched by an assignment."""

    day: date
    meal_slot: MealSlot


@dataclass(frozen=True)
class FailedWrite:
    """A pending write that did not succeed after retries."""

    day: date
    meal_slot: MealSlot
    recipe_id: UUID
    error: str


@dataclass
class AssignmentResult:
    """Completion report for an assignment."""

    assignment: PlanAssignment
    created: list[DayItem] = field(default_factory=list)
    replaced: int = 0
    skipped: list[SlotRef] = field(default_factory=list)
    failed: list[FailedWrite] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        """Return True when every pending write was applied or skipped."""
        return not self.failed


@dataclass(frozen=True)
class PlanSelection:
    """Optional subset of a template's recipes with a portion override."""

    recipe_id: UUID
    multiplier: float | None = None


def validate_weeks(weeks: object) -> int:
    """Return weeks as an int in [1, 12], raising InvalidRange otherwise."""
    if isinstance(weeks, bool) or not isinstance(weeks, int | float):
        raise InvalidRange("weeks must be a whole number between 1 and 12")
    if int(weeks) != weeks or not MIN_WEEKS <= weeks <= MAX_WEEKS:
        raise InvalidRange("weeks must be a whole number between 1 and 12")
    return int(weeks)


def expand_template(
    template: PlanTemplate, start_date: date, weeks: int
) -> list[PendingWrite]:
    """Map template items onto every matching date in the window."""
    writes: list[PendingWrite] = []
    for offset in range(weeks * DAYS_PER_WEEK):
        day = start_date + timedelta(days=offset)
        writes.extend(
            PendingWrite(day=day, item=item)
            for item in template.items
            if item.weekday == day.weekday()
        )
    return writes


@dataclass
class PlanScheduler:
    """Assigns templates to calendars and tracks the current assignment."""

    planner: DayPlanner
    catalog: RecipeCatalog
    templates: TemplateService
    repository: AssignmentRepository
    write_attempts: int = 2

    def assign(  # noqa: PLR0913
        self,
        user_id: UUID,
        template_id: UUID,
        start_date: date | str,
        weeks: int,
        overwrite: bool,
        auto_scale_portions: bool = False,
    ) -> AssignmentResult:
        """Expand a template over [start_date, start_date + weeks * 7)."""
        week_count = validate_weeks(weeks)
        start = parse_ymd(start_date, field="start_date")
        end = start + timedelta(days=week_count * DAYS_PER_WEEK)

        template = self.templates.get_template(template_id)
        self.templates.ensure_usable(user_id, template)
        recipes = self.catalog.get_many(item.recipe_id for item in template.items)
        for item in template.items:
            validate_multiplier(item.default_multiplier)

        pending = expand_template(template, start, week_count)
        source = ItemSource(type=PLAN_ASSIGNMENT_SOURCE, plan_id=template.id)
        created: list[DayItem] = []
        skipped: list[SlotRef] = []
        failed: list[FailedWrite] = []
        replaced = 0
        for write in pending:
            recipe = recipes[write.item.recipe_id]
            try:
                outcome = self._with_retry(
                    lambda w=write, r=recipe: self._apply(
                        user_id, w, r, overwrite, auto_scale_portions, source
                    ),
                    action=f"assign:{write.day.isoformat()}:{write.item.meal_slot}",
                )
            except Exception as exc:
                _logger.exception(
                    "Plan assignment write failed",
                    extra={
                        "user_id": str(user_id),
                        "day": write.day.isoformat(),
                        "meal_slot": str(write.item.meal_slot),
                    },
                )
                failed.append(
                    FailedWrite(
                        day=write.day,
                        meal_slot=write.item.meal_slot,
                        recipe_id=write.item.recipe_id,
                        error=str(exc) or type(exc).__name__,
                    )
                )
                continue
            removed, item = outcome
            replaced += removed
            if item is None:
                skipped.append(SlotRef(day=write.day, meal_slot=write.item.meal_slot))
            else:
                created.append(item)

        assignment = self.repository.save_current(
            user_id=user_id,
            template_id=template.id,
            start_date=start,
            end_date=end,
            overwrite=overwrite,
            created_at=datetime.now(tz=UTC),
        )
        _logger.info(
            "Plan assigned: created=%s replaced=%s skipped=%s failed=%s",
            len(created),
            replaced,
            len(skipped),
            len(failed),
            extra={"user_id": str(user_id), "template_id": str(template.id)},
        )
        return AssignmentResult(
            assignment=assignment,
            created=created,
            replaced=replaced,
            skipped=skipped,
            failed=failed,
        )

    def current_assignment(
        self, user_id: UUID, today: date | None = None
    ) -> PlanAssignment | None:
        """Return the stored assignment while today is inside its window."""
        assignment = self.repository.get_current(user_id)
        if assignment is None:
            return None
        if not assignment.is_active(today or date.today()):
            return None
        return assignment

    def current_week(
        self, user_id: UUID, today: date | None = None
    ) -> CurrentWeek | None:
        """Return the active assignment with this week's plan-sourced items."""
        reference = today or date.today()
        assignment = self.current_assignment(user_id, reference)
        if assignment is None:
            return None
        template = self.templates.repository.get_template(assignment.template_id)
        week_start = reference - timedelta(days=reference.weekday())
        week_end = week_start + timedelta(days=DAYS_PER_WEEK - 1)
        items = self.planner.repository.list_items_between(
            user_id, week_start, week_end, assignment.template_id
        )
        week = []
        for offset in range(DAYS_PER_WEEK):
            day = week_start + timedelta(days=offset)
            week.append(
                WeekDay(
                    day=day,
                    day_name=DAY_NAMES[day.weekday()],
                    items=[item for item in items if item.day == day],
                )
            )
        return CurrentWeek(assignment=assignment, template=template, week=week)

    def add_plan_to_day(
        self,
        user_id: UUID,
        template_id: UUID,
        day: date | str,
        selection: list[PlanSelection] | None = None,
    ) -> list[DayItem]:
        """Copy a template's items (or a selected subset) onto a single date."""
        planned_day = parse_ymd(day)
        template = self.templates.get_template(template_id)
        self.templates.ensure_usable(user_id, template)
        if not template.items:
            raise PlannerError("Plan has no items")

        overrides: dict[UUID, float] = {}
        for choice in selection or []:
            if choice.multiplier is not None:
                overrides[choice.recipe_id] = validate_multiplier(choice.multiplier)
        if selection:
            wanted = {choice.recipe_id for choice in selection}
            items = [item for item in template.items if item.recipe_id in wanted]
        else:
            items = list(template.items)
        if not items:
            raise PlannerError("Plan has no items")

        recipes = self.catalog.get_many(item.recipe_id for item in items)
        scaled_items = [
            (
                item,
                scale(
                    recipes[item.recipe_id],
                    overrides.get(item.recipe_id, item.default_multiplier),
                ),
            )
            for item in items
        ]
        source = ItemSource(type=PLAN_LIBRARY_SOURCE, plan_id=template.id)
        return [
            self.planner.add_scaled(
                user_id, planned_day, item.meal_slot, scaled, source
            )
            for item, scaled in scaled_items
        ]

    def _apply(  # noqa: PLR0913
        self,
        user_id: UUID,
        write: PendingWrite,
        recipe: RecipeRef,
        overwrite: bool,
        auto_scale_portions: bool,
        source: ItemSource,
    ) -> tuple[int, DayItem | None]:
        slot = write.item.meal_slot
        removed = 0
        if overwrite:
            removed = self.planner.clear_slot(user_id, write.day, slot)
        elif self.planner.slot_items(user_id, write.day, slot):
            return 0, None
        if auto_scale_portions:
            residual = self.planner.residual_budget(user_id, write.day)
            scaled = auto_scale(recipe, residual)
        else:
            scaled = scale(recipe, write.item.default_multiplier)
        item = self.planner.add_scaled(user_id, write.day, slot, scaled, source)
        return removed, item

    def _with_retry(self, func: Callable[[], T], *, action: str) -> T:
        attempt = 0
        while True:
            try:
                return func()
            except PlannerError:
                raise
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "Planner %s failed (attempt %s/%s): %s",
                    action,
                    attempt,
                    self.write_attempts,
                    exc,
                )
                if attempt >= self.write_attempts:
                    raise
