"""Ingredient aggregation and shopping lists."""

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Protocol
from uuid import UUID

from meal_planner.domain.errors import (
    InvalidMultiplier,
    InvalidRange,
    ItemNotFound,
    ListNotFound,
)
from meal_planner.domain.recipes import Ingredient
from meal_planner.domain.shopping import (
    MergeOutcome,
    ShoppingList,
    ShoppingListDetail,
    ShoppingListItem,
    ShoppingListRecipe,
    ShoppingRow,
)
from meal_planner.services.assignments import AssignmentRepository
from meal_planner.services.dates import parse_ymd
from meal_planner.services.day_planner import DayItemRepository
from meal_planner.services.recipes import RecipeCatalog
from meal_planner.services.scaling import scale_ingredients, validate_multiplier
from meal_planner.services.templates import TemplateService

_logger = logging.getLogger(__name__)


class ShoppingRepository(Protocol):
    """Persistence interface for shopping lists."""

    def create_list(self, user_id: UUID, name: str) -> ShoppingList:
        """Create a list and return it."""

    def get_list(self, user_id: UUID, list_id: UUID) -> ShoppingList | None:
        """Return a user's list, if present."""

    def list_lists(self, user_id: UUID) -> list[ShoppingList]:
        """Return a user's lists, most recently updated first."""

    def touch_list(self, list_id: UUID) -> None:
        """Bump a list's updated_at timestamp."""

    def delete_list(self, list_id: UUID) -> None:
        """Delete the list row itself."""

    def list_items(self, list_id: UUID) -> list[ShoppingListItem]:
        """Return a list's items."""

    def create_item(self, list_id: UUID, row: ShoppingRow) -> ShoppingListItem:
        """Create a list item."""

    def update_item(
        self, list_id: UUID, item_id: UUID, fields: dict[str, object]
    ) -> ShoppingListItem | None:
        """Update fields on an item of the given list; None if it has no such item."""

    def delete_item(self, list_id: UUID, item_id: UUID) -> None:
        """Delete a single list item; missing items are ignored."""

    def delete_items(self, list_id: UUID) -> None:
        """Delete every item on a list."""

    def list_recipes(self, list_id: UUID) -> list[ShoppingListRecipe]:
        """Return recipes attached to a list."""

    def attach_recipe(
        self, list_id: UUID, recipe_id: UUID, title: str, people: float
    ) -> ShoppingListRecipe:
        """Record a recipe attachment with its people count."""

    def delete_recipes(self, list_id: UUID) -> None:
        """Delete every recipe attachment of a list."""


@dataclass(frozen=True)
class RecipeSelection:
    """Recipe chosen for aggregation with its portion multiplier."""

    recipe_id: UUID
    multiplier: float = 1.0


@dataclass(frozen=True)
class RecipeServings:
    """Recipe added to a list for a number of people."""

    recipe_id: UUID
    people: float = 1.0


def normalize_name(name: str) -> str:
    """Return the grouping form of an ingredient name."""
    return name.strip().lower()


def normalize_unit(unit: str | None) -> str | None:
    """Return a unit with blank values mapped to None."""
    if unit is None:
        return None
    cleaned = unit.strip()
    return cleaned or None


@dataclass
class _Group:
    unit: str | None
    spellings: set[str] = field(default_factory=set)
    quantities: list[float] = field(default_factory=list)


def aggregate_ingredients(
    ingredient_lists: Iterable[list[Ingredient]],
) -> list[ShoppingRow]:
    """Merge ingredient lists by (normalized name, unit).

    Rows appear in order of first occurrence. Quantities are summed with
    fsum and the displayed name is the smallest spelling seen, so the merged
    multiset does not depend on input order.
    """
    groups: dict[tuple[str, str | None], _Group] = {}
    for ingredients in ingredient_lists:
        for ingredient in ingredients:
            name = ingredient.name.strip()
            if not name:
                continue
            unit = normalize_unit(ingredient.unit)
            group = groups.setdefault((normalize_name(name), unit), _Group(unit=unit))
            group.spellings.add(name)
            if ingredient.quantity is not None:
                group.quantities.append(float(ingredient.quantity))
    return [
        ShoppingRow(
            name=min(group.spellings),
            qty=math.fsum(group.quantities) if group.quantities else None,
            unit=group.unit,
        )
        for group in groups.values()
    ]


@dataclass
class ShoppingService:
    """Builds merged shopping lists from recipes and plans."""

    repository: ShoppingRepository
    catalog: RecipeCatalog
    templates: TemplateService
    assignments: AssignmentRepository
    day_items: DayItemRepository

    def aggregate(self, selections: list[RecipeSelection]) -> list[ShoppingRow]:
        """Scale each selected recipe's ingredients and merge them."""
        factors = [validate_multiplier(choice.multiplier) for choice in selections]
        recipes = self.catalog.get_many(choice.recipe_id for choice in selections)
        return aggregate_ingredients(
            scale_ingredients(recipes[choice.recipe_id].ingredients, factor)
            for choice, factor in zip(selections, factors, strict=True)
        )

    def create_list(self, user_id: UUID, name: str) -> ShoppingList:
        """Create a named list."""
        cleaned = name.strip() or "Shopping list"
        return self.repository.create_list(user_id, cleaned)

    def list_lists(self, user_id: UUID) -> list[ShoppingList]:
        """Return the user's lists."""
        return self.repository.list_lists(user_id)

    def get_list(self, user_id: UUID, list_id: UUID) -> ShoppingListDetail:
        """Return a list with its items and recipe attachments."""
        shopping_list = self._require_list(user_id, list_id)
        return ShoppingListDetail(
            shopping_list=shopping_list,
            items=self.repository.list_items(list_id),
            recipes=self.repository.list_recipes(list_id),
        )

    def delete_list(self, user_id: UUID, list_id: UUID) -> None:
        """Delete a list together with its items and recipe attachments."""
        if self.repository.get_list(user_id, list_id) is None:
            return
        self.repository.delete_items(list_id)
        self.repository.delete_recipes(list_id)
        self.repository.delete_list(list_id)

    def add_foods(
        self, user_id: UUID, list_id: UUID, foods: list[ShoppingRow]
    ) -> MergeOutcome:
        """Merge free-form food rows into a list."""
        self._require_list(user_id, list_id)
        return self._merge(list_id, aggregate_ingredients([_as_ingredients(foods)]))

    def add_recipes(
        self, user_id: UUID, list_id: UUID, requests: list[RecipeServings]
    ) -> MergeOutcome:
        """Scale recipes to a people count, merge them, and attach them."""
        self._require_list(user_id, list_id)
        for request in requests:
            try:
                validate_multiplier(request.people)
            except InvalidMultiplier as exc:
                raise InvalidMultiplier("people must be > 0") from exc
        recipes = self.catalog.get_many(request.recipe_id for request in requests)
        rows = aggregate_ingredients(
            scale_ingredients(
                recipes[request.recipe_id].ingredients,
                float(request.people) / _servings(recipes[request.recipe_id].servings),
            )
            for request in requests
        )
        outcome = self._merge(list_id, rows)
        for request in requests:
            recipe = recipes[request.recipe_id]
            self.repository.attach_recipe(
                list_id, recipe.id, recipe.title, float(request.people)
            )
        return outcome

    def set_item_done(
        self, user_id: UUID, list_id: UUID, item_id: UUID, done: bool
    ) -> None:
        """Tick or untick a list item."""
        self._require_list(user_id, list_id)
        if self.repository.update_item(list_id, item_id, {"done": done}) is None:
            raise ItemNotFound

    def remove_item(self, user_id: UUID, list_id: UUID, item_id: UUID) -> None:
        """Remove a list item. Removing a missing item succeeds."""
        self._require_list(user_id, list_id)
        self.repository.delete_item(list_id, item_id)

    def shopping_from_plan(  # noqa: PLR0913
        self,
        user_id: UUID,
        start_date: date | str,
        end_date: date | str,
        people: float = 1.0,
        template_id: UUID | None = None,
        list_id: UUID | None = None,
    ) -> tuple[ShoppingList, MergeOutcome]:
        """Add every plan recipe scheduled in [start_date, end_date] to a list."""
        start = parse_ymd(start_date, field="start_date")
        end = parse_ymd(end_date, field="end_date")
        if start > end:
            raise InvalidRange("start_date must be on/before end_date")
        if template_id is None:
            assignment = self.assignments.get_current(user_id)
            if assignment is None or not assignment.overlaps(start, end):
                raise InvalidRange("No active plan found for date range")
            template_id = assignment.template_id
        template = self.templates.get_template(template_id)
        self.templates.ensure_usable(user_id, template)

        if list_id is None:
            name = f"{template.title} ({start.isoformat()} to {end.isoformat()})"
            shopping_list = self.create_list(user_id, name)
        else:
            shopping_list = self._require_list(user_id, list_id)

        requests: list[RecipeServings] = []
        for offset in range((end - start).days + 1):
            day = start + timedelta(days=offset)
            requests.extend(
                RecipeServings(recipe_id=item.recipe_id, people=people)
                for item in template.items
                if item.weekday == day.weekday()
            )
        if not requests:
            return shopping_list, MergeOutcome(added=0, updated=0, items=[])
        outcome = self.add_recipes(user_id, shopping_list.id, requests)
        _logger.info(
            "Shopping list built from plan: recipes=%s added=%s updated=%s",
            len(requests),
            outcome.added,
            outcome.updated,
            extra={"user_id": str(user_id), "template_id": str(template.id)},
        )
        return shopping_list, outcome

    def shopping_from_day(
        self, user_id: UUID, day: date | str, list_id: UUID | None = None
    ) -> tuple[ShoppingList, MergeOutcome]:
        """Add the ingredients of a date's planner items, at their stored multipliers."""
        planned_day = parse_ymd(day)
        selections = [
            RecipeSelection(recipe_id=item.recipe_id, multiplier=item.multiplier)
            for item in self.day_items.list_items(user_id, planned_day)
        ]
        rows = self.aggregate(selections) if selections else []

        if list_id is None:
            shopping_list = self.create_list(
                user_id, f"Meal plan {planned_day.isoformat()}"
            )
        else:
            shopping_list = self._require_list(user_id, list_id)
        if not rows:
            return shopping_list, MergeOutcome(added=0, updated=0, items=[])
        outcome = self._merge(shopping_list.id, rows)
        _logger.info(
            "Shopping list built from day: items=%s added=%s updated=%s",
            len(selections),
            outcome.added,
            outcome.updated,
            extra={"user_id": str(user_id), "day": planned_day.isoformat()},
        )
        return shopping_list, outcome

    def _require_list(self, user_id: UUID, list_id: UUID) -> ShoppingList:
        shopping_list = self.repository.get_list(user_id, list_id)
        if shopping_list is None:
            raise ListNotFound
        return shopping_list

    def _merge(self, list_id: UUID, rows: list[ShoppingRow]) -> MergeOutcome:
        existing = {
            (normalize_name(item.name), normalize_unit(item.unit)): item
            for item in self.repository.list_items(list_id)
        }
        added = 0
        updated = 0
        for row in rows:
            key = (normalize_name(row.name), normalize_unit(row.unit))
            found = existing.get(key)
            if found is None:
                existing[key] = self.repository.create_item(list_id, row)
                added += 1
                continue
            qty = _sum_optional(found.qty, row.qty)
            self.repository.update_item(list_id, found.id, {"qty": qty})
            existing[key] = ShoppingListItem(
                id=found.id,
                list_id=found.list_id,
                name=found.name,
                qty=qty,
                unit=found.unit,
                done=found.done,
            )
            updated += 1
        if added or updated:
            self.repository.touch_list(list_id)
        return MergeOutcome(
            added=added, updated=updated, items=self.repository.list_items(list_id)
        )


def _as_ingredients(rows: list[ShoppingRow]) -> list[Ingredient]:
    return [Ingredient(name=row.name, quantity=row.qty, unit=row.unit) for row in rows]


def _servings(value: float) -> float:
    return value if value and value > 0 else 1.0


def _sum_optional(left: float | None, right: float | None) -> float | None:
    if left is None:
        return right
    if right is None:
        return left
    return left + right
