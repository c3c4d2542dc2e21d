"""Domain models for shopping lists."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class ShoppingRow:
    """Merged ingredient row produced by aggregation."""

    name: str
    qty: float | None
    unit: str | None


@dataclass(frozen=True)
class ShoppingList:
    """Named shopping list owned by a user."""

    id: UUID
    user_id: UUID
    name: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class ShoppingListItem:
    """Line on a shopping list."""

    id: UUID
    list_id: UUID
    name: str
    qty: float | None
    unit: str | None
    done: bool = False


@dataclass(frozen=True)
class ShoppingListRecipe:
    """Recipe attached to a list with the people count used to scale it."""

    id: UUID
    list_id: UUID
    recipe_id: UUID
    title: str
    people: float


@dataclass(frozen=True)
class ShoppingListDetail:
    """List with its items and recipe attachments."""

    shopping_list: ShoppingList
    items: list[ShoppingListItem] = field(default_factory=list)
    recipes: list[ShoppingListRecipe] = field(default_factory=list)


@dataclass(frozen=True)
class MergeOutcome:
    """Counts and resulting rows after merging entries into a list."""

    added: int
    updated: int
    items: list[ShoppingListItem]
