"""Supabase repository for shopping lists."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from meal_planner.domain.shopping import (
    ShoppingList,
    ShoppingListItem,
    ShoppingListRecipe,
    ShoppingRow,
)
from meal_planner.services.shopping import ShoppingRepository


@dataclass
class SupabaseShoppingRepository(ShoppingRepository):
    """Supabase implementation for shopping lists, items and attachments."""

    client: Client

    def create_list(self, user_id: UUID, name: str) -> ShoppingList:
        """Create a list row."""
        now = datetime.now(tz=UTC).isoformat()
        response = (
            self.client.table("shopping_lists")
            .insert(
                {
                    "user_id": str(user_id),
                    "name": name,
                    "created_at": now,
                    "updated_at": now,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create shopping list")
        return _parse_list(response.data[0])

    def get_list(self, user_id: UUID, list_id: UUID) -> ShoppingList | None:
        """Return a user's list, if present."""
        response = (
            self.client.table("shopping_lists")
            .select("*")
            .eq("user_id", str(user_id))
            .eq("id", str(list_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_list(response.data[0])

    def list_lists(self, user_id: UUID) -> list[ShoppingList]:
        """Return lists, most recently updated first."""
        response = (
            self.client.table("shopping_lists")
            .select("*")
            .eq("user_id", str(user_id))
            .order("updated_at", desc=True)
            .execute()
        )
        return [_parse_list(row) for row in response.data or []]

    def touch_list(self, list_id: UUID) -> None:
        """Bump updated_at."""
        self.client.table("shopping_lists").update(
            {"updated_at": datetime.now(tz=UTC).isoformat()}
        ).eq("id", str(list_id)).execute()

    def delete_list(self, list_id: UUID) -> None:
        """Delete the list row."""
        self.client.table("shopping_lists").delete().eq("id", str(list_id)).execute()

    def list_items(self, list_id: UUID) -> list[ShoppingListItem]:
        """Return a list's items in insertion order."""
        response = (
            self.client.table("shopping_list_items")
            .select("id, list_id, name, qty, unit, done")
            .eq("list_id", str(list_id))
            .order("added_at", desc=False)
            .execute()
        )
        return [_parse_item(row) for row in response.data or []]

    def create_item(self, list_id: UUID, row: ShoppingRow) -> ShoppingListItem:
        """Insert a list item."""
        now = datetime.now(tz=UTC).isoformat()
        response = (
            self.client.table("shopping_list_items")
            .insert(
                {
                    "list_id": str(list_id),
                    "name": row.name,
                    "qty": row.qty,
                    "unit": row.unit,
                    "done": False,
                    "added_at": now,
                    "updated_at": now,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create shopping list item")
        return _parse_item(response.data[0])

    def update_item(
        self, list_id: UUID, item_id: UUID, fields: dict[str, object]
    ) -> ShoppingListItem | None:
        """Patch a list item and return it, or None if the list has no such item."""
        response = (
            self.client.table("shopping_list_items")
            .update({**fields, "updated_at": datetime.now(tz=UTC).isoformat()})
            .eq("list_id", str(list_id))
            .eq("id", str(item_id))
            .execute()
        )
        if not response.data:
            return None
        return _parse_item(response.data[0])

    def delete_item(self, list_id: UUID, item_id: UUID) -> None:
        """Delete one item from a list."""
        self.client.table("shopping_list_items").delete().eq(
            "list_id", str(list_id)
        ).eq("id", str(item_id)).execute()

    def delete_items(self, list_id: UUID) -> None:
        """Delete every item on a list."""
        self.client.table("shopping_list_items").delete().eq(
            "list_id", str(list_id)
        ).execute()

    def list_recipes(self, list_id: UUID) -> list[ShoppingListRecipe]:
        """Return recipe attachments."""
        response = (
            self.client.table("shopping_list_recipes")
            .select("id, list_id, recipe_id, title, people")
            .eq("list_id", str(list_id))
            .order("added_at", desc=False)
            .execute()
        )
        return [_parse_recipe(row) for row in response.data or []]

    def attach_recipe(
        self, list_id: UUID, recipe_id: UUID, title: str, people: float
    ) -> ShoppingListRecipe:
        """Record a recipe attachment."""
        response = (
            self.client.table("shopping_list_recipes")
            .insert(
                {
                    "list_id": str(list_id),
                    "recipe_id": str(recipe_id),
                    "title": title,
                    "people": people,
                    "added_at": datetime.now(tz=UTC).isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to attach recipe to shopping list")
        return _parse_recipe(response.data[0])

    def delete_recipes(self, list_id: UUID) -> None:
        """Delete every recipe attachment of a list."""
        self.client.table("shopping_list_recipes").delete().eq(
            "list_id", str(list_id)
        ).execute()


def _parse_list(row: dict[str, object]) -> ShoppingList:
    return ShoppingList(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        name=str(row.get("name") or ""),
        created_at=datetime.fromisoformat(str(row["created_at"])),
        updated_at=datetime.fromisoformat(str(row["updated_at"])),
    )


def _parse_item(row: dict[str, object]) -> ShoppingListItem:
    qty = row.get("qty")
    return ShoppingListItem(
        id=UUID(str(row["id"])),
        list_id=UUID(str(row["list_id"])),
        name=str(row.get("name") or ""),
        qty=float(qty) if qty is not None else None,
        unit=row.get("unit"),
        done=bool(row.get("done", False)),
    )


def _parse_recipe(row: dict[str, object]) -> ShoppingListRecipe:
    return ShoppingListRecipe(
        id=UUID(str(row["id"])),
        list_id=UUID(str(row["list_id"])),
        recipe_id=UUID(str(row["recipe_id"])),
        title=str(row.get("title") or "Recipe"),
        people=float(row.get("people", 1)),
    )
