"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from uuid import UUID, uuid4

import pytest

from meal_planner.adapters.supabase_day_item_repository import (
    SupabaseDayItemRepository,
)
from meal_planner.adapters.supabase_plan_repository import (
    SupabaseAssignmentRepository,
    SupabaseTemplateRepository,
)
from meal_planner.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from meal_planner.adapters.supabase_recipe_repository import (
    SupabaseRecipeRepository,
    parse_recipe,
)
from meal_planner.adapters.supabase_shopping_repository import (
    SupabaseShoppingRepository,
)
from meal_planner.domain.nutrition import MacroProfile
from meal_planner.domain.planner import DayItemDraft, ItemSource
from meal_planner.domain.plans import PlanTier
from meal_planner.domain.recipes import MealSlot
from meal_planner.domain.shopping import ShoppingRow

NOW = datetime(2024, 1, 1, 8, 0, tzinfo=UTC).isoformat()


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {
            "select": [],
            "insert": [],
            "update": [],
            "upsert": [],
            "delete": [],
        }
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    upsert_conflict: str | None = None

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def update(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "update"
        self.last_payload = payload
        return self

    def upsert(self, payload, on_conflict: str = "") -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "upsert"
        self.last_payload = payload
        self.upsert_conflict = on_conflict
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def gte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((f"{column}>=", value))
        return self

    def lte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((f"{column}<=", value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, _column: str, desc: bool = False) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _item_row(**overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "id": str(uuid4()),
        "user_id": str(uuid4()),
        "date": "2024-01-01",
        "meal_type": "breakfast",
        "recipe_id": str(uuid4()),
        "title": "Oatmeal",
        "multiplier": 1.5,
        "per_serving": {"calories": 400, "protein_g": 20, "carbs_g": 50, "fat_g": 10},
        "image": None,
        "source_type": None,
        "source_plan_id": None,
        "added_at": NOW,
    }
    row.update(overrides)
    return row


def test_parse_recipe_reads_flexible_ingredient_rows() -> None:
    recipe = parse_recipe(
        {
            "id": str(uuid4()),
            "title": "Porridge",
            "meal_type": "breakfast",
            "per_serving": {"calories": "350", "protein_g": 12},
            "servings": 0,
            "ingredients": [
                {"name": "Oats", "qty": 50, "unit": "g"},
                {"ingredient": "Milk", "quantity": "200", "uom": "ml"},
                {"title": "Honey", "grams": 10},
                {"name": "Salt"},
                {"name": "  "},
                "garbage",
            ],
        }
    )

    assert recipe.meal_slot == MealSlot.BREAKFAST
    assert recipe.per_serving == MacroProfile(350, 12, 0, 0)
    assert recipe.servings == 1.0
    assert [(i.name, i.quantity, i.unit) for i in recipe.ingredients] == [
        ("Oats", 50, "g"),
        ("Milk", 200, "ml"),
        ("Honey", 10, "g"),
        ("Salt", None, None),
    ]


def test_supabase_recipe_repository() -> None:
    client = FakeSupabaseClient()
    recipes_table = client.table("recipes")
    recipe_id = uuid4()
    recipes_table.queue("select", [{"id": str(recipe_id), "title": "Stew"}])

    repository = SupabaseRecipeRepository(client)
    found = repository.get_recipe(recipe_id)
    missing = repository.get_recipe(uuid4())

    assert found is not None
    assert found.title == "Stew"
    assert found.meal_slot is None
    assert missing is None
    assert ("id", str(recipe_id)) in recipes_table.last_filters


def test_supabase_profile_repository() -> None:
    client = FakeSupabaseClient()
    users_table = client.table("users")
    user_id = uuid4()
    users_table.queue(
        "select",
        [
            {
                "id": str(user_id),
                "caloric_target": 2100,
                "macro_split": {"protein_pct": 35, "carbs_pct": 35, "fat_pct": 30},
                "subscription_status": "active",
            }
        ],
    )

    repository = SupabaseProfileRepository(client)
    profile = repository.get_profile(user_id)

    assert profile is not None
    assert profile.caloric_target == 2100
    assert profile.macro_split is not None
    assert profile.macro_split.protein_pct == 35
    assert profile.subscription_status == "active"
    assert repository.get_profile(uuid4()) is None


def test_supabase_day_item_repository() -> None:
    client = FakeSupabaseClient()
    items_table = client.table("meal_plan_items")
    plan_id = uuid4()
    created_row = _item_row(source_type="plan-assignment", source_plan_id=str(plan_id))
    items_table.queue("insert", [created_row])
    items_table.queue("delete", [_item_row(), _item_row()])

    repository = SupabaseDayItemRepository(client)
    created = repository.create_item(
        DayItemDraft(
            user_id=uuid4(),
            day=date(2024, 1, 1),
            meal_slot=MealSlot.BREAKFAST,
            recipe_id=uuid4(),
            title="Oatmeal",
            multiplier=1.5,
            per_serving=MacroProfile(400, 20, 50, 10),
            source=ItemSource(type="plan-assignment", plan_id=plan_id),
        )
    )

    assert isinstance(items_table.last_payload, dict)
    assert items_table.last_payload["meal_type"] == "breakfast"
    assert items_table.last_payload["source_plan_id"] == str(plan_id)
    assert created.scaled.calories == 600
    assert created.source == ItemSource(type="plan-assignment", plan_id=plan_id)
    assert repository.delete_slot(uuid4(), date(2024, 1, 1), MealSlot.LUNCH) == 2
    assert ("meal_type", "lunch") in items_table.last_filters


def test_supabase_day_item_repository_range_and_update() -> None:
    client = FakeSupabaseClient()
    items_table = client.table("meal_plan_items")
    items_table.queue("select", [_item_row(date="2024-01-03")])

    repository = SupabaseDayItemRepository(client)
    plan_id = uuid4()
    items = repository.list_items_between(
        uuid4(), date(2024, 1, 1), date(2024, 1, 7), plan_id
    )

    assert [item.day for item in items] == [date(2024, 1, 3)]
    assert ("date>=", "2024-01-01") in items_table.last_filters
    assert ("date<=", "2024-01-07") in items_table.last_filters
    assert ("source_plan_id", str(plan_id)) in items_table.last_filters
    assert repository.update_multiplier(uuid4(), uuid4(), 2.0) is None


def test_supabase_day_item_repository_raises_without_row() -> None:
    repository = SupabaseDayItemRepository(FakeSupabaseClient())

    with pytest.raises(RuntimeError):
        repository.create_item(
            DayItemDraft(
                user_id=uuid4(),
                day=date(2024, 1, 1),
                meal_slot=MealSlot.LUNCH,
                recipe_id=uuid4(),
                title="Soup",
                multiplier=1.0,
                per_serving=MacroProfile.zero(),
            )
        )


def test_supabase_template_repository() -> None:
    client = FakeSupabaseClient()
    library_table = client.table("meal_plan_library")
    template_id = str(uuid4())
    recipe_id = str(uuid4())
    row = {
        "id": template_id,
        "title": "Lean",
        "tier": "PREMIUM",
        "items": [
            {"day": "Monday", "meal_type": "lunch", "recipe_id": recipe_id},
        ],
    }
    library_table.queue("select", [row])
    library_table.queue("update", [row])

    repository = SupabaseTemplateRepository(client)
    template = repository.get_template(uuid4())
    saved = repository.upsert_template(uuid4(), {"title": "Lean", "tier": "premium"})

    assert template is not None
    assert template.tier == PlanTier.PREMIUM
    assert template.items[0].default_multiplier == 1.0
    assert template.items[0].weekday == 0
    assert str(saved.id) == template_id
    with pytest.raises(RuntimeError):
        repository.upsert_template(None, {"title": "Empty"})

    library_table.last_filters.clear()
    repository.delete_template(UUID(template_id))
    assert library_table.last_filters == [("id", template_id)]


def test_supabase_assignment_repository() -> None:
    client = FakeSupabaseClient()
    assignments_table = client.table("meal_plan_assignments")
    user_id = uuid4()
    plan_id = uuid4()
    row = {
        "id": str(uuid4()),
        "user_id": str(user_id),
        "plan_id": str(plan_id),
        "start_date": "2024-01-01",
        "end_date": "2024-01-15",
        "overwrite": True,
        "created_at": NOW,
    }
    assignments_table.queue("upsert", [row])
    assignments_table.queue("select", [row])

    repository = SupabaseAssignmentRepository(client)
    saved = repository.save_current(
        user_id,
        plan_id,
        date(2024, 1, 1),
        date(2024, 1, 15),
        True,
        datetime.now(tz=UTC),
    )
    current = repository.get_current(user_id)

    assert assignments_table.upsert_conflict == "user_id"
    assert saved.template_id == plan_id
    assert current is not None
    assert current.end_date == date(2024, 1, 15)
    assert repository.get_current(uuid4()) is None


def test_supabase_shopping_repository() -> None:
    client = FakeSupabaseClient()
    lists_table = client.table("shopping_lists")
    items_table = client.table("shopping_list_items")
    recipes_table = client.table("shopping_list_recipes")
    user_id = uuid4()
    list_id = uuid4()
    lists_table.queue(
        "insert",
        [
            {
                "id": str(list_id),
                "user_id": str(user_id),
                "name": "Week",
                "created_at": NOW,
                "updated_at": NOW,
            }
        ],
    )
    items_table.queue(
        "insert",
        [
            {
                "id": str(uuid4()),
                "list_id": str(list_id),
                "name": "Oats",
                "qty": 100,
                "unit": "g",
                "done": False,
            }
        ],
    )
    recipes_table.queue(
        "insert",
        [
            {
                "id": str(uuid4()),
                "list_id": str(list_id),
                "recipe_id": str(uuid4()),
                "title": "Porridge",
                "people": 2,
            }
        ],
    )

    repository = SupabaseShoppingRepository(client)
    created = repository.create_list(user_id, "Week")
    item = repository.create_item(list_id, ShoppingRow(name="Oats", qty=100, unit="g"))
    attachment = repository.attach_recipe(list_id, uuid4(), "Porridge", 2)
    items_table.queue(
        "update",
        [
            {
                "id": str(item.id),
                "list_id": str(list_id),
                "name": "Oats",
                "qty": 100,
                "unit": "g",
                "done": True,
            }
        ],
    )
    items_table.last_filters.clear()
    updated = repository.update_item(list_id, item.id, {"done": True})

    assert created.id == list_id
    assert item.qty == 100
    assert attachment.people == 2
    assert isinstance(items_table.last_payload, dict)
    assert items_table.last_payload["done"] is True
    assert items_table.last_filters == [
        ("list_id", str(list_id)),
        ("id", str(item.id)),
    ]
    assert updated is not None
    assert updated.done
    assert repository.update_item(uuid4(), item.id, {"done": False}) is None
    assert repository.get_list(user_id, list_id) is None
