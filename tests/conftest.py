"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from uuid import UUID, uuid4

import pytest

from meal_planner.config import Settings
from meal_planner.containers import AppContainer
from meal_planner.domain.nutrition import MacroProfile, UserProfile
from meal_planner.domain.planner import DayItem, DayItemDraft
from meal_planner.domain.plans import PlanAssignment, PlanTemplate, PlanTier
from meal_planner.domain.recipes import Ingredient, MealSlot, RecipeRef
from meal_planner.domain.shopping import (
    ShoppingList,
    ShoppingListItem,
    ShoppingListRecipe,
    ShoppingRow,
)
from meal_planner.services.assignments import AssignmentRepository, PlanScheduler
from meal_planner.services.day_planner import DayItemRepository, DayPlanner
from meal_planner.services.profiles import ProfileRepository, ProfileService
from meal_planner.services.recipes import RecipeCatalog, RecipeRepository
from meal_planner.services.shopping import ShoppingRepository, ShoppingService
from meal_planner.services.templates import (
    TemplateRepository,
    TemplateService,
    parse_plan_item,
)


def make_recipe(  # noqa: PLR0913
    title: str = "Oatmeal",
    calories: float = 400.0,
    protein_g: float = 20.0,
    carbs_g: float = 50.0,
    fat_g: float = 10.0,
    meal_slot: MealSlot | None = MealSlot.BREAKFAST,
    ingredients: list[Ingredient] | None = None,
    servings: float = 1.0,
) -> RecipeRef:
    return RecipeRef(
        id=uuid4(),
        title=title,
        meal_slot=meal_slot,
        per_serving=MacroProfile(calories, protein_g, carbs_g, fat_g),
        ingredients=ingredients or [],
        servings=servings,
    )


@dataclass
class InMemoryRecipeRepository(RecipeRepository):
    """In-memory recipe catalog for tests."""

    recipes: dict[UUID, RecipeRef] = field(default_factory=dict)

    def add(self, recipe: RecipeRef) -> RecipeRef:
        self.recipes[recipe.id] = recipe
        return recipe

    def get_recipe(self, recipe_id: UUID) -> RecipeRef | None:
        return self.recipes.get(recipe_id)


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile store for tests."""

    profiles: dict[UUID, UserProfile] = field(default_factory=dict)

    def set_profile(
        self,
        user_id: UUID,
        caloric_target: float | None = None,
        subscription_status: str | None = None,
    ) -> None:
        self.profiles[user_id] = UserProfile(
            user_id=user_id,
            caloric_target=caloric_target,
            subscription_status=subscription_status,
        )

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        return self.profiles.get(user_id)


@dataclass
class InMemoryTemplateRepository(TemplateRepository):
    """In-memory plan template store for tests."""

    templates: dict[UUID, PlanTemplate] = field(default_factory=dict)

    def add(self, template: PlanTemplate) -> PlanTemplate:
        self.templates[template.id] = template
        return template

    def get_template(self, template_id: UUID) -> PlanTemplate | None:
        return self.templates.get(template_id)

    def list_templates(self, tier: PlanTier | None) -> list[PlanTemplate]:
        return [
            template
            for template in self.templates.values()
            if tier is None or template.tier == tier
        ]

    def upsert_template(
        self, template_id: UUID | None, payload: dict[str, object]
    ) -> PlanTemplate:
        raw_items = payload["items"]
        assert isinstance(raw_items, list)
        template = PlanTemplate(
            id=template_id or uuid4(),
            title=str(payload["title"]),
            tier=PlanTier(str(payload["tier"])),
            items=[parse_plan_item(row) for row in raw_items],
            description=payload.get("description"),  # type: ignore[arg-type]
            image=payload.get("image"),  # type: ignore[arg-type]
        )
        self.templates[template.id] = template
        return template

    def delete_template(self, template_id: UUID) -> None:
        self.templates.pop(template_id, None)


@dataclass
class InMemoryAssignmentRepository(AssignmentRepository):
    """In-memory current-assignment store for tests."""

    assignments: dict[UUID, PlanAssignment] = field(default_factory=dict)

    def get_current(self, user_id: UUID) -> PlanAssignment | None:
        return self.assignments.get(user_id)

    def save_current(  # noqa: PLR0913
        self,
        user_id: UUID,
        template_id: UUID,
        start_date: date,
        end_date: date,
        overwrite: bool,
        created_at: datetime,
    ) -> PlanAssignment:
        assignment = PlanAssignment(
            id=uuid4(),
            user_id=user_id,
            template_id=template_id,
            start_date=start_date,
            end_date=end_date,
            overwrite=overwrite,
            created_at=created_at,
        )
        self.assignments[user_id] = assignment
        return assignment


@dataclass
class InMemoryDayItemRepository(DayItemRepository):
    """In-memory planner entries for tests, kept in insertion order."""

    items: list[DayItem] = field(default_factory=list)

    def list_items(self, user_id: UUID, day: date) -> list[DayItem]:
        return [
            item for item in self.items if item.user_id == user_id and item.day == day
        ]

    def list_items_between(
        self, user_id: UUID, start: date, end: date, plan_id: UUID | None
    ) -> list[DayItem]:
        return [
            item
            for item in self.items
            if item.user_id == user_id
            and start <= item.day <= end
            and (
                plan_id is None
                or (item.source is not None and item.source.plan_id == plan_id)
            )
        ]

    def create_item(self, draft: DayItemDraft) -> DayItem:
        item = DayItem(
            id=uuid4(),
            user_id=draft.user_id,
            day=draft.day,
            meal_slot=draft.meal_slot,
            recipe_id=draft.recipe_id,
            title=draft.title,
            multiplier=draft.multiplier,
            per_serving=draft.per_serving,
            added_at=datetime.now(tz=UTC),
            image=draft.image,
            source=draft.source,
        )
        self.items.append(item)
        return item

    def update_multiplier(
        self, user_id: UUID, item_id: UUID, multiplier: float
    ) -> DayItem | None:
        for idx, item in enumerate(self.items):
            if item.id == item_id and item.user_id == user_id:
                updated = DayItem(
                    id=item.id,
                    user_id=item.user_id,
                    day=item.day,
                    meal_slot=item.meal_slot,
                    recipe_id=item.recipe_id,
                    title=item.title,
                    multiplier=multiplier,
                    per_serving=item.per_serving,
                    added_at=item.added_at,
                    image=item.image,
                    source=item.source,
                )
                self.items[idx] = updated
                return updated
        return None

    def delete_item(self, user_id: UUID, item_id: UUID) -> None:
        self.items = [
            item
            for item in self.items
            if not (item.id == item_id and item.user_id == user_id)
        ]

    def delete_slot(self, user_id: UUID, day: date, meal_slot: MealSlot) -> int:
        kept = [
            item
            for item in self.items
            if not (
                item.user_id == user_id
                and item.day == day
                and item.meal_slot == meal_slot
            )
        ]
        removed = len(self.items) - len(kept)
        self.items = kept
        return removed


@dataclass
class InMemoryShoppingRepository(ShoppingRepository):
    """In-memory shopping lists for tests."""

    lists: dict[UUID, ShoppingList] = field(default_factory=dict)
    items: dict[UUID, ShoppingListItem] = field(default_factory=dict)
    recipes: list[ShoppingListRecipe] = field(default_factory=list)
    touched: list[UUID] = field(default_factory=list)

    def create_list(self, user_id: UUID, name: str) -> ShoppingList:
        now = datetime.now(tz=UTC)
        shopping_list = ShoppingList(
            id=uuid4(), user_id=user_id, name=name, created_at=now, updated_at=now
        )
        self.lists[shopping_list.id] = shopping_list
        return shopping_list

    def get_list(self, user_id: UUID, list_id: UUID) -> ShoppingList | None:
        shopping_list = self.lists.get(list_id)
        if shopping_list is None or shopping_list.user_id != user_id:
            return None
        return shopping_list

    def list_lists(self, user_id: UUID) -> list[ShoppingList]:
        owned = [item for item in self.lists.values() if item.user_id == user_id]
        return sorted(owned, key=lambda item: item.updated_at, reverse=True)

    def touch_list(self, list_id: UUID) -> None:
        self.touched.append(list_id)

    def delete_list(self, list_id: UUID) -> None:
        self.lists.pop(list_id, None)

    def list_items(self, list_id: UUID) -> list[ShoppingListItem]:
        return [item for item in self.items.values() if item.list_id == list_id]

    def create_item(self, list_id: UUID, row: ShoppingRow) -> ShoppingListItem:
        item = ShoppingListItem(
            id=uuid4(), list_id=list_id, name=row.name, qty=row.qty, unit=row.unit
        )
        self.items[item.id] = item
        return item

    def update_item(
        self, list_id: UUID, item_id: UUID, fields: dict[str, object]
    ) -> ShoppingListItem | None:
        item = self.items.get(item_id)
        if item is None or item.list_id != list_id:
            return None
        updated = ShoppingListItem(
            id=item.id,
            list_id=item.list_id,
            name=item.name,
            qty=fields.get("qty", item.qty),  # type: ignore[arg-type]
            unit=item.unit,
            done=bool(fields.get("done", item.done)),
        )
        self.items[item_id] = updated
        return updated

    def delete_item(self, list_id: UUID, item_id: UUID) -> None:
        item = self.items.get(item_id)
        if item is not None and item.list_id == list_id:
            del self.items[item_id]

    def delete_items(self, list_id: UUID) -> None:
        self.items = {
            key: item for key, item in self.items.items() if item.list_id != list_id
        }

    def list_recipes(self, list_id: UUID) -> list[ShoppingListRecipe]:
        return [recipe for recipe in self.recipes if recipe.list_id == list_id]

    def attach_recipe(
        self, list_id: UUID, recipe_id: UUID, title: str, people: float
    ) -> ShoppingListRecipe:
        attachment = ShoppingListRecipe(
            id=uuid4(), list_id=list_id, recipe_id=recipe_id, title=title, people=people
        )
        self.recipes.append(attachment)
        return attachment

    def delete_recipes(self, list_id: UUID) -> None:
        self.recipes = [recipe for recipe in self.recipes if recipe.list_id != list_id]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        admin_token="admin-token",
    )


@pytest.fixture
def recipe_repository() -> InMemoryRecipeRepository:
    return InMemoryRecipeRepository()


@pytest.fixture
def profile_repository() -> InMemoryProfileRepository:
    return InMemoryProfileRepository()


@pytest.fixture
def template_repository() -> InMemoryTemplateRepository:
    return InMemoryTemplateRepository()


@pytest.fixture
def assignment_repository() -> InMemoryAssignmentRepository:
    return InMemoryAssignmentRepository()


@pytest.fixture
def day_item_repository() -> InMemoryDayItemRepository:
    return InMemoryDayItemRepository()


@pytest.fixture
def shopping_repository() -> InMemoryShoppingRepository:
    return InMemoryShoppingRepository()


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    recipe_repository: InMemoryRecipeRepository,
    profile_repository: InMemoryProfileRepository,
    template_repository: InMemoryTemplateRepository,
    assignment_repository: InMemoryAssignmentRepository,
    day_item_repository: InMemoryDayItemRepository,
    shopping_repository: InMemoryShoppingRepository,
) -> AppContainer:
    catalog = RecipeCatalog(recipe_repository)
    profile_service = ProfileService(profile_repository)
    template_service = TemplateService(template_repository, profile_service)
    day_planner = DayPlanner(day_item_repository, catalog, profile_service)
    scheduler = PlanScheduler(
        planner=day_planner,
        catalog=catalog,
        templates=template_service,
        repository=assignment_repository,
        write_attempts=settings.assignment_write_attempts,
    )
    shopping_service = ShoppingService(
        repository=shopping_repository,
        catalog=catalog,
        templates=template_service,
        assignments=assignment_repository,
        day_items=day_item_repository,
    )
    return AppContainer(
        settings=settings,
        catalog=catalog,
        profile_service=profile_service,
        template_service=template_service,
        day_planner=day_planner,
        scheduler=scheduler,
        shopping_service=shopping_service,
    )
