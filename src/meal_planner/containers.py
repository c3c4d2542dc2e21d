"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

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
from meal_planner.adapters.supabase_recipe_repository import SupabaseRecipeRepository
from meal_planner.adapters.supabase_shopping_repository import (
    SupabaseShoppingRepository,
)
from meal_planner.config import Settings, parse_premium_statuses
from meal_planner.services.assignments import PlanScheduler
from meal_planner.services.day_planner import DayPlanner
from meal_planner.services.profiles import ProfileService
from meal_planner.services.recipes import RecipeCatalog
from meal_planner.services.shopping import ShoppingService
from meal_planner.services.templates import TemplateService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    catalog: RecipeCatalog
    profile_service: ProfileService
    template_service: TemplateService
    day_planner: DayPlanner
    scheduler: PlanScheduler
    shopping_service: ShoppingService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    catalog = RecipeCatalog(SupabaseRecipeRepository(supabase_client))
    profile_service = ProfileService(
        repository=SupabaseProfileRepository(supabase_client),
        premium_statuses=parse_premium_statuses(resolved_settings.premium_statuses),
    )
    template_service = TemplateService(
        repository=SupabaseTemplateRepository(supabase_client),
        profiles=profile_service,
    )
    assignment_repository = SupabaseAssignmentRepository(supabase_client)
    day_item_repository = SupabaseDayItemRepository(supabase_client)
    day_planner = DayPlanner(
        repository=day_item_repository,
        catalog=catalog,
        profiles=profile_service,
    )
    scheduler = PlanScheduler(
        planner=day_planner,
        catalog=catalog,
        templates=template_service,
        repository=assignment_repository,
        write_attempts=resolved_settings.assignment_write_attempts,
    )
    shopping_service = ShoppingService(
        repository=SupabaseShoppingRepository(supabase_client),
        catalog=catalog,
        templates=template_service,
        assignments=assignment_repository,
        day_items=day_item_repository,
    )
    return AppContainer(
        settings=resolved_settings,
        catalog=catalog,
        profile_service=profile_service,
        template_service=template_service,
        day_planner=day_planner,
        scheduler=scheduler,
        shopping_service=shopping_service,
    )
