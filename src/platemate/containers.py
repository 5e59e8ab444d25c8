"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from platemate.adapters.supabase_dish_repository import SupabaseDishRepository
from platemate.adapters.supabase_preferences_repository import (
    SupabasePreferencesRepository,
)
from platemate.adapters.supabase_restaurant_repository import (
    SupabaseRestaurantRepository,
)
from platemate.config import Settings
from platemate.services.cards import CardService
from platemate.services.discovery import DiscoveryState
from platemate.services.dishes import DishService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    dish_service: DishService
    card_service: CardService
    discovery: DiscoveryState


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    dish_service = DishService(
        dish_repository=SupabaseDishRepository(supabase_client),
        restaurant_repository=SupabaseRestaurantRepository(supabase_client),
    )
    card_service = CardService(
        dish_service=dish_service,
        preferences=SupabasePreferencesRepository(supabase_client),
    )
    discovery = DiscoveryState(
        dish_service,
        debounce_seconds=resolved_settings.search_debounce_seconds,
        window_days=resolved_settings.throwback_window_days,
    )
    return AppContainer(
        settings=resolved_settings,
        dish_service=dish_service,
        card_service=card_service,
        discovery=discovery,
    )
