"""Dish logging service and the in-memory dish store."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from platemate.domain.dishes import (
    DishDraft,
    DishEdit,
    DishRecord,
    DishSnapshot,
    RestaurantRecord,
    average_rating,
)

logger = logging.getLogger(__name__)


class DishRepository(Protocol):
    """Persistence interface for dishes."""

    def list_dishes(self) -> list[DishRecord]:
        """Return all dishes, newest first."""

    def create_dish(self, payload: dict[str, object]) -> DishRecord:
        """Create a dish and return it."""

    def update_dish(self, dish_id: UUID, payload: dict[str, object]) -> DishRecord:
        """Update a dish and return it."""

    def delete_dish(self, dish_id: UUID) -> None:
        """Delete a dish."""


class RestaurantRepository(Protocol):
    """Persistence interface for restaurants."""

    def list_restaurants(self) -> list[RestaurantRecord]:
        """Return all restaurants, most visited first."""

    def find_by_name(self, name: str) -> RestaurantRecord | None:
        """Return the restaurant whose name matches exactly, if present."""

    def search_by_name(self, query: str, limit: int) -> list[RestaurantRecord]:
        """Return restaurants whose name contains the query, most visited first."""

    def list_favorites(self, limit: int) -> list[RestaurantRecord]:
        """Return restaurants by visit count, then name."""

    def create_restaurant(
        self, name: str, location: str, visit_count: int
    ) -> RestaurantRecord:
        """Create a restaurant and return it."""

    def set_visit_count(
        self, restaurant_id: UUID, visit_count: int
    ) -> RestaurantRecord:
        """Store a new visit count and return the restaurant."""


@dataclass
class DishService:
    """Application service that owns the current dish snapshot."""

    dish_repository: DishRepository
    restaurant_repository: RestaurantRepository
    snapshot: DishSnapshot = field(default_factory=DishSnapshot)

    def refresh(self) -> DishSnapshot:
        """Reload the snapshot, keeping the previous one if the store fails."""
        try:
            dishes = self.dish_repository.list_dishes()
            restaurants = self.restaurant_repository.list_restaurants()
        except Exception:
            logger.exception("Failed to refresh dishes")
            return self.snapshot
        self.snapshot = DishSnapshot(
            dishes=dishes,
            restaurants={restaurant.id: restaurant for restaurant in restaurants},
        )
        return self.snapshot

    def log_dish(self, draft: DishDraft) -> DishRecord | None:
        """Persist a new dish and bump its restaurant's visit count."""
        average = average_rating(
            draft.taste_rating, draft.presentation_rating, draft.value_rating
        )
        try:
            restaurant = self._find_or_create_restaurant(draft.restaurant_name)
            dish = self.dish_repository.create_dish(
                {
                    "name": draft.name,
                    "notes": draft.notes,
                    "image_data": draft.image_data,
                    "taste_rating": draft.taste_rating,
                    "presentation_rating": draft.presentation_rating,
                    "value_rating": draft.value_rating,
                    "average_rating": average,
                    "created_at": datetime.now(tz=UTC),
                    "restaurant_id": restaurant.id,
                }
            )
        except Exception:
            logger.exception(
                "Failed to log dish", extra={"restaurant": draft.restaurant_name}
            )
            return None
        try:
            self.restaurant_repository.set_visit_count(
                restaurant.id, restaurant.visit_count + 1
            )
        except Exception:
            logger.exception(
                "Failed to count restaurant visit",
                extra={"restaurant_id": restaurant.id},
            )
        self.refresh()
        return dish

    def update_dish(self, dish_id: UUID, edit: DishEdit) -> DishRecord | None:
        """Rewrite a dish's name, notes and ratings."""
        if self.get_dish(dish_id) is None:
            return None
        average = average_rating(
            edit.taste_rating, edit.presentation_rating, edit.value_rating
        )
        try:
            dish = self.dish_repository.update_dish(
                dish_id,
                {
                    "name": edit.name,
                    "notes": edit.notes,
                    "taste_rating": edit.taste_rating,
                    "presentation_rating": edit.presentation_rating,
                    "value_rating": edit.value_rating,
                    "average_rating": average,
                },
            )
        except Exception:
            logger.exception("Failed to update dish", extra={"dish_id": dish_id})
            return None
        self.refresh()
        return dish

    def delete_dish(self, dish_id: UUID) -> bool:
        """Delete a dish, returning whether it was removed."""
        if self.get_dish(dish_id) is None:
            return False
        try:
            self.dish_repository.delete_dish(dish_id)
        except Exception:
            logger.exception("Failed to delete dish", extra={"dish_id": dish_id})
            return False
        self.refresh()
        return True

    def get_dish(self, dish_id: UUID) -> DishRecord | None:
        """Return a dish from the current snapshot."""
        for dish in self.snapshot.dishes:
            if dish.id == dish_id:
                return dish
        return None

    def restaurant_for(self, dish: DishRecord) -> RestaurantRecord | None:
        """Return the restaurant a dish was logged at."""
        if dish.restaurant_id is None:
            return None
        return self.snapshot.restaurants.get(dish.restaurant_id)

    def recent_dishes(self, limit: int = 5) -> list[DishRecord]:
        """Return the most recently logged dishes."""
        return self.snapshot.dishes[:limit]

    def restaurant_suggestions(self, query: str, limit: int = 5) -> list[str]:
        """Autocomplete restaurant names containing ``query``."""
        if not query:
            return []
        try:
            restaurants = self.restaurant_repository.search_by_name(query, limit)
        except Exception:
            logger.exception("Failed to fetch restaurant suggestions")
            return []
        return [restaurant.name for restaurant in restaurants]

    def favorite_restaurants(self, limit: int = 5) -> list[RestaurantRecord]:
        """Return the most visited restaurants."""
        try:
            return self.restaurant_repository.list_favorites(limit)
        except Exception:
            logger.exception("Failed to fetch favorite restaurants")
            return []

    def all_restaurant_names(self) -> list[str]:
        """Return every restaurant name, most visited first."""
        try:
            restaurants = self.restaurant_repository.list_restaurants()
        except Exception:
            logger.exception("Failed to fetch restaurants")
            return []
        return [restaurant.name for restaurant in restaurants]

    def _find_or_create_restaurant(self, name: str) -> RestaurantRecord:
        # New restaurants start at zero; the visit is counted once the dish exists.
        existing = self.restaurant_repository.find_by_name(name)
        if existing:
            return existing
        return self.restaurant_repository.create_restaurant(
            name=name, location="", visit_count=0
        )
