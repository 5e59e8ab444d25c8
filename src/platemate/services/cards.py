"""Plate card assembly, theme preference and share tracking."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from platemate.domain.cards import (
    HASHTAG,
    PlateCard,
    PlateCardTheme,
    TextCustomization,
)
from platemate.services.dishes import DishService
from platemate.services.query import rating_band

logger = logging.getLogger(__name__)


class PreferencesRepository(Protocol):
    """Persistence interface for app preferences and counters."""

    def get_value(self, key: str) -> str | None:
        """Return a stored preference value."""

    def set_value(self, key: str, value: str) -> None:
        """Store a preference value."""


class CardExporter(Protocol):
    """Renders a plate card to a shareable image."""

    def export(self, card: PlateCard) -> bytes:
        """Return encoded image bytes for the card."""


PREFERRED_THEME_KEY = "preferred_card_theme"
SHARED_COUNT_KEY = "total_dishes_shared"


@dataclass
class CardService:
    """Builds card data and tracks sharing."""

    dish_service: DishService
    preferences: PreferencesRepository

    def preferred_theme(self) -> PlateCardTheme:
        """Return the saved theme, falling back to classic."""
        try:
            stored = self.preferences.get_value(PREFERRED_THEME_KEY)
        except Exception:
            logger.exception("Failed to load preferred theme")
            return PlateCardTheme.CLASSIC
        return PlateCardTheme.from_stored(stored)

    def save_preferred_theme(self, theme: PlateCardTheme) -> None:
        """Persist the preferred theme."""
        try:
            self.preferences.set_value(PREFERRED_THEME_KEY, theme.value)
        except Exception:
            logger.exception("Failed to save preferred theme")

    def build_card(
        self,
        dish_id: UUID,
        theme: PlateCardTheme | None = None,
        text: TextCustomization | None = None,
    ) -> PlateCard | None:
        """Assemble card data for a dish."""
        dish = self.dish_service.get_dish(dish_id)
        if dish is None:
            return None
        resolved_theme = theme or self.preferred_theme()
        restaurant = self.dish_service.restaurant_for(dish)
        return PlateCard(
            dish_id=dish.id,
            title=dish.name or "Unknown Dish",
            restaurant=restaurant.name if restaurant else "Unknown Restaurant",
            overall=f"{dish.average_rating:.1f}",
            taste=dish.taste_rating,
            presentation=dish.presentation_rating,
            value=dish.value_rating,
            rating_band=rating_band(dish.average_rating),
            notes=dish.notes or None,
            logged_on=dish.created_at,
            hashtag=HASHTAG,
            theme=resolved_theme,
            style=resolved_theme.style,
            text=text or TextCustomization(),
            image_data=dish.image_data,
        )

    def export_card(self, card: PlateCard, exporter: CardExporter) -> bytes:
        """Hand a card to an exporter."""
        return exporter.export(card)

    def shared_count(self) -> int:
        """Return how many dishes have been shared."""
        try:
            stored = self.preferences.get_value(SHARED_COUNT_KEY)
        except Exception:
            logger.exception("Failed to load share count")
            return 0
        if stored is None or not stored.isdigit():
            return 0
        return int(stored)

    def track_share(self, dish_id: UUID) -> int:
        """Record a share and return the new total."""
        total = self.shared_count() + 1
        try:
            self.preferences.set_value(SHARED_COUNT_KEY, str(total))
        except Exception:
            logger.exception("Failed to record share", extra={"dish_id": dish_id})
            return total - 1
        return total

    def share_conversion_rate(self) -> float:
        """Return shares per logged dish."""
        dish_count = len(self.dish_service.snapshot.dishes)
        if dish_count == 0:
            return 0.0
        return self.shared_count() / dish_count
