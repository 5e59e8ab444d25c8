"""Domain models for logged dishes and restaurants."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID

MIN_RATING = 0.0
MAX_RATING = 5.0


@dataclass(frozen=True)
class RestaurantRecord:
    """Represents a place a dish was eaten."""

    id: UUID
    name: str
    location: str
    visit_count: int


@dataclass(frozen=True)
class DishRecord:
    """Represents one logged dish."""

    id: UUID
    name: str
    notes: str | None
    image_data: bytes | None
    taste_rating: float
    presentation_rating: float
    value_rating: float
    average_rating: float
    created_at: datetime | None
    restaurant_id: UUID | None


@dataclass(frozen=True)
class DishDraft:
    """User input for logging a new dish."""

    name: str
    restaurant_name: str
    taste_rating: float
    presentation_rating: float
    value_rating: float
    notes: str | None = None
    image_data: bytes | None = None


@dataclass(frozen=True)
class DishEdit:
    """User input for editing an existing dish."""

    name: str
    notes: str | None
    taste_rating: float
    presentation_rating: float
    value_rating: float


@dataclass(frozen=True)
class DishSnapshot:
    """Dishes and the restaurant table they refer to."""

    dishes: list[DishRecord] = field(default_factory=list)
    restaurants: dict[UUID, RestaurantRecord] = field(default_factory=dict)

    def restaurant_name(self, dish: DishRecord) -> str | None:
        """Return the restaurant name for a dish, if known."""
        if dish.restaurant_id is None:
            return None
        restaurant = self.restaurants.get(dish.restaurant_id)
        return restaurant.name if restaurant else None


class SortOption(str, Enum):
    """Orderings available for the discovery list."""

    NEWEST = "newest"
    OLDEST = "oldest"
    HIGHEST_RATED = "highest_rated"
    TRENDING = "trending"

    @property
    def label(self) -> str:
        """Human readable label."""
        return _SORT_LABELS[self]


_SORT_LABELS = {
    SortOption.NEWEST: "Newest",
    SortOption.OLDEST: "Oldest",
    SortOption.HIGHEST_RATED: "Highest Rated",
    SortOption.TRENDING: "Trending",
}


@dataclass(frozen=True)
class QueryParameters:
    """Discovery query inputs."""

    search_text: str = ""
    min_rating: float = 0.0
    sort: SortOption = SortOption.NEWEST

    def __post_init__(self) -> None:
        clamped = min(max(self.min_rating, MIN_RATING), MAX_RATING)
        object.__setattr__(self, "min_rating", clamped)
        object.__setattr__(self, "sort", SortOption(self.sort))


def average_rating(taste: float, presentation: float, value: float) -> float:
    """Return the stored overall rating for three sub-ratings."""
    for rating in (taste, presentation, value):
        if not MIN_RATING <= rating <= MAX_RATING:
            raise ValueError(f"Rating {rating} is outside 0-5")
    return (taste + presentation + value) / 3.0
