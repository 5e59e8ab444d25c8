"""Filter, sort, grouping and throwback queries over a dish snapshot.

Every function here is pure: it reads a snapshot and returns new lists. ``now``
is passed in so results are reproducible.
"""

from datetime import UTC, date, datetime
from random import Random

from platemate.domain.dishes import (
    DishRecord,
    DishSnapshot,
    QueryParameters,
    SortOption,
)
from platemate.domain.memories import DiscoveryView, MemoryLane, MemoryTimeline

RECENCY_WEIGHT = 0.7
RATING_WEIGHT = 0.3
THROWBACK_GRACE_DAYS = 7
DEFAULT_WINDOW_DAYS = 365
LOW_RATING_CEILING = 2.5
MEDIUM_RATING_CEILING = 3.8

_EARLIEST = datetime.min.replace(tzinfo=UTC)


def filter_dishes(
    snapshot: DishSnapshot, min_rating: float = 0.0, search_text: str = ""
) -> list[DishRecord]:
    """Return dishes at or above ``min_rating`` whose dish or restaurant name
    contains ``search_text`` (case-insensitive)."""
    needle = search_text.lower()
    results = []
    for dish in snapshot.dishes:
        if dish.average_rating < min_rating:
            continue
        if needle:
            dish_name = (dish.name or "").lower()
            restaurant_name = (snapshot.restaurant_name(dish) or "").lower()
            if needle not in dish_name and needle not in restaurant_name:
                continue
        results.append(dish)
    return results


def days_since(created_at: datetime | None, now: datetime) -> int:
    """Whole days elapsed between creation and ``now``."""
    return (now - (created_at or _EARLIEST)).days


def trending_score(dish: DishRecord, now: datetime) -> float:
    """Blend recency (70%) and rating (30%) into one score."""
    days = max(days_since(dish.created_at, now), 1)
    return RECENCY_WEIGHT * (1.0 / days) + RATING_WEIGHT * dish.average_rating


def sort_dishes(
    dishes: list[DishRecord], option: SortOption, now: datetime | None = None
) -> list[DishRecord]:
    """Return a stably sorted copy of ``dishes``."""
    if option is SortOption.NEWEST:
        return sorted(dishes, key=_created_key, reverse=True)
    if option is SortOption.OLDEST:
        return sorted(dishes, key=_created_key)
    if option is SortOption.HIGHEST_RATED:
        return sorted(dishes, key=lambda dish: dish.average_rating, reverse=True)
    reference = now or datetime.now(tz=UTC)
    return sorted(
        dishes, key=lambda dish: trending_score(dish, reference), reverse=True
    )


def group_by_month(
    dishes: list[DishRecord], now: datetime | None = None
) -> MemoryTimeline:
    """Bucket dishes by the month they were created, newest month first.

    Dishes without a timestamp land in the bucket for ``now``.
    """
    reference = now or datetime.now(tz=UTC)
    groups: dict[date, list[DishRecord]] = {}
    for dish in dishes:
        created = dish.created_at or reference
        key = date(created.year, created.month, 1)
        groups.setdefault(key, []).append(dish)
    return MemoryTimeline(groups=groups, keys=sorted(groups, reverse=True))


def select_throwbacks(
    dishes: list[DishRecord],
    now: datetime | None = None,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> list[DishRecord]:
    """Return dishes created within a week of an anniversary.

    A dish matches once at least ``window_days - 7`` days have passed and the
    elapsed days sit less than a week after, or at most a week before, a
    multiple of ``window_days``.
    """
    if window_days <= 0:
        raise ValueError("window_days must be positive")
    reference = now or datetime.now(tz=UTC)
    results = []
    for dish in dishes:
        if dish.created_at is None:
            continue
        days = days_since(dish.created_at, reference)
        if days < window_days - THROWBACK_GRACE_DAYS:
            continue
        offset = days % window_days
        if (
            offset < THROWBACK_GRACE_DAYS
            or offset >= window_days - THROWBACK_GRACE_DAYS
        ):
            results.append(dish)
    return results


def highly_rated(
    dishes: list[DishRecord], min_rating: float = 4.0, limit: int = 5
) -> list[DishRecord]:
    """Return the first ``limit`` dishes rated at least ``min_rating``."""
    return [dish for dish in dishes if dish.average_rating >= min_rating][:limit]


def pick_random(
    dishes: list[DishRecord], rng: Random | None = None
) -> DishRecord | None:
    """Pick one dish at random, or None when there are none."""
    if not dishes:
        return None
    return (rng or Random()).choice(dishes)


def rating_band(rating: float) -> str:
    """Classify a rating as low, medium or high."""
    if rating < LOW_RATING_CEILING:
        return "low"
    if rating < MEDIUM_RATING_CEILING:
        return "medium"
    return "high"


def compute_view(
    snapshot: DishSnapshot,
    params: QueryParameters,
    now: datetime | None = None,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> DiscoveryView:
    """Derive the discovery list and throwbacks from a snapshot."""
    reference = now or datetime.now(tz=UTC)
    filtered = filter_dishes(snapshot, params.min_rating, params.search_text)
    return DiscoveryView(
        dishes=sort_dishes(filtered, params.sort, reference),
        throwbacks=select_throwbacks(snapshot.dishes, reference, window_days),
    )


def compute_memory_lane(
    snapshot: DishSnapshot,
    now: datetime | None = None,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> MemoryLane:
    """Derive the month timeline and throwbacks from a snapshot."""
    reference = now or datetime.now(tz=UTC)
    return MemoryLane(
        timeline=group_by_month(snapshot.dishes, reference),
        throwbacks=select_throwbacks(snapshot.dishes, reference, window_days),
    )


def _created_key(dish: DishRecord) -> datetime:
    return dish.created_at or _EARLIEST
