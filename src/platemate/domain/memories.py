"""Derived views over the dish collection."""

from dataclasses import dataclass
from datetime import date

from platemate.domain.dishes import DishRecord


@dataclass(frozen=True)
class MemoryTimeline:
    """Dishes bucketed by calendar month, newest month first."""

    groups: dict[date, list[DishRecord]]
    keys: list[date]

    @staticmethod
    def label(key: date) -> str:
        """Return a display label such as 'October 2026'."""
        return key.strftime("%B %Y")


@dataclass(frozen=True)
class MemoryLane:
    """Timeline plus anniversary throwbacks."""

    timeline: MemoryTimeline
    throwbacks: list[DishRecord]


@dataclass(frozen=True)
class DiscoveryView:
    """Filtered and sorted dishes plus throwbacks."""

    dishes: list[DishRecord]
    throwbacks: list[DishRecord]
