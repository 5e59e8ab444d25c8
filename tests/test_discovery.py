"""Tests for the debounced discovery state."""

import asyncio

from platemate.domain.dishes import DishSnapshot, SortOption
from platemate.services.discovery import DiscoveryState
from platemate.services.dishes import DishService
from tests.conftest import make_dish


def test_rapid_updates_coalesce_into_one_recompute(dish_service: DishService) -> None:
    ramen = make_dish("Ramen", average=4.5)
    pho = make_dish("Pho", average=3.0)
    dish_service.snapshot = DishSnapshot(dishes=[ramen, pho])
    state = DiscoveryState(dish_service, debounce_seconds=0.05)

    async def type_query() -> None:
        for text in ("r", "ra", "ram"):
            state.update(search_text=text)
            await asyncio.sleep(0.01)
        await asyncio.sleep(0.15)

    asyncio.run(type_query())

    assert state.recompute_count == 1
    assert state.params.search_text == "ram"
    assert state.view is not None
    assert state.view.dishes == [ramen]


def test_update_clamps_and_sorts(dish_service: DishService) -> None:
    low = make_dish("low", average=1.0)
    high = make_dish("high", average=5.0)
    dish_service.snapshot = DishSnapshot(dishes=[low, high])
    state = DiscoveryState(dish_service, debounce_seconds=0.01)

    async def change() -> None:
        state.update(sort=SortOption.HIGHEST_RATED, min_rating=-1.0)
        await asyncio.sleep(0.05)

    asyncio.run(change())

    assert state.params.min_rating == 0.0
    assert state.view.dishes == [high, low]


def test_update_accepts_sort_name(dish_service: DishService) -> None:
    old = make_dish("old", average=5.0, days_ago=100)
    new = make_dish("new", average=1.0, days_ago=0)
    dish_service.snapshot = DishSnapshot(dishes=[old, new])
    state = DiscoveryState(dish_service, debounce_seconds=0.01)

    async def change() -> None:
        state.update(sort="oldest")
        assert state.pending
        await asyncio.sleep(0.05)

    asyncio.run(change())

    assert state.params.sort is SortOption.OLDEST
    assert not state.pending
    assert state.view.dishes == [old, new]


def test_recompute_runs_immediately(dish_service: DishService) -> None:
    dish = make_dish()
    dish_service.snapshot = DishSnapshot(dishes=[dish])
    state = DiscoveryState(dish_service)

    view = state.recompute()

    assert view.dishes == [dish]
    assert state.recompute_count == 1
