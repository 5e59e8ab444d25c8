"""Debounced discovery state for interactive search."""

import asyncio
from dataclasses import dataclass, field, replace

from platemate.domain.dishes import QueryParameters
from platemate.domain.memories import DiscoveryView
from platemate.services.dishes import DishService
from platemate.services.query import DEFAULT_WINDOW_DAYS, compute_view


@dataclass
class DiscoveryState:
    """Holds query parameters and recomputes the view after input settles."""

    dish_service: DishService
    debounce_seconds: float = 0.2
    window_days: int = DEFAULT_WINDOW_DAYS
    params: QueryParameters = field(default_factory=QueryParameters)
    view: DiscoveryView | None = None
    recompute_count: int = 0
    _pending: asyncio.TimerHandle | None = field(default=None, repr=False)

    @property
    def pending(self) -> bool:
        """Whether a recomputation is waiting for input to settle."""
        return self._pending is not None

    def update(self, **changes: object) -> None:
        """Apply parameter changes and schedule a recomputation.

        Must be called from a running event loop. Calls inside the debounce
        window replace the pending recomputation.
        """
        self.params = replace(self.params, **changes)
        if self._pending is not None:
            self._pending.cancel()
        loop = asyncio.get_running_loop()
        self._pending = loop.call_later(self.debounce_seconds, self._fire)

    def recompute(self) -> DiscoveryView:
        """Recompute the view now."""
        self.view = compute_view(
            self.dish_service.snapshot, self.params, window_days=self.window_days
        )
        self.recompute_count += 1
        return self.view

    def _fire(self) -> None:
        self._pending = None
        self.recompute()
