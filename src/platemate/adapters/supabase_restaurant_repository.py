"""Supabase implementation for restaurants."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from platemate.domain.dishes import RestaurantRecord
from platemate.services.dishes import RestaurantRepository


@dataclass
class SupabaseRestaurantRepository(RestaurantRepository):
    """Supabase-backed repository for restaurants."""

    client: Client

    def list_restaurants(self) -> list[RestaurantRecord]:
        """Return all restaurants, most visited first."""
        response = (
            self.client.table("restaurants")
            .select("*")
            .order("visit_count", desc=True)
            .execute()
        )
        return [_parse_restaurant(row) for row in response.data or []]

    def find_by_name(self, name: str) -> RestaurantRecord | None:
        """Return the restaurant with exactly this name."""
        response = (
            self.client.table("restaurants")
            .select("*")
            .eq("name", name)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_restaurant(response.data[0])

    def search_by_name(self, query: str, limit: int) -> list[RestaurantRecord]:
        """Return restaurants whose name contains the query."""
        response = (
            self.client.table("restaurants")
            .select("*")
            .ilike("name", f"%{_escape_like(query)}%")
            .order("visit_count", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_restaurant(row) for row in response.data or []]

    def list_favorites(self, limit: int) -> list[RestaurantRecord]:
        """Return restaurants by visit count, then name."""
        response = (
            self.client.table("restaurants")
            .select("*")
            .order("visit_count", desc=True)
            .order("name")
            .limit(limit)
            .execute()
        )
        return [_parse_restaurant(row) for row in response.data or []]

    def create_restaurant(
        self, name: str, location: str, visit_count: int
    ) -> RestaurantRecord:
        """Create a restaurant and return it."""
        response = (
            self.client.table("restaurants")
            .insert({"name": name, "location": location, "visit_count": visit_count})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create restaurant")
        return _parse_restaurant(response.data[0])

    def set_visit_count(
        self, restaurant_id: UUID, visit_count: int
    ) -> RestaurantRecord:
        """Store a new visit count and return the restaurant."""
        response = (
            self.client.table("restaurants")
            .update({"visit_count": visit_count})
            .eq("id", str(restaurant_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update restaurant")
        return _parse_restaurant(response.data[0])


def _parse_restaurant(row: dict[str, object]) -> RestaurantRecord:
    return RestaurantRecord(
        id=UUID(row["id"]),
        name=str(row.get("name") or ""),
        location=str(row.get("location") or ""),
        visit_count=int(row.get("visit_count", 0)),
    )


def _escape_like(value: str) -> str:
    """Escape LIKE wildcards so the query matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
