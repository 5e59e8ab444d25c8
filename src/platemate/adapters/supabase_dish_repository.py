"""Supabase implementation for dishes."""

import base64
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from platemate.domain.dishes import DishRecord
from platemate.services.dishes import DishRepository


@dataclass
class SupabaseDishRepository(DishRepository):
    """Supabase-backed repository for logged dishes."""

    client: Client

    def list_dishes(self) -> list[DishRecord]:
        """Return all dishes, newest first."""
        response = (
            self.client.table("dishes")
            .select("*")
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_dish(row) for row in response.data or []]

    def create_dish(self, payload: dict[str, object]) -> DishRecord:
        """Create a dish and return it."""
        response = self.client.table("dishes").insert(_to_row(payload)).execute()
        if not response.data:
            raise RuntimeError("Failed to create dish")
        return _parse_dish(response.data[0])

    def update_dish(self, dish_id: UUID, payload: dict[str, object]) -> DishRecord:
        """Update a dish and return it."""
        response = (
            self.client.table("dishes")
            .update(_to_row(payload))
            .eq("id", str(dish_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update dish")
        return _parse_dish(response.data[0])

    def delete_dish(self, dish_id: UUID) -> None:
        """Delete a dish."""
        self.client.table("dishes").delete().eq("id", str(dish_id)).execute()


def _to_row(payload: dict[str, object]) -> dict[str, object]:
    """Convert service payload values into JSON-friendly column values."""
    row = dict(payload)
    image = row.get("image_data")
    if isinstance(image, bytes):
        row["image_data"] = base64.b64encode(image).decode("ascii")
    created_at = row.get("created_at")
    if isinstance(created_at, datetime):
        row["created_at"] = created_at.isoformat()
    restaurant_id = row.get("restaurant_id")
    if isinstance(restaurant_id, UUID):
        row["restaurant_id"] = str(restaurant_id)
    return row


def _parse_dish(row: dict[str, object]) -> DishRecord:
    """Parse a dish row into a domain model."""
    created_raw = row.get("created_at")
    image_raw = row.get("image_data")
    restaurant_raw = row.get("restaurant_id")
    return DishRecord(
        id=UUID(row["id"]),
        name=str(row.get("name") or ""),
        notes=row.get("notes"),
        image_data=(
            base64.b64decode(image_raw)
            if isinstance(image_raw, str) and image_raw
            else None
        ),
        taste_rating=float(row.get("taste_rating", 0.0)),
        presentation_rating=float(row.get("presentation_rating", 0.0)),
        value_rating=float(row.get("value_rating", 0.0)),
        average_rating=float(row.get("average_rating", 0.0)),
        created_at=(
            datetime.fromisoformat(created_raw)
            if isinstance(created_raw, str) and created_raw
            else None
        ),
        restaurant_id=UUID(restaurant_raw) if restaurant_raw else None,
    )
