"""Supabase repository for app preferences."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from platemate.services.cards import PreferencesRepository


@dataclass
class SupabasePreferencesRepository(PreferencesRepository):
    """Supabase implementation for key/value preferences."""

    client: Client

    def get_value(self, key: str) -> str | None:
        """Return the stored value for a key."""
        response = (
            self.client.table("preferences")
            .select("value")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return response.data[0].get("value")

    def set_value(self, key: str, value: str) -> None:
        """Insert or update the value for a key."""
        self.client.table("preferences").upsert(
            {
                "key": key,
                "value": value,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="key",
        ).execute()
