"""Supabase-backed key/value storage for mood state."""

from dataclasses import dataclass

from supabase import Client

from mood_engine.services.store import StateStorage


@dataclass
class SupabaseStateStorage(StateStorage):
    """Stores values in a ``(scope, key, value)`` table."""

    client: Client
    scope: str
    table: str = "app_state"

    def get_item(self, key: str) -> str | None:
        """Return the value stored under a key."""
        response = (
            self.client.table(self.table)
            .select("value")
            .eq("scope", self.scope)
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        value = response.data[0].get("value")
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        """Insert or replace the value for a key."""
        self.client.table(self.table).upsert(
            {"scope": self.scope, "key": key, "value": value},
            on_conflict="scope,key",
        ).execute()

    def remove_item(self, key: str) -> None:
        """Delete the row for a key."""
        self.client.table(self.table).delete().eq("scope", self.scope).eq(
            "key", key
        ).execute()
