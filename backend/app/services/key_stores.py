"""
Backing stores for the completion API key.

- UserSettingsStore: durable, owner-keyed row in the remote `user_settings`
  table (upsert on user_id).
- LegacyKeyStore: flat key/value pairs in a local SQLite file, read only
  to migrate a key cached by the old client.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from ..config import Config
from ..db import BaseRepository
from .supabase_client import SupabaseClient, eq

logger = logging.getLogger(__name__)


class UserSettingsStore:
    """Durable key storage keyed by owner identity."""

    KEY_COLUMN = "openai_api_key"
    OWNER_COLUMN = "user_id"

    def __init__(self, client: SupabaseClient, table: Optional[str] = None):
        self._client = client
        self.table = table or Config.SETTINGS_TABLE

    async def get_api_key(self, owner_id: str) -> Optional[str]:
        """Stored key for the owner, or None. Raises TransportFailure."""
        rows = await self._client.select(
            self.table,
            filters={self.OWNER_COLUMN: eq(owner_id)},
            columns=self.KEY_COLUMN,
        )
        if not rows:
            return None
        return rows[0].get(self.KEY_COLUMN) or None

    async def save_api_key(self, owner_id: str, key: str) -> None:
        """Upsert the owner's key. Raises TransportFailure."""
        await self._client.upsert(
            self.table,
            {
                self.OWNER_COLUMN: owner_id,
                self.KEY_COLUMN: key,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            },
            on_conflict=self.OWNER_COLUMN,
        )


class LegacyKeyStore(BaseRepository):
    """SQLite-backed flat string store, the old client's local storage."""

    SCHEMA = """
        CREATE TABLE IF NOT EXISTS local_storage (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        );
    """

    def get_item(self, key: str) -> Optional[str]:
        return self._fetch_value("SELECT value FROM local_storage WHERE key = ?", (key,))

    def set_item(self, key: str, value: str) -> None:
        with self._transaction() as cursor:
            cursor.execute(
                "INSERT OR REPLACE INTO local_storage (key, value) VALUES (?, ?)",
                (key, value),
            )

    def remove_item(self, key: str) -> None:
        with self._transaction() as cursor:
            cursor.execute("DELETE FROM local_storage WHERE key = ?", (key,))
