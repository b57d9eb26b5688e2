"""
Process-wide holder for the completion API key.

One instance is owned by the CellarService and injected wherever an AI
call is made. The in-memory slot is authoritative for reads; the durable
user_settings row is written behind it.
"""

import asyncio
import logging
import threading
from typing import Optional

from ..config import Config
from ..errors import CellarError
from ..feature_flags import get_feature_flags
from .key_stores import LegacyKeyStore, UserSettingsStore
from .session import OwnerResolverProtocol

logger = logging.getLogger(__name__)


def mask_key(key: Optional[str]) -> str:
    """Show only the last four characters of a secret."""
    if not key:
        return ""
    return f"...{key[-4:]}" if len(key) > 4 else "****"


class ApiKeyCache:
    """
    Single-slot credential cache.

    - get/set/clear never block on I/O
    - set() persists in the background; failures are logged
    - load() hydrates once: legacy local store first (migrated, then
      removed), otherwise the owner's durable settings row
    """

    def __init__(
        self,
        settings: UserSettingsStore,
        owners: OwnerResolverProtocol,
        legacy: Optional[LegacyKeyStore] = None,
        migrate_legacy: Optional[bool] = None,
    ):
        self._settings = settings
        self._owners = owners
        self._legacy = legacy
        if migrate_legacy is None:
            migrate_legacy = get_feature_flags().feature_legacy_key_migration
        self._migrate_legacy = migrate_legacy
        self._key: Optional[str] = None
        self._lock = threading.Lock()
        self._pending: set[asyncio.Task] = set()
        self._last_task: Optional[asyncio.Task] = None

    def get(self) -> Optional[str]:
        with self._lock:
            return self._key

    def set(self, key: str) -> None:
        """Cache the key now and persist it without waiting."""
        with self._lock:
            self._key = key

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop (scripts): persist inline
            asyncio.run(self._persist(key))
            return

        # Writes are chained so the durable copy ends on the last key set
        task = loop.create_task(self._persist_after(self._last_task, key))
        self._last_task = task
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def clear(self) -> None:
        """Empty the slot (logout). Durable storage is left untouched."""
        with self._lock:
            self._key = None

    async def flush(self) -> None:
        """Wait for background persistence started by set()."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def load(self) -> Optional[str]:
        """Hydrate an empty cache. Returns the cached key, if any."""
        cached = self.get()
        if cached is not None:
            return cached

        if self._migrate_legacy and self._legacy is not None:
            legacy_key = self._legacy.get_item(Config.LEGACY_API_KEY_KEY)
            if legacy_key:
                with self._lock:
                    self._key = legacy_key
                if await self._persist(legacy_key):
                    self._legacy.remove_item(Config.LEGACY_API_KEY_KEY)
                    logger.info("Migrated legacy API key to user settings")
                else:
                    logger.warning("Legacy API key kept locally until it can be persisted")
                return legacy_key

        owner = await self._owners.current_owner()
        if owner is None:
            return None

        try:
            stored = await self._settings.get_api_key(owner)
        except CellarError as e:
            logger.error(f"Error loading API key: {e.message}")
            return None

        if not stored:
            return None

        with self._lock:
            # A set() that raced with this load wins
            if self._key is None:
                self._key = stored
            logger.info(f"Loaded API key {mask_key(self._key)}")
            return self._key

    async def _persist_after(self, previous: Optional[asyncio.Task], key: str) -> bool:
        if (previous is not None and not previous.done()
                and previous.get_loop() is asyncio.get_running_loop()):
            await asyncio.wait([previous])
        return await self._persist(key)

    async def _persist(self, key: str) -> bool:
        owner = await self._owners.current_owner()
        if owner is None:
            logger.error("Cannot persist API key: no authenticated user")
            return False
        try:
            await self._settings.save_api_key(owner, key)
        except CellarError as e:
            logger.error(f"Error saving API key: {e.message}")
            return False
        logger.info(f"Persisted API key {mask_key(key)}")
        return True
