"""
Owner-scoped CRUD for wines in the remote store.

Every operation returns a Result instead of raising. Reads degrade to an
empty list with the error attached; writes report their failure so the
caller can tell the user nothing was saved. No retries.
"""

import logging
from typing import Optional

from ..config import Config
from ..errors import CellarError, NotFound, Unauthenticated, WriteFailed
from ..models.result import Result
from ..models.wine import Wine, WineDraft
from .schema_mapper import (
    CREATED_AT_COLUMN,
    ID_COLUMN,
    OWNER_COLUMN,
    from_storage,
    to_storage,
    to_update_values,
)
from .session import OwnerResolverProtocol
from .supabase_client import SupabaseClient, eq

logger = logging.getLogger(__name__)


class WineStore:
    """
    Remote repository for the `wines` table.

    Row-level security on the server is the authority on ownership;
    the owner filter sent with each call only narrows what we ask for.
    """

    def __init__(
        self,
        client: SupabaseClient,
        owners: OwnerResolverProtocol,
        table: Optional[str] = None,
    ):
        self._client = client
        self._owners = owners
        self.table = table or Config.WINES_TABLE

    async def list_wines(self) -> Result[list[Wine]]:
        """All wines of the current owner, newest first."""
        owner = await self._owners.current_owner()
        if owner is None:
            logger.error("Listing wines without an authenticated owner")
            return Result.failure(Unauthenticated("No authenticated user"), value=[])

        try:
            rows = await self._client.select(
                self.table,
                filters={OWNER_COLUMN: eq(owner)},
                order=f"{CREATED_AT_COLUMN}.desc",
            )
        except CellarError as e:
            logger.error(f"Error fetching wines: {e.message}")
            return Result.failure(e, value=[])

        return Result.success([from_storage(row) for row in rows])

    async def create(self, draft: WineDraft) -> Result[Wine]:
        """Insert a new wine. Returns it with store-assigned id and created_at."""
        owner = await self._owners.current_owner()
        if owner is None:
            return Result.failure(Unauthenticated("No authenticated user"))

        row = to_storage(draft, owner)
        row.pop(ID_COLUMN, None)
        row.pop(CREATED_AT_COLUMN, None)

        try:
            stored = await self._client.insert(self.table, row)
        except CellarError as e:
            logger.error(f"Error saving wine: {e.message}")
            return Result.failure(WriteFailed(e.message))

        wine = from_storage(stored)
        logger.info(f"Saved wine {wine.id} ({wine.name} {wine.year})")
        return Result.success(wine)

    async def update(self, wine: Wine) -> Result[Wine]:
        """Replace every mutable field of the wine with the given values."""
        owner = await self._owners.current_owner()
        if owner is None:
            return Result.failure(Unauthenticated("No authenticated user"))

        try:
            rows = await self._client.update(
                self.table,
                to_update_values(wine),
                filters={ID_COLUMN: eq(wine.id), OWNER_COLUMN: eq(owner)},
            )
        except CellarError as e:
            logger.error(f"Error updating wine {wine.id}: {e.message}")
            return Result.failure(WriteFailed(e.message))

        if not rows:
            logger.warning(f"Update matched no wine with id {wine.id}")
            return Result.failure(NotFound(f"No wine with id {wine.id}"))

        return Result.success(from_storage(rows[0]))

    async def delete(self, wine_id: str) -> Result[None]:
        """Delete by id. A missing row counts as deleted."""
        owner = await self._owners.current_owner()
        if owner is None:
            return Result.failure(Unauthenticated("No authenticated user"))

        try:
            await self._client.delete(
                self.table,
                filters={ID_COLUMN: eq(wine_id), OWNER_COLUMN: eq(owner)},
            )
        except CellarError as e:
            logger.error(f"Error deleting wine {wine_id}: {e.message}")
            return Result.failure(WriteFailed(e.message))

        return Result.success()
