"""
CellarService: the single entry point for presentation code.

Owns the process-wide collaborators (remote client, session, key cache,
store, sommelier) and exposes every cellar operation as a coroutine or
method returning a Result. CellarError never escapes this class.
"""

import logging
from functools import lru_cache
from typing import Optional, Sequence

import httpx

from ..config import Config
from ..errors import CellarError, MissingCredential, Unauthenticated
from ..models.result import Result
from ..models.wine import PairingResult, Wine, WineDraft, WineEnrichment
from .api_key_cache import ApiKeyCache
from .completion import CompletionClientProtocol, get_completion_client
from .key_stores import LegacyKeyStore, UserSettingsStore
from .session import OwnerResolver, Session
from .sommelier import Sommelier
from .supabase_client import SupabaseClient
from .wine_store import WineStore

logger = logging.getLogger(__name__)


class CellarService:
    """Facade over store, key cache and sommelier."""

    def __init__(
        self,
        client: SupabaseClient,
        session: Session,
        owners: OwnerResolver,
        store: WineStore,
        api_keys: ApiKeyCache,
        sommelier: Sommelier,
    ):
        self.client = client
        self.session = session
        self.owners = owners
        self.store = store
        self.api_keys = api_keys
        self.sommelier = sommelier

    @classmethod
    def from_config(
        cls,
        completion_client: Optional[CompletionClientProtocol] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        legacy_store_path: Optional[str] = None,
        access_token: Optional[str] = None,
    ) -> "CellarService":
        """Wire the collaborators from Config (overrides are for tests)."""
        client = SupabaseClient(transport=transport)
        session = Session(client, access_token or Config.supabase_access_token())
        owners = OwnerResolver(client)
        api_keys = ApiKeyCache(
            settings=UserSettingsStore(client),
            owners=owners,
            legacy=LegacyKeyStore(legacy_store_path),
        )
        return cls(
            client=client,
            session=session,
            owners=owners,
            store=WineStore(client, owners),
            api_keys=api_keys,
            sommelier=Sommelier(api_keys, completion_client or get_completion_client()),
        )

    # === Session ===

    async def start_session(self, access_token: str) -> Result[str]:
        """Adopt a sign-in token and hydrate the key cache for that user."""
        self.session.start(access_token)
        owner = await self.owners.current_owner()
        if owner is None:
            self.session.end()
            return Result.failure(Unauthenticated("Session token was not accepted"))
        await self.api_keys.load()
        logger.info(f"Session started for user {owner}")
        return Result.success(owner)

    def end_session(self) -> None:
        """Logout: forget the token and the cached key (durable copy stays)."""
        self.api_keys.clear()
        self.session.end()

    # === Wines ===

    async def list_wines(self) -> Result[list[Wine]]:
        return await self.store.list_wines()

    async def save_wine(self, draft: WineDraft) -> Result[Wine]:
        return await self.store.create(draft)

    async def update_wine(self, wine: Wine) -> Result[Wine]:
        return await self.store.update(wine)

    async def delete_wine(self, wine_id: str) -> Result[None]:
        return await self.store.delete(wine_id)

    async def adjust_quantity(self, wine: Wine, delta: int) -> Result[Wine]:
        """Add or remove bottles (never below zero) and save the full record."""
        return await self.store.update(wine.with_quantity_delta(delta))

    # === AI ===

    async def enrich_wine(
        self,
        name: str,
        year: int,
        grapes: Optional[str] = None,
    ) -> Result[WineEnrichment]:
        try:
            return Result.success(await self.sommelier.enrich(name, year, grapes))
        except CellarError as e:
            logger.warning(f"Enrichment of '{name}' failed: {e.code.value}: {e.message}")
            return Result.failure(e)

    async def pair_dish_with_cellar(
        self,
        dish: str,
        candidate_wines: Sequence[Wine],
    ) -> Result[PairingResult]:
        try:
            return Result.success(await self.sommelier.pair(dish, candidate_wines))
        except CellarError as e:
            logger.warning(f"Pairing for '{dish}' failed: {e.code.value}: {e.message}")
            return Result.failure(e)

    async def add_wine_with_enrichment(self, draft: WineDraft) -> Result[Wine]:
        """Enrich a draft, then save it. Nothing is saved if enrichment fails."""
        enriched = await self.enrich_wine(draft.name, draft.year, draft.grapes)
        if not enriched.ok:
            return Result.failure(enriched.error)
        return await self.save_wine(draft.apply_enrichment(enriched.value))

    # === Credential ===

    def get_cached_key(self) -> Optional[str]:
        return self.api_keys.get()

    def set_key(self, key: str) -> Result[None]:
        """Cache and persist a key. Blank keys are rejected, never stored."""
        key = (key or "").strip()
        if not key:
            return Result.failure(MissingCredential("API key is empty"))
        self.api_keys.set(key)
        return Result.success()

    async def aclose(self) -> None:
        """Wait for pending key persistence and release the HTTP client."""
        await self.api_keys.flush()
        await self.client.aclose()


@lru_cache()
def get_cellar_service() -> CellarService:
    """Cached singleton. Use FastAPI Depends() for injection."""
    return CellarService.from_config()
