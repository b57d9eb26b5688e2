"""
Authenticated session and owner resolution.

The presentation layer signs the user in against Supabase auth and hands
the resulting access token to the backend. Every store write resolves
the owner through OwnerResolver; "no owner" means Unauthenticated.
"""

import logging
from typing import Optional, Protocol

from ..errors import CellarError
from .supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


class OwnerResolverProtocol(Protocol):
    """Anything that can name the current authenticated user."""
    async def current_owner(self) -> Optional[str]: ...


class Session:
    """Holds the access token of the signed-in user, if any."""

    def __init__(self, client: SupabaseClient, access_token: Optional[str] = None):
        self._client = client
        if access_token:
            self.start(access_token)

    @property
    def access_token(self) -> Optional[str]:
        return self._client.access_token

    def start(self, access_token: str) -> None:
        self._client.access_token = access_token

    def end(self) -> None:
        self._client.access_token = None


class OwnerResolver:
    """Resolves the session token to a user id via the auth API."""

    def __init__(self, client: SupabaseClient):
        self._client = client
        self._resolved: dict[str, str] = {}

    async def current_owner(self) -> Optional[str]:
        token = self._client.access_token
        if not token:
            return None
        if token in self._resolved:
            return self._resolved[token]

        try:
            user = await self._client.get_user(token)
        except CellarError as e:
            logger.error(f"Owner lookup failed: {e.message}")
            return None

        user_id = (user or {}).get("id")
        if not user_id:
            return None
        self._resolved[token] = user_id
        return user_id
