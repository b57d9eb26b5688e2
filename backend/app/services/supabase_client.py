"""
Minimal async client for the Supabase REST (PostgREST) and auth APIs.

Only the calls the cellar needs: filtered/ordered select, insert and
update returning rows, delete, upsert-on-conflict and user lookup.
Row-level security on the server scopes every call to the session's
user; the access token is sent as the bearer credential.
"""

import logging
from typing import Any, Optional

import httpx

from ..config import Config
from ..errors import TransportFailure

logger = logging.getLogger(__name__)


class SupabaseClient:
    """Thin wrapper over httpx.AsyncClient for one Supabase project."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        anon_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: Project URL. Defaults to Config.supabase_url()
            anon_key: Public anon key. Defaults to Config.supabase_anon_key()
            timeout: Request timeout in seconds. Defaults to Config.http_timeout()
            transport: Optional httpx transport (tests inject httpx.MockTransport)
        """
        self.base_url = (base_url if base_url is not None else Config.supabase_url()).rstrip("/")
        self.anon_key = anon_key if anon_key is not None else Config.supabase_anon_key()
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else Config.http_timeout(),
            transport=transport,
        )
        self.access_token: Optional[str] = None

    def _headers(self, prefer: Optional[str] = None, token: Optional[str] = None) -> dict[str, str]:
        bearer = token or self.access_token or self.anon_key
        headers = {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {bearer}",
            "Content-Type": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, str]] = None,
        json: Any = None,
        prefer: Optional[str] = None,
        token: Optional[str] = None,
    ) -> Any:
        try:
            response = await self._client.request(
                method,
                path,
                params=params,
                json=json,
                headers=self._headers(prefer, token),
            )
        except httpx.HTTPError as e:
            logger.error(f"Supabase {method} {path} failed: {e}")
            raise TransportFailure(f"{method} {path} failed: {e}") from e

        if response.is_error:
            message = _error_message(response)
            logger.error(f"Supabase {method} {path} returned {response.status_code}: {message}")
            raise TransportFailure(message, status_code=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise TransportFailure(f"Invalid JSON from {path}") from e

    # === REST ===

    async def select(
        self,
        table: str,
        filters: Optional[dict[str, str]] = None,
        order: Optional[str] = None,
        columns: str = "*",
    ) -> list[dict]:
        """SELECT rows. filters use PostgREST syntax, e.g. {"user_id": "eq.42"}."""
        params = {"select": columns}
        params.update(filters or {})
        if order:
            params["order"] = order
        return await self._request("GET", f"/rest/v1/{table}", params=params) or []

    async def insert(self, table: str, row: dict) -> dict:
        """INSERT one row and return it as stored."""
        rows = await self._request(
            "POST", f"/rest/v1/{table}", json=row, prefer="return=representation"
        )
        if not rows:
            raise TransportFailure(f"Insert into {table} returned no row")
        return rows[0]

    async def update(self, table: str, values: dict, filters: dict[str, str]) -> list[dict]:
        """UPDATE matching rows and return them (empty when nothing matched)."""
        return await self._request(
            "PATCH",
            f"/rest/v1/{table}",
            params=filters,
            json=values,
            prefer="return=representation",
        ) or []

    async def delete(self, table: str, filters: dict[str, str]) -> None:
        """DELETE matching rows. Zero matches is not an error."""
        await self._request(
            "DELETE", f"/rest/v1/{table}", params=filters, prefer="return=minimal"
        )

    async def upsert(self, table: str, row: dict, on_conflict: str) -> None:
        """INSERT or merge on the given conflict column."""
        await self._request(
            "POST",
            f"/rest/v1/{table}",
            params={"on_conflict": on_conflict},
            json=row,
            prefer="resolution=merge-duplicates,return=minimal",
        )

    # === Auth ===

    async def get_user(self, access_token: Optional[str] = None) -> Optional[dict]:
        """Return the user behind a session token, or None without a token."""
        token = access_token or self.access_token
        if not token:
            return None
        return await self._request("GET", "/auth/v1/user", token=token)

    async def aclose(self) -> None:
        await self._client.aclose()


def eq(value: Any) -> str:
    """PostgREST equality filter value."""
    return f"eq.{value}"


def _error_message(response: httpx.Response) -> str:
    """Best human-readable message from a PostgREST/GoTrue error body."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("message", "msg", "error_description", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return f"HTTP {response.status_code}"
