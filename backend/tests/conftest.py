"""
Pytest configuration for the wine cellar tests.
"""

import json
from typing import Optional

import httpx
import pytest

from app.models.enums import WineType
from app.models.wine import Wine, WineDraft
from app.services.cellar import CellarService
from app.services.completion import MockCompletionClient
from app.services.supabase_client import SupabaseClient

BASE_URL = "https://test.supabase.co"
ANON_KEY = "anon-key"
USER_TOKEN = "token-1"
USER_ID = "user-1"


# Configure pytest-asyncio markers for async tests
def pytest_configure(config):
    """Register the asyncio marker."""
    config.addinivalue_line(
        "markers", "asyncio: mark test as an asyncio test"
    )


class FakeOwners:
    """Owner resolver returning a fixed user (or None)."""

    def __init__(self, owner: Optional[str] = USER_ID):
        self.owner = owner

    async def current_owner(self) -> Optional[str]:
        return self.owner


class FakeSupabase:
    """
    In-memory stand-in for the PostgREST and auth endpoints the cellar uses.

    Use as the handler of an httpx.MockTransport. Set `fail_with` to a
    (status, body) tuple to make every REST call fail.
    """

    def __init__(self):
        self.wines: list[dict] = []
        self.settings: dict[str, dict] = {}
        self.users: dict[str, dict] = {USER_TOKEN: {"id": USER_ID, "email": "user@example.com"}}
        self.requests: list[httpx.Request] = []
        self.fail_with: Optional[tuple[int, dict]] = None
        self._counter = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/auth/v1/user":
            token = request.headers.get("Authorization", "").removeprefix("Bearer ")
            user = self.users.get(token)
            if user is None:
                return httpx.Response(401, json={"msg": "invalid JWT"})
            return httpx.Response(200, json=user)

        if self.fail_with is not None:
            status, body = self.fail_with
            return httpx.Response(status, json=body)

        if path == "/rest/v1/wines":
            return self._wines(request)
        if path == "/rest/v1/user_settings":
            return self._settings(request)
        return httpx.Response(404, json={"message": f"Unknown path {path}"})

    @staticmethod
    def _eq_filters(request: httpx.Request) -> dict[str, str]:
        return {
            key: value[len("eq."):]
            for key, value in request.url.params.items()
            if value.startswith("eq.")
        }

    def _matching(self, rows: list[dict], filters: dict[str, str]) -> list[dict]:
        return [row for row in rows if all(str(row.get(k)) == v for k, v in filters.items())]

    def _wines(self, request: httpx.Request) -> httpx.Response:
        filters = self._eq_filters(request)

        if request.method == "GET":
            rows = self._matching(self.wines, filters)
            if request.url.params.get("order") == "created_at.desc":
                rows = sorted(rows, key=lambda r: r["created_at"], reverse=True)
            return httpx.Response(200, json=rows)

        if request.method == "POST":
            self._counter += 1
            row = dict(json.loads(request.content))
            row["id"] = f"wine-{self._counter}"
            row["created_at"] = f"2024-05-01T12:00:{self._counter:02d}+00:00"
            self.wines.append(row)
            return httpx.Response(201, json=[row])

        if request.method == "PATCH":
            values = json.loads(request.content)
            matched = self._matching(self.wines, filters)
            for row in matched:
                row.update(values)
            return httpx.Response(200, json=matched)

        if request.method == "DELETE":
            matched = self._matching(self.wines, filters)
            self.wines = [row for row in self.wines if row not in matched]
            return httpx.Response(204)

        return httpx.Response(405)

    def _settings(self, request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            filters = self._eq_filters(request)
            row = self.settings.get(filters.get("user_id", ""))
            return httpx.Response(200, json=[row] if row else [])

        if request.method == "POST":
            row = json.loads(request.content)
            existing = self.settings.setdefault(row["user_id"], {})
            existing.update(row)
            return httpx.Response(201)

        return httpx.Response(405)


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def completion_client():
    return MockCompletionClient()


@pytest.fixture
def cellar_service(fake_supabase, completion_client, tmp_path, monkeypatch):
    """CellarService wired from Config against the fake, no session yet."""
    monkeypatch.setenv("SUPABASE_URL", BASE_URL)
    monkeypatch.setenv("SUPABASE_ANON_KEY", ANON_KEY)
    monkeypatch.delenv("SUPABASE_ACCESS_TOKEN", raising=False)
    return CellarService.from_config(
        completion_client=completion_client,
        transport=httpx.MockTransport(fake_supabase),
        legacy_store_path=str(tmp_path / "local_storage.db"),
    )


@pytest.fixture
def supabase_client(fake_supabase):
    """SupabaseClient wired to the in-memory fake, signed in as USER_ID."""
    client = SupabaseClient(
        base_url=BASE_URL,
        anon_key=ANON_KEY,
        transport=httpx.MockTransport(fake_supabase),
    )
    client.access_token = USER_TOKEN
    return client


def make_draft(**overrides) -> WineDraft:
    """Create a WineDraft with sensible defaults."""
    defaults = {
        "name": "Château Test",
        "year": 2018,
        "grapes": "Merlot",
        "quantity": 2,
    }
    defaults.update(overrides)
    return WineDraft(**defaults)


def make_wine(**overrides) -> Wine:
    """Create a persisted-looking Wine with sensible defaults."""
    defaults = {
        "id": "wine-1",
        "name": "Château Test",
        "year": 2018,
        "grapes": "Merlot",
        "quantity": 2,
        "country": "France",
        "region": "Bordeaux",
        "wine_type": WineType.RED,
        "drink_window": "2024-2030",
        "taste_profile": "Plum and cedar",
        "pairing_advice": "Lamb",
    }
    defaults.update(overrides)
    return Wine(**defaults)
