"""
Tests for the enrichment and pairing engine.

Uses MockCompletionClient so no network calls are made; the recorded
calls show what was sent and whether the model was reached at all.
"""

from unittest.mock import MagicMock

import pytest

from app.errors import (
    EmptyCandidateSet,
    MalformedOutput,
    MissingCredential,
    NoStructuredOutput,
)
from app.mocks.fixtures import get_mock_response
from app.models.enums import WineType
from app.services.completion import MockCompletionClient
from app.services.sommelier import Sommelier
from conftest import make_wine


def _api_keys(key="sk-test"):
    api_keys = MagicMock()
    api_keys.get.return_value = key
    return api_keys


def _prompt(client: MockCompletionClient) -> str:
    return client.calls[-1]["messages"][-1]["content"]


class TestEnrich:
    @pytest.mark.asyncio
    async def test_returns_parsed_enrichment(self):
        client = MockCompletionClient([get_mock_response("enrichment")])
        sommelier = Sommelier(_api_keys(), client)

        enrichment = await sommelier.enrich("Château Lafite", 2015)

        assert enrichment.wine_type == WineType.RED
        assert enrichment.country == "France"
        assert client.calls[0]["api_key"] == "sk-test"

    @pytest.mark.asyncio
    async def test_prompt_includes_user_input(self):
        client = MockCompletionClient()
        sommelier = Sommelier(_api_keys(), client)

        await sommelier.enrich("Château Lafite", 2015, "Cabernet Sauvignon")

        prompt = _prompt(client)
        assert "Château Lafite" in prompt
        assert "2015" in prompt
        assert "Cabernet Sauvignon" in prompt

    @pytest.mark.asyncio
    async def test_invalid_type_becomes_red(self):
        client = MockCompletionClient([get_mock_response("enrichment_bad_type")])
        sommelier = Sommelier(_api_keys(), client)

        enrichment = await sommelier.enrich("Mystery", 2020)

        assert enrichment.wine_type == WineType.RED

    @pytest.mark.asyncio
    async def test_missing_key_makes_no_call(self):
        client = MockCompletionClient()
        sommelier = Sommelier(_api_keys(None), client)

        with pytest.raises(MissingCredential):
            await sommelier.enrich("Château Lafite", 2015)

        assert client.calls == []

    @pytest.mark.asyncio
    async def test_no_json_answer(self):
        client = MockCompletionClient([get_mock_response("no_json")])
        sommelier = Sommelier(_api_keys(), client)

        with pytest.raises(NoStructuredOutput):
            await sommelier.enrich("Château Lafite", 2015)


class TestPair:
    @pytest.fixture
    def cellar(self):
        return [
            make_wine(id="a", name="Barolo", quantity=2),
            make_wine(id="empty", name="Finished Rioja", quantity=0),
            make_wine(id="b", name="Sancerre", wine_type=WineType.WHITE, quantity=1),
            make_wine(id="c", name="Cava", wine_type=WineType.SPARKLING, quantity=6),
        ]

    @pytest.mark.asyncio
    async def test_indices_resolve_against_in_stock_listing(self, cellar):
        client = MockCompletionClient([get_mock_response("pairing")])
        sommelier = Sommelier(_api_keys(), client)

        result = await sommelier.pair("Lamb stew", cellar)

        # Index 2 is Sancerre because the empty bottle is never listed
        assert [r.wine.id for r in result.recommendations] == ["a", "b"]
        assert result.recommendations[0].score == 92
        assert result.general_advice == "Choose a structured red for red meat dishes."

    @pytest.mark.asyncio
    async def test_out_of_stock_wines_are_not_offered(self, cellar):
        client = MockCompletionClient()
        sommelier = Sommelier(_api_keys(), client)

        await sommelier.pair("Lamb stew", cellar)

        prompt = _prompt(client)
        assert "Lamb stew" in prompt
        assert "1. Barolo (2018)" in prompt
        assert "2. Sancerre (2018)" in prompt
        assert "3. Cava (2018)" in prompt
        assert "Finished Rioja" not in prompt

    @pytest.mark.asyncio
    async def test_empty_cellar_makes_no_call(self):
        client = MockCompletionClient()
        sommelier = Sommelier(_api_keys(), client)

        with pytest.raises(EmptyCandidateSet):
            await sommelier.pair("Lamb stew", [])

        assert client.calls == []

    @pytest.mark.asyncio
    async def test_all_out_of_stock_makes_no_call(self):
        client = MockCompletionClient()
        sommelier = Sommelier(_api_keys(), client)

        with pytest.raises(EmptyCandidateSet):
            await sommelier.pair("Lamb stew", [make_wine(quantity=0)])

        assert client.calls == []

    @pytest.mark.asyncio
    async def test_missing_key_is_checked_first(self):
        client = MockCompletionClient()
        sommelier = Sommelier(_api_keys(""), client)

        with pytest.raises(MissingCredential):
            await sommelier.pair("Lamb stew", [])

        assert client.calls == []

    @pytest.mark.asyncio
    async def test_malformed_answer(self, cellar):
        client = MockCompletionClient(['{"recommendations": {"wineIndex": 1}}'])
        sommelier = Sommelier(_api_keys(), client)

        with pytest.raises(MalformedOutput):
            await sommelier.pair("Lamb stew", cellar)

    @pytest.mark.asyncio
    async def test_does_not_mutate_wines(self, cellar):
        before = [w.model_copy() for w in cellar]
        sommelier = Sommelier(_api_keys(), MockCompletionClient())

        await sommelier.pair("Lamb stew", cellar)

        assert cellar == before
