"""
Tests for the completion clients.

LiteLLM is patched out; no network calls are made.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.errors import NoStructuredOutput, TransportFailure
from app.services.completion import (
    GENERIC_API_ERROR,
    LiteLLMCompletionClient,
    MockCompletionClient,
    get_completion_client,
)
from app.services.prompt_builder import as_messages


def _response(content):
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    return response


def _litellm(**acompletion_kwargs):
    litellm = MagicMock()
    litellm.acompletion = AsyncMock(**acompletion_kwargs)
    return litellm


class ProviderError(Exception):
    """Shaped like a litellm provider exception."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class TestLiteLLMCompletionClient:
    @pytest.mark.asyncio
    async def test_returns_first_choice_text(self):
        litellm = _litellm(return_value=_response('{"type": "red"}'))

        with patch("app.services.completion._get_litellm", return_value=litellm):
            client = LiteLLMCompletionClient(model="gpt-4o-mini", temperature=0.7, timeout=5)
            text = await client.complete(as_messages("hello"), "sk-test")

        assert text == '{"type": "red"}'
        kwargs = litellm.acompletion.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["temperature"] == 0.7
        assert kwargs["api_key"] == "sk-test"
        assert kwargs["messages"] == [{"role": "user", "content": "hello"}]

    def test_defaults_from_config(self, monkeypatch):
        monkeypatch.delenv("COMPLETION_MODEL", raising=False)
        monkeypatch.delenv("COMPLETION_TEMPERATURE", raising=False)

        client = LiteLLMCompletionClient()

        assert client.model == "gpt-4o-mini"
        assert client.temperature == 0.7

    @pytest.mark.asyncio
    async def test_provider_message_is_kept_verbatim(self):
        error = ProviderError("Incorrect API key provided: sk-test", status_code=401)
        litellm = _litellm(side_effect=error)

        with patch("app.services.completion._get_litellm", return_value=litellm):
            client = LiteLLMCompletionClient(timeout=5)
            with pytest.raises(TransportFailure) as exc_info:
                await client.complete(as_messages("hello"), "sk-test")

        assert exc_info.value.message == GENERIC_API_ERROR
        assert exc_info.value.detail == "Incorrect API key provided: sk-test"
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_error_without_message_uses_generic_text(self):
        litellm = _litellm(side_effect=RuntimeError("socket closed"))

        with patch("app.services.completion._get_litellm", return_value=litellm):
            client = LiteLLMCompletionClient(timeout=5)
            with pytest.raises(TransportFailure) as exc_info:
                await client.complete(as_messages("hello"), "sk-test")

        assert exc_info.value.message == GENERIC_API_ERROR
        assert exc_info.value.detail is None

    @pytest.mark.asyncio
    async def test_timeout(self):
        async def slow(**kwargs):
            await asyncio.sleep(1)

        litellm = MagicMock()
        litellm.acompletion = slow

        with patch("app.services.completion._get_litellm", return_value=litellm):
            client = LiteLLMCompletionClient(timeout=0.01)
            with pytest.raises(TransportFailure, match="timed out"):
                await client.complete(as_messages("hello"), "sk-test")

    @pytest.mark.asyncio
    async def test_empty_content(self):
        litellm = _litellm(return_value=_response(None))

        with patch("app.services.completion._get_litellm", return_value=litellm):
            client = LiteLLMCompletionClient(timeout=5)
            with pytest.raises(NoStructuredOutput):
                await client.complete(as_messages("hello"), "sk-test")

    @pytest.mark.asyncio
    async def test_no_choices(self):
        response = MagicMock()
        response.choices = []
        litellm = _litellm(return_value=response)

        with patch("app.services.completion._get_litellm", return_value=litellm):
            client = LiteLLMCompletionClient(timeout=5)
            with pytest.raises(NoStructuredOutput):
                await client.complete(as_messages("hello"), "sk-test")


class TestMockCompletionClient:
    @pytest.mark.asyncio
    async def test_queued_responses_in_order(self):
        client = MockCompletionClient(["first", "second"])

        assert await client.complete(as_messages("a"), "k") == "first"
        assert await client.complete(as_messages("b"), "k") == "second"
        assert len(client.calls) == 2

    @pytest.mark.asyncio
    async def test_fixture_by_request_kind(self):
        client = MockCompletionClient()

        pairing = await client.complete(as_messages('{"recommendations": []}'), "k")
        enrichment = await client.complete(as_messages("Name: Barolo"), "k")

        assert "wineIndex" in pairing
        assert "tasteProfile" in enrichment


class TestFactory:
    def test_mock(self):
        assert isinstance(get_completion_client(use_mock=True), MockCompletionClient)

    def test_real(self):
        assert isinstance(get_completion_client(use_mock=False), LiteLLMCompletionClient)

    def test_env_controls_default(self, monkeypatch):
        monkeypatch.setenv("USE_MOCKS", "true")
        assert isinstance(get_completion_client(), MockCompletionClient)
