"""
Chat completion clients for enrichment and pairing.

LiteLLMCompletionClient sends a single request per call (no retries, no
streaming). Swappable via CompletionClientProtocol; MockCompletionClient
serves canned answers for USE_MOCKS=true and tests.
"""

import asyncio
import logging
from typing import Optional, Protocol

from ..config import Config
from ..errors import NoStructuredOutput, TransportFailure

# Lazy import for litellm to avoid slow network requests during module load
_litellm = None

logger = logging.getLogger(__name__)

GENERIC_API_ERROR = "Completion API error"


def _get_litellm():
    """Lazy-load litellm to avoid startup delays from network requests."""
    global _litellm
    if _litellm is None:
        import litellm
        litellm.set_verbose = False
        _litellm = litellm
    return _litellm


class CompletionClientProtocol(Protocol):
    """Protocol for completion backends (allows swapping providers)."""
    async def complete(self, messages: list[dict], api_key: str) -> str: ...


class LiteLLMCompletionClient:
    """Completion client using the LiteLLM unified interface."""

    def __init__(
        self,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        timeout: Optional[float] = None,
    ):
        self.model = model or Config.completion_model()
        self.temperature = temperature if temperature is not None else Config.completion_temperature()
        self.timeout = timeout if timeout is not None else Config.completion_timeout()

    async def complete(self, messages: list[dict], api_key: str) -> str:
        """
        Send messages and return the raw text of the first choice.

        Raises:
            TransportFailure: provider error (message kept verbatim) or timeout
            NoStructuredOutput: the provider answered with empty content
        """
        litellm = _get_litellm()

        try:
            response = await asyncio.wait_for(
                litellm.acompletion(
                    model=self.model,
                    messages=messages,
                    temperature=self.temperature,
                    api_key=api_key,
                    timeout=self.timeout,
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            logger.error(f"Completion call timed out after {self.timeout}s")
            raise TransportFailure("Completion request timed out") from e
        except Exception as e:
            detail = getattr(e, "message", None)
            logger.error(f"Completion call failed: {detail or e}")
            raise TransportFailure(
                GENERIC_API_ERROR,
                detail=detail if isinstance(detail, str) and detail else None,
                status_code=getattr(e, "status_code", None),
            ) from e

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError) as e:
            raise NoStructuredOutput("No answer from completion API") from e

        if not content:
            raise NoStructuredOutput("No answer from completion API")
        return content


class MockCompletionClient:
    """
    Mock client for testing without API calls.

    Returns queued responses in order; when the queue is empty, picks a
    canned fixture by request kind. Records every call.
    """

    def __init__(self, responses: Optional[list[str]] = None):
        self.responses = list(responses or [])
        self.calls: list[dict] = []

    async def complete(self, messages: list[dict], api_key: str) -> str:
        self.calls.append({"messages": messages, "api_key": api_key})
        if self.responses:
            return self.responses.pop(0)

        from ..mocks.fixtures import MOCK_ENRICHMENT_RESPONSE, MOCK_PAIRING_RESPONSE
        prompt = messages[-1]["content"] if messages else ""
        if "recommendations" in prompt:
            return MOCK_PAIRING_RESPONSE
        return MOCK_ENRICHMENT_RESPONSE


def get_completion_client(use_mock: Optional[bool] = None) -> CompletionClientProtocol:
    """
    Factory function for completion clients.

    Args:
        use_mock: If True, return the mock client. Defaults to Config.use_mocks().
    """
    if use_mock is None:
        use_mock = Config.use_mocks()
    if use_mock:
        logger.info("Using mock completion client")
        return MockCompletionClient()
    return LiteLLMCompletionClient()
