"""
AI enrichment and dish pairing.

Each call is a single completion round trip: credential check, prompt,
completion, parse. Nothing here mutates a Wine; callers merge the
returned structures themselves.
"""

import logging
import time
from typing import Optional, Sequence

from ..errors import EmptyCandidateSet, MissingCredential
from ..models.wine import PairingResult, Wine, WineEnrichment
from .api_key_cache import ApiKeyCache
from .cellar_filter import eligible_candidates
from .completion import CompletionClientProtocol
from .prompt_builder import as_messages, build_enrichment_prompt, build_pairing_prompt
from .response_parser import parse_enrichment, parse_pairing

logger = logging.getLogger(__name__)


class Sommelier:
    """
    Enrichment and pairing engine.

    Flow:
    1. Fail fast with MissingCredential when no key is cached
    2. Build a deterministic prompt
    3. One completion call
    4. Parse and validate the raw text
    """

    def __init__(self, api_keys: ApiKeyCache, client: CompletionClientProtocol):
        self.api_keys = api_keys
        self.client = client

    def _require_key(self) -> str:
        key = self.api_keys.get()
        if not key:
            raise MissingCredential("No OpenAI API key set")
        return key

    async def enrich(self, name: str, year: int, grapes: Optional[str] = None) -> WineEnrichment:
        """
        Ask the model for the AI core of a wine.

        Raises:
            MissingCredential, TransportFailure, NoStructuredOutput, MalformedOutput
        """
        key = self._require_key()
        prompt = build_enrichment_prompt(name, year, grapes)

        t0 = time.perf_counter()
        raw = await self.client.complete(as_messages(prompt), key)
        elapsed_ms = round((time.perf_counter() - t0) * 1000)

        enrichment = parse_enrichment(raw)
        logger.info(f"Sommelier: enriched '{name}' ({year}) in {elapsed_ms}ms")
        return enrichment

    async def pair(self, dish: str, wines: Sequence[Wine]) -> PairingResult:
        """
        Rank in-stock wines against a dish.

        Wines with zero quantity are never offered to the model.

        Raises:
            MissingCredential, EmptyCandidateSet, TransportFailure,
            NoStructuredOutput, MalformedOutput
        """
        key = self._require_key()

        candidates = eligible_candidates(wines)
        if not candidates:
            raise EmptyCandidateSet("No wines in stock")

        prompt = build_pairing_prompt(dish, candidates)

        t0 = time.perf_counter()
        raw = await self.client.complete(as_messages(prompt), key)
        elapsed_ms = round((time.perf_counter() - t0) * 1000)

        result = parse_pairing(raw, candidates)
        logger.info(
            f"Sommelier: {len(result.recommendations)} recommendations for "
            f"'{dish}' from {len(candidates)} candidates in {elapsed_ms}ms"
        )
        return result
