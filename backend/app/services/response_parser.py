"""
Parsing and validation of free-form model output.

Model output is untrusted. The only hard failures are the absence of a
JSON object (NoStructuredOutput) and JSON that cannot be decoded or has
an unusable top-level shape (MalformedOutput). Everything inside a
usable payload degrades instead: bad enum values are coerced, missing
text is left unset, unresolvable recommendations are dropped.
"""

import json
import logging
from typing import Any, Optional, Sequence

from ..config import Config
from ..errors import MalformedOutput, NoStructuredOutput
from ..models.enums import WineType
from ..models.wine import PairingResult, Recommendation, Wine, WineEnrichment

logger = logging.getLogger(__name__)

_decoder = json.JSONDecoder()


def extract_json_object(response_text: str) -> dict:
    """
    Decode the first JSON object embedded in the text.

    Prose and markdown fences around the object are ignored. A "{" that
    does not decode is skipped together with everything up to its
    matching "}", so a stray brace in leading prose does not hide the
    real payload, while a nested object of a broken payload is never
    mistaken for the answer.

    Raises:
        NoStructuredOutput: no "{...}" substring at all
        MalformedOutput: braces present but no decodable object
    """
    text = response_text or ""
    start = text.find("{")
    if start == -1 or text.rfind("}") < start:
        raise NoStructuredOutput("No JSON found in answer")

    while start != -1:
        try:
            data, _ = _decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            end = _matching_brace(text, start)
            if end is None:
                # Unclosed: every later brace is inside the broken object
                break
            start = text.find("{", end + 1)
            continue
        if isinstance(data, dict):
            return data
        start = text.find("{", start + 1)

    logger.debug(f"Undecodable model output: {text[:500]}")
    raise MalformedOutput("Could not decode JSON in answer")


def _matching_brace(text: str, start: int) -> Optional[int]:
    """Index of the "}" closing the "{" at start, skipping string literals."""
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        char = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return i
    return None


def parse_enrichment(response_text: str) -> WineEnrichment:
    """Validated enrichment. An illegal or missing type becomes red."""
    data = extract_json_object(response_text)

    raw_type = data.get("type")
    if raw_type is None:
        wine_type = WineType.RED
    else:
        wine_type = WineType.coerce(raw_type)

    return WineEnrichment(
        grapes=_text(data.get("grapes")),
        country=_text(data.get("country")),
        region=_text(data.get("region")),
        wine_type=wine_type,
        drink_window=_text(data.get("bestBefore")),
        taste_profile=_text(data.get("tasteProfile")),
        pairing_advice=_text(data.get("pairingAdvice")),
    )


def parse_pairing(response_text: str, candidates: Sequence[Wine]) -> PairingResult:
    """
    Resolve 1-based wineIndex references against the candidate listing.

    Out-of-range, zero, non-integer and repeated indices are dropped.
    At most Config.MAX_RECOMMENDATIONS are kept, in the model's order.
    """
    data = extract_json_object(response_text)

    raw_recommendations = data.get("recommendations")
    if not isinstance(raw_recommendations, list):
        raise MalformedOutput("Answer has no recommendations list")

    recommendations: list[Recommendation] = []
    seen: set[int] = set()
    for item in raw_recommendations:
        if not isinstance(item, dict):
            logger.warning(f"Dropping non-object recommendation {item!r}")
            continue

        index = _index(item.get("wineIndex"))
        if index is None or not 1 <= index <= len(candidates):
            logger.warning(f"Dropping recommendation with wineIndex {item.get('wineIndex')!r}")
            continue
        if index in seen:
            logger.warning(f"Dropping duplicate recommendation for wineIndex {index}")
            continue
        seen.add(index)

        recommendations.append(Recommendation(
            wine=candidates[index - 1],
            reason=_text(item.get("reason")) or "",
            score=_score(item.get("score")),
        ))
        if len(recommendations) >= Config.MAX_RECOMMENDATIONS:
            break

    return PairingResult(
        recommendations=recommendations,
        general_advice=_text(data.get("generalAdvice")) or "",
    )


def _text(value: Any) -> Optional[str]:
    """Strings pass through, numbers are stringified, anything else is unset."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _index(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        # isdigit() also accepts superscripts that int() rejects
        if text.isascii() and text.isdigit():
            return int(text)
    return None


def _score(value: Any) -> int:
    """Integer score clamped to 0-100; non-numeric scores count as 0."""
    if isinstance(value, bool):
        return 0
    try:
        score = int(round(float(value)))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(0, min(100, score))
