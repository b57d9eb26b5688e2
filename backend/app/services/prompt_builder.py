"""
Prompts for wine enrichment and dish pairing.

Both builders are deterministic: the same input always yields the same
text. The pairing listing is 1-indexed and its order is the order the
parser resolves wineIndex against.
"""

from typing import Optional, Sequence

from ..config import Config
from ..models.enums import WineType
from ..models.wine import Wine

LEGAL_TYPES = " or ".join(f'"{t.value}"' for t in WineType)

ENRICHMENT_PROMPT = """You are a wine expert. Give information about the following wine:

Name: {name}
Year: {year}
{grapes_line}
Return the information in the following JSON format:
{{
  "grapes": "the grape variety or varieties",
  "country": "country of origin",
  "region": "region/appellation",
  "type": {legal_types},
  "bestBefore": "best drinking period (e.g. '2024-2030')",
  "tasteProfile": "short description of taste and aromas",
  "pairingAdvice": "recommended dishes to serve with it"
}}

Answer ONLY with the JSON, no extra text."""

PAIRING_PROMPT = """You are a sommelier. A user wants to know which wine from their cellar goes best with the following dish:

DISH: {dish}

AVAILABLE WINES IN THE CELLAR:
{listing}

Analyse which wines pair best with this dish. Give at most {max_recommendations} recommendations, ranked from best match to least good match.

Answer in the following JSON format:
{{
  "recommendations": [
    {{
      "wineIndex": 1,
      "reason": "Short explanation of why this wine pairs well",
      "score": 95
    }}
  ],
  "generalAdvice": "General advice about wine with this dish"
}}

The wineIndex must match the number in the list above (1-indexed).
The score is a number from 0-100 indicating how good the match is.

If no wine really fits, still give the best options with lower scores and explain why.

Answer ONLY with the JSON, no extra text."""


def build_enrichment_prompt(name: str, year: int, grapes: Optional[str] = None) -> str:
    """Instruction asking for the fixed enrichment JSON object."""
    grapes_line = f"Grapes: {grapes}\n" if grapes and grapes.strip() else ""
    return ENRICHMENT_PROMPT.format(
        name=name,
        year=year,
        grapes_line=grapes_line,
        legal_types=LEGAL_TYPES,
    )


def format_candidate_listing(candidates: Sequence[Wine]) -> str:
    """One numbered line per candidate; absent fields read "unknown"."""
    unknown = Config.UNKNOWN_PLACEHOLDER

    def field(value: Optional[str]) -> str:
        return value if value else unknown

    lines = []
    for index, wine in enumerate(candidates, start=1):
        wine_type = wine.wine_type.value if wine.wine_type else unknown
        lines.append(
            f"{index}. {wine.name} ({wine.year}) - {wine_type} - "
            f"{field(wine.country)}, {field(wine.region)} - "
            f"Taste: {field(wine.taste_profile)}"
        )
    return "\n".join(lines)


def build_pairing_prompt(dish: str, candidates: Sequence[Wine]) -> str:
    """Instruction asking for ranked recommendations over the listing."""
    return PAIRING_PROMPT.format(
        dish=dish,
        listing=format_candidate_listing(candidates),
        max_recommendations=Config.MAX_RECOMMENDATIONS,
    )


def as_messages(prompt: str) -> list[dict]:
    """Single user turn, the shape the completion API expects."""
    return [{"role": "user", "content": prompt}]
