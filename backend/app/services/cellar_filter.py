"""
In-memory views over a list of wines: type filter, text search, stock.
"""

from typing import Optional, Sequence

from ..models.enums import WineType
from ..models.wine import Wine


def eligible_candidates(wines: Sequence[Wine]) -> list[Wine]:
    """Wines that can be poured: quantity greater than zero, order kept."""
    return [wine for wine in wines if wine.quantity > 0]


def _haystack(wine: Wine) -> list[str]:
    fields = [
        wine.name,
        str(wine.year),
        wine.grapes,
        wine.country,
        wine.region,
        wine.wine_type.value,
        wine.taste_profile,
        wine.pairing_advice,
        wine.notes,
    ]
    return [f.lower() for f in fields if f]


def filter_wines(
    wines: Sequence[Wine],
    wine_type: Optional[WineType] = None,
    search: str = "",
) -> list[Wine]:
    """
    Wines matching the type (if given) and containing the search text
    in any descriptive field (case-insensitive). Order is preserved.
    """
    needle = (search or "").strip().lower()
    results = []
    for wine in wines:
        if wine_type is not None and wine.wine_type != wine_type:
            continue
        if needle and not any(needle in text for text in _haystack(wine)):
            continue
        results.append(wine)
    return results
