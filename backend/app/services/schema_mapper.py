"""
Translation between Wine entities and rows of the remote `wines` table.

FIELD_MAP is the only place that knows storage column names. Both
directions are total: to_storage writes unset optionals as explicit
nulls, from_storage turns null/missing/blank values back into unset and
coerces anything it cannot represent instead of failing.
"""

import logging
from datetime import datetime
from typing import Any, Mapping, Optional

from ..models.enums import WineType
from ..models.wine import Wine, WineDraft

logger = logging.getLogger(__name__)

OWNER_COLUMN = "user_id"
ID_COLUMN = "id"
CREATED_AT_COLUMN = "created_at"

# Entity field -> storage column, for every mutable field
FIELD_MAP: dict[str, str] = {
    "name": "name",
    "year": "year",
    "grapes": "grapes",
    "quantity": "quantity",
    "country": "country",
    "region": "region",
    "wine_type": "type",
    "drink_window": "best_before",
    "taste_profile": "taste_profile",
    "pairing_advice": "pairing_advice",
    "notes": "notes",
    "rating": "rating",
}

_TEXT_FIELDS = {"grapes", "country", "region", "drink_window", "taste_profile", "pairing_advice", "notes"}


def to_update_values(entity: WineDraft) -> dict[str, Any]:
    """Full set of mutable columns for an update. Unset optionals become None."""
    values: dict[str, Any] = {}
    for field_name, column in FIELD_MAP.items():
        value = getattr(entity, field_name)
        if field_name == "wine_type":
            value = WineType.coerce(value).value
        elif field_name in _TEXT_FIELDS:
            value = value or None
        elif field_name == "rating":
            value = value or None
        values[column] = value
    return values


def to_storage(entity: WineDraft, owner_id: str) -> dict[str, Any]:
    """Storage row for an entity owned by owner_id.

    Identity columns are included only when the entity already has them.
    """
    row: dict[str, Any] = {OWNER_COLUMN: owner_id}
    row.update(to_update_values(entity))
    if isinstance(entity, Wine):
        row[ID_COLUMN] = entity.id
        row[CREATED_AT_COLUMN] = entity.created_at.isoformat() if entity.created_at else None
    return row


def from_storage(row: Mapping[str, Any]) -> Wine:
    """Entity for a storage row. Never raises on bad column values."""

    def col(field_name: str) -> Any:
        return row.get(FIELD_MAP[field_name])

    return Wine(
        id=_to_text(row.get(ID_COLUMN)) or "",
        created_at=_to_datetime(row.get(CREATED_AT_COLUMN)),
        name=_to_text(col("name")) or "",
        year=_to_int(col("year")) or 0,
        grapes=_to_text(col("grapes")),
        quantity=max(0, _to_int(col("quantity")) or 0),
        country=_to_text(col("country")),
        region=_to_text(col("region")),
        wine_type=WineType.coerce(col("wine_type")),
        drink_window=_to_text(col("drink_window")),
        taste_profile=_to_text(col("taste_profile")),
        pairing_advice=_to_text(col("pairing_advice")),
        notes=_to_text(col("notes")),
        rating=_to_rating(col("rating")),
    )


def _to_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = value if isinstance(value, str) else str(value)
    return text if text.strip() else None


def _to_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _to_rating(value: Any) -> Optional[int]:
    rating = _to_int(value)
    if rating is None or not 1 <= rating <= 5:
        return None
    return rating


def _to_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.warning(f"Unparsable created_at {value!r}")
        return None
