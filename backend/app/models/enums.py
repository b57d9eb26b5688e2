"""
Enums for type-safe string constants in the Wine Cellar backend.
"""

import logging
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class WineType(str, Enum):
    """Closed set of wine styles a record may carry."""
    RED = "red"
    WHITE = "white"
    ROSE = "rosé"
    SPARKLING = "sparkling"

    @classmethod
    def coerce(cls, value: Any) -> "WineType":
        """
        Map any external value onto the enum, defaulting to RED.

        Accepts enum members, case-insensitive names, the unaccented
        "rose" and the Dutch values written by the old client.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            if key in _WINE_TYPE_ALIASES:
                return _WINE_TYPE_ALIASES[key]
        logger.warning(f"Unknown wine type {value!r}, falling back to {cls.RED.value}")
        return cls.RED


_WINE_TYPE_ALIASES: dict[str, WineType] = {
    "red": WineType.RED,
    "white": WineType.WHITE,
    "rosé": WineType.ROSE,
    "rose": WineType.ROSE,
    "sparkling": WineType.SPARKLING,
    # Legacy values stored by the Dutch client
    "rood": WineType.RED,
    "wit": WineType.WHITE,
    "bruisend": WineType.SPARKLING,
}


class ErrorCode(str, Enum):
    """Failure categories surfaced to callers."""
    UNAUTHENTICATED = "unauthenticated"
    MISSING_CREDENTIAL = "missing_credential"
    TRANSPORT_FAILURE = "transport_failure"
    NO_STRUCTURED_OUTPUT = "no_structured_output"
    MALFORMED_OUTPUT = "malformed_output"
    EMPTY_CANDIDATE_SET = "empty_candidate_set"
    NOT_FOUND = "not_found"
    WRITE_FAILED = "write_failed"
