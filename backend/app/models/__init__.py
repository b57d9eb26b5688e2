from .enums import (
    WineType,
    ErrorCode,
)
from .wine import (
    WineDraft,
    Wine,
    WineEnrichment,
    Recommendation,
    PairingResult,
)

__all__ = [
    "WineType",
    "ErrorCode",
    "WineDraft",
    "Wine",
    "WineEnrichment",
    "Recommendation",
    "PairingResult",
]
