"""
Pydantic models for cellar entities.

Field names are snake_case in Python and camelCase on the wire
(presentation layer). Storage column names are owned by the schema
mapper, not by these models.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .enums import WineType

_OPTIONAL_TEXT_FIELDS = (
    "grapes",
    "country",
    "region",
    "drink_window",
    "taste_profile",
    "pairing_advice",
    "notes",
)


class CamelModel(BaseModel):
    """Base model serialised with camelCase aliases."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WineEnrichment(CamelModel):
    """Validated AI-derived metadata for a single wine."""
    grapes: Optional[str] = None
    country: Optional[str] = None
    region: Optional[str] = None
    wine_type: WineType = Field(WineType.RED, alias="type")
    drink_window: Optional[str] = None
    taste_profile: Optional[str] = None
    pairing_advice: Optional[str] = None


class WineDraft(CamelModel):
    """A wine without store-assigned identity (input to save)."""
    # User-entered core
    name: str = Field(..., description="Wine name")
    year: int = Field(..., description="Vintage year")
    grapes: Optional[str] = Field(None, description="Grape variety or blend")
    quantity: int = Field(1, ge=0, description="Bottles in stock")
    # AI-derived core
    country: Optional[str] = None
    region: Optional[str] = None
    wine_type: WineType = Field(WineType.RED, alias="type")
    drink_window: Optional[str] = Field(None, description="Best drinking period, e.g. '2025-2030'")
    taste_profile: Optional[str] = None
    pairing_advice: Optional[str] = None
    # User feedback
    notes: Optional[str] = None
    rating: Optional[int] = Field(None, ge=1, le=5, description="Star rating (1-5)")

    @field_validator("wine_type", mode="before")
    @classmethod
    def coerce_wine_type(cls, v):
        return WineType.coerce(v)

    @field_validator(*_OPTIONAL_TEXT_FIELDS, mode="before")
    @classmethod
    def blank_to_none(cls, v):
        """Empty text is the same as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def apply_enrichment(self, enrichment: WineEnrichment):
        """Return a copy with the AI core filled in. User-entered grapes win."""
        return self.model_copy(update={
            "grapes": self.grapes or enrichment.grapes,
            "country": enrichment.country,
            "region": enrichment.region,
            "wine_type": enrichment.wine_type,
            "drink_window": enrichment.drink_window,
            "taste_profile": enrichment.taste_profile,
            "pairing_advice": enrichment.pairing_advice,
        })

    def with_quantity_delta(self, delta: int):
        """Return a copy with quantity adjusted by delta, clamped at zero."""
        return self.model_copy(update={"quantity": max(0, self.quantity + delta)})


class Wine(WineDraft):
    """A persisted wine, including store-assigned identity and timestamp."""
    id: str = Field(..., description="Store-assigned identity")
    created_at: Optional[datetime] = Field(None, description="Assigned by the store, immutable")


class Recommendation(CamelModel):
    """A single pairing result. Not persisted."""
    wine: Wine
    reason: str = ""
    score: int = Field(0, description="Match score, 0-100 by convention")


class PairingResult(CamelModel):
    """Ranked recommendations for a dish, best first."""
    recommendations: list[Recommendation] = Field(default_factory=list)
    general_advice: str = ""
