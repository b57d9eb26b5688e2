"""
/enrich and /pairing endpoints.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import Field

from ..feature_flags import FeatureFlags, get_feature_flags
from ..models.wine import CamelModel, PairingResult, Wine, WineEnrichment
from ..services.cellar import CellarService, get_cellar_service
from .responses import error_response

logger = logging.getLogger(__name__)
router = APIRouter()


# === Models ===


class EnrichRequest(CamelModel):
    """Minimal user input for an enrichment lookup."""
    name: str = Field(..., min_length=1)
    year: int
    grapes: Optional[str] = None


class PairingRequest(CamelModel):
    """A dish and, optionally, the wines to choose from.

    Without `wines` the whole cellar is considered. Out-of-stock wines
    are never offered either way.
    """
    dish: str = Field(..., min_length=1)
    wines: Optional[list[Wine]] = None


# === Routes ===


@router.post("/enrich", response_model=WineEnrichment)
async def enrich_wine(
    request: EnrichRequest,
    service: CellarService = Depends(get_cellar_service),
    flags: FeatureFlags = Depends(get_feature_flags),
):
    """Look up AI metadata for a wine without saving anything."""
    if not flags.feature_enrichment:
        raise HTTPException(status_code=404, detail="Enrichment is disabled")

    result = await service.enrich_wine(request.name, request.year, request.grapes)
    if not result.ok:
        return error_response(result.error)
    return result.value


@router.post("/pairing", response_model=PairingResult)
async def pair_dish(
    request: PairingRequest,
    service: CellarService = Depends(get_cellar_service),
    flags: FeatureFlags = Depends(get_feature_flags),
):
    """Rank in-stock wines for a dish, best first."""
    if not flags.feature_pairing:
        raise HTTPException(status_code=404, detail="Pairing is disabled")

    wines = request.wines
    if wines is None:
        listed = await service.list_wines()
        if not listed.ok:
            return error_response(listed.error)
        wines = listed.value

    result = await service.pair_dish_with_cellar(request.dish, wines)
    if not result.ok:
        return error_response(result.error)
    return result.value
