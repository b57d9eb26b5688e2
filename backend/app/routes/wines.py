"""
/wines endpoints: list, save, update, delete and stock adjustments.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import Field

from ..models.enums import WineType
from ..models.wine import CamelModel, Wine, WineDraft
from ..services.cellar import CellarService, get_cellar_service
from ..services.cellar_filter import filter_wines
from .responses import ErrorBody, error_body, error_response

logger = logging.getLogger(__name__)
router = APIRouter()


# === Models ===


class WineListResponse(CamelModel):
    """Cellar listing. `error` is set when the list could not be loaded."""
    wines: list[Wine] = Field(default_factory=list)
    error: Optional[ErrorBody] = None


class QuantityRequest(CamelModel):
    """Bottles to add (positive) or remove (negative)."""
    wine: Wine
    delta: int


# === Routes ===


@router.get("/wines", response_model=WineListResponse)
async def list_wines(
    wine_type: Optional[WineType] = Query(None, alias="type", description="Only wines of this type"),
    q: str = Query("", description="Search across descriptive fields"),
    service: CellarService = Depends(get_cellar_service),
):
    """List the owner's wines, newest first.

    A failed load answers 200 with an empty list and the error attached,
    so clients can tell "could not load" from "empty cellar".
    """
    result = await service.list_wines()
    wines = filter_wines(result.value or [], wine_type=wine_type, search=q)
    return WineListResponse(
        wines=wines,
        error=error_body(result.error) if result.error else None,
    )


@router.post("/wines", response_model=Wine, status_code=201)
async def save_wine(draft: WineDraft, service: CellarService = Depends(get_cellar_service)):
    """Save a wine as entered."""
    result = await service.save_wine(draft)
    if not result.ok:
        return error_response(result.error)
    return result.value


@router.post("/wines/enriched", response_model=Wine, status_code=201)
async def save_enriched_wine(draft: WineDraft, service: CellarService = Depends(get_cellar_service)):
    """Enrich a wine with AI metadata, then save it."""
    result = await service.add_wine_with_enrichment(draft)
    if not result.ok:
        return error_response(result.error)
    return result.value


@router.put("/wines/{wine_id}", response_model=Wine)
async def update_wine(
    wine_id: str,
    wine: Wine,
    service: CellarService = Depends(get_cellar_service),
):
    """Replace every mutable field of a wine."""
    result = await service.update_wine(wine.model_copy(update={"id": wine_id}))
    if not result.ok:
        return error_response(result.error)
    return result.value


@router.delete("/wines/{wine_id}", status_code=204)
async def delete_wine(wine_id: str, service: CellarService = Depends(get_cellar_service)):
    """Delete a wine. Deleting a wine that is already gone succeeds."""
    result = await service.delete_wine(wine_id)
    if not result.ok:
        return error_response(result.error)
    return None


@router.post("/wines/{wine_id}/quantity", response_model=Wine)
async def adjust_quantity(
    wine_id: str,
    request: QuantityRequest,
    service: CellarService = Depends(get_cellar_service),
):
    """Add or remove bottles. Stock never drops below zero."""
    wine = request.wine.model_copy(update={"id": wine_id})
    result = await service.adjust_quantity(wine, request.delta)
    if not result.ok:
        return error_response(result.error)
    return result.value
