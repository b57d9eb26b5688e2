"""
/session and /settings/api-key endpoints.

The presentation layer signs in against Supabase auth itself and hands
the access token over here. The API key is never echoed back in full.
"""

import logging

from fastapi import APIRouter, Depends
from pydantic import Field, field_validator

from ..models.wine import CamelModel
from ..services.api_key_cache import mask_key
from ..services.cellar import CellarService, get_cellar_service
from .responses import error_response

logger = logging.getLogger(__name__)
router = APIRouter()


# === Models ===


class SessionRequest(CamelModel):
    access_token: str = Field(..., min_length=1)


class SessionResponse(CamelModel):
    user_id: str
    has_api_key: bool


class ApiKeyRequest(CamelModel):
    api_key: str = Field(..., min_length=1)

    @field_validator("api_key")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("API key must not be blank")
        return v


class ApiKeyStatus(CamelModel):
    configured: bool
    masked_key: str = ""


# === Routes ===


@router.post("/session", response_model=SessionResponse)
async def start_session(request: SessionRequest, service: CellarService = Depends(get_cellar_service)):
    """Adopt a sign-in token and load the user's API key."""
    result = await service.start_session(request.access_token)
    if not result.ok:
        return error_response(result.error)
    return SessionResponse(user_id=result.value, has_api_key=service.get_cached_key() is not None)


@router.delete("/session", status_code=204)
async def end_session(service: CellarService = Depends(get_cellar_service)):
    """Logout. The stored API key is kept for the next sign-in."""
    service.end_session()
    return None


@router.get("/settings/api-key", response_model=ApiKeyStatus)
async def get_api_key_status(service: CellarService = Depends(get_cellar_service)):
    key = service.get_cached_key()
    return ApiKeyStatus(configured=bool(key), masked_key=mask_key(key))


@router.put("/settings/api-key", response_model=ApiKeyStatus)
async def set_api_key(request: ApiKeyRequest, service: CellarService = Depends(get_cellar_service)):
    """Cache the key immediately; it is saved to user settings in the background."""
    result = service.set_key(request.api_key)
    if not result.ok:
        return error_response(result.error)
    key = service.get_cached_key()
    return ApiKeyStatus(configured=bool(key), masked_key=mask_key(key))
