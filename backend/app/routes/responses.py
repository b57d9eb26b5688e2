"""
Shared HTTP error rendering for cellar routes.
"""

from typing import Optional

from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import Config
from ..errors import CellarError
from ..messages import error_message
from ..models.enums import ErrorCode

STATUS_CODES: dict[ErrorCode, int] = {
    ErrorCode.UNAUTHENTICATED: 401,
    ErrorCode.MISSING_CREDENTIAL: 428,
    ErrorCode.EMPTY_CANDIDATE_SET: 422,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.NO_STRUCTURED_OUTPUT: 502,
    ErrorCode.MALFORMED_OUTPUT: 502,
    ErrorCode.TRANSPORT_FAILURE: 502,
    ErrorCode.WRITE_FAILED: 500,
}


class ErrorBody(BaseModel):
    """One-line failure shown to the user."""
    error: str
    message: str


def error_body(error: CellarError, locale: Optional[str] = None) -> ErrorBody:
    return ErrorBody(
        error=error.code.value,
        message=error_message(error, locale or Config.locale()),
    )


def error_response(error: CellarError, locale: Optional[str] = None) -> JSONResponse:
    """JSON error response with the status mapped from the error code."""
    return JSONResponse(
        status_code=STATUS_CODES.get(error.code, 500),
        content=error_body(error, locale).model_dump(),
    )
