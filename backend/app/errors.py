"""
Domain exceptions for the Wine Cellar backend.

Raised inside the services and converted into a Result at the
CellarService boundary, so presentation code never sees them.
"""

from typing import Optional

from .models.enums import ErrorCode

__all__ = [
    "CellarError",
    "Unauthenticated",
    "MissingCredential",
    "TransportFailure",
    "NoStructuredOutput",
    "MalformedOutput",
    "EmptyCandidateSet",
    "NotFound",
    "WriteFailed",
]


class CellarError(Exception):
    """Base class carrying an ErrorCode and a human-readable summary."""

    code: ErrorCode = ErrorCode.TRANSPORT_FAILURE

    def __init__(self, message: str = "", detail: Optional[str] = None):
        super().__init__(message or self.code.value)
        self.message = message or self.code.value
        # Verbatim upstream message (e.g. the completion provider's error text)
        self.detail = detail


class Unauthenticated(CellarError):
    """No resolvable owner for a store operation."""
    code = ErrorCode.UNAUTHENTICATED


class MissingCredential(CellarError):
    """No completion API key cached."""
    code = ErrorCode.MISSING_CREDENTIAL


class TransportFailure(CellarError):
    """Network or HTTP-layer failure talking to the store or the completion API."""
    code = ErrorCode.TRANSPORT_FAILURE

    def __init__(
        self,
        message: str = "",
        detail: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, detail)
        self.status_code = status_code


class NoStructuredOutput(CellarError):
    """Model output contained no JSON object."""
    code = ErrorCode.NO_STRUCTURED_OUTPUT


class MalformedOutput(CellarError):
    """JSON was found but could not be parsed or had an unusable shape."""
    code = ErrorCode.MALFORMED_OUTPUT


class EmptyCandidateSet(CellarError):
    """Pairing requested without any in-stock wine."""
    code = ErrorCode.EMPTY_CANDIDATE_SET


class NotFound(CellarError):
    """The store matched no row for the given identity."""
    code = ErrorCode.NOT_FOUND


class WriteFailed(CellarError):
    """The store rejected a write."""
    code = ErrorCode.WRITE_FAILED
