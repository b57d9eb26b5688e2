"""
One-line user-facing error messages, per locale.
"""

from typing import Optional

from .errors import CellarError
from .models.enums import ErrorCode

DEFAULT_LOCALE = "en"

ERROR_MESSAGES: dict[str, dict[ErrorCode, str]] = {
    "en": {
        ErrorCode.UNAUTHENTICATED: "Please sign in to manage your cellar.",
        ErrorCode.MISSING_CREDENTIAL: "No OpenAI API key has been set.",
        ErrorCode.TRANSPORT_FAILURE: "Could not reach the server. Please try again.",
        ErrorCode.NO_STRUCTURED_OUTPUT: "The AI answer contained no usable information.",
        ErrorCode.MALFORMED_OUTPUT: "The AI answer could not be processed.",
        ErrorCode.EMPTY_CANDIDATE_SET: "You have no wines in stock to pair with.",
        ErrorCode.NOT_FOUND: "This wine no longer exists.",
        ErrorCode.WRITE_FAILED: "Could not save your changes.",
    },
    "nl": {
        ErrorCode.UNAUTHENTICATED: "Log in om je wijnkelder te beheren.",
        ErrorCode.MISSING_CREDENTIAL: "Geen OpenAI API key ingesteld.",
        ErrorCode.TRANSPORT_FAILURE: "Kon de server niet bereiken. Probeer het opnieuw.",
        ErrorCode.NO_STRUCTURED_OUTPUT: "Geen JSON gevonden in het antwoord.",
        ErrorCode.MALFORMED_OUTPUT: "Kon het antwoord niet verwerken.",
        ErrorCode.EMPTY_CANDIDATE_SET: "Je hebt nog geen wijnen in je kelder.",
        ErrorCode.NOT_FOUND: "Deze wijn bestaat niet meer.",
        ErrorCode.WRITE_FAILED: "Kon wijn niet opslaan.",
    },
}


def error_message(error: CellarError, locale: Optional[str] = None) -> str:
    """
    Render a one-line message for an error.

    An upstream message carried verbatim (e.g. from the completion
    provider) takes precedence over the canned text.
    """
    if error.detail:
        return error.detail
    table = ERROR_MESSAGES.get((locale or DEFAULT_LOCALE).lower(), ERROR_MESSAGES[DEFAULT_LOCALE])
    return table.get(error.code, error.message)
