from typing import Optional

from fastapi import status


class BridgeGenerationError(Exception):
    """Base class for failures the bridge reports to the caller.

    Each subclass fixes the HTTP status and the user-facing message; ``details``
    holds diagnostics that are only returned outside production.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Failed to generate video. Please try again."

    def __init__(self, message: Optional[str] = None, details: Optional[str] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class InvalidRequest(BridgeGenerationError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Missing prompt or API key"


class InvalidCredential(BridgeGenerationError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid API key. Please check your Google AI API key."


class QuotaExceeded(BridgeGenerationError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = "API quota exceeded. Please check your usage limits."


class EmptyResponse(BridgeGenerationError):
    default_message = "No video data returned from API"


class UnrecognizedResponse(EmptyResponse):
    """The first part exists but carries none of the known video fields."""

    default_message = "Unrecognized video data returned from API"


class UnknownGenerationFailure(BridgeGenerationError):
    pass


# Substring checks are case-sensitive and run in this order.
UPSTREAM_ERROR_MARKERS = (
    ("API key", InvalidCredential),
    ("quota", QuotaExceeded),
)


def classify_upstream_error(error: Exception, details: Optional[str] = None) -> BridgeGenerationError:
    """Maps an exception raised during generation onto the bridge taxonomy."""
    message = str(error)
    for marker, error_cls in UPSTREAM_ERROR_MARKERS:
        if marker in message:
            # 401 and 429 bodies carry only the user message
            return error_cls()

    if isinstance(error, BridgeGenerationError):
        if details and not error.details:
            error.details = details
        return error

    return UnknownGenerationFailure(message or None, details=details)
