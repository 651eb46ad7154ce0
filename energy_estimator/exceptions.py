"""Error hierarchy for the estimation pipeline.

Every error carries a ``message`` that is safe to show to the end user and a
short ``kind`` used by the HTTP layer and in metrics labels.
"""

from __future__ import annotations

from enum import Enum


class EstimatorError(Exception):
    """Base class for all errors raised by the estimator."""

    kind = "error"
    default_message = "Failed to fetch property information"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(EstimatorError):
    """Address query is empty or too short; raised before any network call."""

    kind = "validation"
    default_message = "Please enter a valid address or postal code"


class NotFoundError(EstimatorError):
    """The geocoding provider returned no candidates."""

    kind = "not_found"
    default_message = "Address not found. Please try a different address or postal code."


class InvalidDataError(EstimatorError):
    """The top geocoding candidate is missing a name or usable coordinates."""

    kind = "invalid_data"
    default_message = "Invalid location data received"


class TransportErrorKind(str, Enum):
    REMOTE = "remote"            # provider answered with an error status
    NO_RESPONSE = "no_response"  # connectivity / timeout
    LOCAL = "local"              # request never left the process


class TransportError(EstimatorError):
    """Network or HTTP failure talking to the geocoding provider."""

    kind = "transport"

    def __init__(
        self,
        cause: TransportErrorKind,
        status_code: int | None = None,
        reason: str | None = None,
    ):
        self.cause = cause
        self.status_code = status_code
        self.reason = reason
        super().__init__(self._describe())

    def _describe(self) -> str:
        if self.cause is TransportErrorKind.REMOTE:
            return f"Server error: {self.status_code} - {self.reason or 'Unknown'}"
        if self.cause is TransportErrorKind.NO_RESPONSE:
            return "No response received from the server. Please check your internet connection."
        return "Error validating address. Please try again."
