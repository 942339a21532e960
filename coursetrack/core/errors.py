"""Error taxonomy for the tracking core.

InvalidInputError     client error, rejected before any computation
StoreUnavailableError the event store could not be reached; retryable

A duplicate activity is not an error: it is reported as a successful
append with ``duplicate=True``.
"""

from __future__ import annotations


class TrackingError(Exception):
    """Base tracking error."""

    def __init__(self, message: str, code: str = "tracking_error") -> None:
        self.message = message
        self.code = code
        super().__init__(message)


class InvalidInputError(TrackingError):
    """Missing or malformed identifier / activity type."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, "invalid_input")
        self.field = field


class StoreUnavailableError(TrackingError):
    """The backing store is unreachable.  Nothing was written."""

    def __init__(self, message: str = "event store unavailable") -> None:
        super().__init__(message, "store_unavailable")
