from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .enums import ValidationCode


class CalendarError(RuntimeError):
    """Base class for calendar engine failures."""


class UnsupportedDateError(CalendarError, ValueError):
    """Raised when a date-like value cannot be resolved to a calendar date."""


class InvalidTimeError(CalendarError, ValueError):
    """Raised when a time-of-day string is not a zero-padded 24h ``HH:MM`` value."""


class EventNotFoundError(CalendarError, LookupError):
    """Raised when an event identifier does not resolve to a stored event."""


class EventValidationError(CalendarError, ValueError):
    """Raised before persistence when an event payload is rejected."""

    def __init__(self, code: "ValidationCode", reason: str) -> None:
        super().__init__(reason)
        self.code = code
        self.reason = reason


class QuotaExceededError(EventValidationError):
    """Raised when an owner already holds the maximum number of events."""


class DateOutOfRangeError(UnsupportedDateError):
    """Raised when a grid or upcoming window would run past the supported calendar years."""
