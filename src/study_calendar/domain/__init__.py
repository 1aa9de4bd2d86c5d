"""Domain models for the study calendar."""

from __future__ import annotations

from .enums import ValidationCode
from .errors import (
    CalendarError,
    DateOutOfRangeError,
    EventNotFoundError,
    EventValidationError,
    InvalidTimeError,
    QuotaExceededError,
    UnsupportedDateError,
)
from .models import CalendarDay, CalendarEvent, DayBucket, EventDraft, EventPatch, ScheduledEvent

__all__ = [
    "CalendarDay",
    "CalendarError",
    "DateOutOfRangeError",
    "CalendarEvent",
    "DayBucket",
    "EventDraft",
    "EventNotFoundError",
    "EventPatch",
    "EventValidationError",
    "InvalidTimeError",
    "QuotaExceededError",
    "ScheduledEvent",
    "UnsupportedDateError",
    "ValidationCode",
]
