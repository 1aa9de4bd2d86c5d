from __future__ import annotations

from typing import Any, Dict

from ..domain import CalendarDay, CalendarEvent, DayBucket
from .models import CalendarDayPayload, DayBucketPayload, EventPayload


def serialize_event(event: CalendarEvent) -> Dict[str, Any]:
    return EventPayload.from_domain(event).model_dump(by_alias=True)


def serialize_day(cell: CalendarDay) -> Dict[str, Any]:
    return CalendarDayPayload.from_domain(cell).model_dump(by_alias=True)


def serialize_bucket(bucket: DayBucket) -> Dict[str, Any]:
    return DayBucketPayload.from_domain(bucket).model_dump(by_alias=True)
