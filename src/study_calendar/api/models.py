from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain import CalendarDay, CalendarEvent, DayBucket, ScheduledEvent
from ..engine import format_time_12h


class EventPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(default=None)
    owner_id: str = Field(alias="ownerId")
    date: str
    event_name: str = Field(alias="eventName")
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    description: str = Field(default="")
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")

    @classmethod
    def from_domain(cls, event: CalendarEvent) -> "EventPayload":
        return cls(
            id=event.id,
            owner_id=event.owner_id,
            date=event.day.isoformat(),
            event_name=event.event_name,
            start_time=event.start_time,
            end_time=event.end_time,
            description=event.description,
            created_at=_iso(event.created_at),
            updated_at=_iso(event.updated_at),
        )


class ScheduledEventPayload(EventPayload):
    is_past: bool = Field(alias="isPast")
    time_label: str = Field(alias="timeLabel")

    @classmethod
    def from_scheduled(cls, item: ScheduledEvent) -> "ScheduledEventPayload":
        base = EventPayload.from_domain(item.event).model_dump()
        event = item.event
        return cls(
            **base,
            is_past=item.is_past,
            time_label=f"{format_time_12h(event.start_time)} - {format_time_12h(event.end_time)}",
        )


class DayBucketPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    day: str
    events: List[ScheduledEventPayload] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, bucket: DayBucket) -> "DayBucketPayload":
        return cls(day=bucket.key, events=[ScheduledEventPayload.from_scheduled(item) for item in bucket.events])


class CalendarDayPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date: str
    is_current_month: bool = Field(alias="isCurrentMonth")
    is_today: bool = Field(alias="isToday")
    is_selected: bool = Field(alias="isSelected")
    event_count: int = Field(alias="eventCount")

    @classmethod
    def from_domain(cls, cell: CalendarDay) -> "CalendarDayPayload":
        return cls(
            date=cell.date.isoformat(),
            is_current_month=cell.is_current_month,
            is_today=cell.is_today,
            is_selected=cell.is_selected,
            event_count=cell.event_count,
        )


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None
