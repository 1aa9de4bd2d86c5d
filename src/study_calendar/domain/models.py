from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from .dates import DateLike, day_key, midnight, normalize


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat(timespec="milliseconds") if value else None


@dataclass(slots=True)
class CalendarEvent:
    owner_id: str
    date: datetime
    event_name: str
    start_time: str
    end_time: str
    description: str = ""
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def day(self) -> date:
        return self.date.date()

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "CalendarEvent":
        return cls(
            id=str(record["id"]) if record.get("id") is not None else None,
            owner_id=str(record["ownerId"]),
            date=midnight(record["date"]),
            event_name=str(record["eventName"]),
            start_time=str(record["startTime"]),
            end_time=str(record["endTime"]),
            description=record.get("description") or "",
            created_at=normalize(record["createdAt"]) if record.get("createdAt") else None,
            updated_at=normalize(record["updatedAt"]) if record.get("updatedAt") else None,
        )

    def to_record(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {
            "ownerId": self.owner_id,
            "date": _iso(midnight(self.date)),
            "eventName": self.event_name,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "description": self.description,
        }
        if self.id is not None:
            record["id"] = self.id
        return record


@dataclass(slots=True)
class EventDraft:
    """Caller-supplied fields for a new event; the owner comes from the session."""

    date: DateLike
    event_name: str
    start_time: str
    end_time: str
    description: str = ""

    def to_event(self, owner_id: str) -> CalendarEvent:
        return CalendarEvent(
            owner_id=owner_id,
            date=midnight(self.date),
            event_name=self.event_name,
            start_time=self.start_time,
            end_time=self.end_time,
            description=self.description,
        )


@dataclass(slots=True)
class EventPatch:
    """Partial update; ``None`` marks a field as absent from the payload."""

    date: Optional[DateLike] = None
    event_name: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    description: Optional[str] = None

    def is_empty(self) -> bool:
        return not self.to_record()

    def to_record(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {}
        if self.date is not None:
            record["date"] = _iso(midnight(self.date))
        if self.event_name is not None:
            record["eventName"] = self.event_name
        if self.start_time is not None:
            record["startTime"] = self.start_time
        if self.end_time is not None:
            record["endTime"] = self.end_time
        if self.description is not None:
            record["description"] = self.description
        return record


@dataclass(frozen=True, slots=True)
class CalendarDay:
    date: date
    is_current_month: bool
    is_today: bool
    is_selected: bool
    event_count: int


@dataclass(frozen=True, slots=True)
class ScheduledEvent:
    event: CalendarEvent
    is_past: bool


@dataclass(slots=True)
class DayBucket:
    day: date
    events: List[ScheduledEvent] = field(default_factory=list)

    @property
    def key(self) -> str:
        return day_key(self.day)
