from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from supabase import PostgrestAPIError

from ...domain import CalendarEvent, QuotaExceededError, ValidationCode
from ...domain.dates import end_of_day, month_bounds, start_of_day
from ..supabase import SupabaseGateway

logger = logging.getLogger(__name__)

QUOTA_ERROR_MARKER = "quota_exceeded"


def _bound(value: datetime) -> str:
    return value.isoformat(timespec="milliseconds")


@dataclass(slots=True)
class EventRepository:
    """Supabase-backed implementation of the ``EventScheduler`` read and write shapes."""

    gateway: SupabaseGateway
    table_name: str
    guarded_insert_fn: str = "create_calendar_event_guarded"

    def _table(self):
        return self.gateway.table(self.table_name)

    @staticmethod
    def _events(response: Any) -> List[CalendarEvent]:
        return [CalendarEvent.from_record(record) for record in response.data or []]

    def by_owner(self, owner_id: str) -> List[CalendarEvent]:
        response = (
            self._table()
            .select("*")
            .eq("ownerId", owner_id)
            .order("date", desc=False)
            .order("startTime", desc=False)
            .execute()
        )
        return self._events(response)

    def by_owner_and_day(self, owner_id: str, day: date) -> List[CalendarEvent]:
        response = (
            self._table()
            .select("*")
            .eq("ownerId", owner_id)
            .gte("date", _bound(start_of_day(day)))
            .lte("date", _bound(end_of_day(day)))
            .order("startTime", desc=False)
            .execute()
        )
        return self._events(response)

    def by_owner_and_month(self, owner_id: str, year: int, month: int) -> List[CalendarEvent]:
        start, end = month_bounds(year, month)
        response = (
            self._table()
            .select("*")
            .eq("ownerId", owner_id)
            .gte("date", _bound(start))
            .lte("date", _bound(end))
            .order("date", desc=False)
            .order("startTime", desc=False)
            .execute()
        )
        return self._events(response)

    def count_for_owner(self, owner_id: str) -> int:
        response = self._table().select("id", count="exact").eq("ownerId", owner_id).execute()
        if response.count is not None:
            return int(response.count)
        return len(response.data or [])

    def fetch(self, event_id: str) -> Optional[CalendarEvent]:
        response = self._table().select("*").eq("id", event_id).limit(1).execute()
        events = self._events(response)
        return events[0] if events else None

    def insert(self, event: CalendarEvent) -> CalendarEvent:
        payload = event.to_record()
        response = self._table().insert(payload).execute()
        records = response.data or [payload]
        return CalendarEvent.from_record(records[0])

    def insert_with_quota(self, event: CalendarEvent, max_events: int) -> CalendarEvent:
        payload = event.to_record()
        try:
            response = self.gateway.rpc(
                self.guarded_insert_fn,
                {"payload": payload, "max_events": max_events},
            ).execute()
        except PostgrestAPIError as exc:
            if QUOTA_ERROR_MARKER in str(exc.message or ""):
                raise QuotaExceededError(
                    ValidationCode.QUOTA_EXCEEDED,
                    f"Maximum limit of {max_events} events reached. "
                    "Please delete some events before creating a new one.",
                ) from exc
            raise
        data = response.data
        record = data[0] if isinstance(data, list) else data
        return CalendarEvent.from_record(record or payload)

    def update(self, event_id: str, changes: Dict[str, Any]) -> Optional[CalendarEvent]:
        response = self._table().update(changes).eq("id", event_id).execute()
        events = self._events(response)
        return events[0] if events else None

    def delete(self, event_id: str) -> bool:
        response = self._table().delete().eq("id", event_id).execute()
        deleted = response.data or []
        logger.debug("Deleted %d row(s) for event %s", len(deleted), event_id)
        return bool(deleted)
