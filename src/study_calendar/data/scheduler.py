"""Read and write shapes the calendar requires from its persistence backend."""

from __future__ import annotations

from datetime import date
from typing import List, Optional, Protocol

from ..domain import CalendarEvent


class EventScheduler(Protocol):
    def by_owner(self, owner_id: str) -> List[CalendarEvent]:
        """All events of ``owner_id`` ordered by (date, startTime)."""

    def by_owner_and_day(self, owner_id: str, day: date) -> List[CalendarEvent]:
        """Events within ``[day 00:00:00.000, day 23:59:59.999]`` ordered by startTime."""

    def by_owner_and_month(self, owner_id: str, year: int, month: int) -> List[CalendarEvent]:
        """Events within the inclusive month range ordered by (date, startTime)."""

    def count_for_owner(self, owner_id: str) -> int: ...

    def fetch(self, event_id: str) -> Optional[CalendarEvent]: ...

    def insert(self, event: CalendarEvent) -> CalendarEvent: ...

    def insert_with_quota(self, event: CalendarEvent, max_events: int) -> CalendarEvent:
        """Insert only if the owner holds fewer than ``max_events``, atomically."""

    def update(self, event_id: str, changes: dict) -> Optional[CalendarEvent]: ...

    def delete(self, event_id: str) -> bool: ...
