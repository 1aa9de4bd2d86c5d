from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import datetime
from typing import List, Tuple

from ..domain import CalendarDay, CalendarEvent, DayBucket
from .aggregation import events_in_month, events_on_day, group_upcoming, sort_by_date_then_time
from .grid import CalendarCursor, build_grid


@dataclass(frozen=True)
class CalendarSnapshot:
    """Every derived calendar view as a function of one set of explicit inputs.

    Callers rebuild the snapshot whenever the event feed, the cursor, or the
    clock moves on; nothing here is cached between snapshots.
    """

    events: Tuple[CalendarEvent, ...]
    cursor: CalendarCursor
    now: datetime
    week_start: int = calendar.SUNDAY

    def grid(self) -> List[CalendarDay]:
        return build_grid(
            self.cursor.month,
            self.events,
            self.now,
            self.cursor.selected,
            week_start=self.week_start,
        )

    def ordered(self) -> List[CalendarEvent]:
        return sort_by_date_then_time(self.events)

    def month_events(self) -> List[CalendarEvent]:
        return events_in_month(self.events, self.cursor.month.year, self.cursor.month.month)

    def selected_day_events(self) -> List[CalendarEvent]:
        if self.cursor.selected is None:
            return []
        return events_on_day(self.events, self.cursor.selected)

    def upcoming(self, days: int = 7, hide_past: bool = False) -> List[DayBucket]:
        return group_upcoming(self.events, self.now, days=days, hide_past=hide_past)
