"""Ordering, past/future status, and day grouping of calendar events."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List

from ..domain import CalendarEvent, DateOutOfRangeError, DayBucket, ScheduledEvent
from ..domain.dates import DateLike, minutes_since_midnight, normalize, parse_clock, to_day


def _time_key(event: CalendarEvent) -> int:
    return minutes_since_midnight(event.start_time)


def _date_time_key(event: CalendarEvent) -> tuple[date, int]:
    return to_day(event.date), minutes_since_midnight(event.start_time)


def sort_by_time(events: Iterable[CalendarEvent], *, descending: bool = False) -> List[CalendarEvent]:
    # sorted() keeps equal keys in input order, reverse=True included.
    return sorted(events, key=_time_key, reverse=descending)


def sort_for_day(events: Iterable[CalendarEvent]) -> List[CalendarEvent]:
    return sort_by_time(events)


def sort_for_list(events: Iterable[CalendarEvent]) -> List[CalendarEvent]:
    return sort_by_time(events)


def sort_by_date_then_time(events: Iterable[CalendarEvent], *, descending: bool = False) -> List[CalendarEvent]:
    """Canonical listing order: calendar day first, then start time."""

    return sorted(events, key=_date_time_key, reverse=descending)


def end_instant(event: CalendarEvent) -> datetime:
    return datetime.combine(to_day(event.date), parse_clock(event.end_time))


def is_past(event: CalendarEvent, now: DateLike) -> bool:
    return end_instant(event) < normalize(now)


def annotate(events: Iterable[CalendarEvent], now: DateLike) -> List[ScheduledEvent]:
    reference = normalize(now)
    return [ScheduledEvent(event=event, is_past=is_past(event, reference)) for event in events]


def events_on_day(events: Iterable[CalendarEvent], day: DateLike) -> List[CalendarEvent]:
    target = to_day(day)
    return sort_for_day(event for event in events if to_day(event.date) == target)


def events_in_month(events: Iterable[CalendarEvent], year: int, month: int) -> List[CalendarEvent]:
    selected = []
    for event in events:
        day = to_day(event.date)
        if day.year == year and day.month == month:
            selected.append(event)
    return sort_by_date_then_time(selected)


def group_upcoming(
    events: Iterable[CalendarEvent],
    now: DateLike,
    days: int = 7,
    hide_past: bool = False,
) -> List[DayBucket]:
    """Group events from today through ``days`` days ahead into per-day buckets.

    The window is ``[today 00:00, today + days)``. Buckets are ordered by day
    and their events by start time. With ``hide_past`` set, finished events
    are dropped along with any bucket they leave empty.
    """

    reference = normalize(now)
    window_start = reference.date()
    try:
        window_end = window_start + timedelta(days=days)
    except OverflowError as exc:
        raise DateOutOfRangeError(f"An upcoming window of {days} days runs outside the calendar.") from exc

    grouped: Dict[date, List[CalendarEvent]] = {}
    for event in events:
        day = to_day(event.date)
        if window_start <= day < window_end:
            grouped.setdefault(day, []).append(event)

    buckets: List[DayBucket] = []
    for day in sorted(grouped):
        scheduled = annotate(sort_for_day(grouped[day]), reference)
        if hide_past:
            scheduled = [item for item in scheduled if not item.is_past]
            if not scheduled:
                continue
        buckets.append(DayBucket(day=day, events=scheduled))
    return buckets


def format_time_12h(value: str) -> str:
    parsed = parse_clock(value)
    period = "PM" if parsed.hour >= 12 else "AM"
    display_hour = parsed.hour % 12 or 12
    return f"{display_hour}:{parsed.minute:02d} {period}"
