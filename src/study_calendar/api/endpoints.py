from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional

from ..domain import EventDraft, EventNotFoundError, EventPatch
from ..engine import CalendarCursor, annotate, month_label, sort_by_date_then_time, weekday_labels
from .registry import register_api
from .serializers import serialize_bucket, serialize_day, serialize_event
from .state import api_state


def _require_session() -> None:
    if not api_state.context.gateway.is_ready():
        raise RuntimeError("Supabase session is not initialized. Authenticate before calling API functions.")


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:  # noqa: TRY003
        raise ValueError(f"Invalid ISO date: {value}") from exc


@register_api(
    "calendar_month_grid",
    description="Return the 42-cell month grid with per-day event counts.",
    category="calendar",
    tags=("read", "grid"),
)
def calendar_month_grid(year: int, month: int, selected: Optional[str] = None) -> Dict[str, Any]:
    _require_session()
    cursor = CalendarCursor(month=date(year, month, 1), selected=_parse_date(selected) if selected else None)
    snapshot = api_state.calendar.snapshot(api_state.calendar.events_for_owner(), cursor)
    return {
        "label": month_label(cursor.month),
        "weekdays": weekday_labels(snapshot.week_start),
        "days": [serialize_day(cell) for cell in snapshot.grid()],
    }


@register_api(
    "calendar_list_events",
    description="Return all events of the current user ordered by date, then start time.",
    category="calendar",
    tags=("read",),
)
def calendar_list_events(descending: bool = False) -> Dict[str, Any]:
    _require_session()
    events = sort_by_date_then_time(api_state.calendar.events_for_owner(), descending=descending)
    return {"events": [serialize_event(event) for event in events]}


@register_api(
    "calendar_day_events",
    description="Return the events of one day ordered by start time, flagged when already over.",
    category="calendar",
    tags=("read", "day"),
)
def calendar_day_events(day: str) -> Dict[str, Any]:
    _require_session()
    target = _parse_date(day)
    events = api_state.calendar.events_for_day(target)
    scheduled = annotate(events, api_state.context.clock())
    return {
        "day": target.isoformat(),
        "events": [{**serialize_event(item.event), "isPast": item.is_past} for item in scheduled],
    }


@register_api(
    "calendar_upcoming",
    description="Group the events of the next days into per-day buckets.",
    category="calendar",
    tags=("read", "upcoming"),
)
def calendar_upcoming(days: Optional[int] = None, hide_past: bool = False) -> Dict[str, Any]:
    _require_session()
    buckets = api_state.calendar.upcoming(api_state.calendar.events_for_owner(), days=days, hide_past=hide_past)
    return {"buckets": [serialize_bucket(bucket) for bucket in buckets]}


@register_api(
    "calendar_create_event",
    description="Validate and create a calendar event for the current user.",
    category="calendar",
    tags=("write",),
)
def calendar_create_event(
    *,
    date: str,
    event_name: str,
    start_time: str,
    end_time: str,
    description: str = "",
) -> Dict[str, Any]:
    _require_session()
    event = api_state.calendar.create_event(
        EventDraft(
            date=date,
            event_name=event_name,
            start_time=start_time,
            end_time=end_time,
            description=description,
        )
    )
    return {"event": serialize_event(event)}


@register_api(
    "calendar_update_event",
    description="Apply a partial update to an existing calendar event.",
    category="calendar",
    tags=("write",),
)
def calendar_update_event(
    event_id: str,
    date: Optional[str] = None,
    event_name: Optional[str] = None,
    start_time: Optional[str] = None,
    end_time: Optional[str] = None,
    description: Optional[str] = None,
) -> Dict[str, Any]:
    _require_session()
    event = api_state.calendar.update_event(
        event_id,
        EventPatch(
            date=date,
            event_name=event_name,
            start_time=start_time,
            end_time=end_time,
            description=description,
        ),
    )
    return {"event": serialize_event(event)}


@register_api(
    "calendar_delete_event",
    description="Delete a calendar event.",
    category="calendar",
    tags=("write",),
)
def calendar_delete_event(event_id: str) -> Dict[str, Any]:
    _require_session()
    if not api_state.calendar.delete_event(event_id):
        raise EventNotFoundError(f"Event '{event_id}' not found.")
    return {"deleted": event_id}
