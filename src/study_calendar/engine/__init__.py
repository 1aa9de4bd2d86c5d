"""Pure calendar computations: validation, month grid, and event aggregation."""

from __future__ import annotations

from .aggregation import (
    annotate,
    events_in_month,
    events_on_day,
    format_time_12h,
    group_upcoming,
    is_past,
    sort_by_date_then_time,
    sort_by_time,
    sort_for_day,
    sort_for_list,
)
from .grid import GRID_CELLS, CalendarCursor, build_grid, month_label, weekday_labels, weeks
from .validation import EventLimits, EventValidator, ValidationResult
from .views import CalendarSnapshot

__all__ = [
    "GRID_CELLS",
    "CalendarCursor",
    "CalendarSnapshot",
    "EventLimits",
    "EventValidator",
    "ValidationResult",
    "annotate",
    "build_grid",
    "events_in_month",
    "events_on_day",
    "format_time_12h",
    "group_upcoming",
    "is_past",
    "month_label",
    "sort_by_date_then_time",
    "sort_by_time",
    "sort_for_day",
    "sort_for_list",
    "weekday_labels",
    "weeks",
]
