"""Month grid construction for the calendar view."""

from __future__ import annotations

import calendar
from collections import Counter
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, List, Optional

from ..domain import CalendarDay, CalendarEvent, DateOutOfRangeError
from ..domain.dates import DateLike, to_day

GRID_CELLS = 42
DAYS_PER_WEEK = 7


def first_of_month(day: DateLike) -> date:
    return to_day(day).replace(day=1)


def shift_month(day: DateLike, delta: int) -> date:
    anchor = first_of_month(day)
    index = anchor.year * 12 + (anchor.month - 1) + delta
    try:
        return date(index // 12, index % 12 + 1, 1)
    except ValueError as exc:
        raise DateOutOfRangeError(f"No month {delta:+d} from {anchor:%Y-%m}.") from exc


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_label(day: DateLike) -> str:
    anchor = to_day(day)
    return f"{calendar.month_name[anchor.month]} {anchor.year}"


def weekday_labels(week_start: int = calendar.SUNDAY) -> List[str]:
    return [calendar.day_abbr[(week_start + offset) % DAYS_PER_WEEK] for offset in range(DAYS_PER_WEEK)]


def leading_days(month: DateLike, week_start: int = calendar.SUNDAY) -> int:
    """Number of previous-month cells shown before the first of ``month``."""

    return (first_of_month(month).weekday() - week_start) % DAYS_PER_WEEK


def build_grid(
    month: DateLike,
    events: Iterable[CalendarEvent],
    today: DateLike,
    selected: Optional[DateLike] = None,
    *,
    week_start: int = calendar.SUNDAY,
) -> List[CalendarDay]:
    """Return the six-week grid of day cells covering ``month``.

    Leading cells come from the previous month and trailing cells from the
    next one so the result always holds exactly 42 days.
    """

    first = first_of_month(month)
    try:
        start = first - timedelta(days=leading_days(first, week_start))
        cell_days = [start + timedelta(days=offset) for offset in range(GRID_CELLS)]
    except OverflowError as exc:
        raise DateOutOfRangeError(f"The grid for {first:%Y-%m} runs outside the calendar.") from exc
    today_day = to_day(today)
    selected_day = to_day(selected) if selected is not None else None
    counts = Counter(to_day(event.date) for event in events)

    cells: List[CalendarDay] = []
    for cell_day in cell_days:
        cells.append(
            CalendarDay(
                date=cell_day,
                is_current_month=(cell_day.year, cell_day.month) == (first.year, first.month),
                is_today=cell_day == today_day,
                is_selected=selected_day is not None and cell_day == selected_day,
                event_count=counts.get(cell_day, 0),
            )
        )
    return cells


def weeks(cells: List[CalendarDay]) -> List[List[CalendarDay]]:
    return [cells[index : index + DAYS_PER_WEEK] for index in range(0, len(cells), DAYS_PER_WEEK)]


@dataclass(frozen=True)
class CalendarCursor:
    """The viewed month and the selected day of a calendar view."""

    month: date
    selected: Optional[date] = None

    @classmethod
    def starting(cls, today: DateLike) -> "CalendarCursor":
        day = to_day(today)
        return cls(month=first_of_month(day), selected=day)

    @property
    def label(self) -> str:
        return month_label(self.month)

    def previous_month(self) -> "CalendarCursor":
        return CalendarCursor(month=shift_month(self.month, -1), selected=self.selected)

    def next_month(self) -> "CalendarCursor":
        return CalendarCursor(month=shift_month(self.month, 1), selected=self.selected)

    def go_to_today(self, today: DateLike) -> "CalendarCursor":
        return CalendarCursor.starting(today)

    def select(self, day: DateLike) -> "CalendarCursor":
        chosen = to_day(day)
        return CalendarCursor(month=first_of_month(chosen), selected=chosen)
