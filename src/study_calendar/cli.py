from __future__ import annotations

import argparse
import logging
from datetime import date
from pathlib import Path
from typing import List, Optional

import orjson

from .bootstrap import configure_logging
from .config import get_settings
from .domain import CalendarDay, CalendarEvent
from .engine import CalendarCursor, build_grid, weekday_labels, weeks

CELL_WIDTH = 6


def load_events(path: Path) -> List[CalendarEvent]:
    """Read a JSON array of stored event records."""

    records = orjson.loads(path.read_bytes())
    if not isinstance(records, list):
        raise ValueError(f"{path} must contain a JSON array of events.")
    return [CalendarEvent.from_record(record) for record in records]


def _render_cell(cell: CalendarDay) -> str:
    marker = "*" if cell.is_today else " "
    day = f"{cell.date.day:2d}" if cell.is_current_month else "  "
    count = f"+{cell.event_count}" if cell.event_count and cell.is_current_month else ""
    return f"{marker}{day}{count:<{CELL_WIDTH - 3}}"


def render_month(cursor: CalendarCursor, cells: List[CalendarDay], week_start: int) -> str:
    lines = [cursor.label.center(CELL_WIDTH * 7).rstrip()]
    lines.append("".join(f" {label:<{CELL_WIDTH - 1}}" for label in weekday_labels(week_start)).rstrip())
    for week in weeks(cells):
        lines.append("".join(_render_cell(cell) for cell in week).rstrip())
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Study calendar command line interface.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    api_parser = subparsers.add_parser("api", help="Start the FastAPI server exposing calendar functions.")
    api_parser.add_argument("--host", default="127.0.0.1")
    api_parser.add_argument("--port", type=int, default=8000)

    month_parser = subparsers.add_parser("month", help="Print a month grid with per-day event counts.")
    month_parser.add_argument("--year", type=int)
    month_parser.add_argument("--month", type=int, choices=range(1, 13), metavar="1-12")
    month_parser.add_argument("--events", type=Path, help="JSON file holding stored event records.")

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    configure_logging()
    logging.getLogger(__name__).info("Study calendar CLI starting")
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "api":
        from .services.http import run_local_server

        run_local_server(host=args.host, port=args.port)
    elif args.command == "month":
        today = date.today()
        cursor = CalendarCursor.starting(today)
        if args.year or args.month:
            cursor = CalendarCursor(month=date(args.year or today.year, args.month or today.month, 1))
        events = load_events(args.events) if args.events else []
        week_start = get_settings().calendar.week_start
        cells = build_grid(cursor.month, events, today, cursor.selected, week_start=week_start)
        print(render_month(cursor, cells, week_start))
    else:  # pragma: no cover - argparse enforces choices
        parser.print_help()


if __name__ == "__main__":
    main()
