from __future__ import annotations

import calendar
from collections import deque
from dataclasses import replace
from datetime import date, datetime, timedelta
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest

from study_calendar.config import AppSettings, CalendarSettings, LoggingSettings, StorageSettings, SupabaseSettings
from study_calendar.domain import CalendarEvent, QuotaExceededError, ValidationCode
from study_calendar.services import CalendarService, ServiceContext

NOW = datetime(2024, 3, 1, 10, 0)
OWNER = "owner-1"


def make_event(
    day: date,
    start: str = "09:00",
    end: str = "10:00",
    *,
    name: str = "Study session",
    owner: str = OWNER,
    event_id: Optional[str] = None,
    description: str = "",
) -> CalendarEvent:
    return CalendarEvent(
        id=event_id,
        owner_id=owner,
        date=datetime.combine(day, datetime.min.time()),
        event_name=name,
        start_time=start,
        end_time=end,
        description=description,
    )


class InMemoryScheduler:
    """Dict-backed stand-in for the Supabase event repository."""

    def __init__(self, events: Optional[List[CalendarEvent]] = None) -> None:
        self.rows: Dict[str, CalendarEvent] = {}
        self.writes: List[tuple] = []
        self._next = 0
        for event in events or []:
            self._store(event)

    def _store(self, event: CalendarEvent) -> CalendarEvent:
        self._next += 1
        stored = replace(event, id=event.id or f"evt-{self._next:04d}", created_at=NOW, updated_at=NOW)
        self.rows[stored.id] = stored
        return stored

    def _ordered(self, events):
        return sorted(events, key=lambda event: (event.date, event.start_time))

    def by_owner(self, owner_id: str) -> List[CalendarEvent]:
        return self._ordered(event for event in self.rows.values() if event.owner_id == owner_id)

    def by_owner_and_day(self, owner_id: str, day: date) -> List[CalendarEvent]:
        return sorted(
            (event for event in self.by_owner(owner_id) if event.day == day),
            key=lambda event: event.start_time,
        )

    def by_owner_and_month(self, owner_id: str, year: int, month: int) -> List[CalendarEvent]:
        return [event for event in self.by_owner(owner_id) if (event.day.year, event.day.month) == (year, month)]

    def count_for_owner(self, owner_id: str) -> int:
        return sum(1 for event in self.rows.values() if event.owner_id == owner_id)

    def fetch(self, event_id: str) -> Optional[CalendarEvent]:
        return self.rows.get(event_id)

    def insert(self, event: CalendarEvent) -> CalendarEvent:
        self.writes.append(("insert", event))
        return self._store(event)

    def insert_with_quota(self, event: CalendarEvent, max_events: int) -> CalendarEvent:
        self.writes.append(("insert_with_quota", event))
        if self.count_for_owner(event.owner_id) >= max_events:
            raise QuotaExceededError(ValidationCode.QUOTA_EXCEEDED, "quota exceeded")
        return self._store(event)

    def update(self, event_id: str, changes: Dict[str, Any]) -> Optional[CalendarEvent]:
        self.writes.append(("update", event_id, changes))
        current = self.rows.get(event_id)
        if current is None:
            return None
        record = {**current.to_record(), **changes}
        updated = CalendarEvent.from_record(record)
        self.rows[event_id] = updated
        return updated

    def delete(self, event_id: str) -> bool:
        self.writes.append(("delete", event_id))
        return self.rows.pop(event_id, None) is not None


class FakeQuery:
    """Records PostgREST builder calls and replays a canned response."""

    def __init__(self, client: "FakeSupabaseClient", target: str) -> None:
        self.client = client
        self.target = target
        self.calls: List[tuple] = []

    def _chain(self, name: str, *args: Any, **kwargs: Any) -> "FakeQuery":
        self.calls.append((name, args, kwargs))
        return self

    def select(self, *args, **kwargs):
        return self._chain("select", *args, **kwargs)

    def eq(self, *args, **kwargs):
        return self._chain("eq", *args, **kwargs)

    def gte(self, *args, **kwargs):
        return self._chain("gte", *args, **kwargs)

    def lte(self, *args, **kwargs):
        return self._chain("lte", *args, **kwargs)

    def order(self, *args, **kwargs):
        return self._chain("order", *args, **kwargs)

    def limit(self, *args, **kwargs):
        return self._chain("limit", *args, **kwargs)

    def insert(self, *args, **kwargs):
        return self._chain("insert", *args, **kwargs)

    def update(self, *args, **kwargs):
        return self._chain("update", *args, **kwargs)

    def delete(self, *args, **kwargs):
        return self._chain("delete", *args, **kwargs)

    def execute(self):
        if self.client.errors:
            raise self.client.errors.popleft()
        if self.client.responses:
            return self.client.responses.popleft()
        return SimpleNamespace(data=[], count=None)


class FakeSupabaseClient:
    def __init__(self) -> None:
        self.queries: List[FakeQuery] = []
        self.responses: deque = deque()
        self.errors: deque = deque()

    def respond(self, data: Any, count: Optional[int] = None) -> None:
        self.responses.append(SimpleNamespace(data=data, count=count))

    def table(self, name: str) -> FakeQuery:
        query = FakeQuery(self, name)
        self.queries.append(query)
        return query

    def rpc(self, name: str, params: dict) -> FakeQuery:
        query = FakeQuery(self, f"rpc:{name}")
        query.calls.append(("rpc", (name, params), {}))
        self.queries.append(query)
        return query


@pytest.fixture
def settings(tmp_path: Path) -> AppSettings:
    return AppSettings(
        supabase=SupabaseSettings(url="https://example.supabase.co", anon_key="anon"),
        storage=StorageSettings(events_table="calendar_events", guarded_insert_fn="create_calendar_event_guarded"),
        calendar=CalendarSettings(
            max_events_per_owner=200,
            upcoming_days=7,
            week_start=calendar.SUNDAY,
            atomic_quota=False,
            feed_interval=timedelta(seconds=60),
        ),
        logging=LoggingSettings(level="INFO", directory=tmp_path / "logs"),
    )


@pytest.fixture
def store() -> InMemoryScheduler:
    return InMemoryScheduler()


@pytest.fixture
def context(settings: AppSettings, store: InMemoryScheduler) -> ServiceContext:
    ctx = ServiceContext(settings=settings, events=store, clock=lambda: NOW)
    ctx.gateway.use_client(FakeSupabaseClient())
    ctx.gateway.set_session(SimpleNamespace(user=SimpleNamespace(id=OWNER)))
    return ctx


@pytest.fixture
def service(context: ServiceContext) -> CalendarService:
    return CalendarService(context)
