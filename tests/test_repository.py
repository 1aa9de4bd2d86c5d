"""Tests for the Supabase-backed event repository, against a recording fake client."""

from __future__ import annotations

from datetime import date, datetime

import pytest
from supabase import PostgrestAPIError

from study_calendar.data import EventRepository, SupabaseGateway, SupabaseNotInitializedError
from study_calendar.data import SupabaseSessionMissingError
from study_calendar.config import SupabaseSettings
from study_calendar.domain import QuotaExceededError

from .conftest import FakeSupabaseClient, make_event

RECORD = {
    "id": "evt-1",
    "ownerId": "owner-1",
    "date": "2024-03-05T00:00:00.000",
    "eventName": "Chemistry lab",
    "startTime": "09:00",
    "endTime": "10:30",
    "description": "Bring goggles",
    "createdAt": "2024-03-01T08:00:00+00:00",
    "updatedAt": "2024-03-01T08:00:00+00:00",
}


@pytest.fixture
def client() -> FakeSupabaseClient:
    return FakeSupabaseClient()


@pytest.fixture
def repository(settings, client) -> EventRepository:
    gateway = SupabaseGateway(settings.supabase)
    gateway.use_client(client)
    return EventRepository(gateway=gateway, table_name="calendar_events")


def _calls(client: FakeSupabaseClient):
    return client.queries[-1].calls


def test_by_owner_orders_by_date_then_start(repository, client):
    client.respond([RECORD])
    events = repository.by_owner("owner-1")

    assert [event.event_name for event in events] == ["Chemistry lab"]
    assert events[0].date == datetime(2024, 3, 5)
    assert client.queries[-1].target == "calendar_events"
    assert _calls(client) == [
        ("select", ("*",), {}),
        ("eq", ("ownerId", "owner-1"), {}),
        ("order", ("date",), {"desc": False}),
        ("order", ("startTime",), {"desc": False}),
    ]


def test_rows_with_short_timestamp_fractions_still_load(repository, client):
    client.respond([{**RECORD, "createdAt": "2024-03-01T08:00:00.12345+00:00", "updatedAt": "2024-03-01T08:00:00.1+00"}])
    (event,) = repository.by_owner("owner-1")

    assert event.created_at.microsecond == 123000
    assert event.updated_at.microsecond == 100000


def test_by_owner_and_day_uses_inclusive_day_range(repository, client):
    repository.by_owner_and_day("owner-1", date(2024, 3, 5))

    assert _calls(client) == [
        ("select", ("*",), {}),
        ("eq", ("ownerId", "owner-1"), {}),
        ("gte", ("date", "2024-03-05T00:00:00.000"), {}),
        ("lte", ("date", "2024-03-05T23:59:59.999"), {}),
        ("order", ("startTime",), {"desc": False}),
    ]


def test_by_owner_and_month_uses_inclusive_month_range(repository, client):
    repository.by_owner_and_month("owner-1", 2024, 2)

    calls = _calls(client)
    assert ("gte", ("date", "2024-02-01T00:00:00.000"), {}) in calls
    assert ("lte", ("date", "2024-02-29T23:59:59.999"), {}) in calls
    assert [call for call in calls if call[0] == "order"] == [
        ("order", ("date",), {"desc": False}),
        ("order", ("startTime",), {"desc": False}),
    ]


def test_count_for_owner_uses_exact_count(repository, client):
    client.respond([{"id": "a"}], count=42)
    assert repository.count_for_owner("owner-1") == 42
    assert _calls(client)[0] == ("select", ("id",), {"count": "exact"})


def test_count_falls_back_to_rows(repository, client):
    client.respond([{"id": "a"}, {"id": "b"}], count=None)
    assert repository.count_for_owner("owner-1") == 2


def test_insert_sends_midnight_date_and_no_server_fields(repository, client):
    client.respond([RECORD])
    event = make_event(date(2024, 3, 5), "09:00", "10:30", name="Chemistry lab")

    saved = repository.insert(event)

    payload = _calls(client)[0][1][0]
    assert payload == {
        "ownerId": "owner-1",
        "date": "2024-03-05T00:00:00.000",
        "eventName": "Chemistry lab",
        "startTime": "09:00",
        "endTime": "10:30",
        "description": "",
    }
    assert saved.id == "evt-1"
    assert saved.created_at is not None


def test_fetch_returns_none_when_missing(repository, client):
    assert repository.fetch("missing") is None
    assert ("limit", (1,), {}) in _calls(client)


def test_update_and_delete(repository, client):
    client.respond([{**RECORD, "eventName": "Renamed"}])
    updated = repository.update("evt-1", {"eventName": "Renamed"})
    assert updated is not None and updated.event_name == "Renamed"
    assert _calls(client) == [("update", ({"eventName": "Renamed"},), {}), ("eq", ("id", "evt-1"), {})]

    client.respond([])
    assert repository.delete("evt-1") is False
    client.respond([RECORD])
    assert repository.delete("evt-1") is True


def test_guarded_insert_calls_rpc(repository, client):
    client.respond([RECORD])
    saved = repository.insert_with_quota(make_event(date(2024, 3, 5)), 200)

    name, params = _calls(client)[0][1]
    assert name == "create_calendar_event_guarded"
    assert params["max_events"] == 200
    assert params["payload"]["date"] == "2024-03-05T00:00:00.000"
    assert saved.id == "evt-1"


def test_guarded_insert_maps_quota_failure(repository, client):
    client.errors.append(PostgrestAPIError({"message": "quota_exceeded: 200 events for owner", "code": "P0001"}))

    with pytest.raises(QuotaExceededError):
        repository.insert_with_quota(make_event(date(2024, 3, 5)), 200)


def test_guarded_insert_propagates_other_failures(repository, client):
    client.errors.append(PostgrestAPIError({"message": "connection reset", "code": "08006"}))

    with pytest.raises(PostgrestAPIError):
        repository.insert_with_quota(make_event(date(2024, 3, 5)), 200)


class TestGateway:
    def test_unconfigured_gateway_refuses_client(self):
        gateway = SupabaseGateway(SupabaseSettings(url=None, anon_key=None))
        with pytest.raises(SupabaseNotInitializedError, match="SUPABASE_URL"):
            gateway.ensure_client()

    def test_owner_id_requires_session(self, settings):
        gateway = SupabaseGateway(settings.supabase)
        with pytest.raises(SupabaseSessionMissingError):
            gateway.current_owner_id()
