"""Tests for study_calendar.engine.validation."""

from __future__ import annotations

from datetime import date

import pytest

from study_calendar.domain import EventDraft, EventPatch, EventValidationError, QuotaExceededError, ValidationCode
from study_calendar.engine import EventLimits, EventValidator

from .conftest import make_event


def _draft(**overrides) -> EventDraft:
    fields = {
        "date": date(2024, 3, 5),
        "event_name": "Linear algebra revision",
        "start_time": "09:00",
        "end_time": "10:00",
        "description": "",
    }
    fields.update(overrides)
    return EventDraft(**fields)


@pytest.fixture
def validator() -> EventValidator:
    return EventValidator()


class TestCreate:
    def test_accepts_well_formed_draft(self, validator):
        result = validator.validate_for_create(0, _draft())
        assert result.ok
        result.raise_for_rejection()

    def test_quota_boundary(self, validator):
        assert validator.validate_for_create(199, _draft()).ok

        rejected = validator.validate_for_create(200, _draft())
        assert rejected.code is ValidationCode.QUOTA_EXCEEDED
        assert "200" in rejected.reason
        with pytest.raises(QuotaExceededError):
            rejected.raise_for_rejection()

    def test_quota_checked_before_fields(self, validator):
        result = validator.validate_for_create(250, _draft(event_name="", description="x" * 2000))
        assert result.code is ValidationCode.QUOTA_EXCEEDED

    @pytest.mark.parametrize("name", ["", "x" * 201])
    def test_name_length_bounds(self, validator, name):
        result = validator.validate_for_create(0, _draft(event_name=name))
        assert result.code is ValidationCode.NAME_LENGTH

    def test_name_at_bounds(self, validator):
        assert validator.validate_for_create(0, _draft(event_name="x")).ok
        assert validator.validate_for_create(0, _draft(event_name="x" * 200)).ok

    def test_description_length(self, validator):
        assert validator.validate_for_create(0, _draft(description="d" * 1000)).ok
        result = validator.validate_for_create(0, _draft(description="d" * 1001))
        assert result.code is ValidationCode.DESCRIPTION_LENGTH

    def test_name_checked_before_description(self, validator):
        result = validator.validate_for_create(0, _draft(event_name="", description="d" * 1001))
        assert result.code is ValidationCode.NAME_LENGTH

    @pytest.mark.parametrize("start,end", [("9:00", "10:00"), ("09:00", "25:00")])
    def test_time_format(self, validator, start, end):
        result = validator.validate_for_create(0, _draft(start_time=start, end_time=end))
        assert result.code is ValidationCode.TIME_FORMAT

    @pytest.mark.parametrize("start,end", [("10:00", "10:00"), ("11:00", "10:00")])
    def test_start_must_precede_end(self, validator, start, end):
        result = validator.validate_for_create(0, _draft(start_time=start, end_time=end))
        assert result.code is ValidationCode.TIME_ORDER

    def test_overnight_span_is_rejected_not_crashing(self, validator):
        result = validator.validate_for_create(0, _draft(start_time="23:30", end_time="00:15"))

        assert not result.ok
        assert result.code is ValidationCode.TIME_ORDER
        with pytest.raises(EventValidationError) as excinfo:
            result.raise_for_rejection()
        assert excinfo.value.reason == "End time must be after start time."
        assert not isinstance(excinfo.value, QuotaExceededError)

    def test_custom_limits(self):
        validator = EventValidator(EventLimits(max_events_per_owner=3, name_max=5))
        assert validator.validate_for_create(3, _draft()).code is ValidationCode.QUOTA_EXCEEDED
        assert validator.validate_for_create(0, _draft(event_name="toolong")).code is ValidationCode.NAME_LENGTH


class TestUpdate:
    def test_only_present_fields_are_checked(self, validator):
        assert validator.validate_for_update(EventPatch(description="short")).ok
        assert validator.validate_for_update(EventPatch()).ok

    def test_present_fields_are_bounded(self, validator):
        assert validator.validate_for_update(EventPatch(event_name="")).code is ValidationCode.NAME_LENGTH
        assert (
            validator.validate_for_update(EventPatch(description="d" * 1001)).code
            is ValidationCode.DESCRIPTION_LENGTH
        )

    def test_time_pair_checked_when_both_present(self, validator):
        result = validator.validate_for_update(EventPatch(start_time="23:30", end_time="00:15"))
        assert result.code is ValidationCode.TIME_ORDER

    def test_single_time_checked_against_current_event(self, validator):
        current = make_event(date(2024, 3, 5), "09:00", "10:00")

        assert validator.validate_for_update(EventPatch(end_time="09:30"), current).ok
        result = validator.validate_for_update(EventPatch(end_time="08:30"), current)
        assert result.code is ValidationCode.TIME_ORDER

    def test_quota_is_not_rechecked(self, validator):
        # Update never sees the owner's count, only the payload.
        assert validator.validate_for_update(EventPatch(event_name="Renamed")).ok
