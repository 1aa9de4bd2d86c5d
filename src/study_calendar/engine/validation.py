from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ..domain import CalendarEvent, EventDraft, EventPatch, ValidationCode
from ..domain.dates import minutes_since_midnight
from ..domain.errors import EventValidationError, InvalidTimeError, QuotaExceededError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EventLimits:
    max_events_per_owner: int = 200
    name_min: int = 1
    name_max: int = 200
    description_max: int = 1000


@dataclass(frozen=True)
class ValidationResult:
    code: ValidationCode
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.code is ValidationCode.OK

    def raise_for_rejection(self) -> None:
        if self.ok:
            return
        logger.warning("Event rejected (%s): %s", self.code.value, self.reason)
        if self.code is ValidationCode.QUOTA_EXCEEDED:
            raise QuotaExceededError(self.code, self.reason)
        raise EventValidationError(self.code, self.reason)


ACCEPTED = ValidationResult(ValidationCode.OK)


@dataclass(frozen=True)
class EventValidator:
    """Field bounds and per-owner quota, checked in a fixed order before any write."""

    limits: EventLimits = field(default_factory=EventLimits)

    def quota_reason(self) -> str:
        return (
            f"Maximum limit of {self.limits.max_events_per_owner} events reached. "
            "Please delete some events before creating a new one."
        )

    def check_quota(self, existing_count: int) -> ValidationResult:
        if existing_count >= self.limits.max_events_per_owner:
            return ValidationResult(ValidationCode.QUOTA_EXCEEDED, self.quota_reason())
        return ACCEPTED

    def check_name(self, name: str) -> ValidationResult:
        if not self.limits.name_min <= len(name) <= self.limits.name_max:
            return ValidationResult(
                ValidationCode.NAME_LENGTH,
                f"Event name must be between {self.limits.name_min} and {self.limits.name_max} characters.",
            )
        return ACCEPTED

    def check_description(self, description: str) -> ValidationResult:
        if len(description) > self.limits.description_max:
            return ValidationResult(
                ValidationCode.DESCRIPTION_LENGTH,
                f"Event description cannot exceed {self.limits.description_max} characters.",
            )
        return ACCEPTED

    def check_time_format(self, value: str) -> ValidationResult:
        try:
            minutes_since_midnight(value)
        except InvalidTimeError as exc:
            return ValidationResult(ValidationCode.TIME_FORMAT, str(exc))
        return ACCEPTED

    def check_time_order(self, start_time: str, end_time: str) -> ValidationResult:
        # Same-day spans only: 23:30 -> 00:15 compares as 1410 >= 15 and is rejected.
        if minutes_since_midnight(start_time) >= minutes_since_midnight(end_time):
            return ValidationResult(ValidationCode.TIME_ORDER, "End time must be after start time.")
        return ACCEPTED

    def validate_fields(self, draft: EventDraft | CalendarEvent) -> ValidationResult:
        checks = (
            lambda: self.check_name(draft.event_name),
            lambda: self.check_description(draft.description),
            lambda: self.check_time_format(draft.start_time),
            lambda: self.check_time_format(draft.end_time),
            lambda: self.check_time_order(draft.start_time, draft.end_time),
        )
        return _first_failure(checks)

    def validate_for_create(self, existing_count: int, draft: EventDraft | CalendarEvent) -> ValidationResult:
        quota = self.check_quota(existing_count)
        if not quota.ok:
            return quota
        return self.validate_fields(draft)

    def validate_for_update(self, patch: EventPatch, current: Optional[CalendarEvent] = None) -> ValidationResult:
        """Validate only the fields present in ``patch``; quota is not re-checked."""

        checks = []
        if patch.event_name is not None:
            checks.append(lambda: self.check_name(patch.event_name))
        if patch.description is not None:
            checks.append(lambda: self.check_description(patch.description))
        if patch.start_time is not None:
            checks.append(lambda: self.check_time_format(patch.start_time))
        if patch.end_time is not None:
            checks.append(lambda: self.check_time_format(patch.end_time))

        if patch.start_time is not None or patch.end_time is not None:
            start = patch.start_time if patch.start_time is not None else getattr(current, "start_time", None)
            end = patch.end_time if patch.end_time is not None else getattr(current, "end_time", None)
            if start is not None and end is not None:
                checks.append(lambda: self.check_time_format(start))
                checks.append(lambda: self.check_time_format(end))
                checks.append(lambda: self.check_time_order(start, end))
        return _first_failure(checks)


def _first_failure(checks) -> ValidationResult:
    for check in checks:
        result = check()
        if not result.ok:
            return result
    return ACCEPTED
