from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List, Optional

from ..data import EventScheduler, SubscriptionSlot, subscribe
from ..data.feed import Listener, Subscription
from ..domain import CalendarDay, CalendarEvent, DayBucket, EventDraft, EventNotFoundError, EventPatch
from ..domain.dates import DateLike, normalize
from ..engine import CalendarCursor, CalendarSnapshot
from .context import ServiceContext

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CalendarService:
    context: ServiceContext
    _feed: SubscriptionSlot = field(default_factory=SubscriptionSlot)

    @property
    def store(self) -> EventScheduler:
        assert self.context.events is not None
        return self.context.events

    def owner_id(self) -> str:
        return self.context.gateway.current_owner_id()

    # Writes

    def create_event(self, draft: EventDraft) -> CalendarEvent:
        """Validate ``draft`` and insert it for the signed-in owner.

        Without atomic quota the count is read before the insert, so two
        concurrent creates can both pass at 199 existing events.
        """

        owner_id = self.owner_id()
        event = draft.to_event(owner_id)
        validator = self.context.validator
        if self.context.settings.calendar.atomic_quota:
            validator.validate_fields(event).raise_for_rejection()
            saved = self.store.insert_with_quota(event, validator.limits.max_events_per_owner)
        else:
            existing = self.store.count_for_owner(owner_id)
            validator.validate_for_create(existing, event).raise_for_rejection()
            saved = self.store.insert(event)
        logger.info("Created event %s on %s for owner %s", saved.id, saved.day.isoformat(), owner_id)
        return saved

    def update_event(self, event_id: str, patch: EventPatch) -> CalendarEvent:
        current: Optional[CalendarEvent] = None
        if patch.is_empty() or (patch.start_time is None) != (patch.end_time is None):
            current = self.store.fetch(event_id)
            if current is None:
                raise EventNotFoundError(f"Event '{event_id}' not found.")
        self.context.validator.validate_for_update(patch, current).raise_for_rejection()
        if patch.is_empty():
            assert current is not None
            return current
        updated = self.store.update(event_id, patch.to_record())
        if updated is None:
            raise EventNotFoundError(f"Event '{event_id}' not found.")
        logger.info("Updated event %s (%s)", event_id, ", ".join(sorted(patch.to_record())))
        return updated

    def delete_event(self, event_id: str) -> bool:
        deleted = self.store.delete(event_id)
        if deleted:
            logger.info("Deleted event %s", event_id)
        return deleted

    # Reads

    def events_for_owner(self) -> List[CalendarEvent]:
        return self.store.by_owner(self.owner_id())

    def events_for_day(self, day: DateLike) -> List[CalendarEvent]:
        return self.store.by_owner_and_day(self.owner_id(), normalize(day).date())

    def events_for_month(self, year: int, month: int) -> List[CalendarEvent]:
        return self.store.by_owner_and_month(self.owner_id(), year, month)

    # Derived views

    def snapshot(
        self,
        events: Iterable[CalendarEvent],
        cursor: Optional[CalendarCursor] = None,
        now: Optional[DateLike] = None,
    ) -> CalendarSnapshot:
        current = normalize(now if now is not None else self.context.clock())
        return CalendarSnapshot(
            events=tuple(events),
            cursor=cursor or CalendarCursor.starting(current),
            now=current,
            week_start=self.context.settings.calendar.week_start,
        )

    def month_grid(
        self,
        cursor: CalendarCursor,
        events: Iterable[CalendarEvent],
        now: Optional[DateLike] = None,
    ) -> List[CalendarDay]:
        return self.snapshot(events, cursor, now).grid()

    def upcoming(
        self,
        events: Iterable[CalendarEvent],
        *,
        now: Optional[DateLike] = None,
        days: Optional[int] = None,
        hide_past: bool = False,
    ) -> List[DayBucket]:
        window = days if days is not None else self.context.settings.calendar.upcoming_days
        return self.snapshot(events, now=now).upcoming(days=window, hide_past=hide_past)

    # Live feed

    def watch(self, listener: Listener, *, month: Optional[date] = None) -> Subscription:
        """Replace the live event feed with one for the current owner (and month)."""

        owner_id = self.owner_id()
        if month is None:
            query = lambda: self.store.by_owner(owner_id)  # noqa: E731
            name = f"owner-{owner_id}"
        else:
            query = lambda: self.store.by_owner_and_month(owner_id, month.year, month.month)  # noqa: E731
            name = f"owner-{owner_id}-{month:%Y-%m}"
        subscription = subscribe(
            query,
            listener,
            interval=self.context.settings.calendar.feed_interval,
            name=name,
            start=False,
        )
        return self._feed.replace(subscription)

    def stop_watching(self) -> None:
        self._feed.cancel()
