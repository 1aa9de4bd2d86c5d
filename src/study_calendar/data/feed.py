"""Polling subscriptions that push fresh event snapshots to a listener.

Each :class:`Subscription` owns one background thread and one query. Callers
cancel the handle when they stop needing updates; :class:`SubscriptionSlot`
holds at most one live handle and cancels the old one before taking a new one.
"""

from __future__ import annotations

import logging
import threading
from datetime import timedelta
from typing import Callable, List, Optional

from ..domain import CalendarEvent

logger = logging.getLogger(__name__)

Query = Callable[[], List[CalendarEvent]]
Listener = Callable[[List[CalendarEvent]], None]


class Subscription:
    def __init__(self, query: Query, listener: Listener, *, interval: timedelta, name: str = "events") -> None:
        self._query = query
        self._listener = listener
        self._interval = interval.total_seconds()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._snapshot: Optional[List[CalendarEvent]] = None
        self.name = name

    @property
    def active(self) -> bool:
        return not self._stop.is_set()

    @property
    def snapshot(self) -> List[CalendarEvent]:
        return list(self._snapshot or [])

    def poll(self) -> bool:
        """Run the query once and notify the listener if the result changed."""

        if not self.active:
            return False
        events = self._query()
        if events == self._snapshot:
            return False
        self._snapshot = list(events)
        self._listener(list(events))
        return True

    def start(self) -> "Subscription":
        if self._thread is not None:
            return self
        self._thread = threading.Thread(target=self._run, name=f"feed-{self.name}", daemon=True)
        self._thread.start()
        logger.debug("Feed %s started (interval %.1fs)", self.name, self._interval)
        return self

    def _run(self) -> None:
        while not self._stop.is_set():
            try:
                self.poll()
            except Exception:  # noqa: BLE001
                logger.exception("Feed %s failed to refresh", self.name)
            self._stop.wait(self._interval)

    def cancel(self) -> None:
        if self._stop.is_set():
            return
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=max(self._interval, 1.0))
        logger.debug("Feed %s cancelled", self.name)


def subscribe(
    query: Query,
    listener: Listener,
    *,
    interval: timedelta,
    name: str = "events",
    start: bool = True,
) -> Subscription:
    subscription = Subscription(query, listener, interval=interval, name=name)
    return subscription.start() if start else subscription


class SubscriptionSlot:
    """Holder for the single live subscription of one logical query."""

    def __init__(self) -> None:
        self._current: Optional[Subscription] = None
        self._lock = threading.Lock()

    @property
    def current(self) -> Optional[Subscription]:
        return self._current

    def replace(self, subscription: Subscription) -> Subscription:
        """Cancel the held subscription, then start and hold ``subscription``."""

        with self._lock:
            previous, self._current = self._current, subscription
        if previous is not None and previous is not subscription:
            previous.cancel()
        return subscription.start()

    def cancel(self) -> None:
        with self._lock:
            previous, self._current = self._current, None
        if previous is not None:
            previous.cancel()
