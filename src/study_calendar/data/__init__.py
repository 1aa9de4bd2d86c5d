"""Data access layer."""

from __future__ import annotations

from .feed import Subscription, SubscriptionSlot, subscribe
from .repositories import EventRepository
from .scheduler import EventScheduler
from .supabase import SupabaseGateway, SupabaseNotInitializedError, SupabaseSessionMissingError

__all__ = [
    "EventRepository",
    "EventScheduler",
    "Subscription",
    "SubscriptionSlot",
    "SupabaseGateway",
    "SupabaseNotInitializedError",
    "SupabaseSessionMissingError",
    "subscribe",
]
