from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional

from ..config import AppSettings, get_settings
from ..data import EventRepository, EventScheduler, SupabaseGateway
from ..engine import EventLimits, EventValidator


@dataclass(slots=True)
class ServiceContext:
    """Aggregate root for services to share settings, gateway, storage, and clock."""

    settings: AppSettings = field(default_factory=get_settings)
    events: Optional[EventScheduler] = None
    clock: Callable[[], datetime] = datetime.now
    gateway: SupabaseGateway = field(init=False)
    validator: EventValidator = field(init=False)

    def __post_init__(self) -> None:
        self.gateway = SupabaseGateway(self.settings.supabase)
        self.validator = EventValidator(
            EventLimits(max_events_per_owner=self.settings.calendar.max_events_per_owner)
        )
        if self.events is None:
            self.events = EventRepository(
                gateway=self.gateway,
                table_name=self.settings.storage.events_table,
                guarded_insert_fn=self.settings.storage.guarded_insert_fn,
            )
