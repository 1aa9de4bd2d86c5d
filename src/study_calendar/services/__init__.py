"""Application services orchestrating data access and domain logic."""

from __future__ import annotations

from .calendar import CalendarService
from .context import ServiceContext

__all__ = ["CalendarService", "ServiceContext"]
