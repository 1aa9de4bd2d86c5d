from __future__ import annotations

import calendar
import os
from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from platformdirs import user_log_dir

load_dotenv()

APP_NAME = "Study Calendar"
APP_AUTHOR = "StudyCalendar"

_WEEKDAYS = {
    "monday": calendar.MONDAY,
    "tuesday": calendar.TUESDAY,
    "wednesday": calendar.WEDNESDAY,
    "thursday": calendar.THURSDAY,
    "friday": calendar.FRIDAY,
    "saturday": calendar.SATURDAY,
    "sunday": calendar.SUNDAY,
}


@dataclass(frozen=True)
class SupabaseSettings:
    url: Optional[str]
    anon_key: Optional[str]

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.anon_key)

    @property
    def missing_env_vars(self) -> list[str]:
        missing = []
        if not self.url:
            missing.append("SUPABASE_URL")
        if not self.anon_key:
            missing.append("SUPABASE_ANON_KEY")
        return missing


@dataclass(frozen=True)
class StorageSettings:
    events_table: str
    guarded_insert_fn: str


@dataclass(frozen=True)
class CalendarSettings:
    max_events_per_owner: int
    upcoming_days: int
    week_start: int
    atomic_quota: bool
    feed_interval: timedelta


@dataclass(frozen=True)
class LoggingSettings:
    level: str
    directory: Path


@dataclass(frozen=True)
class AppSettings:
    supabase: SupabaseSettings
    storage: StorageSettings
    calendar: CalendarSettings
    logging: LoggingSettings


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _float_from_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _bool_from_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _weekday_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    return _WEEKDAYS.get(raw.strip().lower(), default)


def load_settings() -> AppSettings:
    """Build settings from the process environment without caching."""

    supabase = SupabaseSettings(
        url=os.getenv("SUPABASE_URL"),
        anon_key=os.getenv("SUPABASE_ANON_KEY"),
    )

    storage = StorageSettings(
        events_table=os.getenv("CALENDAR_EVENTS_TABLE", "calendar_events"),
        guarded_insert_fn=os.getenv("CALENDAR_GUARDED_INSERT_FN", "create_calendar_event_guarded"),
    )

    calendar_settings = CalendarSettings(
        max_events_per_owner=_int_from_env("CALENDAR_MAX_EVENTS", 200),
        upcoming_days=_int_from_env("CALENDAR_UPCOMING_DAYS", 7),
        week_start=_weekday_from_env("CALENDAR_WEEK_START", calendar.SUNDAY),
        atomic_quota=_bool_from_env("CALENDAR_ATOMIC_QUOTA", False),
        feed_interval=timedelta(seconds=_float_from_env("CALENDAR_FEED_INTERVAL_SECONDS", 30.0)),
    )

    logging_settings = LoggingSettings(
        level=os.getenv("STUDY_CALENDAR_LOG_LEVEL", "INFO").upper(),
        directory=Path(os.getenv("STUDY_CALENDAR_LOG_DIR") or user_log_dir(APP_NAME, APP_AUTHOR)),
    )

    return AppSettings(
        supabase=supabase,
        storage=storage,
        calendar=calendar_settings,
        logging=logging_settings,
    )


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    return load_settings()
