"""Configuration models and helpers."""

from __future__ import annotations

from .settings import (
    APP_NAME,
    AppSettings,
    CalendarSettings,
    LoggingSettings,
    StorageSettings,
    SupabaseSettings,
    get_settings,
    load_settings,
)

__all__ = [
    "APP_NAME",
    "AppSettings",
    "CalendarSettings",
    "LoggingSettings",
    "StorageSettings",
    "SupabaseSettings",
    "get_settings",
    "load_settings",
]
