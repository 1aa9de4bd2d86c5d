"""Study calendar: month grid, event ordering, and validated Supabase persistence."""

from __future__ import annotations

from .cli import main as main

__all__ = ["main"]
