from __future__ import annotations

from datetime import date, datetime
from typing import Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def today() -> date:
    """Current local date.

    Note: Wrapped so tests can patch it.
    """
    return date.today()


def within_window(day: date, start: date, end: Optional[date]) -> bool:
    """Inclusive [start, end] check; a missing end means open-ended."""
    if day < start:
        return False
    return end is None or day <= end
