from __future__ import annotations

import re
from datetime import date, datetime, time
from typing import Optional

_CLOCK = re.compile(r"^\s*(\d{1,2})(?::(\d{2}))?\s*([AaPp][Mm])?")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value.strip(), "%Y-%m-%d").date()


def today_local() -> date:
    return now_local().date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def slot_start(slot: str) -> Optional[time]:
    """Start time of a slot string like '9:00 AM - 10:00 AM' or '09:00-10:00'.

    Returns None when the text does not begin with a clock time.
    """

    m = _CLOCK.match(slot or "")
    if not m:
        return None
    hour = int(m.group(1))
    minute = int(m.group(2) or 0)
    meridiem = (m.group(3) or "").lower()
    if meridiem:
        if not 1 <= hour <= 12:
            return None
        hour = hour % 12 + (12 if meridiem == "pm" else 0)
    if hour > 23 or minute > 59:
        return None
    return time(hour=hour, minute=minute)


def isoformat_or_none(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None
