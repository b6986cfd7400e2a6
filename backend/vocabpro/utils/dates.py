"""
Date helpers.
Day keys, tolerant parsing of stored dates and the default clock.
"""
import re
from datetime import date, datetime, timezone
from typing import Callable, Optional
from zoneinfo import ZoneInfo


Clock = Callable[[], datetime]

_DAY_KEY_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
SECONDS_PER_DAY = 24 * 60 * 60


def utcnow() -> datetime:
    """Timezone-aware current UTC time (default clock)."""
    return datetime.now(timezone.utc)


def day_key(day: date) -> str:
    """Return the storage key of a calendar day (YYYY-MM-DD)."""
    return day.isoformat()


def parse_day_key(value: str) -> Optional[date]:
    """
    Parse a day key.

    Accepts zero-padded keys and the unpadded "YYYY-M-D" form written by
    older clients. Returns None when the key is not a valid date.
    """
    match = _DAY_KEY_RE.match(value.strip()) if isinstance(value, str) else None
    if not match:
        return None
    try:
        return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    except ValueError:
        return None


def days_between(start: datetime, end: datetime) -> float:
    """Fractional days from start to end (negative when end is earlier)."""
    return (end - start).total_seconds() / SECONDS_PER_DAY


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def local_date(value: datetime, tz_name: Optional[str] = None) -> date:
    """Calendar day of an instant in the named zone (the system zone when None)."""
    zone = ZoneInfo(tz_name) if tz_name else None
    return ensure_aware(value).astimezone(zone).date()


def day_seed(day: date) -> int:
    """Non-negative integer derived from a day, stable across processes."""
    seed = 0
    for char in day_key(day):
        seed = (seed * 31 + ord(char)) & 0xFFFFFFFF
    return seed
