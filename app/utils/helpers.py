"""Helper utilities."""

import re
from datetime import datetime, timedelta, timezone
from typing import Optional

_DURATION_PATTERN = re.compile(r"^\s*(\d+)\s*([smhdw]?)\s*$", re.IGNORECASE)

_DURATION_UNITS = {
    "": "seconds",
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
    "w": "weeks",
}


def parse_duration(value: str) -> timedelta:
    """Parse a duration such as '15m', '7d', '3600' into a timedelta."""
    match = _DURATION_PATTERN.match(value)
    if not match:
        raise ValueError(f"Invalid duration: {value!r} (expected e.g. '15m', '7d', '3600')")
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit.lower()]: int(amount)})


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (the form BSON round-trips)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to naive UTC; naive values are assumed UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def normalize_email(email: str) -> str:
    """Normalize email for storage and lookups."""
    return email.strip().lower()
