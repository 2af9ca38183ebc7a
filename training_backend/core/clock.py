"""
Wall-clock helpers.

Every timestamp handled by the scheduler is a timezone-aware UTC
datetime. Services receive a clock callable so a single "now" can be
captured per operation and replaced in tests.

Dependencies: datetime (stdlib)
System role: Time source and UTC normalization
"""

from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """
    Normalize a datetime to aware UTC.

    Naive values are interpreted as UTC, aware values are converted.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
