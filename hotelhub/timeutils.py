"""Server-local datetime helpers.

Booking dates and audit timestamps are stored as naive datetimes in the
server's local timezone (single-timezone deployment).
"""
from datetime import datetime, timedelta
from typing import Optional, Tuple


def local_now() -> datetime:
    return datetime.now()


def as_local_naive(value: datetime) -> datetime:
    """Convert an aware datetime to naive local time; naive values are assumed local already."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def day_window(now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """Return the [midnight, next midnight) window containing `now`."""
    now = now or local_now()
    start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)
