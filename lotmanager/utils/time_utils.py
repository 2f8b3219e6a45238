# lotmanager/utils/time_utils.py
"""
Time helpers. Everything is stored in UTC; the configured timezone is only
used to find the boundaries of "today" for reports.
"""

import math
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from lotmanager.config import settings


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def elapsed_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes between start and end, rounded up. Negative spans (clock skew) count as 0."""
    diff_ms = (ensure_utc(end) - ensure_utc(start)) / timedelta(milliseconds=1)
    if diff_ms < 0:
        diff_ms = 0
    return math.ceil(diff_ms / 60000)


def today_bounds_utc(now: Optional[datetime] = None, tz_name: Optional[str] = None) -> Tuple[datetime, datetime]:
    """[start, end) of the current local day, expressed in UTC."""
    tz = ZoneInfo(tz_name or settings.TIMEZONE)
    local_now = ensure_utc(now or utcnow()).astimezone(tz)
    start = datetime.combine(local_now.date(), time.min, tzinfo=tz)
    end = start + timedelta(days=1)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def local_date(now: Optional[datetime] = None, tz_name: Optional[str] = None) -> date:
    tz = ZoneInfo(tz_name or settings.TIMEZONE)
    return ensure_utc(now or utcnow()).astimezone(tz).date()
