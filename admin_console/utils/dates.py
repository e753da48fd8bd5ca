"""
Date helpers shared by the panels, dashboard and revenue metrics.

Timestamps come back from PostgreSQL as datetime objects and from SQLite
as "YYYY-MM-DD HH:MM:SS" strings; parse_datetime() accepts both.
All values are naive UTC.
"""

from datetime import datetime, date, timedelta
from typing import Optional, Union

DB_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

EPOCH = datetime(1970, 1, 1)

MONTH_ABBR = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def utcnow() -> datetime:
    return datetime.utcnow().replace(microsecond=0)


def parse_datetime(value: Union[str, datetime, date, None]) -> Optional[datetime]:
    """Parse a DB timestamp (datetime, date or ISO string). None stays None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.replace(tzinfo=None) if value.tzinfo else value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    text_value = str(value).strip().replace("Z", "+00:00")
    parsed = datetime.fromisoformat(text_value)
    if parsed.tzinfo:
        parsed = parsed.replace(tzinfo=None) - (parsed.utcoffset() or timedelta(0))
    return parsed


def to_db_timestamp(value: datetime) -> str:
    """Format a datetime for a parameterised INSERT/UPDATE."""
    return value.strftime(DB_TIMESTAMP_FORMAT)


def month_start(value: datetime) -> datetime:
    return datetime(value.year, value.month, 1)


def shift_months(value: datetime, months: int) -> datetime:
    """First day of the month `months` away from value's month."""
    index = value.year * 12 + (value.month - 1) + months
    return datetime(index // 12, index % 12 + 1, 1)


def last_n_months(now: datetime, count: int) -> list:
    """Month starts for the last `count` calendar months, oldest first, current month last."""
    current = month_start(now)
    return [shift_months(current, -offset) for offset in range(count - 1, -1, -1)]


def month_label(value: datetime) -> str:
    return MONTH_ABBR[value.month - 1]


def time_ago(value: datetime, now: Optional[datetime] = None) -> str:
    """Humanised age: 'just now', '5 minutes ago', '1 day ago'."""
    now = now or utcnow()
    seconds = int((now - value).total_seconds())
    if seconds < 60:
        return "just now"
    for unit, size in (("day", 86400), ("hour", 3600), ("minute", 60)):
        if seconds >= size:
            count = seconds // size
            return f"{count} {unit}{'' if count == 1 else 's'} ago"
    return "just now"


PERIODS = {"7d": 7, "30d": 30, "90d": 90}


def period_days(period: str) -> int:
    """'30d' -> 30. Raises ValueError for unknown periods."""
    if period not in PERIODS:
        raise ValueError(f"Unsupported period '{period}'. Use one of: {', '.join(PERIODS)}")
    return PERIODS[period]
