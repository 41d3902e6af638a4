"""Date helpers shared by the metrics and recommendation code.

All comparisons happen on timezone-aware datetimes. Naive values are
interpreted as local time.
"""

from datetime import datetime, time, timedelta
from typing import Optional, Union


def now_local() -> datetime:
    """Current time as an aware datetime in the local timezone."""
    return datetime.now().astimezone()


def ensure_aware(value: datetime) -> datetime:
    """Attach the local timezone to naive datetimes."""
    if value.tzinfo is None:
        return value.astimezone()
    return value


def parse_datetime(value: Union[str, datetime]) -> datetime:
    """Parse an ISO-8601 string (a trailing 'Z' is accepted)."""
    if isinstance(value, datetime):
        return ensure_aware(value)
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return ensure_aware(datetime.fromisoformat(text))


def _is_local(value: datetime) -> bool:
    local = value.astimezone()
    return value.utcoffset() == local.utcoffset() and value.tzname() == local.tzname()


def start_of_week(now: datetime) -> datetime:
    """
    Monday 00:00 of the week containing ``now``.

    Local times get Monday's own UTC offset, so a DST change between
    Monday and ``now`` does not move the week start.
    """
    now = ensure_aware(now)
    monday = now.date() - timedelta(days=now.weekday())
    if _is_local(now):
        return datetime.combine(monday, time.min).astimezone()
    return datetime.combine(monday, time.min, tzinfo=now.tzinfo)


def whole_days_between(earlier: datetime, later: datetime) -> int:
    """floor((later - earlier) / 1 day)."""
    delta = ensure_aware(later) - ensure_aware(earlier)
    return delta.days


def isoformat_or_none(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None
