from datetime import datetime, time, timedelta, timezone, tzinfo
from typing import Tuple

# Fixed width so that lexical order in SQLite matches chronological order.
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_aware(ts: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def format_ts(ts: datetime) -> str:
    return ensure_aware(ts).astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def parse_ts(value: str) -> datetime:
    return ensure_aware(datetime.fromisoformat(value))


def add_calendar_days(ts: datetime, days: int) -> datetime:
    """Advance the date part by `days`, keeping the wall-clock time and zone.

    Across a DST change the elapsed time is 23 or 25 hours; the local time of
    day stays the same.
    """
    shifted_date = ts.date() + timedelta(days=days)
    return datetime.combine(shifted_date, ts.timetz())


def day_bounds(as_of: datetime, tz: tzinfo) -> Tuple[datetime, datetime]:
    """Start of the local day containing `as_of` and start of the next one."""
    local_date = ensure_aware(as_of).astimezone(tz).date()
    start_of_today = datetime.combine(local_date, time.min, tzinfo=tz)
    start_of_tomorrow = datetime.combine(local_date + timedelta(days=1), time.min, tzinfo=tz)
    return start_of_today, start_of_tomorrow
