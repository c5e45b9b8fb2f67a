"""
Datetime helpers.
- Store timestamps in UTC in the database.
- "Today" and lateness are evaluated on the company wall clock (settings.TZ).
"""
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from app.core.config import settings

UTC = timezone.utc


def local_tz() -> ZoneInfo:
    return ZoneInfo(settings.TZ)


def now_utc() -> datetime:
    """Current time in UTC (timezone-aware). Use for clock_in, clock_out, break start/end, created_at."""
    return datetime.now(UTC)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """If dt is naive, treat as UTC and return timezone-aware UTC. If already aware, convert to UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    else:
        dt = dt.astimezone(UTC)
    return dt


def to_local(dt: Optional[datetime]) -> Optional[datetime]:
    """Convert to the company zone. Naive datetimes are treated as UTC before converting."""
    if dt is None:
        return None
    return ensure_utc(dt).astimezone(local_tz())


def work_date(utc_now: Optional[datetime] = None) -> date:
    """Calendar date on the company wall clock for the given UTC instant (default now)."""
    return to_local(utc_now or now_utc()).date()


def parse_hhmm(value: str) -> Tuple[int, int]:
    """Parse an 'HH:MM' wall-clock string into (hour, minute)."""
    try:
        hour_s, minute_s = value.strip().split(":")[:2]
        hour, minute = int(hour_s), int(minute_s)
    except (AttributeError, ValueError):
        raise ValueError(f"Invalid time of day: {value!r} (expected HH:MM)")
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValueError(f"Invalid time of day: {value!r} (expected HH:MM)")
    return hour, minute


def late_deadline(day: date, work_start: str, threshold_minutes: int) -> datetime:
    """
    Naive wall-clock deadline: midnight of ``day`` plus the work-start minutes
    plus the grace minutes. Offsets past midnight roll into the next day.
    """
    hour, minute = parse_hhmm(work_start)
    return datetime.combine(day, time(0, 0)) + timedelta(minutes=hour * 60 + minute + threshold_minutes)


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last calendar day of the month."""
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {month}. Must be between 1 and 12.")
    first = date(year, month, 1)
    if month == 12:
        last = date(year, 12, 31)
    else:
        last = date(year, month + 1, 1) - timedelta(days=1)
    return first, last


def iso_8601_utc(dt: Optional[datetime]) -> Optional[str]:
    """ISO-8601 with Z for UTC."""
    if dt is None:
        return None
    s = ensure_utc(dt).isoformat()
    if s.endswith("+00:00"):
        s = s[:-6] + "Z"
    return s
