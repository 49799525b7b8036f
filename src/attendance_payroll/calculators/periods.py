"""Pay period and calendar helpers.

A pay period is a calendar month keyed "YYYY-MM". Calendar days and months
are always taken in the configured local timezone; naive datetimes read back
from the store are treated as UTC.
"""

from __future__ import annotations

import calendar
import re
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Any

PERIOD_PATTERN = re.compile(r"^([0-9]{4})-([0-9]{2})$")

UTC = timezone.utc


def as_aware(value: datetime) -> datetime:
    """Attach UTC to naive datetimes."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def to_utc(value: datetime) -> datetime:
    """Normalize an instant to UTC for storage."""
    return as_aware(value).astimezone(UTC)


def coerce_instant(value: Any, tz: tzinfo = UTC) -> datetime | None:
    """Parse an instant from a datetime, date, ISO string, or epoch millis."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return as_aware(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=tz)
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None
        if parsed.tzinfo is None and len(text) == 10:
            # Bare date string: local midnight
            return parsed.replace(tzinfo=tz)
        return as_aware(parsed)
    return None


def coerce_local_date(value: Any, tz: tzinfo = UTC) -> date | None:
    """Calendar date of a value in the local timezone."""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    instant = coerce_instant(value, tz)
    if instant is None:
        return None
    return instant.astimezone(tz).date()


def local_day_key(instant: datetime, tz: tzinfo = UTC) -> str:
    """ISO date key (YYYY-MM-DD) of an instant in local time."""
    return as_aware(instant).astimezone(tz).date().isoformat()


def local_period_key(instant: datetime, tz: tzinfo = UTC) -> str:
    """Pay period key (YYYY-MM) of an instant in local time."""
    return as_aware(instant).astimezone(tz).strftime("%Y-%m")


def current_period(now: datetime | None = None, tz: tzinfo = UTC) -> str:
    """Period key of the current local month."""
    return local_period_key(now or datetime.now(UTC), tz)


def parse_period(period: Any) -> tuple[int, int] | None:
    """Parse "YYYY-MM" into (year, month), or None if malformed."""
    if not isinstance(period, str):
        return None
    match = PERIOD_PATTERN.match(period.strip())
    if not match:
        return None
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12 or year < 1:
        return None
    return year, month


def period_date_range(
    period: Any,
    tz: tzinfo = UTC,
    now: datetime | None = None,
) -> tuple[datetime, datetime]:
    """First instant and last instant of the period's month, local time.

    Unparseable periods fall back to the current month.
    """
    parsed = parse_period(period)
    if parsed is None:
        local_now = as_aware(now or datetime.now(UTC)).astimezone(tz)
        parsed = (local_now.year, local_now.month)

    year, month = parsed
    last_day = calendar.monthrange(year, month)[1]
    start = datetime(year, month, 1, tzinfo=tz)
    end = datetime(year, month, last_day, 23, 59, 59, 999999, tzinfo=tz)
    return start, end


def end_of_month(period: Any, tz: tzinfo = UTC, now: datetime | None = None) -> datetime:
    """Last instant of the period's month (auto-approval schedule)."""
    return period_date_range(period, tz, now)[1]


def enumerate_dates(start: date, end: date) -> list[date]:
    """Every calendar date from start to end inclusive."""
    if isinstance(start, datetime):
        start = start.date()
    if isinstance(end, datetime):
        end = end.date()
    if start > end:
        return []
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def business_day_keys(start: date, end: date) -> list[str]:
    """ISO keys of Monday-Friday dates between start and end inclusive."""
    return [day.isoformat() for day in enumerate_dates(start, end) if not is_weekend(day)]
