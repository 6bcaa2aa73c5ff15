"""
Time-of-day and calendar arithmetic.

All scheduling math works in integer minutes since midnight; these helpers
convert to and from the "HH:MM" and ISO date strings used at the edges.
"""

import math
import re
from datetime import date, datetime, timedelta

import pytz

from .errors import InvalidDate, InvalidTimeFormat
from .types import MINUTES_PER_DAY

HALF_HOUR_MINUTES = 30

_TIME_PATTERN = re.compile(r"([0-9]{1,2}):([0-9]{2})")


def parse_time_of_day(time_str: str) -> int:
    """
    Parse "HH:MM" into minutes since midnight.

    Raises:
        InvalidTimeFormat: if the string is malformed or out of range
    """
    match = _TIME_PATTERN.fullmatch(time_str) if isinstance(time_str, str) else None
    if not match:
        raise InvalidTimeFormat(f"Invalid time string: {time_str!r}")

    hour, minute = int(match.group(1)), int(match.group(2))
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise InvalidTimeFormat(f"Invalid time string: {time_str!r}")
    return hour * 60 + minute


def round_to_half_hour(minutes: float) -> int:
    """Round to the nearest multiple of 30 minutes (ties round up)."""
    return int(math.floor(minutes / HALF_HOUR_MINUTES + 0.5)) * HALF_HOUR_MINUTES


def normalize_minutes(minutes: int) -> int:
    """Map any minute value (negative or past midnight) onto 0-1439."""
    return minutes % MINUTES_PER_DAY


def minutes_to_time_of_day(minutes: int) -> str:
    """Format minutes as "HH:MM" (wraps around midnight)."""
    minutes = normalize_minutes(minutes)
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def parse_iso_date(date_str: str) -> date:
    """
    Parse a "YYYY-MM-DD" date.

    Raises:
        InvalidDate: if the string is not a valid calendar date
    """
    try:
        return datetime.strptime(date_str, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise InvalidDate(f"Invalid date string: {date_str!r}") from None


def add_days(date_str: str, days: int) -> str:
    """Add N days to an ISO date, handling month and year rollover."""
    return (parse_iso_date(date_str) + timedelta(days=days)).isoformat()


def get_current_date_in_tz(tz_name: str) -> str:
    """
    Get today's ISO date in the specified timezone.

    Serverless functions run in UTC, so "today" for a patient must be taken
    from their own timezone or evening requests land on tomorrow's date.

    Args:
        tz_name: IANA timezone name (e.g., "Asia/Jerusalem")

    Returns:
        Current local date as "YYYY-MM-DD"
    """
    tz = pytz.timezone(tz_name)
    now_utc = datetime.now(pytz.UTC)
    return now_utc.astimezone(tz).date().isoformat()
