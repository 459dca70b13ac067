"""
Datetime utilities for consistent wall-clock handling across the application.

All scheduling is done in the hospital's local wall-clock time. The only
timezone-aware value is "now", which is taken in the configured clinic
offset so that "today" comparisons (e.g. prospective-only leave) match the
front desk's calendar.
"""

import logging
from datetime import datetime, timezone, timedelta, date, time

from core.config import CLINIC_UTC_OFFSET_HOURS
from core.constants import WEEKDAYS

logger = logging.getLogger(__name__)

CLINIC_TZ = timezone(timedelta(hours=CLINIC_UTC_OFFSET_HOURS))


def clinic_now() -> datetime:
    """
    Get current datetime in the clinic's timezone.

    Returns:
        Current datetime with the configured clinic offset
    """
    return datetime.now(CLINIC_TZ)


def clinic_today() -> date:
    """Get the current calendar date in the clinic's timezone."""
    return clinic_now().date()


def parse_date_string(date_str: str) -> date:
    """
    Parse a date string in YYYY-MM-DD or YYYY/MM/DD format.

    Accepts both formats:
    - YYYY-MM-DD (e.g., "2022-01-01", "2022-1-1")
    - YYYY/MM/DD (e.g., "2022/01/01", "2022/1/1")

    Automatically normalizes single-digit months/days.

    Args:
        date_str: Date string in YYYY-MM-DD or YYYY/MM/DD format

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    if not date_str or not date_str.strip():
        raise ValueError("Date string cannot be empty")

    date_str = date_str.strip()

    # Detect separator (either - or /)
    if '/' in date_str:
        parts = date_str.split('/')
    elif '-' in date_str:
        parts = date_str.split('-')
    else:
        raise ValueError(f"Invalid date format (expected YYYY-MM-DD or YYYY/MM/DD): {date_str}")

    if len(parts) != 3:
        raise ValueError(f"Invalid date format (expected YYYY-MM-DD or YYYY/MM/DD): {date_str}")

    year = parts[0].zfill(4)
    month = parts[1].zfill(2)
    day = parts[2].zfill(2)

    normalized = f"{year}-{month}-{day}"

    try:
        return datetime.strptime(normalized, '%Y-%m-%d').date()
    except ValueError as e:
        raise ValueError(f"Invalid date format (expected YYYY-MM-DD or YYYY/MM/DD): {date_str}") from e


def parse_time_string(time_str: str) -> time:
    """
    Parse a wall-clock time in HH:MM (or HH:MM:SS) format.

    Seconds are validated for compatibility with serialized `time` values
    but dropped; scheduling works at minute granularity.

    Raises:
        ValueError: If the string is not a valid 24-hour time
    """
    if not time_str or not time_str.strip():
        raise ValueError("Time string cannot be empty")

    parts = time_str.strip().split(':')
    if len(parts) not in (2, 3):
        raise ValueError(f"Invalid time format (expected HH:MM): {time_str}")

    try:
        hour, minute = int(parts[0]), int(parts[1])
        if len(parts) == 3:
            time(hour, minute, int(parts[2]))
        return time(hour, minute)
    except ValueError as e:
        raise ValueError(f"Invalid time format (expected HH:MM): {time_str}") from e


def format_time(time_obj: time) -> str:
    """Format time object to HH:MM string."""
    return time_obj.strftime('%H:%M')


def time_to_minutes(time_obj: time) -> int:
    """Minutes since midnight."""
    return time_obj.hour * 60 + time_obj.minute


def minutes_to_time(total_minutes: int) -> time:
    """
    Inverse of time_to_minutes.

    Raises:
        ValueError: If the value falls outside a single day
    """
    if total_minutes < 0 or total_minutes >= 24 * 60:
        raise ValueError(f"Minutes out of range for a single day: {total_minutes}")
    return time(total_minutes // 60, total_minutes % 60)


def weekday_name(value: date) -> str:
    """Lowercase weekday tag for a date, e.g. 'monday'."""
    return WEEKDAYS[value.weekday()]
