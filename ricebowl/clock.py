"""Clock-time helpers shared by the soak scheduler, planner and notifications.

All times are 24-hour "HH:MM" strings. "Now" is always built from a caller
supplied date and clock time.
"""

import re
from datetime import date, datetime, time
from typing import Tuple, Union

from ricebowl.data_layer.exceptions import InputValidationError

_HHMM = re.compile(r"^(\d{1,2}):(\d{2})$")

DateLike = Union[str, date]


def parse_clock_time(hhmm: str, field: str = "time") -> Tuple[int, int]:
    """Parse "HH:MM" into (hour, minute).

    Raises:
        InputValidationError: If the string is not a valid 24-hour clock time.
    """
    match = _HHMM.match(hhmm.strip()) if isinstance(hhmm, str) else None
    if match is None:
        raise InputValidationError(field, hhmm, "expected HH:MM")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise InputValidationError(field, hhmm, "hour must be 0-23 and minute 0-59")
    return hour, minute


def time_to_minutes(hhmm: str, field: str = "time") -> int:
    """Convert HH:MM to minutes since midnight."""
    hour, minute = parse_clock_time(hhmm, field)
    return hour * 60 + minute


def minutes_to_clock(minutes: int) -> str:
    """Format minutes since midnight (wrapped to one day) as HH:MM."""
    minutes %= 24 * 60
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def format_clock(moment: datetime) -> str:
    return moment.strftime("%H:%M")


def parse_date(value: DateLike, field: str = "current_date") -> date:
    """Accept a date, a datetime or a YYYY-MM-DD string.

    There is no default: callers always say which day it is.
    """
    if value is None:
        raise InputValidationError(field, value, "a date is required")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise InputValidationError(field, value, "expected YYYY-MM-DD") from None


def combine(current_date: DateLike, current_time: str) -> datetime:
    """Build the "now" instant from a date and an HH:MM clock time."""
    hour, minute = parse_clock_time(current_time, "current_time")
    return datetime.combine(parse_date(current_date), time(hour, minute))


def as_datetime(value: Union[date, datetime, str]) -> datetime:
    """Normalize an expiry-style value to a datetime (dates become midnight)."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time(0, 0))
    return datetime.fromisoformat(str(value))


def format_hours(hours: float) -> str:
    """Render an hour count without a trailing .0 ("6", "1.5")."""
    if float(hours) == int(hours):
        return str(int(hours))
    return f"{hours:g}"
