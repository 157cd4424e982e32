"""Time calculation utilities for the billing engine.

This module provides low-level utilities for time calculations including:
- Parsing ``HH:MM`` / ``HH:MM:SS`` clock strings
- Calculating elapsed time between a time-in and time-out, crossing midnight
  when the time-out is earlier than the time-in
- Converting elapsed seconds to exact hours (a Fraction, so twenty
  minutes stays exactly one third of an hour)

These utilities are timezone-agnostic and work with dt.time values.
"""

import datetime as dt
from fractions import Fraction

from eph_billing.errors import InvalidTimeRangeError

SECONDS_PER_DAY = 24 * 60 * 60

_FORMATS = ("%H:%M", "%H:%M:%S")


def parse_clock_time(value: str) -> dt.time:
    """Parse a clock time string.

    Args:
        value: Time as ``HH:MM`` or ``HH:MM:SS``

    Returns:
        The parsed time

    Raises:
        InvalidTimeRangeError: If the value is not a valid clock time

    Example:
        >>> parse_clock_time("07:30")
        datetime.time(7, 30)
        >>> parse_clock_time("22:15:30")
        datetime.time(22, 15, 30)
    """
    text = str(value).strip()
    for fmt in _FORMATS:
        try:
            return dt.datetime.strptime(text, fmt).time()
        except ValueError:
            continue
    raise InvalidTimeRangeError(
        f"Cannot parse time '{value}'",
        recovery_hint="Use 24-hour HH:MM format, e.g. 07:30",
    )


def convert_time_to_seconds(time: dt.time) -> int:
    """Convert a dt.time object to seconds since midnight.

    Example:
        >>> convert_time_to_seconds(dt.time(9, 30))
        34200
    """
    return time.hour * 3600 + time.minute * 60 + time.second


def calculate_elapsed_seconds(start_time: dt.time, end_time: dt.time) -> int:
    """Calculate elapsed seconds from a time-in to a time-out.

    An end time earlier than the start time is read as the next day.

    Example:
        >>> calculate_elapsed_seconds(dt.time(7, 0), dt.time(16, 0))
        32400
        >>> calculate_elapsed_seconds(dt.time(22, 0), dt.time(6, 0))
        28800
    """
    start_seconds = convert_time_to_seconds(start_time)
    end_seconds = convert_time_to_seconds(end_time)

    if end_seconds < start_seconds:
        # e.g., 22:00 to 06:00 = (86400 - 79200) + 21600
        return SECONDS_PER_DAY - start_seconds + end_seconds
    return end_seconds - start_seconds


def seconds_to_hours(seconds: int) -> Fraction:
    """Convert seconds to exact hours.

    Example:
        >>> seconds_to_hours(27000)
        Fraction(15, 2)
        >>> seconds_to_hours(1200)
        Fraction(1, 3)
    """
    return Fraction(seconds, 3600)


def elapsed_hours(start: str, end: str) -> Fraction:
    """Exact elapsed hours between two clock strings.

    Raises:
        InvalidTimeRangeError: If either value cannot be parsed
    """
    return seconds_to_hours(
        calculate_elapsed_seconds(parse_clock_time(start), parse_clock_time(end))
    )
