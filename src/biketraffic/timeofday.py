"""Minute-of-day helpers shared by the bucketer and the aggregator."""

import numbers
from typing import Optional, Tuple

import pandas as pd


MINUTES_PER_DAY = 1440
WINDOW_MINUTES = 60  # Half-width of the slider window
NO_FILTER = -1  # Slider value meaning "any time"


def minutes_since_midnight(timestamp) -> Optional[int]:
    """
    Convert a timestamp to its minute of the day.

    Args:
        timestamp: datetime (pandas Timestamp works too) or ISO-8601 string.

    Returns:
        hour * 60 + minute in [0, 1439], seconds discarded, or None when the
        value is missing or cannot be read as a time.
    """
    if timestamp is None:
        return None

    if isinstance(timestamp, str):
        try:
            timestamp = pd.Timestamp(timestamp.strip())
        except (ValueError, OverflowError):
            return None

    try:
        # int() rejects the NaN hour/minute carried by pandas NaT
        minute = int(timestamp.hour) * 60 + int(timestamp.minute)
    except (AttributeError, TypeError, ValueError):
        return None

    return minute % MINUTES_PER_DAY


def normalize_filter(time_filter) -> Optional[int]:
    """
    Validate a time filter.

    Returns None for "no filter" (None or -1), otherwise the minute of day.

    Raises:
        ValueError: If the filter is not an integer minute in [0, 1439].
    """
    if time_filter is None:
        return None
    if isinstance(time_filter, bool) or not isinstance(time_filter, numbers.Integral):
        raise ValueError(f"Time filter must be an integer minute, got {time_filter!r}")
    if time_filter == NO_FILTER:
        return None
    if not 0 <= time_filter < MINUTES_PER_DAY:
        raise ValueError(f"Time filter {time_filter} outside [0, {MINUTES_PER_DAY - 1}]")
    return int(time_filter)


def window_bounds(minute: int) -> Tuple[int, int]:
    """
    Return (min_minute, max_minute) of the window around a filter minute.

    The selection built from these bounds is [min_minute, max_minute), so it
    holds 120 minutes starting 60 minutes before the filter and stops short
    of the minute 60 after it. When min_minute > max_minute the window
    crosses midnight.
    """
    min_minute = (minute - WINDOW_MINUTES + MINUTES_PER_DAY) % MINUTES_PER_DAY
    max_minute = (minute + WINDOW_MINUTES) % MINUTES_PER_DAY
    return min_minute, max_minute


def format_time(minute: int) -> str:
    """Format a minute of the day as a short clock label, e.g. "9:05 AM"."""
    hours, minutes = divmod(minute % MINUTES_PER_DAY, 60)
    suffix = "AM" if hours < 12 else "PM"
    display_hour = hours % 12 or 12
    return f"{display_hour}:{minutes:02d} {suffix}"


def parse_time(text: str) -> int:
    """
    Parse slider input as "HH:MM" or a bare minute count.

    Raises:
        ValueError: If the text is not a time of day.
    """
    text = text.strip()
    if ":" in text:
        hours, minutes = text.split(":", 1)
        hours, minutes = int(hours), int(minutes)
        if not (0 <= hours < 24 and 0 <= minutes < 60):
            raise ValueError(f"'{text}' is not a time of day")
        return hours * 60 + minutes
    return int(text)
