"""
Date and Time utilities

This module handles all date/time parsing and recency window calculations.
Centralizes all date parsing logic to maintain consistency across the application.
"""
from datetime import date, datetime, time, timedelta, timezone
import logging

logger = logging.getLogger(__name__)


class DateFormatError(ValueError):
    """Raised when date format is invalid"""
    pass


def _normalize_iso8601_string(date_str: str) -> str:
    """Normalize ISO8601 string by replacing 'Z' with '+00:00'

    Args:
        date_str: ISO8601 datetime string

    Returns:
        Normalized string with explicit timezone offset
    """
    return date_str.replace('Z', '+00:00') if date_str.endswith('Z') else date_str


def parse_iso8601_to_utc(date_str: str) -> datetime:
    """
    Parse ISO8601 date string and convert to UTC datetime

    This is the single source of truth for datetime parsing across the application.

    Args:
        date_str: ISO8601 datetime string (e.g., '2025-10-09T00:00:00Z' or '2025-10-09T00:00:00+01:00')

    Returns:
        Timezone-aware datetime in UTC

    Raises:
        DateFormatError: If the date string format is invalid
    """
    try:
        normalized = _normalize_iso8601_string(date_str)
        dt = datetime.fromisoformat(normalized)
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)
    except (ValueError, AttributeError, TypeError) as e:
        raise DateFormatError(f"Invalid ISO8601 datetime format: '{date_str}'") from e


def parse_calendar_date(date_str: str) -> date:
    """
    Parse a 'YYYY-MM-DD' calendar date

    Raises:
        DateFormatError: If the date string format is invalid
    """
    try:
        return date.fromisoformat(date_str)
    except (ValueError, TypeError) as e:
        raise DateFormatError(f"Invalid calendar date format: '{date_str}'") from e


def start_of_day_utc(day: date) -> datetime:
    """Midnight UTC of the given calendar date."""
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def ensure_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def calculate_window_start(as_of: datetime, window_days: int) -> date:
    """
    First calendar date of a trailing window ending at as_of

    The window is inclusive on both ends, so a 7-day window anchored on the
    10th starts on the 4th.

    Args:
        as_of: Anchor moment ("now")
        window_days: Number of calendar days covered, including as_of's date

    Returns:
        Earliest date inside the window
    """
    if window_days < 1:
        raise ValueError("window_days must be >= 1")
    return ensure_utc(as_of).date() - timedelta(days=window_days - 1)


def window_dates(as_of: datetime, window_days: int) -> list[date]:
    """Calendar dates of the window, newest first."""
    end = ensure_utc(as_of).date()
    return [end - timedelta(days=offset) for offset in range(window_days)]
