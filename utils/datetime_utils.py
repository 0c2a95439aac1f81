# -*- coding: utf-8 -*-
"""
DateTime Utilities

Date parsing and normalization shared by the create-document wizard.
Every comparison between a document date and a series validity range goes
through normalize_date(), so time-of-day never affects the outcome.
"""

from datetime import datetime, date
from typing import Union, Optional

DateLike = Union[datetime, date, str, None]


def parse_date(value: DateLike) -> Optional[date]:
    """
    Parse a date-like value into a calendar date.

    Args:
        value: date, datetime, ISO string (date-only or full datetime), or None

    Returns:
        date object, or None if the value is empty or not a valid calendar date

    Examples:
        >>> parse_date('2024-03-15')
        datetime.date(2024, 3, 15)
        >>> parse_date('2024-03-15T10:30:00Z')
        datetime.date(2024, 3, 15)
        >>> parse_date('2024-02-30') is None
        True
    """
    if value is None:
        return None

    # datetime is a subclass of date, check it first
    if isinstance(value, datetime):
        return value.date()

    if isinstance(value, date):
        return value

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        # Keep only the date part of full timestamps ("2024-03-15T00:00:00Z")
        if 'T' in text:
            text = text.split('T')[0]
        elif ' ' in text:
            text = text.split(' ')[0]
        try:
            return date.fromisoformat(text)
        except ValueError:
            return None

    return None


def normalize_date(value: DateLike) -> Optional[date]:
    """
    Normalize a date-like value to midnight (a plain calendar date) for comparison.

    Alias of parse_date() kept for readability at comparison sites.
    """
    return parse_date(value)


def is_date_in_range(value: DateLike, start: DateLike, end: DateLike) -> bool:
    """
    Check that value falls within [start, end], inclusive, at day granularity.

    Returns False if any bound or the value cannot be parsed.
    """
    day = normalize_date(value)
    start_day = normalize_date(start)
    end_day = normalize_date(end)
    if day is None or start_day is None or end_day is None:
        return False
    return start_day <= day <= end_day


def to_date_isoformat(value: DateLike) -> Optional[str]:
    """
    Convert a date-like value to a date-only ISO string (YYYY-MM-DD).

    Unlike a display formatter this never invents a date: unparseable or empty
    values return None so callers can emit an explicit null.
    """
    day = parse_date(value)
    return day.isoformat() if day else None

