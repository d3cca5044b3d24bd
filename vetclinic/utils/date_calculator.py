"""
Date calculations for examinations and follow-up visits.

All functions are pure: they accept ``datetime``/``date`` objects or ISO-8601
strings and return ``None`` instead of raising on unusable input.
"""

import math
import re
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Union

DateInput = Union[str, date, datetime, None]

DISPLAY_DATE_FORMAT = "%d/%m/%Y"
DISPLAY_DATETIME_FORMAT = "%d/%m/%Y %H:%M"
INPUT_DATETIME_FORMAT = "%Y-%m-%dT%H:%M"
LEADING_INT_PATTERN = re.compile(r"\s*[+-]?\d+")


def parse_datetime(value: DateInput) -> Optional[datetime]:
    """Parse a datetime/date/ISO string, returning None when it cannot be read"""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def _parse_day_count(value: Union[str, int, float, None]) -> Optional[int]:
    """Leading integer of the value ("3.5" and 3.5 give 3, "7 ngày" gives 7), None if there is none"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    match = LEADING_INT_PATTERN.match(str(value))
    return int(match.group(0)) if match else None


def _align(a: datetime, b: datetime) -> tuple[datetime, datetime]:
    # Naive values are read as UTC when compared with aware ones
    if (a.tzinfo is None) != (b.tzinfo is None):
        if a.tzinfo is None:
            a = a.replace(tzinfo=timezone.utc)
        else:
            b = b.replace(tzinfo=timezone.utc)
    return a, b


def calculate_follow_up_date(exam_date: DateInput, num_days: Union[str, int, None]) -> Optional[datetime]:
    """
    Calculate the follow-up date from an examination date and a day count.

    Returns the exam date advanced by ``num_days`` calendar days, truncated to
    minute precision, or None for a missing/unparseable exam date or an invalid
    or negative day count.
    """
    days = _parse_day_count(num_days)
    if days is None or days < 0:
        return None

    exam = parse_datetime(exam_date)
    if exam is None:
        return None

    follow_up = exam + timedelta(days=days)
    return follow_up.replace(second=0, microsecond=0)


def calculate_days_difference(exam_date: DateInput, follow_up_date: DateInput) -> Optional[int]:
    """
    Number of days between the examination and the follow-up visit.

    Returns the ceiling of the (fractional) day difference, or None when either
    input is unparseable or the follow-up precedes the examination.
    """
    exam = parse_datetime(exam_date)
    follow_up = parse_datetime(follow_up_date)
    if exam is None or follow_up is None:
        return None

    exam, follow_up = _align(exam, follow_up)
    seconds = (follow_up - exam).total_seconds()
    if seconds < 0:
        return None
    return math.ceil(seconds / 86400)


def format_date_for_display(value: DateInput, include_time: bool = True) -> str:
    parsed = parse_datetime(value)
    if parsed is None:
        return ""
    return parsed.strftime(DISPLAY_DATETIME_FORMAT if include_time else DISPLAY_DATE_FORMAT)


def format_for_input(value: DateInput) -> str:
    """Format for an HTML datetime-local input (YYYY-MM-DDTHH:MM)"""
    parsed = parse_datetime(value)
    if parsed is None:
        return ""
    return parsed.strftime(INPUT_DATETIME_FORMAT)
