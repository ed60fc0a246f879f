"""Month-key and calendar utilities"""

import calendar
import re
from datetime import date
from typing import List, Optional, Tuple

from household_timeline.domain.exceptions import InvalidMonthKeyError

MONTH_KEY_PATTERN = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")
ISO_DATE_PATTERN = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])-(0[1-9]|[12]\d|3[01])$")


def parse_month_key(month: str) -> Tuple[int, int]:
    """
    Split a YYYY-MM key into (year, month_number).

    Raises:
        InvalidMonthKeyError: If the key is not a zero-padded YYYY-MM string
    """
    match = MONTH_KEY_PATTERN.match(month) if isinstance(month, str) else None
    if not match:
        raise InvalidMonthKeyError(month)
    return int(match.group(1)), int(match.group(2))


def validate_month_key(month: str) -> str:
    parse_month_key(month)
    return month


def format_month_key(year: int, month_number: int) -> str:
    return f"{year:04d}-{month_number:02d}"


def add_months(month: str, delta: int) -> str:
    """Shift a month key by delta months (negative allowed)"""
    year, month_number = parse_month_key(month)
    absolute = year * 12 + (month_number - 1) + delta
    return format_month_key(absolute // 12, absolute % 12 + 1)


def month_range_inclusive(start_month: str, end_month: str) -> List[str]:
    """All month keys from start to end (inclusive); empty if start > end"""
    start_year, start_number = parse_month_key(start_month)
    end_year, end_number = parse_month_key(end_month)
    count = (end_year * 12 + end_number) - (start_year * 12 + start_number) + 1
    return [add_months(start_month, i) for i in range(max(0, count))]


def is_month_in_range(month: str, start_month: str, end_month: Optional[str] = None) -> bool:
    """Inclusive range check; no end_month means open-ended"""
    if month < start_month:
        return False
    if end_month and month > end_month:
        return False
    return True


def days_in_month(year: int, month_number: int) -> int:
    return calendar.monthrange(year, month_number)[1]


def month_bounds(month: str) -> Tuple[date, date]:
    """First and last calendar date of a month"""
    year, month_number = parse_month_key(month)
    return date(year, month_number, 1), date(year, month_number, days_in_month(year, month_number))


def clamp_day(year: int, month_number: int, day: Optional[int]) -> int:
    """Clamp a due day into the month; missing or non-integer days map to 1"""
    if not day or not isinstance(day, int) or isinstance(day, bool):
        return 1
    return min(days_in_month(year, month_number), max(1, day))


def iso_date(year: int, month_number: int, day: int) -> str:
    return date(year, month_number, day).isoformat()


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    """Parse a strict YYYY-MM-DD string; returns None when it is not a real date"""
    if not isinstance(value, str):
        return None
    match = ISO_DATE_PATTERN.match(value)
    if not match:
        return None
    try:
        return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    except ValueError:
        return None
