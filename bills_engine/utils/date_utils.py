"""Calendar-month arithmetic used by the projector and mutations"""

import calendar
from datetime import date, datetime
from typing import Tuple

from bills_engine.domain.exceptions import InvalidMonthError

MONTH_NAMES = [
    "JANUARY",
    "FEBRUARY",
    "MARCH",
    "APRIL",
    "MAY",
    "JUNE",
    "JULY",
    "AUGUST",
    "SEPTEMBER",
    "OCTOBER",
    "NOVEMBER",
    "DECEMBER",
]


def month_index(year: int, month: int) -> int:
    """Absolute month number, so months compare with plain integers"""
    return year * 12 + (month - 1)


def months_between(start: date, year: int, month: int) -> int:
    """Whole calendar months from start's month to (year, month); negative if before"""
    return month_index(year, month) - month_index(start.year, start.month)


def add_months(year: int, month: int, count: int) -> Tuple[int, int]:
    """Shift (year, month) by count months, rolling the year over"""
    absolute = month_index(year, month) + count
    return absolute // 12, absolute % 12 + 1


def last_day_of_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last calendar day of the month"""
    return date(year, month, 1), date(year, month, last_day_of_month(year, month))


def first_instant(year: int, month: int) -> datetime:
    return datetime(year, month, 1)


def exclusion_token(year: int, month: int) -> str:
    """
    Token marking one suppressed month on an obligation.

    Persisted records store the month zero-based ("2025-0" is January 2025),
    so the token keeps that format even though callers pass 1-12.
    """
    return f"{year}-{month - 1}"


def validate_month(year: int, month: int) -> None:
    """Raise InvalidMonthError for a month outside 1-12 or a non-positive year"""
    if not 1 <= month <= 12:
        raise InvalidMonthError(f"month must be in 1..12, got {month}")
    if year < 1:
        raise InvalidMonthError(f"year must be positive, got {year}")
