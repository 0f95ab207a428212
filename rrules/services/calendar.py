"""
Calendar helpers.

Pure functions over the proleptic Gregorian calendar. "No such date" is
reported as None, never as an error.
"""

import calendar
from datetime import date, timedelta
from typing import Optional

from rrules.models.frequencies import Weekday


def is_leap_year(year: int) -> bool:
    """Return whether ``year`` has a 29 February."""
    return calendar.isleap(year)


def days_in_month(year: int, month: int) -> int:
    """Return the number of days in the given month."""
    return calendar.monthrange(year, month)[1]


def weekday_of(day: date) -> Weekday:
    """Return the weekday of a date."""
    return Weekday(day.weekday())


def start_of_week(day: date) -> date:
    """Return the Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())


def add_months(year: int, month: int, months: int) -> tuple[int, int]:
    """
    Shift a (year, month) pair by a number of months.

    Args:
        year: Starting year
        month: Starting month (1-12)
        months: Months to add, may be negative

    Returns:
        The shifted (year, month). The year is not range-checked.
    """
    absolute = year * 12 + (month - 1) + months
    return absolute // 12, absolute % 12 + 1


def nth_weekday_of_month(
    year: int,
    month: int,
    weekday: Weekday,
    ordinal: int,
) -> Optional[int]:
    """
    Resolve the nth occurrence of a weekday in a month.

    Args:
        year: Year
        month: Month (1-12)
        weekday: Weekday to look for
        ordinal: 1 for the first, 2 for the second, ...; -1 for the last,
            -2 for the second to last, ...

    Returns:
        Day of month, or None if the month has fewer than ``abs(ordinal)``
        such weekdays (or ordinal is 0)

    Example:
        >>> nth_weekday_of_month(2023, 1, Weekday.MO, 1)
        2
        >>> nth_weekday_of_month(2023, 2, Weekday.MO, 5) is None
        True
    """
    if ordinal == 0:
        return None

    first_weekday, last_day = calendar.monthrange(year, month)
    if ordinal > 0:
        first = 1 + (weekday - first_weekday) % 7
        day = first + (ordinal - 1) * 7
    else:
        last_weekday = (first_weekday + last_day - 1) % 7
        last = last_day - (last_weekday - weekday) % 7
        day = last + (ordinal + 1) * 7

    if 1 <= day <= last_day:
        return day
    return None
