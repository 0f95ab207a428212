"""
Unit tests for the calendar helpers.
"""

from datetime import date

import pytest

from rrules.models.frequencies import Weekday
from rrules.services.calendar import (
    add_months,
    days_in_month,
    is_leap_year,
    nth_weekday_of_month,
    start_of_week,
    weekday_of,
)


class TestLeapYears:
    """Test is_leap_year and days_in_month."""

    @pytest.mark.parametrize(
        "year,expected",
        [(2023, False), (2024, True), (1900, False), (2000, True)],
    )
    def test_is_leap_year(self, year, expected):
        assert is_leap_year(year) is expected

    def test_days_in_month(self):
        assert days_in_month(2023, 2) == 28
        assert days_in_month(2024, 2) == 29
        assert days_in_month(2023, 4) == 30
        assert days_in_month(2023, 12) == 31


class TestWeekdays:
    """Test weekday_of and start_of_week."""

    def test_weekday_of(self):
        assert weekday_of(date(2023, 1, 2)) is Weekday.MO
        assert weekday_of(date(2023, 1, 1)) is Weekday.SU

    def test_start_of_week_from_sunday(self):
        """Weeks start on Monday, so a Sunday belongs to the previous Monday."""
        assert start_of_week(date(2023, 1, 1)) == date(2022, 12, 26)

    def test_start_of_week_from_monday(self):
        assert start_of_week(date(2023, 1, 2)) == date(2023, 1, 2)


class TestAddMonths:
    """Test add_months."""

    def test_within_year(self):
        assert add_months(2023, 1, 2) == (2023, 3)

    def test_across_year_end(self):
        assert add_months(2023, 11, 3) == (2024, 2)
        assert add_months(2023, 1, 12) == (2024, 1)

    def test_backwards(self):
        assert add_months(2023, 1, -1) == (2022, 12)


class TestNthWeekdayOfMonth:
    """Test nth_weekday_of_month."""

    def test_first_monday(self):
        assert nth_weekday_of_month(2023, 1, Weekday.MO, 1) == 2
        assert nth_weekday_of_month(2023, 2, Weekday.MO, 1) == 6
        assert nth_weekday_of_month(2023, 3, Weekday.MO, 1) == 6

    def test_first_day_is_the_weekday(self):
        """1 January 2023 is a Sunday."""
        assert nth_weekday_of_month(2023, 1, Weekday.SU, 1) == 1

    def test_fifth_monday(self):
        assert nth_weekday_of_month(2023, 1, Weekday.MO, 5) == 30

    def test_fifth_monday_missing(self):
        """February 2023 has only four Mondays."""
        assert nth_weekday_of_month(2023, 2, Weekday.MO, 5) is None

    def test_last_friday(self):
        assert nth_weekday_of_month(2023, 1, Weekday.FR, -1) == 27
        assert nth_weekday_of_month(2023, 2, Weekday.FR, -1) == 24
        assert nth_weekday_of_month(2023, 3, Weekday.FR, -1) == 31

    def test_last_day_is_the_weekday(self):
        """28 February 2023 is a Tuesday."""
        assert nth_weekday_of_month(2023, 2, Weekday.TU, -1) == 28

    def test_second_to_last(self):
        assert nth_weekday_of_month(2023, 1, Weekday.FR, -2) == 20

    def test_negative_missing(self):
        assert nth_weekday_of_month(2023, 2, Weekday.MO, -5) is None

    def test_zero_ordinal(self):
        assert nth_weekday_of_month(2023, 1, Weekday.MO, 0) is None

    def test_leap_february(self):
        """29 February 2024 is a Thursday, the fifth of that month."""
        assert nth_weekday_of_month(2024, 2, Weekday.TH, 5) == 29
        assert nth_weekday_of_month(2023, 2, Weekday.TH, 5) is None
