"""
Unit tests for the frequency model.

Tests:
- Weekday codes
- Per-variant validation (interval, days, ordinals, month dates)
- Normalization of collection fields
- Equality and hashing of frequencies
"""

from dataclasses import FrozenInstanceError
from datetime import time

import pytest

from rrules.exceptions import InvalidValue
from rrules.models.frequencies import (
    FREQUENCIES,
    Daily,
    Frequency,
    Hourly,
    Minutely,
    Monthly,
    MonthlyDate,
    NthWeekday,
    Secondly,
    Weekday,
    Weekly,
    Yearly,
)


class TestWeekday:
    """Test Weekday enum."""

    def test_numbering_matches_date_weekday(self):
        """Monday is 0 and Sunday is 6, like date.weekday()."""
        assert Weekday.MO == 0
        assert Weekday.SU == 6

    def test_from_code(self):
        """Codes resolve case-insensitively."""
        assert Weekday.from_code("MO") is Weekday.MO
        assert Weekday.from_code(" fr ") is Weekday.FR

    def test_from_code_invalid(self):
        """Unknown codes raise InvalidValue on BYDAY."""
        with pytest.raises(InvalidValue) as exc_info:
            Weekday.from_code("XX")

        assert exc_info.value.attribute == "BYDAY"

    def test_code(self):
        assert Weekday.TH.code == "TH"


class TestInterval:
    """Test interval validation shared by all variants."""

    @pytest.mark.parametrize("cls", [Secondly, Minutely, Hourly, Daily, Weekly, Monthly, Yearly])
    def test_default_interval(self, cls):
        assert cls().interval == 1

    @pytest.mark.parametrize("interval", [0, -1])
    def test_non_positive_interval_rejected(self, interval):
        with pytest.raises(InvalidValue) as exc_info:
            Daily(interval=interval)

        assert exc_info.value.attribute == "INTERVAL"

    def test_non_integer_interval_rejected(self):
        with pytest.raises(InvalidValue):
            Hourly(interval="2")

    def test_bool_interval_rejected(self):
        """True is an int subclass but not a meaningful interval."""
        with pytest.raises(InvalidValue):
            Minutely(interval=True)

    def test_base_class_is_abstract(self):
        with pytest.raises(TypeError):
            Frequency()


class TestDaily:
    """Test Daily frequency."""

    def test_by_time_sorted_and_deduplicated(self):
        daily = Daily(by_time=[time(10), time(9), time(9)])

        assert daily.by_time == (time(9), time(10))

    def test_by_time_rejects_non_time(self):
        with pytest.raises(InvalidValue) as exc_info:
            Daily(by_time=["09:00"])

        assert exc_info.value.attribute == "BYTIME"

    def test_by_time_rejects_microseconds(self):
        with pytest.raises(InvalidValue):
            Daily(by_time=[time(9, 0, 0, 500)])


class TestWeekly:
    """Test Weekly frequency."""

    def test_by_day_sorted_monday_first(self):
        weekly = Weekly(by_day=[Weekday.SU, Weekday.TU, Weekday.MO])

        assert weekly.by_day == (Weekday.MO, Weekday.TU, Weekday.SU)

    def test_by_day_accepts_integers(self):
        weekly = Weekly(by_day=[4, 0])

        assert weekly.by_day == (Weekday.MO, Weekday.FR)
        assert all(isinstance(day, Weekday) for day in weekly.by_day)

    def test_by_day_rejects_out_of_range(self):
        with pytest.raises(InvalidValue):
            Weekly(by_day=[7])


class TestMonthly:
    """Test Monthly frequency and NthWeekday."""

    def test_by_month_day_range(self):
        assert Monthly(by_month_day=[31, 1]).by_month_day == (1, 31)

        with pytest.raises(InvalidValue):
            Monthly(by_month_day=[32])
        with pytest.raises(InvalidValue):
            Monthly(by_month_day=[0])

    def test_nth_weekdays_sorted(self):
        monthly = Monthly(
            nth_weekdays=[
                NthWeekday(ordinal=2, weekday=Weekday.TU),
                NthWeekday(ordinal=-1, weekday=Weekday.FR),
                NthWeekday(ordinal=1, weekday=Weekday.MO),
            ]
        )

        assert [str(nth) for nth in monthly.nth_weekdays] == ["-1FR", "1MO", "2TU"]

    def test_nth_weekdays_rejects_plain_weekday(self):
        with pytest.raises(InvalidValue):
            Monthly(nth_weekdays=[Weekday.MO])

    @pytest.mark.parametrize("ordinal", [0, 6, -6])
    def test_nth_weekday_ordinal_range(self, ordinal):
        with pytest.raises(InvalidValue):
            NthWeekday(ordinal=ordinal, weekday=Weekday.MO)

    def test_nth_weekday_str(self):
        assert str(NthWeekday(ordinal=-1, weekday=Weekday.FR)) == "-1FR"
        assert str(NthWeekday(ordinal=1, weekday=0)) == "1MO"


class TestYearly:
    """Test Yearly frequency and MonthlyDate."""

    def test_leap_day_allowed(self):
        assert MonthlyDate(month=2, day=29).day == 29

    def test_day_a_month_never_has_allowed(self):
        """31 April is valid; it simply never occurs."""
        assert MonthlyDate(month=4, day=31).day == 31

    @pytest.mark.parametrize("day", [0, 32])
    def test_day_range(self, day):
        with pytest.raises(InvalidValue) as exc_info:
            MonthlyDate(month=5, day=day)

        assert exc_info.value.attribute == "BYMONTHDAY"

    def test_month_range(self):
        with pytest.raises(InvalidValue) as exc_info:
            MonthlyDate(month=13, day=1)

        assert exc_info.value.attribute == "BYMONTH"

    def test_by_month_date_sorted(self):
        yearly = Yearly(
            by_month_date=[MonthlyDate(7, 4), MonthlyDate(1, 1), MonthlyDate(1, 4), MonthlyDate(7, 1)]
        )

        assert yearly.by_month_date == (
            MonthlyDate(1, 1), MonthlyDate(1, 4), MonthlyDate(7, 1), MonthlyDate(7, 4),
        )

    def test_by_month_date_must_be_combination(self):
        """29 February and 1 March cannot be written as BYMONTH x BYMONTHDAY."""
        with pytest.raises(InvalidValue) as exc_info:
            Yearly(by_month_date=[MonthlyDate(2, 29), MonthlyDate(3, 1)])

        assert exc_info.value.attribute == "BYMONTH"

    def test_by_month_date_duplicates_ignored(self):
        yearly = Yearly(by_month_date=[MonthlyDate(5, 31), MonthlyDate(5, 31)])

        assert yearly.by_month_date == (MonthlyDate(5, 31),)


class TestFrequencyValues:
    """Test value semantics of frequencies."""

    def test_equal_after_normalization(self):
        assert Daily(by_time=[time(9)]) == Daily(by_time=(time(9),))
        assert hash(Weekly(by_day=[1, 0])) == hash(Weekly(by_day=[0, 1]))

    def test_variants_not_equal(self):
        assert Daily(interval=1) != Weekly(interval=1)

    def test_frozen(self):
        daily = Daily()
        with pytest.raises(FrozenInstanceError):
            daily.interval = 2

    def test_frequency_names(self):
        assert set(FREQUENCIES) == {
            "SECONDLY", "MINUTELY", "HOURLY", "DAILY", "WEEKLY", "MONTHLY", "YEARLY",
        }
        assert FREQUENCIES["MONTHLY"] is Monthly
