"""
Frequency model for recurrence rules.

A frequency is one of a closed set of frozen dataclasses, one per
granularity:
- Secondly, Minutely, Hourly: fixed step, no expansion within a period
- Daily: optional times of day
- Weekly: optional weekdays
- Monthly: optional days of month and/or nth weekdays
- Yearly: optional (month, day) dates

Each variant validates itself on construction and normalizes its collection
fields into sorted, de-duplicated tuples, so two equal rules always compare
equal and iterate the same way.
"""

from dataclasses import dataclass
from datetime import time
from enum import IntEnum
from typing import Iterable

from rrules.exceptions import InvalidValue


class Weekday(IntEnum):
    """Day of the week, numbered like ``date.weekday()`` (Monday is 0)."""

    MO = 0
    TU = 1
    WE = 2
    TH = 3
    FR = 4
    SA = 5
    SU = 6

    @property
    def code(self) -> str:
        """Two-letter iCalendar code, e.g. ``MO``."""
        return self.name

    @classmethod
    def from_code(cls, code: str) -> "Weekday":
        """
        Resolve a two-letter iCalendar weekday code.

        Raises:
            InvalidValue: If the code is not one of MO..SU
        """
        try:
            return cls[code.strip().upper()]
        except KeyError:
            raise InvalidValue("BYDAY", f"unrecognized weekday code {code!r}") from None


@dataclass(frozen=True, order=True)
class NthWeekday:
    """
    The nth occurrence of a weekday within a month.

    Positive ordinals count from the first day of the month, negative ones
    from the last day (-1 is the last such weekday).
    """

    ordinal: int
    weekday: Weekday

    def __post_init__(self):
        if not isinstance(self.ordinal, int) or isinstance(self.ordinal, bool):
            raise InvalidValue("BYDAY", f"ordinal must be an integer, got {self.ordinal!r}")
        if self.ordinal == 0 or not -5 <= self.ordinal <= 5:
            raise InvalidValue("BYDAY", f"ordinal must be in -5..-1 or 1..5, got {self.ordinal}")
        try:
            object.__setattr__(self, "weekday", Weekday(self.weekday))
        except ValueError:
            raise InvalidValue("BYDAY", f"unrecognized weekday {self.weekday!r}") from None

    def __str__(self) -> str:
        return f"{self.ordinal}{self.weekday.code}"


@dataclass(frozen=True, order=True)
class MonthlyDate:
    """
    A day of a given month, e.g. 29 February.

    The day is only range-checked against 1..31; dates a month never has
    (31 April) are valid and simply never occur.
    """

    month: int
    day: int

    def __post_init__(self):
        _check_int("BYMONTH", self.month, 1, 12)
        _check_int("BYMONTHDAY", self.day, 1, 31)


def _check_int(attribute: str, value: int, low: int, high: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidValue(attribute, f"expected an integer, got {value!r}")
    if not low <= value <= high:
        raise InvalidValue(attribute, f"{value} is outside {low}..{high}")


def _check_interval(interval: int) -> None:
    if not isinstance(interval, int) or isinstance(interval, bool):
        raise InvalidValue("INTERVAL", f"expected an integer, got {interval!r}")
    if interval < 1:
        raise InvalidValue("INTERVAL", "interval must be greater than 0")


def _normalized(values: Iterable, key=None) -> tuple:
    return tuple(sorted(set(values), key=key))


# =============================================================================
# Frequency variants
# =============================================================================


@dataclass(frozen=True)
class Frequency:
    """Base class of the frequency variants. Not instantiated directly."""

    interval: int = 1

    name = ""

    def __post_init__(self):
        if type(self) is Frequency:
            raise TypeError("Frequency is abstract; use one of its variants")
        _check_interval(self.interval)


@dataclass(frozen=True)
class Secondly(Frequency):
    """Every ``interval`` seconds."""

    name = "SECONDLY"


@dataclass(frozen=True)
class Minutely(Frequency):
    """Every ``interval`` minutes."""

    name = "MINUTELY"


@dataclass(frozen=True)
class Hourly(Frequency):
    """Every ``interval`` hours."""

    name = "HOURLY"


@dataclass(frozen=True)
class Daily(Frequency):
    """
    Every ``interval`` days.

    With ``by_time`` set, each day yields one occurrence per time of day;
    otherwise the start's time of day is used.
    """

    by_time: tuple[time, ...] = ()

    name = "DAILY"

    def __post_init__(self):
        super().__post_init__()
        for value in self.by_time:
            if not isinstance(value, time):
                raise InvalidValue("BYTIME", f"expected a time of day, got {value!r}")
            if value.tzinfo is not None or value.microsecond:
                raise InvalidValue(
                    "BYTIME", f"{value} must be a naive time with whole seconds"
                )
        object.__setattr__(self, "by_time", _normalized(self.by_time))


@dataclass(frozen=True)
class Weekly(Frequency):
    """
    Every ``interval`` weeks, weeks starting on Monday.

    With ``by_day`` set, each week yields one occurrence per weekday;
    otherwise the start's weekday is used.
    """

    by_day: tuple[Weekday, ...] = ()

    name = "WEEKLY"

    def __post_init__(self):
        super().__post_init__()
        days = []
        for value in self.by_day:
            try:
                days.append(Weekday(value))
            except ValueError:
                raise InvalidValue("BYDAY", f"unrecognized weekday {value!r}") from None
        object.__setattr__(self, "by_day", _normalized(days))


@dataclass(frozen=True)
class Monthly(Frequency):
    """
    Every ``interval`` months.

    Candidates in a month are the union of ``by_month_day`` days that exist
    in that month and the resolved ``nth_weekdays``. With neither set, the
    start's day of month is used.
    """

    by_month_day: tuple[int, ...] = ()
    nth_weekdays: tuple[NthWeekday, ...] = ()

    name = "MONTHLY"

    def __post_init__(self):
        super().__post_init__()
        for day in self.by_month_day:
            _check_int("BYMONTHDAY", day, 1, 31)
        for nth in self.nth_weekdays:
            if not isinstance(nth, NthWeekday):
                raise InvalidValue("BYDAY", f"expected an ordinal weekday, got {nth!r}")
        object.__setattr__(self, "by_month_day", _normalized(self.by_month_day))
        object.__setattr__(self, "nth_weekdays", _normalized(self.nth_weekdays))


@dataclass(frozen=True)
class Yearly(Frequency):
    """
    Every ``interval`` years.

    Candidates are the ``by_month_date`` entries that exist in that year
    (29 February only in leap years). With none set, the start's month and
    day are used.

    The dates must be every combination of a set of months and a set of
    days, matching the BYMONTH x BYMONTHDAY text form.
    """

    by_month_date: tuple[MonthlyDate, ...] = ()

    name = "YEARLY"

    def __post_init__(self):
        super().__post_init__()
        for value in self.by_month_date:
            if not isinstance(value, MonthlyDate):
                raise InvalidValue("BYMONTH", f"expected a month date, got {value!r}")
        dates = _normalized(self.by_month_date)
        months = {value.month for value in dates}
        days = {value.day for value in dates}
        if len(months) * len(days) != len(dates):
            raise InvalidValue(
                "BYMONTH",
                "month dates do not form a BYMONTH x BYMONTHDAY combination",
            )
        object.__setattr__(self, "by_month_date", dates)


FREQUENCIES: dict[str, type[Frequency]] = {
    cls.name: cls for cls in (Secondly, Minutely, Hourly, Daily, Weekly, Monthly, Yearly)
}
