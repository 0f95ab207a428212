"""
Data model for recurrence rules.

Exports:
- Frequency variants and their value types
- RecurrenceRule: the immutable rule descriptor
- MAX_DATE: upper bound of open-ended rules
"""

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
from rrules.models.recurrence import MAX_DATE, RecurrenceRule, to_utc

__all__ = [
    # Frequencies
    "FREQUENCIES",
    "Frequency",
    "Secondly",
    "Minutely",
    "Hourly",
    "Daily",
    "Weekly",
    "Monthly",
    "Yearly",
    "Weekday",
    "NthWeekday",
    "MonthlyDate",
    # Rules
    "MAX_DATE",
    "RecurrenceRule",
    "to_utc",
]
