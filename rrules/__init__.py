"""
rrules: lazy expansion of iCalendar-style recurrence rules.

Example:
    >>> from rrules import Recurrence
    >>> recurrence = Recurrence.from_string(
    ...     "FREQ=MONTHLY;INTERVAL=1;DTSTART=2023-01-01T12:00:00Z;BYDAY=1MO"
    ... )
    >>> [dt.day for dt, _ in zip(recurrence, range(3))]
    [2, 6, 6]
"""

from rrules.exceptions import (
    InvalidValue,
    MissingRequiredAttribute,
    RecurrenceError,
    UnknownAttribute,
    UnknownFrequency,
    UnsupportedAttributeForFrequency,
)
from rrules.models import (
    MAX_DATE,
    Daily,
    Frequency,
    Hourly,
    Minutely,
    Monthly,
    MonthlyDate,
    NthWeekday,
    RecurrenceRule,
    Secondly,
    Weekday,
    Weekly,
    Yearly,
)
from rrules.services import (
    OccurrenceCursor,
    Recurrence,
    RecurrenceInstance,
    count_instances_in_range,
    expand_recurrence,
    format_rule,
    get_next_occurrence,
    occurs_at,
    parse_attributes,
    parse_rule,
    validate_rrule,
)

__all__ = [
    "InvalidValue",
    "MissingRequiredAttribute",
    "RecurrenceError",
    "UnknownAttribute",
    "UnknownFrequency",
    "UnsupportedAttributeForFrequency",
    "MAX_DATE",
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
    "RecurrenceRule",
    "OccurrenceCursor",
    "Recurrence",
    "RecurrenceInstance",
    "count_instances_in_range",
    "expand_recurrence",
    "format_rule",
    "get_next_occurrence",
    "occurs_at",
    "parse_attributes",
    "parse_rule",
    "validate_rrule",
]
