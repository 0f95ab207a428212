"""
Service layer for rrules.

Provides:
- Calendar helpers (leap years, month lengths, nth weekday resolution)
- Rule parsing and formatting
- The occurrence engine
- The Recurrence facade and window expansion helpers
"""

from rrules.services.calendar import (
    add_months,
    days_in_month,
    is_leap_year,
    nth_weekday_of_month,
    start_of_week,
    weekday_of,
)

from rrules.services.parser import (
    format_duration,
    format_rule,
    parse_attributes,
    parse_rule,
)

from rrules.services.engine import (
    OccurrenceCursor,
    occurs_at,
    period_candidates,
    seek,
)

from rrules.services.recurrence import (
    Recurrence,
    RecurrenceInstance,
    iter_occurrences,
    expand_recurrence,
    format_recurrence_id,
    parse_recurrence_id,
    get_next_occurrence,
    validate_rrule,
    count_instances_in_range,
)

__all__ = [
    # Calendar helpers
    "add_months",
    "days_in_month",
    "is_leap_year",
    "nth_weekday_of_month",
    "start_of_week",
    "weekday_of",
    # Parsing
    "format_duration",
    "format_rule",
    "parse_attributes",
    "parse_rule",
    # Engine
    "OccurrenceCursor",
    "occurs_at",
    "period_candidates",
    "seek",
    # Recurrence
    "Recurrence",
    "RecurrenceInstance",
    "iter_occurrences",
    "expand_recurrence",
    "format_recurrence_id",
    "parse_recurrence_id",
    "get_next_occurrence",
    "validate_rrule",
    "count_instances_in_range",
]
