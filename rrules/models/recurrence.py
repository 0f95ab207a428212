"""
Immutable recurrence rule descriptor.

A RecurrenceRule pairs a Frequency with the period it applies to. It is
validated once on construction and never mutated, so any number of cursors
can traverse the same rule independently.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from rrules.config import get_settings
from rrules.exceptions import InvalidValue
from rrules.models.frequencies import Frequency

# Upper bound used whenever a rule has no explicit end
MAX_DATE = datetime(9999, 12, 31, 23, 59, 59, tzinfo=timezone.utc)


def to_utc(value: datetime, attribute: str = "DTSTART") -> datetime:
    """
    Normalize an instant to an aware UTC datetime.

    Naive datetimes are taken to already be UTC.

    Raises:
        InvalidValue: If value is not a datetime, or its UTC equivalent
            falls outside years 1..9999
    """
    if not isinstance(value, datetime):
        raise InvalidValue(attribute, f"expected a datetime, got {value!r}")
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    try:
        return value.astimezone(timezone.utc)
    except OverflowError as e:
        raise InvalidValue(attribute, f"{value.isoformat()} is out of range in UTC") from e


@dataclass(frozen=True)
class RecurrenceRule:
    """
    A validated recurrence rule.

    Attributes:
        frequency: One of the Frequency variants
        start: First instant the rule may produce (UTC)
        end: Last instant the rule may produce, or None for open-ended rules
        duration: Length of each occurrence, or None to use the default

    When both an end and a duration are given, the end bounds the sequence
    and the duration only describes the length of each occurrence.
    """

    frequency: Frequency
    start: datetime
    end: Optional[datetime] = None
    duration: Optional[timedelta] = None

    def __post_init__(self):
        if not isinstance(self.frequency, Frequency) or type(self.frequency) is Frequency:
            raise InvalidValue("FREQ", f"expected a frequency variant, got {self.frequency!r}")

        object.__setattr__(self, "start", to_utc(self.start, "DTSTART"))
        if self.end is not None:
            object.__setattr__(self, "end", to_utc(self.end, "DTEND"))
            if self.end < self.start:
                raise InvalidValue("DTEND", "end must not be before start")

        if self.duration is not None:
            if not isinstance(self.duration, timedelta):
                raise InvalidValue("DURATION", f"expected a timedelta, got {self.duration!r}")
            if self.duration < timedelta(0):
                raise InvalidValue("DURATION", "duration must not be negative")

    @property
    def effective_end(self) -> datetime:
        """The end of the rule, or MAX_DATE when it has none."""
        return self.end if self.end is not None else MAX_DATE

    @property
    def effective_duration(self) -> timedelta:
        """The duration of each occurrence, falling back to the configured default."""
        if self.duration is not None:
            return self.duration
        return get_settings().default_duration

    @property
    def is_open_ended(self) -> bool:
        return self.end is None
