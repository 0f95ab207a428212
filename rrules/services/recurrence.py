"""
Recurrence facade and window expansion service.

Exposes the occurrence engine as:
- Recurrence: a single-use pull sequence (has_next / take_next / iteration)
- Window helpers that expand a rule into RecurrenceInstance objects,
  find the next occurrence, or count occurrences in a range

The helpers accept either a RecurrenceRule or rule text.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from itertools import islice
from typing import Iterator, Optional, Union

from dateutil.parser import parse as parse_datetime

from rrules.config import get_settings
from rrules.exceptions import RecurrenceError
from rrules.models.recurrence import RecurrenceRule, to_utc
from rrules.services.engine import OccurrenceCursor, occurs_at
from rrules.services.parser import parse_rule

logger = logging.getLogger(__name__)

RuleLike = Union[RecurrenceRule, str]


def _as_rule(rule: RuleLike) -> RecurrenceRule:
    if isinstance(rule, RecurrenceRule):
        return rule
    return parse_rule(rule)


@dataclass
class RecurrenceInstance:
    """Represents a single occurrence of a recurrence rule."""

    instance_start: datetime
    instance_end: datetime
    recurrence_id: str


class Recurrence:
    """
    Lazy, finite sequence of the occurrences of a rule.

    The sequence can be consumed once. Build another Recurrence from the same
    rule to traverse it again; traversals never affect each other. With
    ``since`` set, the sequence starts at the first occurrence at or after it.

    Example:
        >>> recurrence = Recurrence.from_string("FREQ=DAILY;INTERVAL=1;DTSTART=2023-01-01T08:00:00Z")
        >>> recurrence.take_next()
        datetime.datetime(2023, 1, 1, 8, 0, tzinfo=datetime.timezone.utc)
    """

    def __init__(self, rule: RecurrenceRule, since: Optional[datetime] = None):
        self.rule = rule
        self._cursor = OccurrenceCursor(rule, since=since)
        self._lookahead: Optional[datetime] = None

    @classmethod
    def from_string(cls, text: str) -> "Recurrence":
        """Parse rule text and wrap it."""
        return cls(parse_rule(text))

    def has_next(self) -> bool:
        """Return whether another occurrence is available."""
        if self._lookahead is None:
            self._lookahead = next(self._cursor, None)
        return self._lookahead is not None

    def take_next(self) -> datetime:
        """
        Return the next occurrence.

        Raises:
            StopIteration: If the sequence is exhausted
        """
        if not self.has_next():
            raise StopIteration
        occurrence, self._lookahead = self._lookahead, None
        return occurrence

    def __iter__(self) -> Iterator[datetime]:
        return self

    def __next__(self) -> datetime:
        return self.take_next()

    def contains(self, instant: datetime) -> bool:
        """Return whether ``instant`` is one of the rule's occurrences."""
        return occurs_at(self.rule, instant)


def iter_occurrences(rule: RuleLike) -> Iterator[datetime]:
    """Return a fresh iterator over all occurrences of a rule."""
    return Recurrence(_as_rule(rule))


def _occurrences_between(
    rule: RecurrenceRule,
    window_start: datetime,
    window_end: datetime,
) -> Iterator[datetime]:
    window_start = to_utc(window_start, "window_start")
    window_end = to_utc(window_end, "window_end")
    for occurrence in Recurrence(rule, since=window_start):
        if occurrence > window_end:
            return
        yield occurrence


def expand_recurrence(
    rule: RuleLike,
    window_start: datetime,
    window_end: datetime,
    max_instances: Optional[int] = None,
) -> list[RecurrenceInstance]:
    """
    Expand a rule into instances within a time window.

    Args:
        rule: RecurrenceRule or rule text
        window_start: Start of query window (inclusive)
        window_end: End of query window (inclusive)
        max_instances: Maximum instances to generate (default from settings)

    Returns:
        List of RecurrenceInstance objects whose start lies in the window.
        Each instance lasts the rule's duration, or the configured default.
    """
    rule = _as_rule(rule)
    if max_instances is None:
        max_instances = get_settings().max_instances

    duration = rule.effective_duration
    instances = [
        RecurrenceInstance(
            instance_start=occurrence,
            instance_end=occurrence + duration,
            recurrence_id=format_recurrence_id(occurrence),
        )
        for occurrence in islice(_occurrences_between(rule, window_start, window_end), max_instances)
    ]
    logger.debug(f"Expanded {len(instances)} instances between {window_start} and {window_end}")
    return instances


def format_recurrence_id(dt: datetime) -> str:
    """
    Format a datetime as a recurrence ID (iCalendar RECURRENCE-ID format).

    Args:
        dt: Datetime to format

    Returns:
        String in YYYYMMDDTHHMMSS format
    """
    return dt.strftime("%Y%m%dT%H%M%S")


def parse_recurrence_id(recurrence_id: str) -> Optional[datetime]:
    """
    Parse a recurrence ID back to a UTC datetime.

    Args:
        recurrence_id: String in YYYYMMDDTHHMMSS format

    Returns:
        Datetime or None if parsing fails
    """
    try:
        return to_utc(parse_datetime(recurrence_id))
    except (ValueError, TypeError, OverflowError):
        return None


def get_next_occurrence(
    rule: RuleLike,
    after: Optional[datetime] = None,
) -> Optional[datetime]:
    """
    Get the next occurrence of a rule.

    Args:
        rule: RecurrenceRule or rule text
        after: Find occurrence strictly after this time (default: now)

    Returns:
        Next occurrence datetime or None
    """
    rule = _as_rule(rule)
    if after is None:
        after = datetime.now().astimezone()
    after = to_utc(after, "after")

    for occurrence in Recurrence(rule, since=after):
        if occurrence > after:
            return occurrence
    return None


def validate_rrule(rrule_string: str) -> tuple[bool, Optional[str]]:
    """
    Validate a rule string.

    Args:
        rrule_string: Rule text to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not rrule_string:
        return False, "RRULE string is empty"

    if not rrule_string.strip():
        return False, "RRULE string is blank"

    try:
        rule = parse_rule(rrule_string)
    except RecurrenceError as e:
        return False, e.message

    if not Recurrence(rule).has_next():
        return False, "RRULE generates no occurrences"

    return True, None


def count_instances_in_range(
    rule: RuleLike,
    window_start: datetime,
    window_end: datetime,
    max_count: Optional[int] = None,
) -> int:
    """
    Count instances within a time window without building them.

    Useful for checking if expansion would be expensive.

    Args:
        rule: RecurrenceRule or rule text
        window_start: Start of query window
        window_end: End of query window
        max_count: Stop counting after this many (default from settings)

    Returns:
        Number of instances (capped at max_count)
    """
    rule = _as_rule(rule)
    if max_count is None:
        max_count = get_settings().max_count

    count = 0
    for _ in _occurrences_between(rule, window_start, window_end):
        count += 1
        if count >= max_count:
            break
    return count
