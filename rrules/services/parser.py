"""
Recurrence rule parser and formatter.

Turns ``KEY=VALUE`` attribute lists such as
``FREQ=WEEKLY;INTERVAL=1;DTSTART=2023-01-02T12:00:00Z;BYDAY=MO,TU`` into
validated RecurrenceRule objects, and back.

Supported attributes:
- FREQ, INTERVAL, DTSTART (required)
- DTEND, DURATION (optional; DTEND bounds the sequence when both are given)
- BYTIME (DAILY), BYDAY (WEEKLY, MONTHLY), BYMONTHDAY (MONTHLY, YEARLY),
  BYMONTH (YEARLY)

Instants are parsed with python-dateutil, durations with pydantic.
"""

import logging
import re
from datetime import datetime, time, timedelta
from itertools import product
from typing import Iterable, Mapping, Optional, Union

from dateutil.parser import isoparse
from pydantic import TypeAdapter, ValidationError

from rrules.exceptions import (
    InvalidValue,
    MissingRequiredAttribute,
    UnknownAttribute,
    UnknownFrequency,
    UnsupportedAttributeForFrequency,
)
from rrules.models.frequencies import (
    FREQUENCIES,
    Daily,
    Frequency,
    Monthly,
    MonthlyDate,
    NthWeekday,
    Weekday,
    Weekly,
    Yearly,
)
from rrules.models.recurrence import RecurrenceRule, to_utc

logger = logging.getLogger(__name__)

REQUIRED_ATTRIBUTES = ("FREQ", "INTERVAL", "DTSTART")
COMMON_ATTRIBUTES = frozenset({"FREQ", "INTERVAL", "DTSTART", "DTEND", "DURATION"})

# Optional attributes allowed on top of the common ones, per frequency
FREQUENCY_ATTRIBUTES = {
    "SECONDLY": frozenset(),
    "MINUTELY": frozenset(),
    "HOURLY": frozenset(),
    "DAILY": frozenset({"BYTIME"}),
    "WEEKLY": frozenset({"BYDAY"}),
    "MONTHLY": frozenset({"BYDAY", "BYMONTHDAY"}),
    "YEARLY": frozenset({"BYMONTH", "BYMONTHDAY"}),
}

KNOWN_ATTRIBUTES = COMMON_ATTRIBUTES.union(*FREQUENCY_ATTRIBUTES.values())

_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")
_NTH_WEEKDAY_PATTERN = re.compile(r"^([+-]?\d+)([A-Z]{2})$")
_INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")

_duration_adapter = TypeAdapter(timedelta)

Attributes = Union[Mapping[str, str], Iterable[tuple[str, str]]]


# =============================================================================
# Value parsers
# =============================================================================


def parse_instant(value: str, attribute: str = "DTSTART") -> datetime:
    """
    Parse an ISO 8601 instant such as ``2023-01-01T12:00:00Z``.

    Instants without an offset are taken as UTC.
    """
    try:
        parsed = isoparse(value.strip())
    except (ValueError, OverflowError) as e:
        raise InvalidValue(attribute, f"{value!r} is not an ISO 8601 instant ({e})") from e
    return to_utc(parsed, attribute)


def parse_duration(value: str) -> timedelta:
    """
    Parse an ISO 8601 duration such as ``PT1H`` or ``P1DT30M``.

    Raises:
        InvalidValue: If the value is malformed or negative
    """
    text = value.strip().upper()
    if not text.lstrip("+-").startswith("P"):
        raise InvalidValue("DURATION", f"{value!r} is not an ISO 8601 duration")
    try:
        duration = _duration_adapter.validate_python(text)
    except ValidationError as e:
        raise InvalidValue("DURATION", f"{value!r} is not an ISO 8601 duration") from e
    if duration < timedelta(0):
        raise InvalidValue("DURATION", "duration must not be negative")
    return duration


def parse_integer(value: str, attribute: str, low: int, high: Optional[int] = None) -> int:
    """Parse a decimal integer and check it lies in ``low..high``."""
    text = value.strip()
    if not _INTEGER_PATTERN.match(text):
        raise InvalidValue(attribute, f"{value!r} is not an integer")
    number = int(text)
    if number < low or (high is not None and number > high):
        bound = f"{low}..{high}" if high is not None else f">= {low}"
        raise InvalidValue(attribute, f"{number} is outside {bound}")
    return number


def parse_time(value: str) -> time:
    """Parse a ``HH:MM`` or ``HH:MM:SS`` time of day."""
    match = _TIME_PATTERN.match(value.strip())
    if not match:
        raise InvalidValue("BYTIME", f"{value!r} is not a HH:MM[:SS] time")
    hour, minute, second = match.groups()
    try:
        return time(int(hour), int(minute), int(second or 0))
    except ValueError as e:
        raise InvalidValue("BYTIME", f"{value!r} is out of range") from e


def parse_nth_weekday(value: str) -> NthWeekday:
    """Parse an ordinal weekday code such as ``1MO`` or ``-1FR``."""
    text = value.strip().upper()
    match = _NTH_WEEKDAY_PATTERN.match(text)
    if not match:
        if text in Weekday.__members__:
            raise InvalidValue("BYDAY", f"{value!r} needs an ordinal prefix with FREQ=MONTHLY, e.g. 1{text}")
        raise InvalidValue("BYDAY", f"{value!r} is not an ordinal weekday code")
    ordinal, code = match.groups()
    return NthWeekday(ordinal=int(ordinal), weekday=Weekday.from_code(code))


def _split_list(value: str, attribute: str) -> list[str]:
    items = [item.strip() for item in value.split(",")]
    if not value.strip() or any(not item for item in items):
        raise InvalidValue(attribute, f"{value!r} is not a comma-separated list")
    return items


# =============================================================================
# Rule parsing
# =============================================================================


def _collect(attributes: Attributes) -> dict[str, str]:
    pairs = attributes.items() if isinstance(attributes, Mapping) else attributes
    collected: dict[str, str] = {}
    for key, value in pairs:
        name = str(key).strip().upper()
        if not name:
            raise InvalidValue(str(key), "attribute name is empty")
        if name not in KNOWN_ATTRIBUTES:
            raise UnknownAttribute(name)
        if name in collected:
            raise InvalidValue(name, "attribute is given more than once")
        collected[name] = str(value)
    return collected


def _build_frequency(name: str, interval: int, values: dict[str, str], start: datetime) -> Frequency:
    if name == "DAILY":
        by_time = [parse_time(item) for item in _split_list(values["BYTIME"], "BYTIME")] if "BYTIME" in values else []
        return Daily(interval=interval, by_time=by_time)

    if name == "WEEKLY":
        by_day = [Weekday.from_code(item) for item in _split_list(values["BYDAY"], "BYDAY")] if "BYDAY" in values else []
        return Weekly(interval=interval, by_day=by_day)

    if name == "MONTHLY":
        by_month_day = []
        nth_weekdays = []
        if "BYMONTHDAY" in values:
            by_month_day = [
                parse_integer(item, "BYMONTHDAY", 1, 31)
                for item in _split_list(values["BYMONTHDAY"], "BYMONTHDAY")
            ]
        if "BYDAY" in values:
            nth_weekdays = [parse_nth_weekday(item) for item in _split_list(values["BYDAY"], "BYDAY")]
        return Monthly(interval=interval, by_month_day=by_month_day, nth_weekdays=nth_weekdays)

    if name == "YEARLY":
        if "BYMONTH" not in values and "BYMONTHDAY" not in values:
            return Yearly(interval=interval)
        months = [start.month]
        days = [start.day]
        if "BYMONTH" in values:
            months = [parse_integer(item, "BYMONTH", 1, 12) for item in _split_list(values["BYMONTH"], "BYMONTH")]
        if "BYMONTHDAY" in values:
            days = [
                parse_integer(item, "BYMONTHDAY", 1, 31)
                for item in _split_list(values["BYMONTHDAY"], "BYMONTHDAY")
            ]
        return Yearly(
            interval=interval,
            by_month_date=[MonthlyDate(month=month, day=day) for month, day in product(months, days)],
        )

    return FREQUENCIES[name](interval=interval)


def parse_attributes(attributes: Attributes) -> RecurrenceRule:
    """
    Build a RecurrenceRule from unordered ``(KEY, VALUE)`` attributes.

    Args:
        attributes: Mapping or iterable of key/value pairs; keys are
            case-insensitive

    Returns:
        Validated, immutable RecurrenceRule

    Raises:
        UnknownAttribute: A key outside the supported grammar
        MissingRequiredAttribute: FREQ, INTERVAL or DTSTART is absent
        UnknownFrequency: FREQ is not a supported frequency
        UnsupportedAttributeForFrequency: e.g. BYTIME with FREQ=WEEKLY
        InvalidValue: A value fails its grammar or range
    """
    values = _collect(attributes)

    for name in REQUIRED_ATTRIBUTES:
        if name not in values:
            raise MissingRequiredAttribute(name)

    frequency_name = values["FREQ"].strip().upper()
    if frequency_name not in FREQUENCY_ATTRIBUTES:
        raise UnknownFrequency(values["FREQ"])

    allowed = COMMON_ATTRIBUTES | FREQUENCY_ATTRIBUTES[frequency_name]
    for name in values:
        if name not in allowed:
            raise UnsupportedAttributeForFrequency(name, frequency_name)

    interval = parse_integer(values["INTERVAL"], "INTERVAL", 1)
    start = parse_instant(values["DTSTART"], "DTSTART")
    end = parse_instant(values["DTEND"], "DTEND") if "DTEND" in values else None
    duration = parse_duration(values["DURATION"]) if "DURATION" in values else None

    frequency = _build_frequency(frequency_name, interval, values, start)
    rule = RecurrenceRule(frequency=frequency, start=start, end=end, duration=duration)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"Parsed recurrence rule: {format_rule(rule)}")
    return rule


def parse_rule(text: str) -> RecurrenceRule:
    """
    Parse a semicolon-separated rule string.

    Example:
        >>> rule = parse_rule("FREQ=DAILY;INTERVAL=1;DTSTART=2023-01-01T08:00:00Z")
        >>> rule.frequency
        Daily(interval=1, by_time=())
    """
    if not isinstance(text, str):
        raise InvalidValue("RRULE", f"expected a string, got {type(text).__name__}")

    pairs = []
    for segment in text.strip().split(";"):
        segment = segment.strip()
        if not segment:
            continue
        key, separator, value = segment.partition("=")
        if not separator:
            raise InvalidValue(segment, "expected KEY=VALUE")
        pairs.append((key, value))
    return parse_attributes(pairs)


# =============================================================================
# Formatting
# =============================================================================


def format_instant(value: datetime) -> str:
    """Format an instant as ISO 8601 UTC with a ``Z`` suffix."""
    return to_utc(value).replace(tzinfo=None).isoformat() + "Z"


def format_duration(value: timedelta) -> str:
    """
    Format a non-negative timedelta as an ISO 8601 duration.

    Example:
        >>> format_duration(timedelta(days=1, minutes=30))
        'P1DT30M'
    """
    days = value.days
    hours, remainder = divmod(value.seconds, 3600)
    minutes, seconds = divmod(remainder, 60)

    text = "P"
    if days:
        text += f"{days}D"
    clock = ""
    if hours:
        clock += f"{hours}H"
    if minutes:
        clock += f"{minutes}M"
    if seconds or value.microseconds:
        if value.microseconds:
            clock += f"{seconds}.{value.microseconds:06d}".rstrip("0") + "S"
        else:
            clock += f"{seconds}S"
    if clock:
        text += "T" + clock
    if text == "P":
        text = "PT0S"
    return text


def _format_time(value: time) -> str:
    return value.strftime("%H:%M:%S" if value.second else "%H:%M")


def _format_month_dates(month_dates: tuple[MonthlyDate, ...]) -> list[str]:
    months = sorted({item.month for item in month_dates})
    days = sorted({item.day for item in month_dates})
    return [
        "BYMONTH=" + ",".join(str(month) for month in months),
        "BYMONTHDAY=" + ",".join(str(day) for day in days),
    ]


def format_frequency(frequency: Frequency) -> str:
    """Render the FREQ, INTERVAL and BY* attributes of a frequency."""
    parts = [f"FREQ={frequency.name}", f"INTERVAL={frequency.interval}"]

    if isinstance(frequency, Daily) and frequency.by_time:
        parts.append("BYTIME=" + ",".join(_format_time(t) for t in frequency.by_time))
    elif isinstance(frequency, Weekly) and frequency.by_day:
        parts.append("BYDAY=" + ",".join(day.code for day in frequency.by_day))
    elif isinstance(frequency, Monthly):
        if frequency.by_month_day:
            parts.append("BYMONTHDAY=" + ",".join(str(day) for day in frequency.by_month_day))
        if frequency.nth_weekdays:
            parts.append("BYDAY=" + ",".join(str(nth) for nth in frequency.nth_weekdays))
    elif isinstance(frequency, Yearly) and frequency.by_month_date:
        parts.extend(_format_month_dates(frequency.by_month_date))

    return ";".join(parts)


def format_rule(rule: RecurrenceRule) -> str:
    """
    Render a rule in the text form accepted by parse_rule.

    Example:
        >>> format_rule(parse_rule("FREQ=WEEKLY;INTERVAL=2;BYDAY=TU,MO;DTSTART=2023-01-02T12:00:00Z"))
        'FREQ=WEEKLY;INTERVAL=2;BYDAY=MO,TU;DTSTART=2023-01-02T12:00:00Z'
    """
    parts = [format_frequency(rule.frequency), f"DTSTART={format_instant(rule.start)}"]
    if rule.end is not None:
        parts.append(f"DTEND={format_instant(rule.end)}")
    if rule.duration is not None:
        parts.append(f"DURATION={format_duration(rule.duration)}")
    return ";".join(parts)
