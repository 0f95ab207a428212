"""
Occurrence engine.

Expands a RecurrenceRule period by period:
- The probe marks the origin of the current period (an instant for
  sub-daily frequencies, midnight of the day / Monday / first of the month /
  first of January otherwise)
- Each period yields a sorted list of candidates, buffered in a queue
- The probe then advances by ``interval`` periods, whether or not the
  period produced anything

Impossible dates (31 February, a fifth Monday in a four-Monday month) simply
produce no candidate. The sequence ends once a candidate or the probe passes
the rule's end (MAX_DATE for open-ended rules), or when date arithmetic runs
past year 9999.
"""

import logging
from collections import deque
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from rrules.models.frequencies import (
    Daily,
    Frequency,
    Hourly,
    Minutely,
    Monthly,
    Secondly,
    Weekly,
    Yearly,
)
from rrules.models.recurrence import RecurrenceRule, to_utc
from rrules.services.calendar import (
    add_months,
    days_in_month,
    nth_weekday_of_month,
    start_of_week,
)

logger = logging.getLogger(__name__)

_STEP_SECONDS = {Secondly: 1, Minutely: 60, Hourly: 3600}


def _unknown(frequency: Frequency) -> TypeError:
    return TypeError(f"Unhandled frequency variant: {type(frequency).__name__}")


def _midnight(day: date) -> datetime:
    return datetime.combine(day, time(), tzinfo=timezone.utc)


def _at(day: date, time_of_day: time) -> datetime:
    return datetime.combine(day, time_of_day.replace(tzinfo=timezone.utc))


# =============================================================================
# Periods
# =============================================================================


def period_origin(frequency: Frequency, instant: datetime) -> datetime:
    """
    Return the origin of the period containing ``instant``.

    Sub-daily frequencies have no period structure beyond the step itself,
    so the origin is the instant.
    """
    if isinstance(frequency, (Secondly, Minutely, Hourly)):
        return instant
    if isinstance(frequency, Daily):
        return _midnight(instant.date())
    if isinstance(frequency, Weekly):
        return _midnight(start_of_week(instant.date()))
    if isinstance(frequency, Monthly):
        return _midnight(instant.date().replace(day=1))
    if isinstance(frequency, Yearly):
        return _midnight(date(instant.year, 1, 1))
    raise _unknown(frequency)


def advance(frequency: Frequency, probe: datetime) -> datetime:
    """
    Move a period origin ``interval`` periods ahead.

    Raises:
        OverflowError, ValueError: If the result is past year 9999
    """
    interval = frequency.interval
    if isinstance(frequency, (Secondly, Minutely, Hourly)):
        return probe + timedelta(seconds=_STEP_SECONDS[type(frequency)] * interval)
    if isinstance(frequency, Daily):
        return probe + timedelta(days=interval)
    if isinstance(frequency, Weekly):
        return probe + timedelta(weeks=interval)
    if isinstance(frequency, Monthly):
        year, month = add_months(probe.year, probe.month, interval)
        return probe.replace(year=year, month=month)
    if isinstance(frequency, Yearly):
        return probe.replace(year=probe.year + interval)
    raise _unknown(frequency)


def is_aligned(frequency: Frequency, origin: datetime, probe: datetime) -> bool:
    """Return whether ``probe`` is a whole number of steps after ``origin``."""
    interval = frequency.interval
    if probe < origin:
        return False
    if isinstance(frequency, (Secondly, Minutely, Hourly)):
        step = timedelta(seconds=_STEP_SECONDS[type(frequency)] * interval)
        return (probe - origin) % step == timedelta(0)
    if isinstance(frequency, Daily):
        return (probe - origin).days % interval == 0
    if isinstance(frequency, Weekly):
        return (probe - origin).days // 7 % interval == 0
    if isinstance(frequency, Monthly):
        months = (probe.year - origin.year) * 12 + probe.month - origin.month
        return months % interval == 0
    if isinstance(frequency, Yearly):
        return (probe.year - origin.year) % interval == 0
    raise _unknown(frequency)


def seek(frequency: Frequency, origin: datetime, instant: datetime) -> datetime:
    """
    Return the last period origin at or before the period containing ``instant``.

    Args:
        frequency: Frequency of the rule
        origin: Origin of the rule's first period
        instant: Instant to seek to; not before ``origin``

    Occurrences at or after ``instant`` all lie in the returned period or
    later ones, so a cursor can start there instead of at ``origin``.
    """
    interval = frequency.interval
    if isinstance(frequency, (Secondly, Minutely, Hourly)):
        step = timedelta(seconds=_STEP_SECONDS[type(frequency)] * interval)
        return origin + (instant - origin) // step * step
    if isinstance(frequency, Daily):
        days = (period_origin(frequency, instant) - origin).days
        return origin + timedelta(days=days - days % interval)
    if isinstance(frequency, Weekly):
        weeks = (period_origin(frequency, instant) - origin).days // 7
        return origin + timedelta(weeks=weeks - weeks % interval)
    if isinstance(frequency, Monthly):
        months = (instant.year - origin.year) * 12 + instant.month - origin.month
        year, month = add_months(origin.year, origin.month, months - months % interval)
        return origin.replace(year=year, month=month)
    if isinstance(frequency, Yearly):
        years = instant.year - origin.year
        return origin.replace(year=origin.year + years - years % interval)
    raise _unknown(frequency)


def period_candidates(
    frequency: Frequency,
    probe: datetime,
    start: datetime,
) -> list[datetime]:
    """
    Compute the candidate instants of one period.

    Args:
        frequency: Frequency of the rule
        probe: Origin of the period, as returned by period_origin/advance
        start: Start of the rule; supplies the default time of day, weekday,
            day of month and month

    Returns:
        Candidates in strictly ascending order. Dates that do not exist in
        this period are left out, so the list may be empty.
    """
    time_of_day = start.time()

    if isinstance(frequency, (Secondly, Minutely, Hourly)):
        return [probe]

    if isinstance(frequency, Daily):
        times = frequency.by_time or (time_of_day,)
        return [_at(probe.date(), t) for t in times]

    if isinstance(frequency, Weekly):
        weekdays = frequency.by_day or (start.weekday(),)
        candidates = []
        for weekday in weekdays:
            try:
                day = probe.date() + timedelta(days=weekday)
            except OverflowError:
                break
            candidates.append(_at(day, time_of_day))
        return candidates

    if isinstance(frequency, Monthly):
        year, month = probe.year, probe.month
        last_day = days_in_month(year, month)
        days = {day for day in frequency.by_month_day if day <= last_day}
        for nth in frequency.nth_weekdays:
            day = nth_weekday_of_month(year, month, nth.weekday, nth.ordinal)
            if day is not None:
                days.add(day)
        if not frequency.by_month_day and not frequency.nth_weekdays and start.day <= last_day:
            days.add(start.day)
        return [_at(date(year, month, day), time_of_day) for day in sorted(days)]

    if isinstance(frequency, Yearly):
        year = probe.year
        if frequency.by_month_date:
            month_days = [(item.month, item.day) for item in frequency.by_month_date]
        else:
            month_days = [(start.month, start.day)]
        candidates = []
        for month, day in month_days:
            if day <= days_in_month(year, month):
                candidates.append(_at(date(year, month, day), time_of_day))
        return candidates

    raise _unknown(frequency)


def occurs_at(rule: RecurrenceRule, instant: datetime) -> bool:
    """
    Check whether an instant is one of the rule's occurrences.

    Works directly on the period containing the instant instead of iterating
    from the start of the rule.

    Example:
        >>> rule = RecurrenceRule(Weekly(by_day=[Weekday.MO]), datetime(2023, 1, 2, 9))
        >>> occurs_at(rule, datetime(2023, 1, 9, 9))
        True
    """
    instant = to_utc(instant, "instant")
    if instant < rule.start or instant > rule.effective_end:
        return False

    frequency = rule.frequency
    origin = period_origin(frequency, rule.start)
    probe = period_origin(frequency, instant)
    if not is_aligned(frequency, origin, probe):
        return False
    return instant in period_candidates(frequency, probe, rule.start)


# =============================================================================
# Cursor
# =============================================================================


class OccurrenceCursor:
    """
    Single-use iterator over the occurrences of a rule.

    The rule is never modified; build a new cursor to start over. Cursors
    built from the same rule share no state.

    With ``since`` set, the cursor skips straight to the period containing
    it and yields only occurrences at or after it.
    """

    def __init__(self, rule: RecurrenceRule, since: Optional[datetime] = None):
        self.rule = rule
        self._end = rule.effective_end
        self._since = rule.start
        self._pending: deque[datetime] = deque()
        self._probe: Optional[datetime] = period_origin(rule.frequency, rule.start)
        if since is not None:
            since = to_utc(since, "since")
            if since > rule.start:
                self._since = since
                self._probe = seek(rule.frequency, self._probe, since)
        self._exhausted = False

    def __iter__(self) -> "OccurrenceCursor":
        return self

    def __next__(self) -> datetime:
        while not self._pending:
            if self._exhausted or self._probe is None:
                self._terminate()
                raise StopIteration
            self._expand_period()

        candidate = self._pending.popleft()
        if candidate > self._end:
            self._terminate()
            raise StopIteration
        return candidate

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def _expand_period(self) -> None:
        probe = self._probe
        if probe > self._end:
            self._probe = None
            return

        frequency = self.rule.frequency
        candidates = [
            candidate
            for candidate in period_candidates(frequency, probe, self.rule.start)
            if candidate >= self._since
        ]
        if not candidates:
            logger.debug(f"No occurrences in {frequency.name} period starting {probe.isoformat()}")
        self._pending.extend(candidates)

        try:
            self._probe = advance(frequency, probe)
        except (ValueError, OverflowError):
            # Past year 9999, so past MAX_DATE as well
            self._probe = None

    def _terminate(self) -> None:
        if not self._exhausted:
            logger.debug(f"Recurrence {self.rule.frequency.name} from {self.rule.start.isoformat()} exhausted")
        self._exhausted = True
        self._pending.clear()
        self._probe = None
