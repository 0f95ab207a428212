"""
Pytest configuration and fixtures for rrules tests.

Provides a UTC datetime helper, sample rules, and settings isolation.
"""

from datetime import datetime, timezone
from typing import Generator

import pytest

from rrules.config import get_settings
from rrules.models import Daily, Monthly, NthWeekday, RecurrenceRule, Weekday, Weekly


def utc(*args: int) -> datetime:
    """Build an aware UTC datetime, e.g. ``utc(2023, 1, 2, 12)``."""
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch) -> Generator[None, None, None]:
    """
    Reload settings for every test.

    Clears RRULES_* variables so a developer's environment cannot leak into
    assertions on defaults, and resets the get_settings() cache around each
    test.
    """
    for name in ("RRULES_DEFAULT_DURATION", "RRULES_MAX_INSTANCES", "RRULES_MAX_COUNT"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def daily_rule() -> RecurrenceRule:
    """Every day at 08:00 UTC from 2023-01-01."""
    return RecurrenceRule(frequency=Daily(interval=1), start=utc(2023, 1, 1, 8))


@pytest.fixture
def weekly_rule() -> RecurrenceRule:
    """Mondays and Tuesdays at 12:00 UTC from Monday 2023-01-02."""
    return RecurrenceRule(
        frequency=Weekly(interval=1, by_day=[Weekday.MO, Weekday.TU]),
        start=utc(2023, 1, 2, 12),
    )


@pytest.fixture
def first_monday_rule() -> RecurrenceRule:
    """First Monday of each month at 12:00 UTC from 2023-01-01."""
    return RecurrenceRule(
        frequency=Monthly(interval=1, nth_weekdays=[NthWeekday(ordinal=1, weekday=Weekday.MO)]),
        start=utc(2023, 1, 1, 12),
    )
