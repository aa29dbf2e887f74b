# tests/unit/ports/test_clock.py
"""Unit tests for the Clock implementations."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

from chatauth.services._shared.ports import FrozenClock, SystemClock
from freezegun import freeze_time


def test_system_clock_is_utc_aware():
    with freeze_time("2026-05-04 10:30:00"):
        now = SystemClock().now()

    assert now.tzinfo is not None
    assert now == datetime(2026, 5, 4, 10, 30, tzinfo=UTC)


def test_frozen_clock_stands_still_until_advanced():
    clock = FrozenClock(datetime(2026, 1, 1, tzinfo=UTC))

    assert clock.now() == clock.now()
    assert clock.advance(minutes=5) == datetime(2026, 1, 1, 0, 5, tzinfo=UTC)
    assert clock.advance(timedelta(days=1)) == datetime(2026, 1, 2, 0, 5, tzinfo=UTC)


def test_frozen_clock_normalizes_to_utc():
    plus_two = timezone(timedelta(hours=2))

    clock = FrozenClock(datetime(2026, 1, 1, 14, 0, tzinfo=plus_two))

    assert clock.now().utcoffset() == timedelta(0)
    assert clock.now() == datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
