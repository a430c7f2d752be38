"""Tests for clocks."""

from datetime import datetime, timedelta, timezone

from turnstile.domain import SystemClock
from turnstile.testing import FrozenClock


def test_system_clock_returns_utc():
    now = SystemClock().now()
    assert now.tzinfo == timezone.utc


def test_frozen_clock_stays_put_until_moved():
    clock = FrozenClock(datetime(2025, 1, 1, tzinfo=timezone.utc))
    assert clock.now() == clock.now()

    clock.advance(timedelta(minutes=5))
    assert clock.now() == datetime(2025, 1, 1, 0, 5, tzinfo=timezone.utc)

    clock.set(datetime(2030, 1, 1))
    assert clock.now() == datetime(2030, 1, 1, tzinfo=timezone.utc)


def test_system_clock_has_no_instance_dict():
    assert not hasattr(SystemClock(), "__dict__")
