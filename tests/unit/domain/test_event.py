"""Tests for DomainEvent."""

from datetime import datetime, timedelta, timezone
from typing import ClassVar

import pytest
from pydantic import ValidationError

from turnstile.domain import DomainEvent, ensure_utc


class AccountOpened(DomainEvent):
    event_type: ClassVar[str] = "account.opened"

    owner: str


def test_occurred_at_is_normalized_to_utc():
    """Test that aware timestamps are converted to UTC."""
    plus_two = timezone(timedelta(hours=2))
    event = AccountOpened(
        aggregate_id="acc-1",
        occurred_at=datetime(2025, 1, 15, 14, 0, tzinfo=plus_two),
        owner="Alice",
    )

    assert event.occurred_at == datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)
    assert event.occurred_at.tzinfo == timezone.utc


def test_naive_occurred_at_is_treated_as_utc():
    """Test that naive timestamps are interpreted as UTC."""
    event = AccountOpened(
        aggregate_id="acc-1", occurred_at=datetime(2025, 1, 15, 12, 0), owner="Alice"
    )

    assert event.occurred_at == datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


def test_events_are_immutable():
    """Test that event fields cannot be reassigned."""
    event = AccountOpened(
        aggregate_id="acc-1", occurred_at=datetime.now(timezone.utc), owner="Alice"
    )

    with pytest.raises(ValidationError):
        event.owner = "Mallory"  # type: ignore[misc]


def test_aggregate_id_is_required():
    with pytest.raises(ValidationError):
        AccountOpened(aggregate_id="", occurred_at=datetime.now(timezone.utc), owner="Alice")


def test_events_with_same_fields_are_equal():
    now = datetime.now(timezone.utc)
    assert AccountOpened(aggregate_id="a", occurred_at=now, owner="x") == AccountOpened(
        aggregate_id="a", occurred_at=now, owner="x"
    )


def test_event_type_is_not_a_field():
    """Test that the discriminator is class-level and not serialized."""
    event = AccountOpened(
        aggregate_id="acc-1", occurred_at=datetime.now(timezone.utc), owner="Alice"
    )

    assert event.event_type == "account.opened"
    assert "event_type" not in event.model_dump()


def test_ensure_utc_keeps_instant():
    moment = datetime(2025, 3, 1, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
    assert ensure_utc(moment) == moment
    assert ensure_utc(moment).day == 2
