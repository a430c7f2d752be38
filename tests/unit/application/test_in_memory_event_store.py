"""Tests for InMemoryEventStore."""

import asyncio
from datetime import datetime, timezone
from typing import ClassVar

import pytest

from turnstile.application import InMemoryEventStore
from turnstile.domain import ConcurrencyError, DomainEvent, InvalidArgumentError

NOW = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


class NoteTaken(DomainEvent):
    event_type: ClassVar[str] = "note.taken"

    text: str


def notes(aggregate_id: str, *texts: str) -> list[NoteTaken]:
    return [NoteTaken(aggregate_id=aggregate_id, occurred_at=NOW, text=t) for t in texts]


@pytest.fixture
def store() -> InMemoryEventStore:
    return InMemoryEventStore()


async def test_unknown_stream_is_empty(store: InMemoryEventStore):
    assert await store.get_events("n-1", "note") == []
    assert await store.get_version("n-1", "note") == 0


async def test_append_and_read_back(store: InMemoryEventStore):
    """Test that appended events come back in order and advance the version."""
    await store.append("n-1", "note", notes("n-1", "a", "b"), expected_version=0)
    await store.append("n-1", "note", notes("n-1", "c"), expected_version=2)

    events = await store.get_events("n-1", "note")

    assert [e.text for e in events] == ["a", "b", "c"]  # type: ignore[attr-defined]
    assert await store.get_version("n-1", "note") == 3


async def test_stale_expected_version_raises_and_leaves_stream_unchanged(
    store: InMemoryEventStore,
):
    """Test that a version conflict writes nothing."""
    await store.append("n-1", "note", notes("n-1", "a", "b"), expected_version=0)

    with pytest.raises(ConcurrencyError) as exc_info:
        await store.append("n-1", "note", notes("n-1", "x"), expected_version=1)

    error = exc_info.value
    assert error.aggregate_id == "n-1"
    assert error.aggregate_type == "note"
    assert error.expected_version == 1
    assert error.current_version == 2
    assert "expected version 1, but current version is 2" in str(error)
    assert [e.text for e in await store.get_events("n-1", "note")] == ["a", "b"]  # type: ignore[attr-defined]


async def test_expected_version_ahead_of_stream_raises(store: InMemoryEventStore):
    with pytest.raises(ConcurrencyError):
        await store.append("n-1", "note", notes("n-1", "a"), expected_version=5)

    assert await store.get_version("n-1", "note") == 0


async def test_streams_are_isolated_by_aggregate_type(store: InMemoryEventStore):
    """Test that the same ID under different types are separate streams."""
    await store.append("shared", "note", notes("shared", "a"), expected_version=0)
    await store.append("shared", "memo", notes("shared", "b", "c"), expected_version=0)

    assert await store.get_version("shared", "note") == 1
    assert await store.get_version("shared", "memo") == 2
    assert [e.text for e in await store.get_events("shared", "memo")] == ["b", "c"]  # type: ignore[attr-defined]


async def test_empty_batch_is_rejected(store: InMemoryEventStore):
    with pytest.raises(InvalidArgumentError, match="empty batch"):
        await store.append("n-1", "note", [], expected_version=0)


async def test_negative_expected_version_is_rejected(store: InMemoryEventStore):
    with pytest.raises(InvalidArgumentError, match="non-negative"):
        await store.append("n-1", "note", notes("n-1", "a"), expected_version=-1)


async def test_mixed_aggregate_batch_is_rejected(store: InMemoryEventStore):
    """Test that a batch carrying another aggregate's event is rejected whole."""
    batch = [*notes("n-1", "a"), *notes("n-2", "b")]

    with pytest.raises(InvalidArgumentError, match="does not match"):
        await store.append("n-1", "note", batch, expected_version=0)

    assert await store.get_version("n-1", "note") == 0


async def test_returned_list_is_a_copy(store: InMemoryEventStore):
    await store.append("n-1", "note", notes("n-1", "a"), expected_version=0)

    events = await store.get_events("n-1", "note")
    events.clear()

    assert await store.get_version("n-1", "note") == 1


async def test_concurrent_appends_at_same_version_have_one_winner(store: InMemoryEventStore):
    """Test that exactly one of two racing appends succeeds."""
    await store.append("n-1", "note", notes("n-1", "a"), expected_version=0)

    results = await asyncio.gather(
        store.append("n-1", "note", notes("n-1", "b"), expected_version=1),
        store.append("n-1", "note", notes("n-1", "c"), expected_version=1),
        return_exceptions=True,
    )

    assert sum(r is None for r in results) == 1
    assert sum(isinstance(r, ConcurrencyError) for r in results) == 1
    assert await store.get_version("n-1", "note") == 2


async def test_concurrency_conflict_is_logged(
    store: InMemoryEventStore, caplog: pytest.LogCaptureFixture
):
    await store.append("n-1", "note", notes("n-1", "a"), expected_version=0)

    with pytest.raises(ConcurrencyError):
        await store.append("n-1", "note", notes("n-1", "b"), expected_version=0)

    record = next(r for r in caplog.records if r.message == "Concurrency conflict on append")
    assert record.levelname == "WARNING"
    assert record.aggregate_id == "n-1"  # type: ignore[attr-defined]
    assert record.current_version == 1  # type: ignore[attr-defined]
