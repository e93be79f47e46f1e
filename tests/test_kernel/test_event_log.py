"""
Tests for the in-memory event store

Verifies core event sourcing properties:
- Append-only semantics
- Idempotency via command_id
- Optimistic locking via stream versioning
- Query capabilities
"""

from datetime import datetime, timedelta, timezone

import pytest

from public_works_ledger.kernel.errors import StreamVersionConflict
from public_works_ledger.kernel.event_store import InMemoryEventStore
from public_works_ledger.kernel.events import Event, create_event
from public_works_ledger.kernel.ids import SequentialIdFactory, generate_id

T0 = datetime(2024, 2, 1, 9, 0, tzinfo=timezone.utc)


def make_event(
    stream_id: str,
    version: int,
    command_id: str | None = None,
    stream_type: str = "project",
    event_type: str = "ProjectCreated",
    occurred_at: datetime = T0,
) -> Event:
    return create_event(
        event_id=generate_id(),
        stream_id=stream_id,
        stream_type=stream_type,
        event_type=event_type,
        occurred_at=occurred_at,
        command_id=command_id or generate_id(),
        actor_id="tester",
        payload={"sequence": version},
        version=version,
    )


def test_append_and_load(event_store: InMemoryEventStore) -> None:
    event = make_event("p-1", 1)

    appended = event_store.append("p-1", 0, [event])

    assert appended == [event]
    assert event_store.load_stream("p-1") == [event]
    assert event_store.get_stream_version("p-1") == 1


def test_version_conflict(event_store: InMemoryEventStore) -> None:
    event_store.append("p-1", 0, [make_event("p-1", 1)])

    with pytest.raises(StreamVersionConflict) as exc_info:
        event_store.append("p-1", 0, [make_event("p-1", 1)])

    assert exc_info.value.actual_version == 1
    assert event_store.count_events() == 1


def test_event_version_must_follow_expected(event_store: InMemoryEventStore) -> None:
    with pytest.raises(StreamVersionConflict):
        event_store.append("p-1", 0, [make_event("p-1", 3)])

    assert event_store.load_stream("p-1") == []


def test_duplicate_command_returns_original(event_store: InMemoryEventStore) -> None:
    first = make_event("p-1", 1, command_id="cmd-1")
    event_store.append("p-1", 0, [first])

    again = event_store.append("p-1", 1, [make_event("p-1", 2, command_id="cmd-1")])

    assert again == [first]
    assert event_store.count_events() == 1
    assert event_store.get_events_by_command_id("cmd-1") == [first]


def test_load_all_preserves_append_order(event_store: InMemoryEventStore) -> None:
    a = make_event("p-1", 1)
    b = make_event("pay-1", 1, stream_type="payment", event_type="PaymentRequested")
    c = make_event("p-1", 2, event_type="ProjectUpdated")
    event_store.append("p-1", 0, [a])
    event_store.append("pay-1", 0, [b])
    event_store.append("p-1", 1, [c])

    assert event_store.load_all_events() == [a, b, c]
    assert event_store.count_streams() == 2


def test_query_events(event_store: InMemoryEventStore) -> None:
    early = make_event("p-1", 1)
    late = make_event(
        "pay-1",
        1,
        stream_type="payment",
        event_type="PaymentRequested",
        occurred_at=T0 + timedelta(days=2),
    )
    event_store.append("p-1", 0, [early])
    event_store.append("pay-1", 0, [late])

    assert event_store.query_events(stream_type="payment") == [late]
    assert event_store.query_events(event_type="ProjectCreated") == [early]
    assert event_store.query_events(from_time=T0 + timedelta(days=1)) == [late]
    assert event_store.query_events(to_time=T0) == [early]


def test_sequential_ids() -> None:
    factory = SequentialIdFactory(prefix="p-", start=7)

    assert [factory.generate() for _ in range(3)] == ["p-7", "p-8", "p-9"]


def test_generated_ids_are_unique() -> None:
    ids = {generate_id() for _ in range(1000)}

    assert len(ids) == 1000
