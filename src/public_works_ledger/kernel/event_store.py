"""
In-memory Event Store - Append-only event log with idempotency

The event store is the source of truth for the engine. It provides:
- Append-only semantics (events never modified or deleted)
- Idempotency via command_id (same command = same events)
- Optimistic locking via stream versioning
- Deterministic replay capability

State lives for the lifetime of the process; there is no disk persistence.
"""

import threading
from collections import defaultdict
from datetime import datetime

from public_works_ledger.kernel.errors import StreamVersionConflict
from public_works_ledger.kernel.events import Event
from public_works_ledger.kernel.logging import get_logger
from public_works_ledger.kernel.metrics import events_appended_total

logger = get_logger(__name__)


class InMemoryEventStore:
    """
    Process-local event store with append-only semantics

    Layout:
    - _log: every event in append order (global ordering for replay)
    - _streams: stream_id -> events in version order
    - _by_command: command_id -> events produced by that command
    """

    def __init__(self) -> None:
        self._log: list[Event] = []
        self._streams: defaultdict[str, list[Event]] = defaultdict(list)
        self._by_command: defaultdict[str, list[Event]] = defaultdict(list)
        self._lock = threading.Lock()

    def append(
        self,
        stream_id: str,
        expected_version: int,
        events: list[Event],
    ) -> list[Event]:
        """
        Append events to a stream with optimistic locking

        Args:
            stream_id: Aggregate root identifier
            expected_version: Expected current stream version
            events: Events to append (must have sequential versions)

        Returns:
            The appended events, or the events of the earlier execution if this
            command_id already wrote to this stream

        Raises:
            StreamVersionConflict: If stream version doesn't match expected
        """
        if not events:
            return []

        with self._lock:
            first_command_id = events[0].command_id
            existing_in_stream = [
                e for e in self._by_command.get(first_command_id, []) if e.stream_id == stream_id
            ]
            if existing_in_stream:
                logger.debug(
                    "Duplicate command ignored (idempotency)",
                    command_id=first_command_id,
                    stream_id=stream_id,
                )
                return existing_in_stream

            current_version = self._current_version(stream_id)
            if current_version != expected_version:
                raise StreamVersionConflict(stream_id, expected_version, current_version)

            for offset, event in enumerate(events, start=1):
                if event.stream_id != stream_id or event.version != expected_version + offset:
                    raise StreamVersionConflict(
                        stream_id, expected_version + offset, event.version
                    )

            for event in events:
                self._log.append(event)
                self._streams[stream_id].append(event)
                self._by_command[event.command_id].append(event)
                events_appended_total.labels(
                    stream_type=event.stream_type, event_type=event.event_type
                ).inc()

            return events

    def load_stream(self, stream_id: str) -> list[Event]:
        """Load all events for a stream in version order"""
        with self._lock:
            return list(self._streams.get(stream_id, []))

    def load_all_events(self) -> list[Event]:
        """Load every event in append order (for projection rebuilding)"""
        with self._lock:
            return list(self._log)

    def query_events(
        self,
        *,
        stream_type: str | None = None,
        event_type: str | None = None,
        from_time: datetime | None = None,
        to_time: datetime | None = None,
    ) -> list[Event]:
        """
        Query events by various criteria (all filters ANDed)

        Args:
            stream_type: Filter by stream type (e.g., "project", "payment")
            event_type: Filter by event type (e.g., "PaymentApproved")
            from_time: Events at or after this time
            to_time: Events at or before this time
        """
        with self._lock:
            events = list(self._log)

        if stream_type:
            events = [e for e in events if e.stream_type == stream_type]
        if event_type:
            events = [e for e in events if e.event_type == event_type]
        if from_time:
            events = [e for e in events if e.occurred_at >= from_time]
        if to_time:
            events = [e for e in events if e.occurred_at <= to_time]
        return events

    def get_events_by_command_id(self, command_id: str) -> list[Event]:
        """Events produced by a command (empty if the command never ran)"""
        with self._lock:
            return list(self._by_command.get(command_id, []))

    def get_stream_version(self, stream_id: str) -> int:
        """Current version of a stream (0 if stream doesn't exist)"""
        with self._lock:
            return self._current_version(stream_id)

    def _current_version(self, stream_id: str) -> int:
        stream = self._streams.get(stream_id)
        return stream[-1].version if stream else 0

    def count_events(self) -> int:
        with self._lock:
            return len(self._log)

    def count_streams(self) -> int:
        with self._lock:
            return len(self._streams)
