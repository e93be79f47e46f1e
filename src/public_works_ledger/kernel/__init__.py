"""
Kernel - Event sourcing infrastructure shared by every domain module

Append-only event log, typed errors, injectable ids and time, structured
logging and metrics.
"""

from public_works_ledger.kernel.errors import (
    EventStoreError,
    GovernanceError,
    InvariantViolation,
    NotFound,
    StreamVersionConflict,
)
from public_works_ledger.kernel.events import Event
from public_works_ledger.kernel.ids import IdFactory, SequentialIdFactory, generate_id
from public_works_ledger.kernel.time import RealTimeProvider, TestTimeProvider, TimeProvider

__all__ = [
    # IDs
    "IdFactory",
    "SequentialIdFactory",
    "generate_id",
    # Time
    "TimeProvider",
    "RealTimeProvider",
    "TestTimeProvider",
    # Events
    "Event",
    # Errors
    "GovernanceError",
    "EventStoreError",
    "StreamVersionConflict",
    "InvariantViolation",
    "NotFound",
]
