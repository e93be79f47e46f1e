"""
ID generation using UUIDv7-style (time-ordered) identifiers

Events, projects, allocations and payments all get sortable ids so the
event log reads in creation order. Tests swap in a sequential factory.
"""

import itertools
import secrets
import threading
import time
from typing import Protocol


class IdFactory(Protocol):
    """Protocol for ID generation strategies"""

    def generate(self) -> str:
        """Generate a new unique ID"""
        ...


def generate_id() -> str:
    """
    Generate a UUIDv7-like identifier (time-ordered UUID)

    Format: 8-4-4-4-12 hex characters (36 chars with hyphens)
    First 48 bits: Unix timestamp in milliseconds
    Remaining bits: random, with version 7 and RFC 4122 variant set

    Returns:
        Sortable UUID string (e.g., "01908e9a-3b87-7000-8000-123456789abc")
    """
    timestamp_48 = int(time.time() * 1000) & 0xFFFFFFFFFFFF

    rand_12 = secrets.randbits(12)
    rand_62 = secrets.randbits(62)

    time_high = (timestamp_48 >> 32) & 0xFFFF
    time_mid = (timestamp_48 >> 16) & 0xFFFF
    time_low = timestamp_48 & 0xFFFF
    version_and_rand = 0x7000 | rand_12
    clock_seq_and_variant = 0x8000 | ((rand_62 >> 48) & 0x3FFF)
    node = rand_62 & 0xFFFFFFFFFFFF

    return (
        f"{time_high:04x}{time_mid:04x}-"
        f"{time_low:04x}-"
        f"{version_and_rand:04x}-"
        f"{clock_seq_and_variant:04x}-"
        f"{node:012x}"
    )


class DefaultIdFactory:
    """Default ID factory using UUIDv7-like generation"""

    def generate(self) -> str:
        return generate_id()


class SequentialIdFactory:
    """
    Deterministic ids for tests and demo data: "<prefix>1", "<prefix>2", ...

    Thread-safe so concurrent command tests never hand out the same id twice.
    """

    def __init__(self, prefix: str = "id-", start: int = 1) -> None:
        self.prefix = prefix
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def generate(self) -> str:
        with self._lock:
            return f"{self.prefix}{next(self._counter)}"


default_id_factory: IdFactory = DefaultIdFactory()
