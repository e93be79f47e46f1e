"""
Injectable clock

Proposal, allocation, decision and approval dates are stamped from a
provider so tests can pin "today" and move it forward.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Protocol


class TimeProvider(Protocol):
    def now(self) -> datetime:
        """Current UTC instant"""
        ...


class RealTimeProvider:
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class TestTimeProvider:
    """Frozen clock that only moves when a test advances it"""

    __test__ = False  # not a pytest test class

    def __init__(self, initial_time: datetime) -> None:
        self._current_time = initial_time

    def now(self) -> datetime:
        return self._current_time

    def advance(self, days: int = 0, hours: int = 0) -> None:
        self._current_time += timedelta(days=days, hours=hours)


def today(provider: TimeProvider) -> date:
    """Calendar date of the provider's current instant (UTC)"""
    return provider.now().date()
