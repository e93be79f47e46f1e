"""
Pytest configuration and shared fixtures
"""

from datetime import datetime, timezone

import pytest

from public_works_ledger.engine import GovernanceEngine
from public_works_ledger.kernel.event_store import InMemoryEventStore
from public_works_ledger.kernel.governance_policy import GovernancePolicy
from public_works_ledger.kernel.ids import SequentialIdFactory
from public_works_ledger.kernel.time import TestTimeProvider


@pytest.fixture
def event_store() -> InMemoryEventStore:
    """Provide a fresh event store for each test"""
    return InMemoryEventStore()


@pytest.fixture
def test_time() -> TestTimeProvider:
    """
    Provide a controllable time provider for deterministic tests

    Default time: 2024-02-01 09:00:00 UTC, inside fiscal year 2080/81.
    """
    return TestTimeProvider(datetime(2024, 2, 1, 9, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def policy() -> GovernancePolicy:
    """Provide the default governance policy"""
    return GovernancePolicy()


@pytest.fixture
def id_factory() -> SequentialIdFactory:
    """Predictable entity ids: id-1, id-2, ..."""
    return SequentialIdFactory()


@pytest.fixture
def engine(
    test_time: TestTimeProvider, policy: GovernancePolicy, id_factory: SequentialIdFactory
) -> GovernanceEngine:
    """
    Provide an engine with an empty ledger

    National pool: 100 billion total, nothing allocated or spent.
    """
    return GovernanceEngine(
        policy=policy,
        time_provider=test_time,
        id_factory=id_factory,
        opening_totals={"total_budget": 100_000_000_000},
    )


@pytest.fixture
def demo_engine(test_time: TestTimeProvider, id_factory: SequentialIdFactory) -> GovernanceEngine:
    """Provide an engine loaded with the demo data set"""
    return GovernanceEngine.with_demo_data(time_provider=test_time, id_factory=id_factory)
