"""
Tests for budget allocation and the national totals aggregate

Verifies:
- amount <= totalBudget - allocatedBudget, checked atomically
- A rejected allocation leaves the aggregate untouched
- Concurrent allocations never jointly overdraw the pool
"""

import threading
from datetime import date

import pytest
from pydantic import ValidationError

from public_works_ledger.allocation.events import NATIONAL_STREAM_ID
from public_works_ledger.allocation.models import AllocationStatus, RecipientType
from public_works_ledger.engine import GovernanceEngine
from public_works_ledger.kernel.errors import DuplicateId, InsufficientFunds
from public_works_ledger.kernel.time import TestTimeProvider
from tests.helpers import allocation_input


@pytest.fixture
def ninety_of_hundred(test_time: TestTimeProvider) -> GovernanceEngine:
    """Pool of 100 with 90 already allocated"""
    return GovernanceEngine(
        time_provider=test_time,
        opening_totals={"totalBudget": 100, "allocatedBudget": 90},
    )


def test_allocation_over_remaining_fails(ninety_of_hundred: GovernanceEngine) -> None:
    with pytest.raises(InsufficientFunds) as exc_info:
        ninety_of_hundred.allocate_budget(allocation_input(amount=20))

    assert exc_info.value.remaining == 10
    assert ninety_of_hundred.get_national_stats().allocated_budget == 90
    assert ninety_of_hundred.get_allocations() == []


def test_allocation_within_remaining_succeeds(ninety_of_hundred: GovernanceEngine) -> None:
    allocation = ninety_of_hundred.allocate_budget(allocation_input(amount=5))

    assert allocation.amount == 5
    assert ninety_of_hundred.get_national_stats().allocated_budget == 95


def test_allocation_of_exact_remaining_succeeds(ninety_of_hundred: GovernanceEngine) -> None:
    ninety_of_hundred.allocate_budget(allocation_input(amount=10))

    stats = ninety_of_hundred.get_national_stats()
    assert stats.allocated_budget == 100
    assert stats.remaining_budget == 0


def test_allocation_fields_assigned(engine: GovernanceEngine) -> None:
    allocation = engine.allocate_budget(allocation_input(), actor_id="finance-secretary")

    assert allocation.id == "id-1"
    assert allocation.status == AllocationStatus.ALLOCATED
    assert allocation.recipient_type == RecipientType.PROVINCE
    assert allocation.fiscal_year == "2080/81"
    assert allocation.allocated_date == date(2024, 2, 1)
    assert allocation.allocated_by == "finance-secretary"


def test_allocation_explicit_fiscal_year(engine: GovernanceEngine) -> None:
    allocation = engine.allocate_budget(allocation_input(fiscalYear="2081/82"))

    assert allocation.fiscal_year == "2081/82"
    assert engine.get_allocations({"fiscalYear": "2080/81"}) == []


@pytest.mark.parametrize("amount", [0, -5])
def test_allocation_amount_must_be_positive(engine: GovernanceEngine, amount: int) -> None:
    with pytest.raises(ValidationError):
        engine.allocate_budget(allocation_input(amount=amount))


def test_allocation_replay_does_not_double_count(engine: GovernanceEngine) -> None:
    engine.allocate_budget(allocation_input(), command_id="alloc-1")
    engine.allocate_budget(allocation_input(), command_id="alloc-1")

    assert engine.get_national_stats().allocated_budget == 5_000_000_000
    assert len(engine.get_allocations()) == 1


def test_allocations_serialized_on_national_stream(engine: GovernanceEngine) -> None:
    engine.allocate_budget(allocation_input())
    engine.allocate_budget(allocation_input(recipient="Lumbini Province"))

    events = engine.event_store.load_stream(NATIONAL_STREAM_ID)
    assert [e.event_type for e in events] == [
        "FiscalPeriodOpened",
        "BudgetAllocated",
        "BudgetAllocated",
    ]
    assert [e.version for e in events] == [1, 2, 3]
    assert events[2].payload["remaining_before"] == 95_000_000_000
    assert events[2].payload["remaining_after"] == 90_000_000_000


def test_concurrent_allocations_never_overdraw(test_time: TestTimeProvider) -> None:
    """Twenty threads each try to take 10 of a pool of 100: exactly ten succeed"""
    engine = GovernanceEngine(time_provider=test_time, opening_totals={"totalBudget": 100})
    outcomes: list[bool] = []
    outcomes_lock = threading.Lock()

    def allocate() -> None:
        try:
            engine.allocate_budget(allocation_input(amount=10))
            succeeded = True
        except InsufficientFunds:
            succeeded = False
        with outcomes_lock:
            outcomes.append(succeeded)

    threads = [threading.Thread(target=allocate) for _ in range(20)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert outcomes.count(True) == 10
    assert engine.get_national_stats().allocated_budget == 100
    assert sum(a.amount for a in engine.get_allocations()) == 100


def test_get_allocations_by_recipient_type(demo_engine: GovernanceEngine) -> None:
    provinces = demo_engine.get_allocations({"recipientType": "PROVINCE"})
    local_units = demo_engine.get_allocations({"recipientType": RecipientType.LOCAL_UNIT})

    assert [a.recipient for a in provinces] == ["Bagmati Province", "Gandaki Province"]
    assert [a.recipient for a in local_units] == ["Kathmandu Metropolitan"]


def test_import_allocation_does_not_change_totals(demo_engine: GovernanceEngine) -> None:
    """Seeded allocations are already part of the opening figures"""
    assert demo_engine.get_national_stats().allocated_budget == 100_000_000_000
    assert len(demo_engine.get_allocations()) == 3


def test_import_allocation_duplicate_id(demo_engine: GovernanceEngine) -> None:
    with pytest.raises(DuplicateId):
        demo_engine.import_allocation(
            allocation_input(id="1", allocatedDate="2023-07-16")
        )


def test_opening_totals_reject_allocated_above_total(test_time: TestTimeProvider) -> None:
    with pytest.raises(ValidationError):
        GovernanceEngine(
            time_provider=test_time,
            opening_totals={"totalBudget": 10, "allocatedBudget": 20},
        )


def test_default_opening_uses_policy_budget(test_time: TestTimeProvider) -> None:
    stats = GovernanceEngine(time_provider=test_time).get_national_stats()

    assert stats.total_budget == 150_000_000_000
    assert stats.allocated_budget == 0
    assert stats.provinces == 7
    assert stats.local_units == 753
