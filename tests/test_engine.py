"""
Tests for the GovernanceEngine façade

Verifies:
- Demo data set loads and matches the dashboard figures
- Command ids make every command idempotent
- The event log is a complete audit trail that rebuilds the projections
- Concurrent mixed commands keep the national aggregate consistent
"""

import threading

import pytest

from public_works_ledger.allocation.projections import AllocationLedger
from public_works_ledger.command_api import run_command
from public_works_ledger.engine import GovernanceEngine
from public_works_ledger.kernel.errors import (
    CommandIdConflict,
    FiscalPeriodAlreadyOpen,
    InsufficientFunds,
)
from public_works_ledger.kernel.events import stream_id_for
from public_works_ledger.kernel.time import TestTimeProvider
from public_works_ledger.payments.projections import PaymentLedger
from public_works_ledger.projects.projections import ProjectRegistry
from tests.helpers import allocation_input, payment_input, policy_input, project_input


def test_demo_national_stats(demo_engine: GovernanceEngine) -> None:
    stats = demo_engine.get_national_stats()

    assert stats.total_budget == 150_000_000_000
    assert stats.allocated_budget == 100_000_000_000
    assert stats.spent_budget == 45_000_000_000
    assert stats.total_projects == 1247
    assert stats.completed_projects == 342
    assert stats.ongoing_projects == 765
    assert stats.delayed_projects == 140
    assert stats.total_contractors == 523


def test_demo_allocation_example(demo_engine: GovernanceEngine) -> None:
    demo_engine.allocate_budget(allocation_input())

    assert demo_engine.get_national_stats().allocated_budget == 105_000_000_000


def test_national_stats_are_copies(demo_engine: GovernanceEngine) -> None:
    stats = demo_engine.get_national_stats()
    stats.allocated_budget = 0

    assert demo_engine.get_national_stats().allocated_budget == 100_000_000_000


def test_query_results_are_detached(demo_engine: GovernanceEngine) -> None:
    project = demo_engine.get_project("1")
    project.spent_amount = 0

    assert demo_engine.get_project("1").spent_amount == 28_000_000_000


def test_events_record_actor_and_command(engine: GovernanceEngine) -> None:
    engine.create_project(project_input(), command_id="c-42", actor_id="koshi-planning")

    [event] = engine.get_events("project")
    assert event.command_id == "c-42"
    assert event.actor_id == "koshi-planning"
    assert event.event_type == "ProjectCreated"


def test_rejected_command_appends_nothing(engine: GovernanceEngine) -> None:
    before = engine.event_store.count_events()

    try:
        engine.allocate_budget(allocation_input(amount=500_000_000_000))
    except InsufficientFunds:
        pass

    assert engine.event_store.count_events() == before


def test_projection_rebuild_from_event_log(demo_engine: GovernanceEngine) -> None:
    """Replaying the log into fresh projections reproduces current state"""
    project = demo_engine.create_project(project_input())
    demo_engine.update_project(project.id, {"status": "IN_PROGRESS"})
    demo_engine.allocate_budget(allocation_input())
    payment = demo_engine.submit_payment_request(payment_input(project.id))
    demo_engine.process_payment(payment.id, "APPROVED", "Finance Controller")

    registry, allocations, payments = ProjectRegistry(), AllocationLedger(), PaymentLedger()
    for event in demo_engine.get_events():
        for projection in (registry, allocations, payments):
            projection.apply_event(event)

    assert len(registry.list_projects()) == 4
    assert registry.list_projects() == demo_engine.get_projects()
    assert registry.get(project.id).spent_amount == 100_000_000
    assert registry.get(project.id).remaining_budget == 1_900_000_000
    # 80 billion seeded plus the 5 billion allocated above
    assert sum(a.amount for a in allocations.list_allocations()) == 85_000_000_000
    assert allocations.list_allocations() == demo_engine.get_allocations()
    assert [p.amount for p in payments.list_payments("APPROVED")] == [100_000_000]
    assert payments.list_payments() == demo_engine.get_payment_requests()


def test_concurrent_payments_and_allocations(test_time: TestTimeProvider) -> None:
    """Settlements and allocations racing on the same aggregate stay consistent"""
    engine = GovernanceEngine.with_demo_data(time_provider=test_time)
    project = engine.create_project(project_input())
    payment_ids = [
        engine.submit_payment_request(payment_input(project.id, amount=10_000_000)).id
        for _ in range(10)
    ]

    def settle(payment_id: str) -> None:
        engine.process_payment(payment_id, "APPROVED", "Finance Controller")

    def allocate() -> None:
        engine.allocate_budget(allocation_input(amount=1_000_000_000))

    threads = [threading.Thread(target=settle, args=(pid,)) for pid in payment_ids]
    threads += [threading.Thread(target=allocate) for _ in range(10)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    stats = engine.get_national_stats()
    assert stats.spent_budget == 45_000_000_000 + 100_000_000
    assert stats.allocated_budget == 110_000_000_000
    assert engine.get_project(project.id).spent_amount == 100_000_000


def test_get_events_by_stream_type(demo_engine: GovernanceEngine) -> None:
    payments = demo_engine.get_events("payment")

    assert [e.event_type for e in payments] == [
        "PaymentRequestImported",
        "PaymentRequestImported",
    ]


def test_entities_of_different_types_may_share_an_id(engine: GovernanceEngine) -> None:
    """A project, a policy and a payment request numbered alike live in separate streams"""
    engine.import_project(project_input(id="42"))
    engine.import_policy(policy_input(id="42", proposedDate="2024-01-05"))
    engine.import_payment_request(payment_input("42", id="42", requestDate="2024-01-20"))

    assert engine.get_project("42").title == "Biratnagar Ring Road"
    assert engine.get_policy("42").title == "Open Contracting Standard"
    assert engine.get_payment_request("42").project_id == "42"
    for stream_type in ("project", "policy", "payment"):
        assert engine.event_store.get_stream_version(stream_id_for(stream_type, "42")) == 1


def test_demo_data_shares_ids_across_types(demo_engine: GovernanceEngine) -> None:
    assert demo_engine.get_project("1").title == "Kathmandu-Terai Fast Track"
    assert demo_engine.get_policy("1").title == "National Road Safety Policy 2080"
    assert demo_engine.get_payment_request("1").project_id == "1"


def test_fiscal_period_cannot_be_reopened(engine: GovernanceEngine) -> None:
    """Reopening would zero allocatedBudget under allocations already recorded"""
    engine.allocate_budget(allocation_input(amount=90_000_000_000))

    with pytest.raises(FiscalPeriodAlreadyOpen):
        engine.open_fiscal_period({"totalBudget": 100_000_000_000})

    with pytest.raises(InsufficientFunds):
        engine.allocate_budget(allocation_input(amount=90_000_000_000))
    assert engine.get_national_stats().allocated_budget == 90_000_000_000
    assert len(engine.get_allocations()) == 1


def test_reopen_through_api_is_a_failed_envelope(engine: GovernanceEngine) -> None:
    result = run_command(lambda: engine.open_fiscal_period({"totalBudget": 1}))

    assert result.success is False
    assert result.error_code == "FISCAL_PERIOD_OPEN"


def test_command_id_reused_by_other_operation(engine: GovernanceEngine) -> None:
    engine.allocate_budget(allocation_input(), command_id="c1")

    with pytest.raises(CommandIdConflict):
        engine.create_project(project_input(), command_id="c1")

    assert engine.get_projects() == []
    assert engine.get_national_stats().allocated_budget == 5_000_000_000


def test_failed_command_does_not_claim_its_id(engine: GovernanceEngine) -> None:
    with pytest.raises(InsufficientFunds):
        engine.allocate_budget(allocation_input(amount=200_000_000_000), command_id="c2")

    project = engine.create_project(project_input(), command_id="c2")

    assert project.title == "Biratnagar Ring Road"
