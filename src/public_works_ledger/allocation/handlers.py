"""
Allocation Module Handlers - Command→Event transformation for the national ledger

The overspend guard lives here: an allocation is produced only when its amount
fits in total_budget - allocated_budget as read from the totals projection.
The event is written at totals.version + 1 on the national stream, so a
second allocation decided against the same stale balance fails to append.
"""

from public_works_ledger.allocation.commands import (
    AllocateBudget,
    ImportAllocation,
    OpenFiscalPeriod,
)
from public_works_ledger.allocation.events import (
    NATIONAL_STREAM_ID,
    NATIONAL_STREAM_TYPE,
    AllocationImported,
    BudgetAllocated,
    FiscalPeriodOpened,
)
from public_works_ledger.allocation.models import BudgetAllocation, NationalTotals
from public_works_ledger.allocation.projections import (
    AllocationLedger,
    NationalTotalsProjection,
)
from public_works_ledger.kernel.errors import DuplicateId, FiscalPeriodAlreadyOpen, InsufficientFunds
from public_works_ledger.kernel.events import Event, create_event
from public_works_ledger.kernel.governance_policy import GovernancePolicy
from public_works_ledger.kernel.ids import IdFactory, generate_id
from public_works_ledger.kernel.time import TimeProvider, today


class AllocationCommandHandlers:
    """
    Command handlers for the allocation module

    Depend on the national totals projection for the remaining balance and on
    the allocation ledger for id uniqueness of imported allocations.
    """

    def __init__(
        self,
        time_provider: TimeProvider,
        policy: GovernancePolicy,
        id_factory: IdFactory,
    ) -> None:
        self.time_provider = time_provider
        self.policy = policy
        self.id_factory = id_factory

    def handle_open_fiscal_period(
        self,
        command: OpenFiscalPeriod,
        command_id: str,
        actor_id: str | None,
        totals: NationalTotalsProjection,
    ) -> list[Event]:
        """
        Handle OpenFiscalPeriod command

        Sets the national totals to the given opening figures. A period opens
        once per ledger; reopening would reset allocatedBudget and spentBudget
        underneath the allocations already recorded.

        Raises:
            FiscalPeriodAlreadyOpen: The national totals already have events
        """
        if totals.version > 0:
            raise FiscalPeriodAlreadyOpen(totals.fiscal_year)

        now = self.time_provider.now()

        event_payload = FiscalPeriodOpened(
            totals=NationalTotals(**command.model_dump()),
            fiscal_year=self.policy.fiscal_year,
            opened_at=now,
        ).model_dump(mode="json")

        event = create_event(
            event_id=generate_id(),
            stream_id=NATIONAL_STREAM_ID,
            stream_type=NATIONAL_STREAM_TYPE,
            event_type="FiscalPeriodOpened",
            occurred_at=now,
            command_id=command_id,
            actor_id=actor_id,
            payload=event_payload,
            version=totals.version + 1,
        )

        return [event]

    def handle_allocate_budget(
        self,
        command: AllocateBudget,
        command_id: str,
        actor_id: str | None,
        totals: NationalTotalsProjection,
    ) -> list[Event]:
        """
        Handle AllocateBudget command

        Validates:
        - amount <= total_budget - allocated_budget

        Args:
            command: AllocateBudget command
            command_id: Idempotency key
            actor_id: Who issued the command
            totals: Current national totals

        Returns:
            List of events to append

        Raises:
            InsufficientFunds: If the amount exceeds the unallocated pool
        """
        now = self.time_provider.now()

        remaining = totals.totals.remaining_budget
        if command.amount > remaining:
            raise InsufficientFunds(command.amount, remaining)

        allocation = BudgetAllocation(
            id=self.id_factory.generate(),
            recipient=command.recipient,
            recipient_type=command.recipient_type,
            amount=command.amount,
            purpose=command.purpose,
            fiscal_year=command.fiscal_year or self.policy.fiscal_year,
            allocated_date=today(self.time_provider),
            allocated_by=command.allocated_by or actor_id,
        )

        event_payload = BudgetAllocated(
            allocation=allocation,
            remaining_before=remaining,
            remaining_after=remaining - command.amount,
            allocated_at=now,
        ).model_dump(mode="json")

        event = create_event(
            event_id=generate_id(),
            stream_id=NATIONAL_STREAM_ID,
            stream_type=NATIONAL_STREAM_TYPE,
            event_type="BudgetAllocated",
            occurred_at=now,
            command_id=command_id,
            actor_id=actor_id,
            payload=event_payload,
            version=totals.version + 1,
        )

        return [event]

    def handle_import_allocation(
        self,
        command: ImportAllocation,
        command_id: str,
        actor_id: str | None,
        ledger: AllocationLedger,
        totals: NationalTotalsProjection,
    ) -> list[Event]:
        """
        Handle ImportAllocation command

        Raises:
            DuplicateId: An allocation with this id already exists
        """
        now = self.time_provider.now()

        if ledger.exists(command.id):
            raise DuplicateId("Allocation", command.id)

        allocation = BudgetAllocation(
            id=command.id,
            recipient=command.recipient,
            recipient_type=command.recipient_type,
            amount=command.amount,
            purpose=command.purpose,
            fiscal_year=command.fiscal_year or self.policy.fiscal_year,
            allocated_date=command.allocated_date,
            allocated_by=command.allocated_by or actor_id,
        )

        event_payload = AllocationImported(
            allocation=allocation,
            imported_at=now,
        ).model_dump(mode="json")

        event = create_event(
            event_id=generate_id(),
            stream_id=NATIONAL_STREAM_ID,
            stream_type=NATIONAL_STREAM_TYPE,
            event_type="AllocationImported",
            occurred_at=now,
            command_id=command_id,
            actor_id=actor_id,
            payload=event_payload,
            version=totals.version + 1,
        )

        return [event]
