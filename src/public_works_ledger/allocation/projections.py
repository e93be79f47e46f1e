"""
Allocation Module Projections - Read models for the national ledger

AllocationLedger: every allocation, in the order it was made
NationalTotalsProjection: the NationalTotals aggregate, fed by allocation,
                          project and payment events
"""

from public_works_ledger.allocation.commands import AllocationFilters
from public_works_ledger.allocation.events import NATIONAL_STREAM_ID
from public_works_ledger.allocation.models import BudgetAllocation, NationalTotals
from public_works_ledger.kernel.events import Event

# Project status -> NationalTotals counter it is counted under
STATUS_COUNTERS = {
    "IN_PROGRESS": "ongoing_projects",
    "COMPLETED": "completed_projects",
    "DELAYED": "delayed_projects",
}


class AllocationLedger:
    """
    Allocation projection - append-only list of allocations

    Built from events: BudgetAllocated, AllocationImported

    Query methods: get, exists, list_allocations
    """

    def __init__(self) -> None:
        self.allocations: dict[str, dict] = {}

    def apply_event(self, event: Event) -> None:
        if event.event_type in ("BudgetAllocated", "AllocationImported"):
            allocation = dict(event.payload["allocation"])
            self.allocations[allocation["id"]] = allocation

    def get(self, allocation_id: str) -> BudgetAllocation | None:
        data = self.allocations.get(allocation_id)
        return BudgetAllocation.model_validate(data) if data is not None else None

    def exists(self, allocation_id: str) -> bool:
        return allocation_id in self.allocations

    def list_allocations(
        self, filters: AllocationFilters | None = None
    ) -> list[BudgetAllocation]:
        """List allocations matching every given filter, oldest first"""
        filters = filters or AllocationFilters()
        wanted = filters.model_dump(mode="json", exclude_none=True)

        return [
            BudgetAllocation.model_validate(data)
            for data in self.allocations.values()
            if all(data.get(field) == value for field, value in wanted.items())
        ]


class NationalTotalsProjection:
    """
    NationalTotals projection - the singleton budget aggregate

    Built from events: FiscalPeriodOpened, BudgetAllocated, PaymentApproved,
                       ProjectCreated, ProjectUpdated

    version tracks the national stream only; project and payment events
    arrive on their own streams.
    """

    def __init__(self) -> None:
        self.totals = NationalTotals(total_budget=0)
        self.fiscal_year: str | None = None
        self.version = 0

    def apply_event(self, event: Event) -> None:
        """
        Apply an event to update the projection

        Args:
            event: Event to apply
        """
        if event.event_type == "FiscalPeriodOpened":
            self._apply_fiscal_period_opened(event)
        elif event.event_type == "BudgetAllocated":
            self._apply_budget_allocated(event)
        elif event.event_type == "PaymentApproved":
            self._apply_payment_approved(event)
        elif event.event_type == "ProjectCreated":
            self.totals.total_projects += 1
        elif event.event_type == "ProjectUpdated":
            self._apply_project_updated(event)

        if event.stream_id == NATIONAL_STREAM_ID:
            self.version = event.version

    def _apply_fiscal_period_opened(self, event: Event) -> None:
        self.totals = NationalTotals.model_validate(event.payload["totals"])
        self.fiscal_year = event.payload["fiscal_year"]

    def _apply_budget_allocated(self, event: Event) -> None:
        self.totals.allocated_budget += event.payload["allocation"]["amount"]

    def _apply_payment_approved(self, event: Event) -> None:
        payload = event.payload
        if payload.get("debit_applied"):
            self.totals.spent_budget += event.amount

    def _apply_project_updated(self, event: Event) -> None:
        """Move the project between the ongoing/completed/delayed counters"""
        previous = STATUS_COUNTERS.get(event.payload["previous_status"])
        new = STATUS_COUNTERS.get(event.payload["new_status"])
        if previous == new:
            return

        if previous is not None:
            setattr(self.totals, previous, max(0, getattr(self.totals, previous) - 1))
        if new is not None:
            setattr(self.totals, new, getattr(self.totals, new) + 1)

    def get(self) -> NationalTotals:
        return self.totals.model_copy()
