"""
Allocation Module Events - Domain events for the national ledger

Every event here lives on the single national stream, so stream versioning
serializes allocations against the same remaining balance.
"""

from datetime import datetime

from pydantic import BaseModel

from public_works_ledger.allocation.models import BudgetAllocation, NationalTotals

NATIONAL_STREAM_ID = "national-totals"
NATIONAL_STREAM_TYPE = "national"


class FiscalPeriodOpened(BaseModel):
    """Opening figures for the fiscal period; replaces any earlier totals"""

    totals: NationalTotals
    fiscal_year: str
    opened_at: datetime


class BudgetAllocated(BaseModel):
    """
    Budget left the national pool

    The check amount <= remaining passed against remaining_before.
    """

    allocation: BudgetAllocation
    remaining_before: int
    remaining_after: int
    allocated_at: datetime


class AllocationImported(BaseModel):
    """An allocation already counted in the opening figures was recorded"""

    allocation: BudgetAllocation
    imported_at: datetime


ALLOCATION_EVENT_TYPES = {
    "FiscalPeriodOpened": FiscalPeriodOpened,
    "BudgetAllocated": BudgetAllocated,
    "AllocationImported": AllocationImported,
}
