"""
Allocation Module Commands - Intentions to move budget out of the national pool

AllocateBudget is the only way money leaves the pool. OpenFiscalPeriod sets
the opening figures (total budget and any amounts already allocated or spent).
"""

from datetime import date

from pydantic import Field, model_validator

from public_works_ledger.allocation.models import RecipientType
from public_works_ledger.kernel.schema import DomainModel


class AllocateBudget(DomainModel):
    """
    Allocate part of the national pool to a recipient

    Requirements:
    - amount <= total_budget - allocated_budget at the moment of allocation

    fiscal_year defaults to the policy's current fiscal year when omitted.
    """

    recipient: str = Field(..., min_length=1, max_length=200)
    recipient_type: RecipientType
    amount: int = Field(..., gt=0)
    purpose: str = Field(..., min_length=1, max_length=1000)
    fiscal_year: str | None = Field(default=None, min_length=1)
    allocated_by: str | None = None


class ImportAllocation(AllocateBudget):
    """
    Record an allocation that is already part of the opening figures

    The national allocated total is not incremented; the opening figures
    passed to OpenFiscalPeriod already include it.
    """

    id: str = Field(..., min_length=1)
    allocated_date: date


class OpenFiscalPeriod(DomainModel):
    """
    Set the national totals for a fiscal period

    Opening figures may already include allocations and spending made
    before the ledger was started.
    """

    total_budget: int = Field(..., ge=0)
    allocated_budget: int = Field(default=0, ge=0)
    spent_budget: int = Field(default=0, ge=0)
    total_projects: int = Field(default=0, ge=0)
    completed_projects: int = Field(default=0, ge=0)
    ongoing_projects: int = Field(default=0, ge=0)
    delayed_projects: int = Field(default=0, ge=0)
    total_contractors: int = Field(default=0, ge=0)
    provinces: int = Field(default=7, ge=0)
    local_units: int = Field(default=753, ge=0)

    @model_validator(mode="after")
    def allocated_within_total(self) -> "OpenFiscalPeriod":
        if self.allocated_budget > self.total_budget:
            raise ValueError("allocated_budget cannot exceed total_budget")
        return self


class AllocationFilters(DomainModel):
    recipient_type: RecipientType | None = None
    fiscal_year: str | None = None


ALLOCATION_COMMAND_TYPES = {
    "AllocateBudget": AllocateBudget,
    "ImportAllocation": ImportAllocation,
    "OpenFiscalPeriod": OpenFiscalPeriod,
}
