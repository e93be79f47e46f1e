"""
Allocation Domain Models - national pool, allocations and running totals

Budget moves one way: from the unallocated national pool to a named recipient.
NationalTotals is the single aggregate every money-moving command reads and
updates.
"""

from datetime import date
from enum import Enum

from pydantic import Field

from public_works_ledger.kernel.schema import DomainModel


class RecipientType(str, Enum):
    PROVINCE = "PROVINCE"
    LOCAL_UNIT = "LOCAL_UNIT"
    MINISTRY = "MINISTRY"


class AllocationStatus(str, Enum):
    """Allocations are irrevocable; ALLOCATED is the only (terminal) state"""

    ALLOCATED = "ALLOCATED"


class BudgetAllocation(DomainModel):
    """
    A transfer of budget from the national pool to a recipient

    Attributes:
        id: Unique allocation id
        recipient: Name of the receiving province, local unit or ministry
        recipient_type: Kind of recipient
        amount: Rupees moved, always positive
        purpose: What the money is for
        status: Always ALLOCATED
        fiscal_year: Fiscal year tag such as "2080/81" (not date-checked)
        allocated_date: Day the allocation was made
        allocated_by: Who approved it
    """

    id: str
    recipient: str
    recipient_type: RecipientType
    amount: int = Field(..., gt=0)
    purpose: str
    status: AllocationStatus = AllocationStatus.ALLOCATED
    fiscal_year: str
    allocated_date: date
    allocated_by: str | None = None


class NationalTotals(DomainModel):
    """
    Process-wide budget totals and project counters for the fiscal period

    Invariants:
    - allocated_budget <= total_budget
    - spent_budget <= allocated_budget (enforced unless the policy disables it)
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

    @property
    def remaining_budget(self) -> int:
        """Budget still available to allocate"""
        return self.total_budget - self.allocated_budget
