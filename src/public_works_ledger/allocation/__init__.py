"""
Allocation - National budget pool, allocations and NationalTotals

Moves budget from the unallocated national pool to provinces, local units and
ministries without ever exceeding the pool.
"""

from public_works_ledger.allocation.models import (
    AllocationStatus,
    BudgetAllocation,
    NationalTotals,
    RecipientType,
)

__all__ = [
    "AllocationStatus",
    "BudgetAllocation",
    "NationalTotals",
    "RecipientType",
]
