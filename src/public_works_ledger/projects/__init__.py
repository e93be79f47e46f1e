"""
Projects - Project registry under the validation engine's gate

Creation checks the (level, size, budget) triple and the date range; updates
re-check whatever they touch and follow the status lifecycle.
"""

from public_works_ledger.projects.models import (
    ContractorInfo,
    Priority,
    Project,
    ProjectStatus,
)

__all__ = [
    "ContractorInfo",
    "Priority",
    "Project",
    "ProjectStatus",
]
