"""
Advisory - Best-effort AI analysis with deterministic fallbacks

Results are strictly validated, marked simulated when computed locally, and
never gate or mutate anything in the ledger.
"""

from public_works_ledger.advisory.config import AdvisorySettings
from public_works_ledger.advisory.models import (
    AllocationAnalysis,
    ContractorRating,
    ProjectFeasibility,
)
from public_works_ledger.advisory.service import AdvisoryService

__all__ = [
    "AdvisoryService",
    "AdvisorySettings",
    "AllocationAnalysis",
    "ContractorRating",
    "ProjectFeasibility",
]
