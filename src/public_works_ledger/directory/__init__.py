"""
Directory - Contractors, quality inspection reports and province summaries
"""

from public_works_ledger.directory.models import (
    Contractor,
    InspectionStatus,
    ProvinceStats,
    QualityReport,
)

__all__ = ["Contractor", "InspectionStatus", "ProvinceStats", "QualityReport"]
