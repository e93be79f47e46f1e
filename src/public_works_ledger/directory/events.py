"""
Directory Events
"""

from datetime import datetime

from pydantic import BaseModel

from public_works_ledger.directory.models import Contractor, ProvinceStats, QualityReport


class ContractorRegistered(BaseModel):
    contractor: Contractor
    registered_at: datetime


class QualityReportFiled(BaseModel):
    report: QualityReport
    filed_at: datetime


class ProvinceStatsRecorded(BaseModel):
    stats: ProvinceStats
    recorded_at: datetime


DIRECTORY_EVENT_TYPES = {
    "ContractorRegistered": ContractorRegistered,
    "QualityReportFiled": QualityReportFiled,
    "ProvinceStatsRecorded": ProvinceStatsRecorded,
}
