"""
Directory Commands - registering reference data
"""

from datetime import date

from pydantic import Field

from public_works_ledger.directory.models import InspectionStatus
from public_works_ledger.kernel.schema import DomainModel


class RegisterContractor(DomainModel):
    """
    Add a contractor to the directory

    id and registered_date are assigned when omitted.
    """

    id: str | None = Field(default=None, min_length=1)
    name: str = Field(..., min_length=1, max_length=200)
    company: str = Field(..., min_length=1, max_length=200)
    email: str = ""
    phone: str = ""
    rating: float = Field(default=0.0, ge=0, le=5)
    completed_projects: int = Field(default=0, ge=0)
    ongoing_projects: int = Field(default=0, ge=0)
    specialization: str = ""
    verified: bool = False
    registered_date: date | None = None


class FileQualityReport(DomainModel):
    """
    File an inspection report against an existing project

    id and inspection_date are assigned when omitted.
    """

    id: str | None = Field(default=None, min_length=1)
    project_id: str
    inspector_name: str = Field(..., min_length=1)
    inspection_date: date | None = None
    status: InspectionStatus
    findings: str = ""
    recommendations: str = ""


class RecordProvinceStats(DomainModel):
    """Record (or replace) the summary figures for a province"""

    name: str = Field(..., min_length=1)
    projects: int = Field(..., ge=0)
    utilization: int = Field(..., ge=0, le=100)
    completion: int = Field(..., ge=0, le=100)
    budget: int = Field(..., ge=0)
    spent: int = Field(..., ge=0)


class ContractorFilters(DomainModel):
    """verified must match exactly; specialization is a case-insensitive substring"""

    verified: bool | None = None
    specialization: str | None = None


DIRECTORY_COMMAND_TYPES = {
    "RegisterContractor": RegisterContractor,
    "FileQualityReport": FileQualityReport,
    "RecordProvinceStats": RecordProvinceStats,
}
