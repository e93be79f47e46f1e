"""
Directory Models - reference data around the ledger

Contractors, quality inspection reports and per-province summaries. These are
read-mostly records; a contractor's stored rating is only changed by
registering data, never by an advisory analysis.
"""

from datetime import date
from enum import Enum

from pydantic import Field

from public_works_ledger.kernel.schema import DomainModel


class InspectionStatus(str, Enum):
    PASSED = "PASSED"
    FAILED = "FAILED"
    NEEDS_IMPROVEMENT = "NEEDS_IMPROVEMENT"


class Contractor(DomainModel):
    id: str
    name: str
    company: str
    email: str = ""
    phone: str = ""
    rating: float = Field(default=0.0, ge=0, le=5)
    completed_projects: int = Field(default=0, ge=0)
    ongoing_projects: int = Field(default=0, ge=0)
    specialization: str = ""
    verified: bool = False
    registered_date: date


class QualityReport(DomainModel):
    """Outcome of a site inspection on a project"""

    id: str
    project_id: str
    project_name: str
    inspector_name: str
    inspection_date: date
    status: InspectionStatus
    findings: str = ""
    recommendations: str = ""


class ProvinceStats(DomainModel):
    """
    Summary figures for one province

    Attributes:
        name: Province name
        projects: Number of projects in the province
        utilization: Budget utilization, percent
        completion: Average completion, percent
        budget: Provincial budget in rupees
        spent: Amount spent in rupees
    """

    name: str
    projects: int = Field(..., ge=0)
    utilization: int = Field(..., ge=0, le=100)
    completion: int = Field(..., ge=0, le=100)
    budget: int = Field(..., ge=0)
    spent: int = Field(..., ge=0)
