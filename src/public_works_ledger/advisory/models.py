"""
Advisory result schemas

Model output is validated against these before it is shown to anyone;
anything that does not fit is discarded in favour of the fallback.
"""

from typing import Literal

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from public_works_ledger.kernel.schema import DomainModel


class AdvisoryResult(DomainModel):
    """Base for advisory results; unknown keys are rejected"""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid"
    )

    simulated: bool = False


class AllocationAnalysis(AdvisoryResult):
    feasibility_score: int = Field(..., ge=0, le=100)
    risk_level: Literal["LOW", "MEDIUM", "HIGH"]
    recommendations: list[str] = Field(..., min_length=1, max_length=8)
    potential_issues: list[str] = Field(..., min_length=1, max_length=8)
    benchmark_comparison: str
    approval_recommendation: Literal["APPROVE", "APPROVE_WITH_CONDITIONS", "REJECT"]


class CostBreakdown(DomainModel):
    """Suggested split of a project budget, in rupees"""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid"
    )

    construction: int = Field(..., ge=0)
    land_acquisition: int = Field(..., ge=0)
    engineering_and_design: int = Field(..., ge=0)
    project_management: int = Field(..., ge=0)
    contingency: int = Field(..., ge=0)


class ProjectFeasibility(AdvisoryResult):
    """
    Feasibility review of a proposed project

    Attributes:
        technical_feasibility: COMPLEX | MODERATE | STRAIGHTFORWARD
        financial_viability: Short verdict on the funding
        timeline_assessment: AGGRESSIVE | REALISTIC | EXTENDED
        timeline_months: Planned duration used for the assessment
        budget_appropriateness: TIGHT | APPROPRIATE | GENEROUS for the size tier
        cost_breakdown: Suggested split of the budget
        risks: Major risks
        conditions: Conditions to attach to an approval
        alternatives: Alternative delivery approaches
        approval_status: Recommendation on approval
        verdict: One-line conclusion
    """

    technical_feasibility: Literal["COMPLEX", "MODERATE", "STRAIGHTFORWARD"]
    financial_viability: str
    timeline_assessment: Literal["AGGRESSIVE", "REALISTIC", "EXTENDED"]
    timeline_months: int = Field(..., ge=0)
    budget_appropriateness: Literal["TIGHT", "APPROPRIATE", "GENEROUS"]
    cost_breakdown: CostBreakdown
    risks: list[str] = Field(..., min_length=1)
    conditions: list[str] = Field(default_factory=list)
    alternatives: list[str] = Field(default_factory=list)
    approval_status: str
    verdict: str


class RatingCategories(DomainModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid"
    )

    time_management: float = Field(..., ge=0, le=5)
    budget_adherence: float = Field(..., ge=0, le=5)
    quality: float = Field(..., ge=0, le=5)
    safety: float = Field(..., ge=0, le=5)


class ContractorRating(AdvisoryResult):
    """
    Advisory rating of a contractor's track record

    Presented for human decision only; never written back to the directory.
    """

    overall_rating: float = Field(..., ge=0, le=5)
    categories: RatingCategories
    strengths: list[str] = Field(..., min_length=1)
    concerns: list[str] = Field(..., min_length=1)
    recommendation: str
