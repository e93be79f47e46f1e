"""
Deterministic fallback analyses

Served whenever the remote model is disabled, unreachable, slow, or returns
something that does not fit the result schema. Pure functions of their
inputs; every result is marked simulated=True.
"""

from public_works_ledger.advisory.models import (
    AllocationAnalysis,
    ContractorRating,
    CostBreakdown,
    ProjectFeasibility,
    RatingCategories,
)
from public_works_ledger.allocation.commands import AllocateBudget
from public_works_ledger.directory.models import Contractor
from public_works_ledger.kernel.governance_policy import GovernancePolicy
from public_works_ledger.projects.commands import CreateProject
from public_works_ledger.projects.models import Project, ProjectStatus
from public_works_ledger.rules.models import ProjectSize, format_currency

ONE_HUNDRED_BILLION = 100_000_000_000
FIFTY_BILLION = 50_000_000_000
TEN_BILLION = 10_000_000_000


def _percent_of(amount: int, percent: int) -> int:
    """amount * percent / 100, rounded half up"""
    return (amount * percent + 50) // 100


def _round_half_up(value: float) -> int:
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


def allocation_analysis(command: AllocateBudget) -> AllocationAnalysis:
    amount = command.amount

    if amount > ONE_HUNDRED_BILLION:
        score, risk = 65, "HIGH"
    elif amount > TEN_BILLION:
        score, risk = 80, "MEDIUM"
    else:
        score, risk = 90, "LOW"

    position = "above" if amount > FIFTY_BILLION else "within"

    return AllocationAnalysis(
        simulated=True,
        feasibility_score=score,
        risk_level=risk,
        recommendations=[
            f"Ensure {command.recipient} has adequate project management capacity "
            f"for {format_currency(amount)}",
            "Establish clear milestone-based payment schedules",
            "Require quarterly progress reports and financial audits",
            "Set up dedicated monitoring committee with local representation",
            "Include contingency fund (10-15%) for unforeseen circumstances",
        ],
        potential_issues=[
            "Possible delays in fund utilization due to administrative capacity",
            "Risk of budget reallocation if spending targets not met",
            "Need for technical expertise in project implementation",
        ],
        benchmark_comparison=(
            f"This allocation is {position} the average for similar "
            f"{command.recipient_type.value} allocations in Nepal."
        ),
        approval_recommendation=(
            "APPROVE_WITH_CONDITIONS" if amount > ONE_HUNDRED_BILLION else "APPROVE"
        ),
    )


def project_feasibility(command: CreateProject, policy: GovernancePolicy) -> ProjectFeasibility:
    budget = command.budget
    months = _round_half_up((command.end_date - command.start_date).days / 30)
    budget_range = policy.range_for(command.size)

    technical = {
        ProjectSize.LARGE: "COMPLEX",
        ProjectSize.MEDIUM: "MODERATE",
        ProjectSize.SMALL: "STRAIGHTFORWARD",
    }[command.size]

    if months < 12:
        timeline = "AGGRESSIVE"
    elif months > 60:
        timeline = "EXTENDED"
    else:
        timeline = "REALISTIC"

    if budget < budget_range.min * 1.5:
        appropriateness = "TIGHT"
    elif budget > budget_range.max * 0.8:
        appropriateness = "GENEROUS"
    else:
        appropriateness = "APPROPRIATE"

    large = command.size == ProjectSize.LARGE
    very_large = budget > ONE_HUNDRED_BILLION

    risks = [
        "LAND ACQUISITION: High risk in populated areas, may cause 3-6 month delays",
        "BUDGET OVERRUN: "
        + ("Significant risk (20-30%)" if budget > FIFTY_BILLION else "Moderate risk (10-15%)"),
        "CONTRACTOR CAPACITY: "
        + ("Limited contractors can handle this scale" if large else "Adequate contractors available"),
        "POLITICAL STABILITY: Policy continuity needed across government terms",
        "ENVIRONMENTAL CLEARANCES: Required approvals may take 6-12 months",
    ]

    conditions = []
    if very_large:
        conditions += ["Split into 3-5 year phases", "Annual budget review mechanism"]
    conditions += [
        "Complete Environmental Impact Assessment before work starts",
        "Establish Project Monitoring Committee with local representation",
        "Quarterly progress reports mandatory",
        "Quality audits every 6 months",
        "Penalty clauses for delays in contractor agreement",
    ]

    alternatives = []
    if large:
        alternatives += [
            "Consider Public-Private Partnership (PPP) model",
            "Phase implementation to spread cost over years",
        ]
    alternatives += [
        "Explore regional cooperation for cross-border benefits",
        "Technology transfer clauses with international contractors",
    ]

    if very_large or months < 12:
        verdict = "PROCEED WITH CAUTION - Address highlighted concerns before approval"
    else:
        verdict = "RECOMMENDED FOR APPROVAL - Solid planning with manageable risks"

    return ProjectFeasibility(
        simulated=True,
        technical_feasibility=technical,
        financial_viability=(
            "REQUIRES CAREFUL MONITORING" if budget > FIFTY_BILLION else "REASONABLE"
        ),
        timeline_assessment=timeline,
        timeline_months=max(months, 0),
        budget_appropriateness=appropriateness,
        cost_breakdown=CostBreakdown(
            construction=_percent_of(budget, 60),
            land_acquisition=_percent_of(budget, 15),
            engineering_and_design=_percent_of(budget, 8),
            project_management=_percent_of(budget, 5),
            contingency=_percent_of(budget, 12),
        ),
        risks=risks,
        conditions=conditions,
        alternatives=alternatives,
        approval_status=(
            "CONDITIONAL APPROVAL RECOMMENDED" if very_large else "APPROVAL RECOMMENDED"
        ),
        verdict=verdict,
    )


def contractor_rating(contractor: Contractor, projects: list[Project]) -> ContractorRating:
    """
    Score a contractor from the projects assigned to them

    With no projects on record, progress and completion count as zero and
    budget adherence as perfect.
    """
    total = len(projects)
    completed = sum(1 for p in projects if p.status == ProjectStatus.COMPLETED)
    avg_progress = sum(p.progress for p in projects) / total if total else 0.0
    avg_spend_ratio = sum(p.spent_amount / p.budget for p in projects) / total if total else 0.0
    stored_rating = contractor.rating or None

    time_management = min(5.0, completed / total * 5) if total else 0.0
    budget_adherence = min(5.0, 5 / avg_spend_ratio) if avg_spend_ratio > 0 else 5.0
    scale = projects[0].size.value if projects else None

    if avg_progress > 70 and avg_spend_ratio < 1.2:
        recommendation = (
            f"HIGHLY RECOMMENDED for future {scale or 'similar'} projects. Contractor "
            "demonstrates consistent performance and reliability."
        )
    else:
        recommendation = (
            "RECOMMENDED WITH MONITORING for future projects. Establish clear milestone "
            "reviews and budget oversight."
        )

    return ContractorRating(
        simulated=True,
        overall_rating=round(min(5.0, avg_progress / 20 + (stored_rating or 3)), 2),
        categories=RatingCategories(
            time_management=round(time_management, 2),
            budget_adherence=round(budget_adherence, 2),
            quality=stored_rating or 4.0,
            safety=4.2,
        ),
        strengths=[
            f"Successfully completed {completed} out of {total} projects",
            f"Average project progress of {avg_progress:.1f}%",
            f"Experienced in {scale or 'various'} scale projects",
            f"Strong track record with {contractor.company}",
            "Consistent performance across multiple provinces",
        ],
        concerns=[
            "Budget overruns observed in recent projects"
            if avg_spend_ratio > 1.1
            else "Minor budget variance",
            "Multiple ongoing projects may affect focus"
            if total - completed > 1
            else "Project load is manageable",
            "Periodic quality audits recommended",
            "Safety training documentation should be updated",
        ],
        recommendation=recommendation,
    )
