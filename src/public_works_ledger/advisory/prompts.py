"""
Prompt text for each analysis

Each prompt asks for a single JSON object with exactly the keys of the
matching result schema, so the reply can be validated strictly.
"""

from public_works_ledger.allocation.commands import AllocateBudget
from public_works_ledger.directory.models import Contractor
from public_works_ledger.projects.commands import CreateProject
from public_works_ledger.projects.models import Project, ProjectStatus
from public_works_ledger.rules.models import format_currency


def allocation_prompt(command: AllocateBudget, fiscal_year: str) -> str:
    return f"""Analyze this budget allocation proposal for Nepal's government and return ONLY valid JSON (no markdown, no preamble):

{{
  "feasibilityScore": <number 0-100>,
  "riskLevel": "<LOW|MEDIUM|HIGH>",
  "recommendations": [<array of 3-5 specific recommendations>],
  "potentialIssues": [<array of 2-4 potential problems>],
  "benchmarkComparison": "<comparison with similar allocations>",
  "approvalRecommendation": "<APPROVE|APPROVE_WITH_CONDITIONS|REJECT>"
}}

Allocation Details:
- Recipient: {command.recipient}
- Type: {command.recipient_type.value}
- Amount: {format_currency(command.amount)}
- Purpose: {command.purpose}
- Fiscal Year: {command.fiscal_year or fiscal_year}

Consider: Nepal's economic context, past allocation patterns, recipient's capacity, and purpose alignment with national priorities."""


def project_prompt(command: CreateProject) -> str:
    return f"""As an infrastructure expert, analyze this proposed project for Nepal and return ONLY valid JSON (no markdown, no preamble):

{{
  "technicalFeasibility": "<COMPLEX|MODERATE|STRAIGHTFORWARD>",
  "financialViability": "<short verdict>",
  "timelineAssessment": "<AGGRESSIVE|REALISTIC|EXTENDED>",
  "timelineMonths": <integer>,
  "budgetAppropriateness": "<TIGHT|APPROPRIATE|GENEROUS>",
  "costBreakdown": {{"construction": <rupees>, "landAcquisition": <rupees>, "engineeringAndDesign": <rupees>, "projectManagement": <rupees>, "contingency": <rupees>}},
  "risks": [<major risks>],
  "conditions": [<conditions for approval>],
  "alternatives": [<alternative approaches>],
  "approvalStatus": "<approval recommendation>",
  "verdict": "<one-line conclusion>"
}}

Project: {command.title}
Description: {command.description}
Budget: {format_currency(command.budget)}
Size Category: {command.size.value}
Timeline: {command.start_date.isoformat()} to {command.end_date.isoformat()}
Location: {command.province}, {command.local_unit}
Priority: {command.priority.value}"""


def contractor_prompt(contractor: Contractor, projects: list[Project]) -> str:
    history = "\n".join(
        f"""{i}. {p.title}
   - Budget: {format_currency(p.budget)}
   - Spent: {format_currency(p.spent_amount)}
   - Progress: {p.progress}%
   - Status: {p.status.value}
   - Timeline: {p.start_date.isoformat()} to {p.end_date.isoformat()}"""
        for i, p in enumerate(projects, start=1)
    )

    def count(status: ProjectStatus) -> int:
        return sum(1 for p in projects if p.status == status)

    return f"""Analyze this contractor's performance and generate a comprehensive rating. Return ONLY valid JSON (no markdown, no preamble):

{{
  "overallRating": <number 0-5 with decimals>,
  "categories": {{
    "timeManagement": <number 0-5>,
    "budgetAdherence": <number 0-5>,
    "quality": <number 0-5>,
    "safety": <number 0-5>
  }},
  "strengths": [<array of 3-5 specific strengths>],
  "concerns": [<array of 2-4 specific concerns or areas for improvement>],
  "recommendation": "<detailed recommendation for future project assignments>"
}}

Contractor: {contractor.name}
Company: {contractor.company}
Current Rating: {contractor.rating or 'N/A'}

Projects History:
{history or 'No projects on record'}

Total Projects: {len(projects)}
Completed: {count(ProjectStatus.COMPLETED)}
In Progress: {count(ProjectStatus.IN_PROGRESS)}
Delayed: {count(ProjectStatus.DELAYED)}

Consider:
- On-time delivery rate
- Budget management (over/under spending)
- Project completion rate
- Consistency across projects
- Scale and complexity of projects handled"""
