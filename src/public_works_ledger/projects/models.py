"""
Project Domain Models - public works projects and their lifecycle

A project is created by one tier of government with a size tier and a budget
that the validation engine has accepted. After creation its spending only
grows (through settled payment requests) and its status follows a fixed
lifecycle.
"""

from datetime import date
from enum import Enum

from pydantic import Field

from public_works_ledger.kernel.schema import DomainModel
from public_works_ledger.rules.models import GovernmentLevel, ProjectSize


class ProjectStatus(str, Enum):
    """
    Project lifecycle states

    PLANNING → IN_PROGRESS → COMPLETED
                           → DELAYED → IN_PROGRESS / COMPLETED
    Any non-terminal state may move to CANCELLED.
    """

    PLANNING = "PLANNING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    DELAYED = "DELAYED"
    CANCELLED = "CANCELLED"


class Priority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


STATUS_TRANSITIONS: dict[ProjectStatus, frozenset[ProjectStatus]] = {
    ProjectStatus.PLANNING: frozenset({ProjectStatus.IN_PROGRESS, ProjectStatus.CANCELLED}),
    ProjectStatus.IN_PROGRESS: frozenset(
        {ProjectStatus.COMPLETED, ProjectStatus.DELAYED, ProjectStatus.CANCELLED}
    ),
    ProjectStatus.DELAYED: frozenset(
        {ProjectStatus.IN_PROGRESS, ProjectStatus.COMPLETED, ProjectStatus.CANCELLED}
    ),
    ProjectStatus.COMPLETED: frozenset(),
    ProjectStatus.CANCELLED: frozenset(),
}


def can_transition(current: ProjectStatus, requested: ProjectStatus) -> bool:
    """True if the lifecycle allows current → requested (staying put is always allowed)"""
    return current == requested or requested in STATUS_TRANSITIONS[current]


class ContractorInfo(DomainModel):
    """Contractor summary embedded in a project"""

    id: str
    name: str
    company: str
    rating: float = Field(..., ge=0, le=5)


class Project(DomainModel):
    """
    A public works project

    Attributes:
        id: Assigned at creation, never reused
        title: Short project name
        description: Free text
        budget: Approved budget in rupees
        size: Size tier the budget was validated against
        created_by: Government level that created the project
        created_by_id: Office or user id within that level, if known
        spent_amount: Sum of settled payments, never decreases
        status: Lifecycle state
        priority: Planning priority, used for filtering
        province: Province the project is located in
        local_unit: Municipality or district
        contractor: Assigned contractor, if any
        progress: Physical progress 0-100
        start_date: Planned start
        end_date: Planned completion, never before start_date
    """

    id: str
    title: str
    description: str = ""
    budget: int = Field(..., gt=0)
    size: ProjectSize
    created_by: GovernmentLevel
    created_by_id: str | None = None
    spent_amount: int = Field(default=0, ge=0)
    status: ProjectStatus = ProjectStatus.PLANNING
    priority: Priority = Priority.MEDIUM
    province: str
    local_unit: str
    contractor: ContractorInfo | None = None
    progress: int = Field(default=0, ge=0, le=100)
    start_date: date
    end_date: date

    @property
    def remaining_budget(self) -> int:
        return self.budget - self.spent_amount
