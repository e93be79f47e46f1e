"""
Project Module Commands - Intentions to change project state

CreateProject goes through the validation engine: the creating level must be
allowed the size and the budget must sit inside the size's range. UpdateProject
merges a partial set of fields and re-checks whichever invariants those
fields touch.
"""

from datetime import date

from pydantic import ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from public_works_ledger.kernel.schema import DomainModel
from public_works_ledger.projects.models import (
    ContractorInfo,
    Priority,
    ProjectStatus,
)
from public_works_ledger.rules.models import GovernmentLevel, ProjectSize


class CreateProject(DomainModel):
    """
    Create a new project in PLANNING status

    Requirements:
    - size permitted for created_by
    - budget within the range for size
    - end_date >= start_date
    """

    title: str = Field(..., min_length=1, max_length=300)
    description: str = Field(default="", max_length=5000)
    budget: int = Field(..., gt=0)
    size: ProjectSize
    created_by: GovernmentLevel
    created_by_id: str | None = None
    priority: Priority = Priority.MEDIUM
    province: str = Field(..., min_length=1)
    local_unit: str = Field(..., min_length=1)
    contractor: ContractorInfo | None = None
    start_date: date
    end_date: date


class ImportProject(CreateProject):
    """
    Load an existing project with its id, progress and spending

    Used to seed the registry from an existing data set. Size and budget rules
    still apply; the project counter in national totals is not touched because
    imported projects are already part of the opening figures.
    """

    id: str = Field(..., min_length=1)
    spent_amount: int = Field(default=0, ge=0)
    status: ProjectStatus = ProjectStatus.PLANNING
    progress: int = Field(default=0, ge=0, le=100)


class ProjectUpdate(DomainModel):
    """
    Partial set of project fields; only the fields given are changed

    id, createdBy and spentAmount are not part of this model and are refused.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid"
    )

    title: str | None = Field(default=None, min_length=1, max_length=300)
    description: str | None = Field(default=None, max_length=5000)
    budget: int | None = Field(default=None, gt=0)
    size: ProjectSize | None = None
    status: ProjectStatus | None = None
    priority: Priority | None = None
    province: str | None = Field(default=None, min_length=1)
    local_unit: str | None = Field(default=None, min_length=1)
    contractor: ContractorInfo | None = None
    progress: int | None = Field(default=None, ge=0, le=100)
    start_date: date | None = None
    end_date: date | None = None

    @model_validator(mode="after")
    def require_some_change(self) -> "ProjectUpdate":
        if not self.model_fields_set:
            raise ValueError("At least one field must be updated")
        nulled = [
            name
            for name in self.model_fields_set
            if name != "contractor" and getattr(self, name) is None
        ]
        if nulled:
            raise ValueError(f"Fields cannot be cleared: {', '.join(sorted(nulled))}")
        return self

    def changes(self) -> dict:
        """Fields explicitly set by the caller, JSON-safe and snake_case"""
        return self.model_dump(mode="json", include=self.model_fields_set)


class UpdateProject(DomainModel):
    project_id: str
    update: ProjectUpdate


class ProjectFilters(DomainModel):
    """Optional filters for listing projects; every filter given must match"""

    status: ProjectStatus | None = None
    province: str | None = None
    size: ProjectSize | None = None
    priority: Priority | None = None


PROJECT_COMMAND_TYPES = {
    "CreateProject": CreateProject,
    "ImportProject": ImportProject,
    "UpdateProject": UpdateProject,
}
