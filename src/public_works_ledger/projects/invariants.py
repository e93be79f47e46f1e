"""
Project invariants - checks run before any project event is produced

All functions either return None or raise a GovernanceError subclass.
"""

from typing import Any

from public_works_ledger.kernel.errors import (
    BudgetBelowSpending,
    ImmutableField,
    InvalidStatusTransition,
    ProgressRegression,
    ProjectClosed,
)
from public_works_ledger.kernel.governance_policy import GovernancePolicy
from public_works_ledger.projects.commands import ProjectUpdate
from public_works_ledger.projects.models import (
    STATUS_TRANSITIONS,
    Project,
    ProjectStatus,
    can_transition,
)
from public_works_ledger.rules.invariants import (
    require_valid_project_size,
    validate_date_range,
)

IMMUTABLE_FIELDS = {
    "id": "id",
    "createdBy": "createdBy",
    "created_by": "createdBy",
    "spentAmount": "spentAmount",
    "spent_amount": "spentAmount",
}


def validate_mutable_fields(updates: dict[str, Any]) -> None:
    """
    Refuse raw update payloads that touch system-managed fields

    Raises:
        ImmutableField: If any key names id, createdBy or spentAmount
    """
    touched = sorted({IMMUTABLE_FIELDS[key] for key in updates if key in IMMUTABLE_FIELDS})
    if touched:
        raise ImmutableField(touched)


def validate_status_transition(project: Project, requested: ProjectStatus) -> None:
    """
    Raises:
        InvalidStatusTransition: If the lifecycle does not allow the move
    """
    if not can_transition(project.status, requested):
        raise InvalidStatusTransition(
            project.id, project.status.value, requested.value
        )


def validate_project_update(
    project: Project, update: ProjectUpdate, policy: GovernancePolicy
) -> Project:
    """
    Check an update against the project it applies to

    Re-runs the validation engine when budget or size change, the date check
    when either date changes, and the lifecycle check when status changes.
    Progress never goes down. COMPLETED and CANCELLED projects are closed:
    no field of theirs changes any more.

    Returns:
        The project as it would look after the update
    """
    merged = project.model_copy(update=update.model_dump(include=update.model_fields_set))

    if update.status is not None:
        validate_status_transition(project, update.status)

    if not STATUS_TRANSITIONS[project.status]:
        raise ProjectClosed(project.id, project.status.value)

    if update.progress is not None and update.progress < project.progress:
        raise ProgressRegression(project.id, project.progress, update.progress)

    if {"budget", "size"} & update.model_fields_set:
        require_valid_project_size(merged.created_by, merged.size, merged.budget, policy)
        if merged.budget < merged.spent_amount:
            raise BudgetBelowSpending(project.id, merged.budget, merged.spent_amount)

    if {"start_date", "end_date"} & update.model_fields_set:
        validate_date_range(merged.start_date, merged.end_date)

    return merged
