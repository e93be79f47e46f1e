"""
Project Module Events - Domain events for the project registry

Spending on a project is not recorded here: it arrives through the payments
module's PaymentApproved event, which the project registry also applies.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from public_works_ledger.projects.models import Project


class ProjectCreated(BaseModel):
    """
    A project passed the validation engine and entered the registry

    Counts toward the national project total.
    """

    project: Project
    created_at: datetime


class ProjectImported(BaseModel):
    """An existing project was loaded with its current progress and spending"""

    project: Project
    imported_at: datetime


class ProjectUpdated(BaseModel):
    """
    Fields of a project were changed

    changes holds only the fields that were set, in JSON form. Status is
    carried separately so national counters can move the project between
    buckets without replaying history.
    """

    project_id: str
    changes: dict[str, Any]
    previous_status: str
    new_status: str
    updated_at: datetime


PROJECT_EVENT_TYPES = {
    "ProjectCreated": ProjectCreated,
    "ProjectImported": ProjectImported,
    "ProjectUpdated": ProjectUpdated,
}
