"""
Policy Decision Events
"""

from datetime import date, datetime

from pydantic import BaseModel

from public_works_ledger.decisions.models import PolicyDecision


class PolicyProposed(BaseModel):
    policy: PolicyDecision
    proposed_at: datetime


class PolicyImported(BaseModel):
    policy: PolicyDecision
    imported_at: datetime


class PolicyDecided(BaseModel):
    """
    A PENDING policy was approved or rejected

    Terminal: no further event is accepted on this policy's stream.
    """

    policy_id: str
    status: str
    decided_by: str
    decided_date: date
    decided_at: datetime


DECISION_EVENT_TYPES = {
    "PolicyProposed": PolicyProposed,
    "PolicyImported": PolicyImported,
    "PolicyDecided": PolicyDecided,
}
