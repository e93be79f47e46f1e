"""
Policy Decision Commands

ProposePolicy opens a policy for decision; DecidePolicy closes it for good.
"""

from datetime import date
from typing import Literal

from pydantic import Field, model_validator

from public_works_ledger.decisions.models import PolicyStatus
from public_works_ledger.kernel.schema import DomainModel


class ProposePolicy(DomainModel):
    """Put a policy forward for a decision (starts PENDING)"""

    title: str = Field(..., min_length=1, max_length=300)
    description: str = Field(default="", max_length=5000)
    category: str = Field(..., min_length=1, max_length=100)
    proposed_by: str = Field(..., min_length=1)
    impact: str = Field(default="", max_length=1000)


class ImportPolicy(ProposePolicy):
    """
    Record a policy from an existing data set, possibly already decided

    A decided policy must name who decided it and when.
    """

    id: str = Field(..., min_length=1)
    proposed_date: date
    status: PolicyStatus = PolicyStatus.PENDING
    decided_by: str | None = None
    decided_date: date | None = None

    @model_validator(mode="after")
    def decision_fields_match_status(self) -> "ImportPolicy":
        decided = self.status != PolicyStatus.PENDING
        if decided and (self.decided_by is None or self.decided_date is None):
            raise ValueError("Decided policies need decided_by and decided_date")
        if not decided and (self.decided_by is not None or self.decided_date is not None):
            raise ValueError("Pending policies cannot carry decision fields")
        return self


class DecidePolicy(DomainModel):
    """
    Approve or reject a PENDING policy

    Requirements:
    - Policy exists
    - Policy is still PENDING
    """

    policy_id: str
    status: Literal["APPROVED", "REJECTED"]
    decided_by: str = Field(..., min_length=1)


DECISION_COMMAND_TYPES = {
    "ProposePolicy": ProposePolicy,
    "ImportPolicy": ImportPolicy,
    "DecidePolicy": DecidePolicy,
}
