"""
Policy Decision Models - proposed policies and their one-way decision

A policy is proposed as PENDING and decided exactly once. APPROVED and
REJECTED are terminal.
"""

from datetime import date
from enum import Enum

from public_works_ledger.kernel.schema import DomainModel


class PolicyStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class PolicyDecision(DomainModel):
    """
    A policy awaiting or having received a decision

    decided_by and decided_date are set together when the policy leaves
    PENDING and never change afterwards.
    """

    id: str
    title: str
    description: str = ""
    category: str
    status: PolicyStatus = PolicyStatus.PENDING
    proposed_by: str
    proposed_date: date
    impact: str = ""
    decided_by: str | None = None
    decided_date: date | None = None

    @property
    def is_decided(self) -> bool:
        return self.status != PolicyStatus.PENDING
