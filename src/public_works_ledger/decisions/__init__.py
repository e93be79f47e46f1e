"""
Decisions - Policy proposals and their one-way approval or rejection
"""

from public_works_ledger.decisions.models import PolicyDecision, PolicyStatus

__all__ = ["PolicyDecision", "PolicyStatus"]
