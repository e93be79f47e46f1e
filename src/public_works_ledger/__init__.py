"""
Public Works Ledger - National public-works budget governance

Event-sourced ledger of projects, allocations, policy decisions and payment
settlement, guarded by a rule engine over government level, project size
and budget.
"""

from public_works_ledger.command_api import CommandResult
from public_works_ledger.engine import GovernanceEngine
from public_works_ledger.kernel.governance_policy import GovernancePolicy

__version__ = "0.1.0"

__all__ = ["GovernanceEngine", "GovernancePolicy", "CommandResult", "__version__"]
