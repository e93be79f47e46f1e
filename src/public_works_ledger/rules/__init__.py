"""
Rules - Budget range table, authorization matrix and the validation engine

Decides which tier of government may create a project of a given size and
whether a proposed budget sits inside the legal range for that size.
The checks themselves live in rules.invariants.
"""

from public_works_ledger.rules.models import (
    BudgetRange,
    GovernmentLevel,
    ProjectSize,
    ValidationResult,
    format_currency,
)

__all__ = [
    "BudgetRange",
    "GovernmentLevel",
    "ProjectSize",
    "ValidationResult",
    "format_currency",
]
