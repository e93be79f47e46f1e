"""
Governance Policy - Configurable parameters of the rule engine

The policy holds the two lookup tables (budget ranges, authorization matrix),
the fiscal-period budget, and the switches for invariants that earlier
dashboard versions left unenforced. Defaults are the strict settings.
"""

from typing import Literal

from pydantic import BaseModel, Field, model_validator

from public_works_ledger.rules.models import (
    DEFAULT_ALLOWED_SIZES,
    DEFAULT_BUDGET_RANGES,
    BudgetRange,
    GovernmentLevel,
    ProjectSize,
)

# Most restrictive first; each level's sizes must contain the previous level's
_AUTHORITY_ORDER = (GovernmentLevel.LOCAL, GovernmentLevel.PROVINCIAL, GovernmentLevel.CENTRAL)


class GovernancePolicy(BaseModel):
    """
    Rule-engine parameters

    Attributes:
        budget_ranges: Size tier -> inclusive budget interval
        allowed_sizes: Government level -> creatable size tiers
        national_total_budget: Fiscal-period national budget (integer rupees)
        fiscal_year: Fiscal year tag stamped on the opening totals
        enforce_project_budget_cap: Refuse settlements pushing spentAmount over budget
        enforce_national_spend_cap: Refuse settlements pushing spentBudget over allocatedBudget
        missing_project_settlement: REJECT approval when the project is gone, or
            WARN (approve, skip the debit, log a warning)
    """

    policy_version: str = Field(
        default="1.0",
        description="Policy version for tracking changes over time",
    )

    budget_ranges: dict[ProjectSize, BudgetRange] = Field(
        default_factory=lambda: dict(DEFAULT_BUDGET_RANGES),
        description="Budget interval per project size tier",
    )

    allowed_sizes: dict[GovernmentLevel, list[ProjectSize]] = Field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_ALLOWED_SIZES.items()},
        description="Project sizes each government level may create",
    )

    national_total_budget: int = Field(
        default=150_000_000_000,
        ge=0,
        description="National budget for the fiscal period",
    )

    fiscal_year: str = Field(
        default="2080/81",
        description="Fiscal year tag (Bikram Sambat)",
    )

    enforce_project_budget_cap: bool = Field(
        default=True,
        description="Reject payment settlement that would overspend the project budget",
    )

    enforce_national_spend_cap: bool = Field(
        default=True,
        description="Reject payment settlement that would push national spend past allocations",
    )

    missing_project_settlement: Literal["REJECT", "WARN"] = Field(
        default="REJECT",
        description="Approving a payment whose project no longer exists: fail or warn",
    )

    @model_validator(mode="after")
    def check_tables(self) -> "GovernancePolicy":
        missing = [size.value for size in ProjectSize if size not in self.budget_ranges]
        if missing:
            raise ValueError(f"Budget range missing for sizes: {', '.join(missing)}")

        previous: set[ProjectSize] = set()
        for level in _AUTHORITY_ORDER:
            sizes = set(self.allowed_sizes.get(level, []))
            if not sizes:
                raise ValueError(f"{level.value} must be allowed at least one project size")
            if not previous <= sizes:
                raise ValueError(
                    f"{level.value} must be allowed every size a lower level may create"
                )
            previous = sizes
        return self

    def range_for(self, size: ProjectSize) -> BudgetRange:
        return self.budget_ranges[size]

    def sizes_for(self, level: GovernmentLevel) -> list[ProjectSize]:
        # Keep table order stable for messages
        allowed = set(self.allowed_sizes.get(level, []))
        return [size for size in ProjectSize if size in allowed]


default_governance_policy = GovernancePolicy()
