"""
Rules Domain Models - Government levels, project size tiers, budget ranges

Two static tables drive every project-creation decision:

- Budget Range Table: size tier -> closed [min, max] budget interval
- Authorization Matrix: government level -> size tiers it may create

Amounts are integer rupees. Bounds are inclusive, so a budget of exactly
100,000,000 is both the top of SMALL and the bottom of MEDIUM.
"""

from enum import Enum

from pydantic import BaseModel, Field, model_validator


class GovernmentLevel(str, Enum):
    """
    Tier of government authority creating a project or allocation

    CENTRAL may create every size, PROVINCIAL small and medium, LOCAL only small.
    """

    CENTRAL = "CENTRAL"
    PROVINCIAL = "PROVINCIAL"
    LOCAL = "LOCAL"


class ProjectSize(str, Enum):
    """Size tier bounding a project's budget and the authority that may approve it"""

    SMALL = "SMALL"
    MEDIUM = "MEDIUM"
    LARGE = "LARGE"


class BudgetRange(BaseModel):
    """
    Closed budget interval for one size tier

    Attributes:
        min: Smallest permitted budget (inclusive)
        max: Largest permitted budget (inclusive)
        label: Display label in lakh/crore units
    """

    min: int = Field(..., ge=0)
    max: int = Field(..., ge=0)
    label: str = ""

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_bounds(self) -> "BudgetRange":
        if self.min > self.max:
            raise ValueError(f"Range minimum {self.min} exceeds maximum {self.max}")
        return self

    def contains(self, amount: int) -> bool:
        return self.min <= amount <= self.max


class ValidationResult(BaseModel):
    """Outcome of a (level, size, budget) check"""

    valid: bool
    message: str


DEFAULT_BUDGET_RANGES: dict[ProjectSize, BudgetRange] = {
    ProjectSize.SMALL: BudgetRange(
        min=1_000_000, max=100_000_000, label="Rs. 10 Lakh - 10 Crore"
    ),
    ProjectSize.MEDIUM: BudgetRange(
        min=100_000_000, max=5_000_000_000, label="Rs. 10 Crore - 500 Crore"
    ),
    ProjectSize.LARGE: BudgetRange(
        min=5_000_000_000, max=50_000_000_000, label="Rs. 500 Crore - 5000 Crore"
    ),
}

DEFAULT_ALLOWED_SIZES: dict[GovernmentLevel, list[ProjectSize]] = {
    GovernmentLevel.CENTRAL: [ProjectSize.SMALL, ProjectSize.MEDIUM, ProjectSize.LARGE],
    GovernmentLevel.PROVINCIAL: [ProjectSize.SMALL, ProjectSize.MEDIUM],
    GovernmentLevel.LOCAL: [ProjectSize.SMALL],
}


def format_currency(amount: int | float) -> str:
    """
    Format a rupee amount the way budget officers read it

    >= 1 billion -> "Rs. 45.00 Billion"
    >= 1 crore   -> "Rs. 10.00 Crore"
    >= 1 lakh    -> "Rs. 10.00 Lakh"
    otherwise    -> "Rs. 95,000"
    """
    if amount >= 1_000_000_000:
        return f"Rs. {amount / 1_000_000_000:.2f} Billion"
    if amount >= 10_000_000:
        return f"Rs. {amount / 10_000_000:.2f} Crore"
    if amount >= 100_000:
        return f"Rs. {amount / 100_000:.2f} Lakh"
    return f"Rs. {amount:,}"
