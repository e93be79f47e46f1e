"""
Validation Engine - pure checks over (government level, size, budget)

Check order is fixed: authorization first, then the lower bound, then the
upper bound. A size the level may not create is rejected even when the
budget would fit some other tier.

The functions here have no side effects and read only the policy tables,
so they are safe to call from any thread.
"""

from datetime import date

from public_works_ledger.kernel.errors import InvalidDateRange, OutOfRange, Unauthorized
from public_works_ledger.kernel.governance_policy import (
    GovernancePolicy,
    default_governance_policy,
)
from public_works_ledger.rules.models import (
    GovernmentLevel,
    ProjectSize,
    ValidationResult,
    format_currency,
)

VALID_MESSAGE = "Project size and budget are valid"


def _unauthorized_message(level: GovernmentLevel, allowed: list[ProjectSize]) -> str:
    return (
        f"{level.value} government can only create "
        f"{', '.join(size.value for size in allowed)} projects"
    )


def validate_project_size(
    level: GovernmentLevel | str,
    size: ProjectSize | str,
    budget: int,
    policy: GovernancePolicy = default_governance_policy,
) -> ValidationResult:
    """
    Check whether a government level may create a project of this size and budget

    Args:
        level: Government level proposing the project
        size: Requested size tier
        budget: Proposed budget in rupees
        policy: Tables to check against

    Returns:
        ValidationResult; when invalid, the message names the allowed sizes,
        the minimum, or the maximum, whichever check failed first
    """
    level = GovernmentLevel(level)
    size = ProjectSize(size)

    allowed = policy.sizes_for(level)
    if size not in allowed:
        return ValidationResult(valid=False, message=_unauthorized_message(level, allowed))

    budget_range = policy.range_for(size)
    if budget < budget_range.min:
        return ValidationResult(
            valid=False,
            message=(
                f"Budget too low for {size.value} project. "
                f"Minimum: {format_currency(budget_range.min)}"
            ),
        )

    if budget > budget_range.max:
        return ValidationResult(
            valid=False,
            message=(
                f"Budget too high for {size.value} project. "
                f"Maximum: {format_currency(budget_range.max)}"
            ),
        )

    return ValidationResult(valid=True, message=VALID_MESSAGE)


def require_valid_project_size(
    level: GovernmentLevel | str,
    size: ProjectSize | str,
    budget: int,
    policy: GovernancePolicy = default_governance_policy,
) -> None:
    """
    Raising form of validate_project_size, used by command handlers

    Raises:
        Unauthorized: Size not permitted for the level
        OutOfRange: Budget below the minimum or above the maximum for the size
    """
    result = validate_project_size(level, size, budget, policy)
    if result.valid:
        return

    level = GovernmentLevel(level)
    size = ProjectSize(size)
    allowed = policy.sizes_for(level)
    if size not in allowed:
        raise Unauthorized(
            level=level.value,
            size=size.value,
            allowed=[s.value for s in allowed],
            message=result.message,
        )

    budget_range = policy.range_for(size)
    raise OutOfRange(
        size=size.value,
        budget=budget,
        minimum=budget_range.min,
        maximum=budget_range.max,
        message=result.message,
    )


def validate_date_range(start_date: date, end_date: date) -> None:
    """
    Raises:
        InvalidDateRange: If end_date is before start_date (same day is fine)
    """
    if end_date < start_date:
        raise InvalidDateRange(start_date.isoformat(), end_date.isoformat())
