"""
Settlement invariants - checked before a payment approval is produced

Which caps apply and how a missing project is treated come from the
GovernancePolicy.
"""

from public_works_ledger.allocation.models import NationalTotals
from public_works_ledger.kernel.errors import (
    AlreadyProcessed,
    OverBudget,
    ProjectNotFound,
)
from public_works_ledger.kernel.governance_policy import GovernancePolicy
from public_works_ledger.kernel.logging import get_logger
from public_works_ledger.payments.models import PaymentRequest, PaymentStatus
from public_works_ledger.projects.models import Project

logger = get_logger(__name__)


def validate_pending(payment: PaymentRequest) -> None:
    """
    Raises:
        AlreadyProcessed: If the request has left PENDING
    """
    if payment.status != PaymentStatus.PENDING:
        raise AlreadyProcessed(payment.id, payment.status.value)


def validate_settlement(
    payment: PaymentRequest,
    project: Project | None,
    totals: NationalTotals,
    policy: GovernancePolicy,
) -> bool:
    """
    Decide whether approving this payment may proceed and whether it debits

    Args:
        payment: The PENDING request being approved
        project: The project it is charged to, or None if absent
        totals: Current national totals
        policy: Cap switches and missing-project handling

    Returns:
        True if the debit is applied, False if the project is missing and the
        policy allows approval without a debit

    Raises:
        ProjectNotFound: Project absent and missing_project_settlement is REJECT
        OverBudget: A cap is enforced and the payment would exceed it
    """
    if project is None:
        if policy.missing_project_settlement == "REJECT":
            raise ProjectNotFound(payment.project_id)
        logger.warning(
            "Payment approved without debit: project not found",
            payment_id=payment.id,
            project_id=payment.project_id,
            amount=payment.amount,
        )
        return False

    if policy.enforce_project_budget_cap and payment.amount > project.remaining_budget:
        raise OverBudget(
            scope=f"project {project.id}",
            amount=payment.amount,
            spent=project.spent_amount,
            ceiling=project.budget,
        )

    if (
        policy.enforce_national_spend_cap
        and totals.spent_budget + payment.amount > totals.allocated_budget
    ):
        raise OverBudget(
            scope="national",
            amount=payment.amount,
            spent=totals.spent_budget,
            ceiling=totals.allocated_budget,
        )

    return True
