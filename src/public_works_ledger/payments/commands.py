"""
Payment Settlement Commands
"""

from datetime import date
from typing import Literal

from pydantic import Field

from public_works_ledger.kernel.schema import DomainModel


class SubmitPaymentRequest(DomainModel):
    """
    Raise a PENDING payment request against a project

    Requirements:
    - Project exists (its title is copied into the request)
    """

    project_id: str
    requester: str = Field(..., min_length=1)
    amount: int = Field(..., gt=0)
    purpose: str = Field(..., min_length=1, max_length=1000)


class ImportPaymentRequest(SubmitPaymentRequest):
    """
    Record a PENDING request from an existing data set

    project_name is taken from the project when it exists; otherwise it must
    be given.
    """

    id: str = Field(..., min_length=1)
    request_date: date
    project_name: str | None = None


class ProcessPayment(DomainModel):
    """
    Approve or reject a PENDING payment request

    Approval settles the payment: project spent_amount and national
    spent_budget both grow by amount, in one event.
    """

    payment_id: str
    status: Literal["APPROVED", "REJECTED"]
    approved_by: str = Field(..., min_length=1)


PAYMENT_COMMAND_TYPES = {
    "SubmitPaymentRequest": SubmitPaymentRequest,
    "ImportPaymentRequest": ImportPaymentRequest,
    "ProcessPayment": ProcessPayment,
}
