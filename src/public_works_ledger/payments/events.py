"""
Payment Settlement Events

PaymentApproved is the single fact behind a settlement. The project registry
and the national totals both apply it, so the two debits cannot diverge.
"""

from datetime import date, datetime

from pydantic import BaseModel

from public_works_ledger.payments.models import PaymentRequest


class PaymentRequested(BaseModel):
    payment: PaymentRequest
    requested_at: datetime


class PaymentRequestImported(BaseModel):
    payment: PaymentRequest
    imported_at: datetime


class PaymentApproved(BaseModel):
    """
    A payment request was approved and settled

    debit_applied is False only when the project was missing and the policy
    allows approval without a debit.
    """

    payment_id: str
    project_id: str
    amount: int
    approved_by: str
    approved_date: date
    debit_applied: bool
    processed_at: datetime


class PaymentRejected(BaseModel):
    payment_id: str
    project_id: str
    amount: int
    approved_by: str
    approved_date: date
    processed_at: datetime


PAYMENT_EVENT_TYPES = {
    "PaymentRequested": PaymentRequested,
    "PaymentRequestImported": PaymentRequestImported,
    "PaymentApproved": PaymentApproved,
    "PaymentRejected": PaymentRejected,
}
