"""
Payment Settlement Models

A payment request is raised against a project and processed exactly once.
Approval debits the project's spent amount and the national spent total
together.
"""

from datetime import date
from enum import Enum

from pydantic import Field

from public_works_ledger.kernel.schema import DomainModel


class PaymentStatus(str, Enum):
    """
    PENDING → APPROVED | REJECTED

    PROCESSED is accepted on input for compatibility with existing data sets
    but is never produced by processing a request.
    """

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    PROCESSED = "PROCESSED"


class PaymentRequest(DomainModel):
    """
    Request to pay part of a project's budget

    Attributes:
        id: Unique request id
        project_id: Project the payment is charged to
        project_name: Project title at the time of the request
        requester: Office asking for the money
        amount: Rupees requested, always positive
        purpose: What the payment covers
        status: Processing state
        request_date: Day the request was raised
        approved_by: Who processed it (set on approval and on rejection)
        approved_date: Day it was processed
    """

    id: str
    project_id: str
    project_name: str
    requester: str
    amount: int = Field(..., gt=0)
    purpose: str
    status: PaymentStatus = PaymentStatus.PENDING
    request_date: date
    approved_by: str | None = None
    approved_date: date | None = None
