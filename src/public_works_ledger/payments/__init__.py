"""
Payments - Payment requests and their exactly-once settlement
"""

from public_works_ledger.payments.models import PaymentRequest, PaymentStatus

__all__ = ["PaymentRequest", "PaymentStatus"]
