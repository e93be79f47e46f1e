"""
Payment Settlement Projections

PaymentLedger: every payment request and its processing state, in request order.
"""

from public_works_ledger.kernel.events import Event
from public_works_ledger.payments.models import PaymentRequest, PaymentStatus


class PaymentLedger:
    """
    Built from events: PaymentRequested, PaymentRequestImported,
                       PaymentApproved, PaymentRejected

    Query methods: get, list_payments, version
    """

    def __init__(self) -> None:
        self.payments: dict[str, dict] = {}
        self.versions: dict[str, int] = {}

    def apply_event(self, event: Event) -> None:
        if event.event_type in ("PaymentRequested", "PaymentRequestImported"):
            payment = dict(event.payload["payment"])
            self.payments[payment["id"]] = payment
            self.versions[payment["id"]] = event.version
        elif event.event_type == "PaymentApproved":
            self._apply_processed(event, PaymentStatus.APPROVED)
        elif event.event_type == "PaymentRejected":
            self._apply_processed(event, PaymentStatus.REJECTED)

    def _apply_processed(self, event: Event, status: PaymentStatus) -> None:
        payload = event.payload
        payment_id = payload["payment_id"]

        if payment_id in self.payments:
            self.payments[payment_id]["status"] = status.value
            self.payments[payment_id]["approved_by"] = payload["approved_by"]
            self.payments[payment_id]["approved_date"] = payload["approved_date"]
            self.versions[payment_id] = event.version

    def get(self, payment_id: str) -> PaymentRequest | None:
        data = self.payments.get(payment_id)
        return PaymentRequest.model_validate(data) if data is not None else None

    def exists(self, payment_id: str) -> bool:
        return payment_id in self.payments

    def version(self, payment_id: str) -> int:
        return self.versions.get(payment_id, 0)

    def list_payments(self, status: PaymentStatus | str | None = None) -> list[PaymentRequest]:
        wanted = PaymentStatus(status).value if status is not None else None
        return [
            PaymentRequest.model_validate(data)
            for data in self.payments.values()
            if wanted is None or data["status"] == wanted
        ]
