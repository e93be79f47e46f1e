"""
Payment Settlement Handlers - Command→Event transformation

Processing reads the payment, its project and the national totals, checks
them, and emits one event. Approval emits PaymentApproved, which both the
project registry and national totals apply; rejection touches no money.
"""

from public_works_ledger.allocation.projections import NationalTotalsProjection
from public_works_ledger.kernel.errors import DuplicateId, PaymentNotFound, ProjectNotFound
from public_works_ledger.kernel.events import Event, create_event, stream_id_for
from public_works_ledger.kernel.governance_policy import GovernancePolicy
from public_works_ledger.kernel.ids import IdFactory, generate_id
from public_works_ledger.kernel.time import TimeProvider, today
from public_works_ledger.payments.commands import (
    ImportPaymentRequest,
    ProcessPayment,
    SubmitPaymentRequest,
)
from public_works_ledger.payments.events import (
    PaymentApproved,
    PaymentRejected,
    PaymentRequested,
    PaymentRequestImported,
)
from public_works_ledger.payments.invariants import validate_pending, validate_settlement
from public_works_ledger.payments.models import PaymentRequest
from public_works_ledger.payments.projections import PaymentLedger
from public_works_ledger.projects.projections import ProjectRegistry


class PaymentCommandHandlers:
    """
    Command handlers for payment settlement

    Depend on the payment ledger, the project registry and the national
    totals projection.
    """

    def __init__(
        self,
        time_provider: TimeProvider,
        policy: GovernancePolicy,
        id_factory: IdFactory,
    ) -> None:
        self.time_provider = time_provider
        self.policy = policy
        self.id_factory = id_factory

    def handle_submit_payment_request(
        self,
        command: SubmitPaymentRequest,
        command_id: str,
        actor_id: str | None,
        projects: ProjectRegistry,
    ) -> list[Event]:
        """
        Raises:
            ProjectNotFound: If the project doesn't exist
        """
        now = self.time_provider.now()

        project = projects.get(command.project_id)
        if project is None:
            raise ProjectNotFound(command.project_id)

        payment = PaymentRequest(
            id=self.id_factory.generate(),
            project_name=project.title,
            request_date=today(self.time_provider),
            **command.model_dump(),
        )

        event_payload = PaymentRequested(
            payment=payment, requested_at=now
        ).model_dump(mode="json")

        event = create_event(
            event_id=generate_id(),
            stream_id=stream_id_for("payment", payment.id),
            stream_type="payment",
            event_type="PaymentRequested",
            occurred_at=now,
            command_id=command_id,
            actor_id=actor_id,
            payload=event_payload,
            version=1,
        )

        return [event]

    def handle_import_payment_request(
        self,
        command: ImportPaymentRequest,
        command_id: str,
        actor_id: str | None,
        payments: PaymentLedger,
        projects: ProjectRegistry,
    ) -> list[Event]:
        """
        Raises:
            DuplicateId: A request with this id already exists
            ProjectNotFound: Project absent and no project_name given
        """
        now = self.time_provider.now()

        if payments.exists(command.id):
            raise DuplicateId("Payment request", command.id)

        project = projects.get(command.project_id)
        project_name = project.title if project is not None else command.project_name
        if project_name is None:
            raise ProjectNotFound(command.project_id)

        payment = PaymentRequest(
            id=command.id,
            project_id=command.project_id,
            project_name=project_name,
            requester=command.requester,
            amount=command.amount,
            purpose=command.purpose,
            request_date=command.request_date,
        )

        event_payload = PaymentRequestImported(
            payment=payment, imported_at=now
        ).model_dump(mode="json")

        event = create_event(
            event_id=generate_id(),
            stream_id=stream_id_for("payment", payment.id),
            stream_type="payment",
            event_type="PaymentRequestImported",
            occurred_at=now,
            command_id=command_id,
            actor_id=actor_id,
            payload=event_payload,
            version=1,
        )

        return [event]

    def handle_process_payment(
        self,
        command: ProcessPayment,
        command_id: str,
        actor_id: str | None,
        payments: PaymentLedger,
        projects: ProjectRegistry,
        totals: NationalTotalsProjection,
    ) -> list[Event]:
        """
        Handle ProcessPayment command

        Validates:
        - Payment request exists
        - Payment request is PENDING
        - On approval: project exists (unless policy says WARN), project
          budget cap, national spend cap

        Returns:
            List of events to append

        Raises:
            PaymentNotFound: If the request doesn't exist
            AlreadyProcessed: If the request was already approved or rejected
            ProjectNotFound: Approval against a missing project under REJECT
            OverBudget: Approval would break an enforced spending cap
        """
        now = self.time_provider.now()

        payment = payments.get(command.payment_id)
        if payment is None:
            raise PaymentNotFound(command.payment_id)

        validate_pending(payment)

        if command.status == "APPROVED":
            debit_applied = validate_settlement(
                payment,
                projects.get(payment.project_id),
                totals.totals,
                self.policy,
            )
            event_type = "PaymentApproved"
            event_payload = PaymentApproved(
                payment_id=payment.id,
                project_id=payment.project_id,
                amount=payment.amount,
                approved_by=command.approved_by,
                approved_date=today(self.time_provider),
                debit_applied=debit_applied,
                processed_at=now,
            ).model_dump(mode="json")
        else:
            event_type = "PaymentRejected"
            event_payload = PaymentRejected(
                payment_id=payment.id,
                project_id=payment.project_id,
                amount=payment.amount,
                approved_by=command.approved_by,
                approved_date=today(self.time_provider),
                processed_at=now,
            ).model_dump(mode="json")

        event = create_event(
            event_id=generate_id(),
            stream_id=stream_id_for("payment", payment.id),
            stream_type="payment",
            event_type=event_type,
            occurred_at=now,
            command_id=command_id,
            actor_id=actor_id,
            payload=event_payload,
            version=payments.version(payment.id) + 1,
        )

        return [event]
