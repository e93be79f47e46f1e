"""
Policy Decision Handlers - Command→Event transformation

Deciding is one-way: a policy that has left PENDING raises AlreadyDecided
instead of being overwritten.
"""

from public_works_ledger.decisions.commands import (
    DecidePolicy,
    ImportPolicy,
    ProposePolicy,
)
from public_works_ledger.decisions.events import (
    PolicyDecided,
    PolicyImported,
    PolicyProposed,
)
from public_works_ledger.decisions.models import PolicyDecision, PolicyStatus
from public_works_ledger.decisions.projections import PolicyRegistry
from public_works_ledger.kernel.errors import AlreadyDecided, DuplicateId, PolicyNotFound
from public_works_ledger.kernel.events import Event, create_event, stream_id_for
from public_works_ledger.kernel.ids import IdFactory, generate_id
from public_works_ledger.kernel.time import TimeProvider, today


class DecisionCommandHandlers:
    """Command handlers for the policy decision workflow"""

    def __init__(self, time_provider: TimeProvider, id_factory: IdFactory) -> None:
        self.time_provider = time_provider
        self.id_factory = id_factory

    def handle_propose_policy(
        self,
        command: ProposePolicy,
        command_id: str,
        actor_id: str | None,
    ) -> list[Event]:
        now = self.time_provider.now()

        policy = PolicyDecision(
            id=self.id_factory.generate(),
            proposed_date=today(self.time_provider),
            **command.model_dump(),
        )

        event_payload = PolicyProposed(policy=policy, proposed_at=now).model_dump(mode="json")

        event = create_event(
            event_id=generate_id(),
            stream_id=stream_id_for("policy", policy.id),
            stream_type="policy",
            event_type="PolicyProposed",
            occurred_at=now,
            command_id=command_id,
            actor_id=actor_id,
            payload=event_payload,
            version=1,
        )

        return [event]

    def handle_import_policy(
        self,
        command: ImportPolicy,
        command_id: str,
        actor_id: str | None,
        registry: PolicyRegistry,
    ) -> list[Event]:
        """
        Raises:
            DuplicateId: A policy with this id already exists
        """
        now = self.time_provider.now()

        if registry.exists(command.id):
            raise DuplicateId("Policy", command.id)

        policy = PolicyDecision(**command.model_dump())

        event_payload = PolicyImported(policy=policy, imported_at=now).model_dump(mode="json")

        event = create_event(
            event_id=generate_id(),
            stream_id=stream_id_for("policy", policy.id),
            stream_type="policy",
            event_type="PolicyImported",
            occurred_at=now,
            command_id=command_id,
            actor_id=actor_id,
            payload=event_payload,
            version=1,
        )

        return [event]

    def handle_decide_policy(
        self,
        command: DecidePolicy,
        command_id: str,
        actor_id: str | None,
        registry: PolicyRegistry,
    ) -> list[Event]:
        """
        Handle DecidePolicy command

        Validates:
        - Policy exists
        - Policy is PENDING

        Returns:
            List of events to append

        Raises:
            PolicyNotFound: If policy doesn't exist
            AlreadyDecided: If policy was already approved or rejected
        """
        now = self.time_provider.now()

        policy = registry.get(command.policy_id)
        if policy is None:
            raise PolicyNotFound(command.policy_id)

        if policy.status != PolicyStatus.PENDING:
            raise AlreadyDecided(policy.id, policy.status.value)

        event_payload = PolicyDecided(
            policy_id=policy.id,
            status=command.status,
            decided_by=command.decided_by,
            decided_date=today(self.time_provider),
            decided_at=now,
        ).model_dump(mode="json")

        event = create_event(
            event_id=generate_id(),
            stream_id=stream_id_for("policy", policy.id),
            stream_type="policy",
            event_type="PolicyDecided",
            occurred_at=now,
            command_id=command_id,
            actor_id=actor_id,
            payload=event_payload,
            version=registry.version(policy.id) + 1,
        )

        return [event]
