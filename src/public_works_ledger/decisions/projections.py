"""
Policy Decision Projections

PolicyRegistry: current state of every policy, in proposal order.
"""

from public_works_ledger.decisions.models import PolicyDecision, PolicyStatus
from public_works_ledger.kernel.events import Event


class PolicyRegistry:
    """
    Built from events: PolicyProposed, PolicyImported, PolicyDecided

    Query methods: get, list_policies, version
    """

    def __init__(self) -> None:
        self.policies: dict[str, dict] = {}
        self.versions: dict[str, int] = {}

    def apply_event(self, event: Event) -> None:
        if event.event_type in ("PolicyProposed", "PolicyImported"):
            policy = dict(event.payload["policy"])
            self.policies[policy["id"]] = policy
            self.versions[policy["id"]] = event.version
        elif event.event_type == "PolicyDecided":
            self._apply_policy_decided(event)

    def _apply_policy_decided(self, event: Event) -> None:
        payload = event.payload
        policy_id = payload["policy_id"]

        if policy_id in self.policies:
            self.policies[policy_id]["status"] = payload["status"]
            self.policies[policy_id]["decided_by"] = payload["decided_by"]
            self.policies[policy_id]["decided_date"] = payload["decided_date"]
            self.versions[policy_id] = event.version

    def get(self, policy_id: str) -> PolicyDecision | None:
        data = self.policies.get(policy_id)
        return PolicyDecision.model_validate(data) if data is not None else None

    def exists(self, policy_id: str) -> bool:
        return policy_id in self.policies

    def version(self, policy_id: str) -> int:
        return self.versions.get(policy_id, 0)

    def list_policies(self, status: PolicyStatus | str | None = None) -> list[PolicyDecision]:
        """List policies, optionally only those in one status"""
        wanted = PolicyStatus(status).value if status is not None else None
        return [
            PolicyDecision.model_validate(data)
            for data in self.policies.values()
            if wanted is None or data["status"] == wanted
        ]
