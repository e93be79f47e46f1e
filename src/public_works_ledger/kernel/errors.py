"""
Custom exceptions for Public Works Ledger

Every rule the engine enforces has its own exception class. Each class carries
a stable ``code`` so the command API can turn it into a failed envelope without
string matching on messages.

Taxonomy:
    NotFound          - referenced entity id absent
    Unauthorized      - government level may not create the requested size
    OutOfRange        - budget outside the interval for the size
    InsufficientFunds - allocation exceeds the unallocated national pool
    AlreadyDecided    - policy already approved/rejected
    AlreadyProcessed  - payment request already approved/rejected
    InvalidDateRange  - project ends before it starts
    FiscalPeriodAlreadyOpen - national totals opened twice
"""


class GovernanceError(Exception):
    """Base exception for all Public Works Ledger errors"""

    code = "GOVERNANCE_ERROR"


class EventStoreError(GovernanceError):
    """Base class for event store errors"""

    code = "EVENT_STORE_ERROR"


class StreamVersionConflict(EventStoreError):
    """
    Raised when stream version doesn't match expected (optimistic locking)

    Indicates concurrent modification - caller should reload and retry.
    """

    code = "VERSION_CONFLICT"

    def __init__(
        self, stream_id: str, expected_version: int, actual_version: int
    ) -> None:
        self.stream_id = stream_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Stream {stream_id} version mismatch: "
            f"expected {expected_version}, got {actual_version}"
        )


class CommandIdConflict(EventStoreError):
    """Raised when a command id already used by one operation is reused by another"""

    code = "COMMAND_ID_CONFLICT"

    def __init__(self, command_id: str, recorded: str, attempted: str) -> None:
        self.command_id = command_id
        self.recorded = recorded
        self.attempted = attempted
        super().__init__(
            f"Command {command_id} already ran as {recorded}, cannot reuse it for {attempted}"
        )


class InvariantViolation(GovernanceError):
    """
    Raised when a domain invariant would be violated

    Nothing is appended to the event store when one of these is raised.
    """

    code = "INVARIANT_VIOLATION"


# Lookup errors


class NotFound(GovernanceError):
    """Raised when a referenced entity does not exist"""

    code = "NOT_FOUND"
    entity = "Entity"

    def __init__(self, entity_id: str) -> None:
        self.entity_id = entity_id
        super().__init__(f"{self.entity} {entity_id} not found")


class ProjectNotFound(NotFound):
    entity = "Project"


class PolicyNotFound(NotFound):
    entity = "Policy"


class PaymentNotFound(NotFound):
    entity = "Payment request"


class ContractorNotFound(NotFound):
    entity = "Contractor"


# Project size and budget rules


class Unauthorized(InvariantViolation):
    """Raised when a government level may not create a project of the given size"""

    code = "UNAUTHORIZED"

    def __init__(self, level: str, size: str, allowed: list[str], message: str = "") -> None:
        self.level = level
        self.size = size
        self.allowed = allowed
        super().__init__(
            message
            or f"{level} government cannot create {size} projects "
            f"(allowed: {', '.join(allowed)})"
        )


class OutOfRange(InvariantViolation):
    """Raised when a budget falls outside the interval for its project size"""

    code = "OUT_OF_RANGE"

    def __init__(
        self, size: str, budget: int, minimum: int, maximum: int, message: str = ""
    ) -> None:
        self.size = size
        self.budget = budget
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(
            message
            or f"Budget {budget} must be between {minimum} and {maximum} for {size} projects"
        )


class InvalidDateRange(InvariantViolation):
    """Raised when a project's end date precedes its start date"""

    code = "INVALID_DATE_RANGE"

    def __init__(self, start_date: str, end_date: str) -> None:
        self.start_date = start_date
        self.end_date = end_date
        super().__init__(
            f"End date {end_date} is before start date {start_date}"
        )


class InvalidStatusTransition(InvariantViolation):
    """Raised when a project status change is not part of the lifecycle"""

    code = "INVALID_STATUS_TRANSITION"

    def __init__(self, project_id: str, current: str, requested: str) -> None:
        self.project_id = project_id
        self.current = current
        self.requested = requested
        super().__init__(
            f"Project {project_id} cannot move from {current} to {requested}"
        )


class ProjectClosed(InvariantViolation):
    """Raised when a COMPLETED or CANCELLED project is updated"""

    code = "PROJECT_CLOSED"

    def __init__(self, project_id: str, status: str) -> None:
        self.project_id = project_id
        self.status = status
        super().__init__(f"Project {project_id} is {status} and can no longer be changed")


class ProgressRegression(InvariantViolation):
    """Raised when an update would lower a project's progress"""

    code = "PROGRESS_REGRESSION"

    def __init__(self, project_id: str, current: int, requested: int) -> None:
        self.project_id = project_id
        self.current = current
        self.requested = requested
        super().__init__(
            f"Project {project_id} progress cannot go back from {current}% to {requested}%"
        )


class ImmutableField(InvariantViolation):
    """Raised when an update touches a system-managed project field"""

    code = "IMMUTABLE_FIELD"

    def __init__(self, fields: list[str]) -> None:
        self.fields = fields
        super().__init__(f"Fields cannot be updated directly: {', '.join(fields)}")


# Money movement


class InsufficientFunds(InvariantViolation):
    """Raised when an allocation exceeds the unallocated national pool"""

    code = "INSUFFICIENT_FUNDS"

    def __init__(self, amount: int, remaining: int) -> None:
        self.amount = amount
        self.remaining = remaining
        super().__init__(
            f"Insufficient budget available for allocation: requested {amount}, "
            f"remaining {remaining}"
        )


class OverBudget(InvariantViolation):
    """Raised when settling a payment would push spending past its ceiling"""

    code = "OVER_BUDGET"

    def __init__(self, scope: str, amount: int, spent: int, ceiling: int) -> None:
        self.scope = scope
        self.amount = amount
        self.spent = spent
        self.ceiling = ceiling
        super().__init__(
            f"Payment of {amount} would raise {scope} spending to {spent + amount}, "
            f"above the ceiling of {ceiling}"
        )


# Terminal states


class AlreadyDecided(InvariantViolation):
    """Raised when a policy that is no longer PENDING is decided again"""

    code = "ALREADY_DECIDED"

    def __init__(self, policy_id: str, current_status: str) -> None:
        self.policy_id = policy_id
        self.current_status = current_status
        super().__init__(f"Policy {policy_id} is already {current_status}")


class AlreadyProcessed(InvariantViolation):
    """Raised when a payment request that is no longer PENDING is processed again"""

    code = "ALREADY_PROCESSED"

    def __init__(self, payment_id: str, current_status: str) -> None:
        self.payment_id = payment_id
        self.current_status = current_status
        super().__init__(f"Payment request {payment_id} is already {current_status}")


class FiscalPeriodAlreadyOpen(InvariantViolation):
    """Raised when national totals are opened a second time"""

    code = "FISCAL_PERIOD_OPEN"

    def __init__(self, fiscal_year: str | None) -> None:
        self.fiscal_year = fiscal_year
        super().__init__(f"Fiscal period {fiscal_year} is already open")


class DuplicateId(InvariantViolation):
    """Raised when an imported entity reuses an id that already exists"""

    code = "DUPLICATE_ID"

    def __init__(self, entity: str, entity_id: str) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} already exists")


class BudgetBelowSpending(InvariantViolation):
    """Raised when a project budget would be cut below what it has already spent"""

    code = "BUDGET_BELOW_SPENDING"

    def __init__(self, project_id: str, new_budget: int, spent_amount: int) -> None:
        self.project_id = project_id
        self.new_budget = new_budget
        self.spent_amount = spent_amount
        super().__init__(
            f"Project {project_id} budget {new_budget} is below current spending "
            f"{spent_amount} - cannot reduce budget below spending"
        )
