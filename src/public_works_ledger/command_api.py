"""
Command API - uniform {success, data, error} envelope over the engine

Rule violations (GovernanceError) and malformed input (pydantic
ValidationError) become failed results carrying the error message and a
stable error code. Anything else is a fault and propagates.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from public_works_ledger.kernel.errors import GovernanceError
from public_works_ledger.rules.models import ValidationResult

if TYPE_CHECKING:
    from public_works_ledger.engine import GovernanceEngine

T = TypeVar("T")

VALIDATION_ERROR = "VALIDATION_ERROR"


def describe_validation_error(error: ValidationError) -> str:
    """One line per failing field: 'budget: Input should be greater than 0'"""
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "input"
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)


class CommandResult(BaseModel, Generic[T]):
    """
    Outcome of one command

    Attributes:
        success: True if the command was applied
        data: The resulting entity on success
        error: Human-readable reason on failure
        error_code: Stable code of the failure (NOT_FOUND, OUT_OF_RANGE, ...)
    """

    success: bool
    data: T | None = None
    error: str | None = None
    error_code: str | None = None

    @classmethod
    def ok(cls, data: T) -> "CommandResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str, error_code: str) -> "CommandResult[T]":
        return cls(success=False, error=error, error_code=error_code)

    def to_api(self) -> dict[str, Any]:
        """JSON-safe envelope; entity fields in camelCase"""
        body: dict[str, Any] = {"success": self.success}
        if self.success:
            body["data"] = _to_json(self.data)
        else:
            body["error"] = self.error
            body["error_code"] = self.error_code
        return body


def _to_json(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True)
    if isinstance(data, list):
        return [_to_json(item) for item in data]
    return data


def run_command(action: Callable[[], T]) -> CommandResult[T]:
    """Call action and wrap its result or rule violation in a CommandResult"""
    try:
        return CommandResult.ok(action())
    except GovernanceError as e:
        return CommandResult.fail(str(e), e.code)
    except ValidationError as e:
        return CommandResult.fail(describe_validation_error(e), VALIDATION_ERROR)


class CommandAPI:
    """
    Envelope-returning commands of a GovernanceEngine

    Obtain through ``engine.api``. Each method takes the same arguments as
    the engine method of the same name.
    """

    def __init__(self, engine: "GovernanceEngine") -> None:
        self.engine = engine

    def create_project(self, data: Any, **kwargs: Any) -> CommandResult:
        return run_command(lambda: self.engine.create_project(data, **kwargs))

    def update_project(self, project_id: str, updates: Any, **kwargs: Any) -> CommandResult:
        return run_command(lambda: self.engine.update_project(project_id, updates, **kwargs))

    def allocate_budget(self, data: Any, **kwargs: Any) -> CommandResult:
        return run_command(lambda: self.engine.allocate_budget(data, **kwargs))

    def propose_policy(self, data: Any, **kwargs: Any) -> CommandResult:
        return run_command(lambda: self.engine.propose_policy(data, **kwargs))

    def decide_policy(
        self, policy_id: str, status: str, decided_by: str, **kwargs: Any
    ) -> CommandResult:
        return run_command(
            lambda: self.engine.decide_policy(policy_id, status, decided_by, **kwargs)
        )

    def submit_payment_request(self, data: Any, **kwargs: Any) -> CommandResult:
        return run_command(lambda: self.engine.submit_payment_request(data, **kwargs))

    def process_payment(
        self, payment_id: str, status: str, approved_by: str, **kwargs: Any
    ) -> CommandResult:
        return run_command(
            lambda: self.engine.process_payment(payment_id, status, approved_by, **kwargs)
        )

    def register_contractor(self, data: Any, **kwargs: Any) -> CommandResult:
        return run_command(lambda: self.engine.register_contractor(data, **kwargs))

    def file_quality_report(self, data: Any, **kwargs: Any) -> CommandResult:
        return run_command(lambda: self.engine.file_quality_report(data, **kwargs))

    def validate_project_size(self, level: str, size: str, budget: int) -> CommandResult:
        """
        Envelope around the validation engine

        success reflects whether the check could be run; data.valid carries
        the verdict. An unknown level or size is a failed envelope.
        """
        try:
            result: ValidationResult = self.engine.validate_project_size(level, size, budget)
        except ValueError as e:
            return CommandResult.fail(str(e), VALIDATION_ERROR)
        return CommandResult.ok(result)
