"""
Tests for the {success, data, error} command envelope
"""

from public_works_ledger.command_api import CommandResult, run_command
from public_works_ledger.engine import GovernanceEngine
from public_works_ledger.kernel.errors import InsufficientFunds
from tests.helpers import allocation_input, project_input


def test_success_envelope_is_camel_case(engine: GovernanceEngine) -> None:
    result = engine.api.create_project(project_input())

    assert result.success is True
    body = result.to_api()
    assert body["success"] is True
    assert body["data"]["spentAmount"] == 0
    assert body["data"]["status"] == "PLANNING"
    assert "error" not in body


def test_rule_violation_envelope(engine: GovernanceEngine) -> None:
    result = engine.api.create_project(project_input(createdBy="LOCAL"))

    assert result.success is False
    assert result.error_code == "UNAUTHORIZED"
    assert result.error == "LOCAL government can only create SMALL projects"
    assert result.to_api() == {
        "success": False,
        "error": "LOCAL government can only create SMALL projects",
        "error_code": "UNAUTHORIZED",
    }


def test_validation_error_envelope(engine: GovernanceEngine) -> None:
    result = engine.api.allocate_budget(allocation_input(amount=-1))

    assert result.success is False
    assert result.error_code == "VALIDATION_ERROR"
    assert result.error.startswith("amount:")


def test_not_found_envelope(engine: GovernanceEngine) -> None:
    result = engine.api.process_payment("missing", "APPROVED", "Finance Controller")

    assert result.error_code == "NOT_FOUND"
    assert result.error == "Payment request missing not found"


def test_terminal_state_envelopes(demo_engine: GovernanceEngine) -> None:
    assert demo_engine.api.decide_policy("3", "REJECTED", "PM Office").error_code == (
        "ALREADY_DECIDED"
    )

    demo_engine.api.process_payment("1", "APPROVED", "Finance Controller")
    again = demo_engine.api.process_payment("1", "APPROVED", "Finance Controller")
    assert again.error_code == "ALREADY_PROCESSED"


def test_validate_project_size_envelope(engine: GovernanceEngine) -> None:
    result = engine.api.validate_project_size("PROVINCIAL", "MEDIUM", 50_000_000)

    assert result.success is True
    assert result.data.valid is False
    assert "Minimum" in result.data.message

    unknown = engine.api.validate_project_size("MUNICIPAL", "SMALL", 5_000_000)
    assert unknown.success is False
    assert unknown.error_code == "VALIDATION_ERROR"


def test_run_command_wraps_lists() -> None:
    result = run_command(lambda: [1, 2])

    assert result == CommandResult(success=True, data=[1, 2])
    assert result.to_api() == {"success": True, "data": [1, 2]}


def test_run_command_catches_governance_errors() -> None:
    def fail() -> None:
        raise InsufficientFunds(20, 10)

    result = run_command(fail)

    assert result.error_code == "INSUFFICIENT_FUNDS"
