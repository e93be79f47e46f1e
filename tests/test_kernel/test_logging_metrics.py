"""
Test infrastructure components: logging and metrics.
"""

import pytest
from prometheus_client import REGISTRY

from public_works_ledger.engine import GovernanceEngine
from public_works_ledger.kernel.errors import InsufficientFunds
from public_works_ledger.kernel.logging import (
    LogOperation,
    configure_logging,
    get_correlation_id,
    get_logger,
    is_production,
    redact_context,
    set_correlation_id,
)
from public_works_ledger.kernel.metrics import update_national_budget_metrics
from tests.helpers import allocation_input


def sample(name: str, labels: dict[str, str] | None = None) -> float:
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


class TestLoggingFramework:
    """Test structured logging framework."""

    def test_configure_logging_console(self) -> None:
        configure_logging(json_output=False, log_level="INFO")
        assert get_logger(__name__) is not None

    def test_configure_logging_json(self) -> None:
        configure_logging(json_output=True, log_level="DEBUG")
        assert get_logger(__name__) is not None

    def test_correlation_id(self) -> None:
        assert get_correlation_id()

        set_correlation_id("corr-123")
        assert get_correlation_id() == "corr-123"

    def test_log_operation_success(self) -> None:
        logger = get_logger(__name__)

        with LogOperation(logger, "allocate_budget", amount=5) as op:
            assert op.operation == "allocate_budget"

    def test_log_operation_propagates_errors(self) -> None:
        logger = get_logger(__name__)

        with pytest.raises(InsufficientFunds):
            with LogOperation(logger, "allocate_budget"):
                raise InsufficientFunds(20, 10)

    def test_redact_context(self) -> None:
        redacted = redact_context({"api_key": "sk-123", "operation": "analyze"})

        assert redacted == {"api_key": "***REDACTED***", "operation": "analyze"}

    def test_is_production(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "production")
        assert is_production() is True

        monkeypatch.setenv("ENVIRONMENT", "development")
        assert is_production() is False


class TestMetrics:
    """Test Prometheus metrics collection."""

    def test_command_outcomes_counted(self, engine: GovernanceEngine) -> None:
        labels = {"command_type": "allocate_budget", "status": "failure"}
        before = sample("pwl_commands_processed_total", labels)

        with pytest.raises(InsufficientFunds):
            engine.allocate_budget(allocation_input(amount=200_000_000_000))

        assert sample("pwl_commands_processed_total", labels) == before + 1

    def test_allocation_counter_not_bumped_by_replay(self, engine: GovernanceEngine) -> None:
        labels = {"recipient_type": "MINISTRY"}
        before = sample("pwl_allocations_total", labels)

        data = allocation_input(recipientType="MINISTRY", recipient="Ministry of Health")
        engine.allocate_budget(data, command_id="m-1")
        engine.allocate_budget(data, command_id="m-1")

        assert sample("pwl_allocations_total", labels) == before + 1

    def test_national_ratios(self, engine: GovernanceEngine) -> None:
        engine.allocate_budget(allocation_input(amount=25_000_000_000))

        assert sample("pwl_national_allocation_ratio") == pytest.approx(0.25)
        assert sample("pwl_national_spend_ratio") == 0.0

    def test_ratio_helper_handles_zero(self) -> None:
        update_national_budget_metrics(0, 0, 0)

        assert sample("pwl_national_allocation_ratio") == 0.0

    def test_events_appended_counted(self, engine: GovernanceEngine) -> None:
        labels = {"stream_type": "national", "event_type": "BudgetAllocated"}
        before = sample("pwl_events_appended_total", labels)

        engine.allocate_budget(allocation_input())

        assert sample("pwl_events_appended_total", labels) == before + 1
