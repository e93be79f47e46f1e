"""
Prometheus metrics for Public Works Ledger.

Command outcomes, the state of the national budget pool, payment settlement
and advisory fallbacks.
"""

import time
from collections.abc import Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from prometheus_client import Counter, Gauge, Histogram, start_http_server

# ============================================================================
# Event Store Metrics
# ============================================================================

events_appended_total = Counter(
    "pwl_events_appended_total",
    "Total number of events appended to the event store",
    ["stream_type", "event_type"],
)

# ============================================================================
# Command Processing Metrics
# ============================================================================

command_duration_seconds = Histogram(
    "pwl_command_duration_seconds",
    "Duration of command processing in seconds",
    ["command_type"],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
)

commands_processed_total = Counter(
    "pwl_commands_processed_total",
    "Total number of commands processed",
    ["command_type", "status"],  # status: success, failure
)

# ============================================================================
# National Budget Metrics
# ============================================================================

national_allocation_ratio = Gauge(
    "pwl_national_allocation_ratio",
    "Share of the national budget already allocated (allocated/total)",
)

national_spend_ratio = Gauge(
    "pwl_national_spend_ratio",
    "Share of the allocated budget already spent (spent/allocated)",
)

allocations_total = Counter(
    "pwl_allocations_total",
    "Total number of budget allocations recorded",
    ["recipient_type"],
)

payments_processed_total = Counter(
    "pwl_payments_processed_total",
    "Total number of payment requests approved or rejected",
    ["status"],
)

# ============================================================================
# Advisory Metrics
# ============================================================================

advisory_requests_total = Counter(
    "pwl_advisory_requests_total",
    "Advisory analyses served, by analysis kind and source (model, fallback)",
    ["analysis", "source"],
)

# ============================================================================
# Helper Functions
# ============================================================================

P = ParamSpec("P")
R = TypeVar("R")


def track_command_duration(command_type: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """
    Decorator to track command processing duration and outcome.

    Args:
        command_type: Type of command being processed
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            start = time.perf_counter()
            status = "success"
            try:
                return func(*args, **kwargs)
            except Exception:
                status = "failure"
                raise
            finally:
                command_duration_seconds.labels(command_type=command_type).observe(
                    time.perf_counter() - start
                )
                commands_processed_total.labels(
                    command_type=command_type, status=status
                ).inc()

        return wrapper

    return decorator


def update_national_budget_metrics(
    total_budget: int, allocated_budget: int, spent_budget: int
) -> None:
    """
    Refresh the national pool gauges.

    Args:
        total_budget: Fiscal-period total
        allocated_budget: Sum of all allocations
        spent_budget: Sum of all settled payments
    """
    national_allocation_ratio.set(allocated_budget / total_budget if total_budget else 0.0)
    national_spend_ratio.set(spent_budget / allocated_budget if allocated_budget else 0.0)


def start_metrics_server(port: int = 9090) -> None:
    """Start Prometheus metrics HTTP server on the given port."""
    start_http_server(port)
