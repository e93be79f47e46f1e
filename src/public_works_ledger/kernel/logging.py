"""
Structured logging for Public Works Ledger.

Every ledger command logs under its command id as correlation id, so the
started/completed (or rejected) lines of one allocation or settlement can be
pulled out of a busy log. Console output in development, JSON lines when
ENVIRONMENT=production.
"""

import contextvars
import logging
import os
import sys
import time
import uuid
from typing import Any

import structlog
from pydantic import ValidationError

from public_works_ledger.kernel.errors import GovernanceError

SERVICE_NAME = "public-works-ledger"

correlation_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "correlation_id", default=""
)


def get_correlation_id() -> str:
    """Current correlation id; a fresh one is minted outside any command"""
    cid = correlation_id_var.get()
    if not cid:
        cid = uuid.uuid4().hex
        correlation_id_var.set(cid)
    return cid


def set_correlation_id(correlation_id: str) -> None:
    correlation_id_var.set(correlation_id)


def _add_service_fields(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    event_dict.setdefault("service", SERVICE_NAME)
    event_dict["correlation_id"] = get_correlation_id()
    return event_dict


def is_production() -> bool:
    """True when ENVIRONMENT is 'production' (default: development)"""
    return os.getenv("ENVIRONMENT", "development").lower() == "production"


def configure_logging(
    *,
    json_output: bool | None = None,
    log_level: str = "INFO",
) -> None:
    """
    Configure structlog on top of stdlib logging (stderr).

    Args:
        json_output: JSON lines if True, colored console if False;
            None decides from ENVIRONMENT
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
    """
    if json_output is None:
        json_output = is_production()
    level = getattr(logging, log_level.upper())

    # stderr keeps CLI stdout clean for machine-readable output
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)
    for noisy in ("werkzeug", "httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(max(level, logging.WARNING))

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _add_service_fields,
    ]
    if json_output:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors += [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


# Substrings marking a context key as secret
_SECRET_MARKERS = ("key", "token", "secret", "password", "authorization")


def redact_context(context: dict[str, Any]) -> dict[str, Any]:
    """
    Mask values whose key looks like a credential

    Example:
        >>> redact_context({'api_key': 'sk-123', 'operation': 'analyze'})
        {'api_key': '***REDACTED***', 'operation': 'analyze'}
    """
    return {
        key: "***REDACTED***" if any(m in key.lower() for m in _SECRET_MARKERS) else value
        for key, value in context.items()
    }


class LogOperation:
    """
    Log one ledger command: start, outcome and duration

    A command_id in the context becomes the correlation id until exit.
    Rule violations (GovernanceError, pydantic ValidationError) are logged
    as rejections at WARNING; anything else is a failure at ERROR, with the
    traceback outside production. Exceptions always propagate.
    """

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger,
        operation: str,
        **context: Any,
    ):
        self.logger = logger
        self.operation = operation
        self.context = redact_context(context)
        self.start_time = 0.0
        self._token: contextvars.Token[str] | None = None

    def __enter__(self) -> "LogOperation":
        command_id = self.context.get("command_id")
        if command_id:
            self._token = correlation_id_var.set(str(command_id))
        self.start_time = time.perf_counter()
        self.logger.info(f"{self.operation} started", operation=self.operation, **self.context)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        fields = dict(
            self.context,
            operation=self.operation,
            duration_ms=round((time.perf_counter() - self.start_time) * 1000, 2),
        )
        try:
            if exc_type is None:
                self.logger.info(f"{self.operation} completed", **fields)
            elif issubclass(exc_type, (GovernanceError, ValidationError)):
                code = exc_val.code if isinstance(exc_val, GovernanceError) else "VALIDATION_ERROR"
                self.logger.warning(
                    f"{self.operation} rejected",
                    error_code=code,
                    reason=str(exc_val),
                    **fields,
                )
            else:
                self.logger.error(
                    f"{self.operation} failed", exc_info=not is_production(), **fields
                )
        finally:
            if self._token is not None:
                correlation_id_var.reset(self._token)
