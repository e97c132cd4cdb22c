"""
Structured logging framework for oid-space.

Every generation run binds a run id into structlog's context variables, so
all log lines of one enumeration share it, including those emitted by a
stream's producer thread. Output is console text for development or JSON
for production batch jobs.
"""

import logging
import os
import secrets
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog

RUN_ID_KEY = "run_id"


def generate_run_id() -> str:
    """Generate a new run id (16 random bytes, URL-safe base64)."""
    return secrets.token_urlsafe(16)


def current_run_id() -> str | None:
    """Run id bound in the current context, if any."""
    return structlog.contextvars.get_contextvars().get(RUN_ID_KEY)


def get_run_id() -> str:
    """Get the current run id, binding a new one if none is bound."""
    rid = current_run_id()
    if rid is None:
        rid = generate_run_id()
        set_run_id(rid)
    return rid


def set_run_id(run_id: str) -> None:
    """Bind the run id for the current context."""
    structlog.contextvars.bind_contextvars(**{RUN_ID_KEY: run_id})


@contextmanager
def generation_run(run_id: str | None = None) -> Iterator[str]:
    """
    Scope the logs of one generation run under a single run id

    An explicit run_id wins, then the id already bound by the caller; only
    when neither exists is a fresh one generated. The previous binding is
    restored when the block exits.

    Example:
        with generation_run() as rid:
            logger.info("enumerating")  # carries run_id=rid
    """
    rid = run_id or current_run_id() or generate_run_id()
    with structlog.contextvars.bound_contextvars(**{RUN_ID_KEY: rid}):
        yield rid


def configure_logging(
    *,
    json_output: bool = False,
    log_level: str = "INFO",
) -> None:
    """
    Configure structured logging for the application.

    Logs go to stderr so that identifiers written to stdout stay clean.

    Args:
        json_output: If True, output JSON logs (for production).
                    If False, output human-readable console logs (for development).
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    level = getattr(logging, log_level.upper())

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=level,
    )

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_output:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.processors.ExceptionRenderer(),
            structlog.dev.ConsoleRenderer(colors=False),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger for the given module.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Structured logger instance
    """
    return structlog.get_logger(name)


def is_production() -> bool:
    """True when the ENVIRONMENT variable is 'production'."""
    return os.getenv("ENVIRONMENT", "development").lower() == "production"


class LogOperation:
    """Context manager for logging operations with automatic timing."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger,
        operation: str,
        **context: Any,
    ):
        """
        Initialize operation logger.

        Args:
            logger: Structured logger instance
            operation: Operation name (e.g., "generate", "stream")
            **context: Additional context to include in logs
        """
        self.logger = logger
        self.operation = operation
        self.context = context
        self.start_time: float = 0.0

    def __enter__(self) -> "LogOperation":
        self.start_time = time.perf_counter()
        self.logger.debug(
            f"{self.operation} started",
            operation=self.operation,
            **self.context,
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        duration_ms = (time.perf_counter() - self.start_time) * 1000

        if exc_type is None:
            self.logger.info(
                f"{self.operation} completed",
                operation=self.operation,
                duration_ms=round(duration_ms, 2),
                **self.context,
            )
        else:
            self.logger.error(
                f"{self.operation} failed",
                operation=self.operation,
                duration_ms=round(duration_ms, 2),
                exc_info=not is_production(),
                **self.context,
            )
