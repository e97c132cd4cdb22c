"""
Prometheus metrics collection for oid-space.

Counts produced identifiers and rejected configs, and times each run.
"""

import time
from collections.abc import Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from prometheus_client import Counter, Histogram, start_http_server

# ============================================================================
# Generation Metrics
# ============================================================================

identifiers_generated_total = Counter(
    "oidspace_identifiers_generated_total",
    "Total number of identifiers produced",
    ["mode"],  # mode: batch, stream
)

validation_failures_total = Counter(
    "oidspace_validation_failures_total",
    "Total number of generation configs rejected by validation",
    ["reason"],
)

generation_runs_total = Counter(
    "oidspace_generation_runs_total",
    "Total number of generation runs",
    ["mode", "status"],  # status: success, failure
)

generation_duration_seconds = Histogram(
    "oidspace_generation_duration_seconds",
    "Duration of a generation run in seconds",
    ["mode"],
    buckets=(0.001, 0.01, 0.1, 0.5, 1.0, 5.0, 30.0, 120.0, 600.0),
)

# ============================================================================
# Helper Functions
# ============================================================================

P = ParamSpec("P")
R = TypeVar("R")


def track_generation(mode: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """
    Decorator to track generation run duration and outcome.

    Args:
        mode: Generation mode label ("batch" or "stream")

    Returns:
        Decorated function that tracks duration
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
                duration = time.perf_counter() - start
                generation_duration_seconds.labels(mode=mode).observe(duration)
                generation_runs_total.labels(mode=mode, status=status).inc()

        return wrapper

    return decorator


def record_validation_failure(reason: str) -> None:
    """Count a rejected config under its error class name."""
    validation_failures_total.labels(reason=reason).inc()


def start_metrics_server(port: int = 9090) -> None:
    """
    Start Prometheus metrics HTTP server.

    Args:
        port: Port to listen on (default: 9090)
    """
    start_http_server(port)
