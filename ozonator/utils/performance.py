"""Timing helpers for grid operations.

Sorting and default ordering run on every data or directive change and can see
tens of thousands of rows. These helpers log the operations that get slow
so the UI lag can be traced back to its cause.

Basic usage::

    from ozonator.utils.performance import operation_timer, timed_operation

    with operation_timer("sort_rows", extra_context={"rows": len(rows)}):
        ordered = sort_rows(rows, columns, sort_state)

    @timed_operation("sort_rows_for_default_view")
    def sort_rows_for_default_view(...):
        ...
"""
import time
from contextlib import contextmanager
from functools import wraps
from typing import Generator

from ozonator.utils.logger import get_logger
from ozonator.utils.settings import (
    get_critical_operation_threshold,
    get_slow_operation_threshold,
)

logger = get_logger("Performance")

_SENSITIVE_KEYS = ("password", "token", "secret", "key")


def log_slow_operation(
    operation: str,
    elapsed: float,
    threshold: float | None = None,
    extra_context: dict | None = None,
) -> None:
    """
    Log an operation if it exceeded the time threshold.

    Args:
        operation: Descriptive operation name
        elapsed: Elapsed time in seconds
        threshold: Custom threshold (default: SLOW_GRID_OP_THRESHOLD)
        extra_context: Additional information for the log line
    """
    if threshold is None:
        threshold = get_slow_operation_threshold()
    if elapsed < threshold:
        return

    elapsed_ms = round(elapsed * 1000, 2)

    context_str = ""
    if extra_context:
        safe_context = {
            k: v for k, v in extra_context.items()
            if k.lower() not in _SENSITIVE_KEYS
        }
        context_str = f" | Context: {safe_context}"

    critical = get_critical_operation_threshold()
    if elapsed >= critical:
        logger.error(
            f"CRITICAL grid operation: '{operation}' took {elapsed_ms}ms "
            f"(critical threshold: {critical * 1000}ms){context_str}"
        )
    else:
        logger.warning(
            f"Slow grid operation: '{operation}' took {elapsed_ms}ms "
            f"(threshold: {threshold * 1000}ms){context_str}"
        )


@contextmanager
def operation_timer(
    operation: str,
    threshold: float | None = None,
    extra_context: dict | None = None,
) -> Generator[dict, None, None]:
    """
    Context manager measuring the execution time of a block.

    Yields:
        Dict with timing info (``elapsed`` is filled on exit)
    """
    timing_info = {"elapsed": 0.0, "operation": operation}
    start = time.perf_counter()

    try:
        yield timing_info
    finally:
        elapsed = time.perf_counter() - start
        timing_info["elapsed"] = elapsed
        log_slow_operation(operation, elapsed, threshold, extra_context)


def timed_operation(operation_name: str | None = None, threshold: float | None = None):
    """
    Decorator measuring a function call.

    Args:
        operation_name: Name for the log line (default: function name)
        threshold: Threshold in seconds
    """
    def decorator(func):
        name = operation_name or func.__name__

        @wraps(func)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                elapsed = time.perf_counter() - start
                log_slow_operation(name, elapsed, threshold)

        return wrapper

    return decorator
