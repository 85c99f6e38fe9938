"""Retry logic with exponential backoff.

This module provides:
- retry_with_backoff: Bounded exponential backoff retry
- backoff_delay: Delay before a given retry
- is_network_error: Default retry predicate

The functions know nothing about the transport; callers decide which
failures are worth retrying through the `is_retryable` predicate.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Default retry configuration
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_INITIAL_BACKOFF = 0.4  # seconds
DEFAULT_MAX_BACKOFF = 4.0  # seconds
DEFAULT_BACKOFF_MULTIPLIER = 2.0

# Network-related exceptions that indicate connectivity issues
NETWORK_EXCEPTIONS: tuple[type[Exception], ...] = (
    ConnectionError,
    TimeoutError,
)


def is_network_error(exc: Exception) -> bool:
    """Default predicate: retry connectivity failures only."""
    return isinstance(exc, NETWORK_EXCEPTIONS)


def backoff_delay(
    attempt: int,
    initial_backoff: float = DEFAULT_INITIAL_BACKOFF,
    max_backoff: float = DEFAULT_MAX_BACKOFF,
    backoff_multiplier: float = DEFAULT_BACKOFF_MULTIPLIER,
) -> float:
    """Delay to wait after failed attempt number `attempt` (1-based)."""
    return min(initial_backoff * backoff_multiplier ** (attempt - 1), max_backoff)


def retry_with_backoff(
    func: Callable[[], T],
    label: str = "operation",
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    initial_backoff: float = DEFAULT_INITIAL_BACKOFF,
    max_backoff: float = DEFAULT_MAX_BACKOFF,
    backoff_multiplier: float = DEFAULT_BACKOFF_MULTIPLIER,
    is_retryable: Callable[[Exception], bool] = is_network_error,
) -> T:
    """Execute a function with exponential backoff retry.

    Args:
        func: Function to execute.
        label: Name of the operation, used in log messages.
        max_attempts: Total number of attempts (first try included).
        initial_backoff: Delay after the first failed attempt, in seconds.
        max_backoff: Upper bound of the delay, in seconds.
        backoff_multiplier: Multiplier for each retry.
        is_retryable: Predicate deciding whether an exception is retried.

    Returns:
        Result of the function.

    Raises:
        The exception of the last attempt, or the first non-retryable one.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    for attempt in range(1, max_attempts + 1):
        try:
            return func()
        except Exception as e:
            if not is_retryable(e):
                raise
            if attempt == max_attempts:
                logger.error(f"{label}: all {max_attempts} attempts failed: {e}")
                raise

            delay = backoff_delay(attempt, initial_backoff, max_backoff, backoff_multiplier)
            logger.warning(
                f"Retrying {label} (attempt {attempt + 1}/{max_attempts}) "
                f"in {delay * 1000:.0f}ms: {e}"
            )
            time.sleep(delay)

    # Should not reach here, but satisfy type checker
    raise RuntimeError("Unexpected retry loop exit")
