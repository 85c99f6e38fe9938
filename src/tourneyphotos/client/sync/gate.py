"""Rate-limited request gate.

Serializes outbound requests so that two consecutive requests start at
least `min_interval` seconds apart.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from typing import TypeVar

from tourneyphotos.core.config import DEFAULT_RATE_LIMIT_MS

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MIN_INTERVAL = DEFAULT_RATE_LIMIT_MS / 1000.0


class RateLimitGate:
    """Runs operations one at a time with a minimum start-to-start spacing.

    A failing operation releases the gate like a successful one; its
    exception is raised to its own caller only.
    """

    def __init__(self, min_interval: float = DEFAULT_MIN_INTERVAL) -> None:
        """Initialize the gate.

        Args:
            min_interval: Minimum seconds between the starts of two operations.
        """
        self._min_interval = min_interval
        self._lock = threading.Lock()
        self._last_start: float | None = None

    @property
    def min_interval(self) -> float:
        """Minimum spacing in seconds."""
        return self._min_interval

    def schedule(self, func: Callable[[], T]) -> T:
        """Run an operation once the spacing since the previous one elapsed.

        Args:
            func: Operation to run.

        Returns:
            Result of the operation.
        """
        with self._lock:
            if self._last_start is not None:
                wait = self._last_start + self._min_interval - time.monotonic()
                if wait > 0:
                    logger.debug(f"Rate limit: waiting {wait * 1000:.0f}ms")
                    time.sleep(wait)
            self._last_start = time.monotonic()
            return func()
