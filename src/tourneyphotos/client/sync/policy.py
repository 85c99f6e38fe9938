"""Request policy: retry around the rate-limited gate.

Every storage call made by the sync engine goes through RequestPolicy.run,
so each attempt (first try and retries alike) waits its turn at the gate.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TypeVar

from tourneyphotos.client.api import is_transient_error
from tourneyphotos.client.sync.gate import RateLimitGate
from tourneyphotos.client.sync.retry import (
    DEFAULT_INITIAL_BACKOFF,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MAX_BACKOFF,
    retry_with_backoff,
)

T = TypeVar("T")


@dataclass
class RequestPolicy:
    """Rate limiting and retry settings shared by all storage calls."""

    gate: RateLimitGate = field(default_factory=RateLimitGate)
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    initial_backoff: float = DEFAULT_INITIAL_BACKOFF
    max_backoff: float = DEFAULT_MAX_BACKOFF
    is_retryable: Callable[[Exception], bool] = is_transient_error

    def run(self, func: Callable[[], T], label: str) -> T:
        """Run a storage call through the gate with retries."""
        return retry_with_backoff(
            lambda: self.gate.schedule(func),
            label=label,
            max_attempts=self.max_attempts,
            initial_backoff=self.initial_backoff,
            max_backoff=self.max_backoff,
            is_retryable=self.is_retryable,
        )
