"""
Polling Retry Policy

Explicit retry policy for the propagation poll, so callers and tests can
choose the attempt bound and delay instead of relying on fixed constants.
"""

import random
from dataclasses import dataclass
from typing import Callable, Optional

from ..config.schema import RetryConfig
from ..config.validators import validate_non_negative_float, validate_positive_int


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded fixed-interval retry policy with optional jitter."""

    max_attempts: int = 100
    interval: float = 10.0
    jitter: float = 0.0

    def __post_init__(self) -> None:
        if not validate_positive_int(self.max_attempts):
            raise ValueError(f"Max attempts must be positive: {self.max_attempts}")

        if not validate_non_negative_float(self.interval):
            raise ValueError(f"Interval must be non-negative: {self.interval}")

        if not validate_non_negative_float(self.jitter):
            raise ValueError(f"Jitter must be non-negative: {self.jitter}")

    @classmethod
    def zero(cls, max_attempts: int = 100) -> "RetryPolicy":
        """Policy that never waits between attempts."""
        return cls(max_attempts=max_attempts, interval=0.0, jitter=0.0)

    @classmethod
    def from_config(cls, config: RetryConfig) -> "RetryPolicy":
        return cls(
            max_attempts=config.max_attempts,
            interval=config.interval,
            jitter=config.jitter,
        )

    def delay(self, rand: Optional[Callable[[float, float], float]] = None) -> float:
        """Seconds to wait before the next attempt."""
        if not self.jitter:
            return self.interval
        uniform = rand or random.uniform
        return self.interval + uniform(0.0, self.jitter)

    @property
    def max_wait(self) -> float:
        """Upper bound of total waiting time when every attempt fails."""
        return (self.max_attempts - 1) * (self.interval + self.jitter)
