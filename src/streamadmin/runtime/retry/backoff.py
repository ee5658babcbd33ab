"""Backoff strategies for retry policies.

Provides pluggable delay calculation for retry attempts:
- ExponentialBackoff: Exponential growth with optional cap and jitter
- ConstantBackoff: Fixed delay
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class Backoff(Protocol):
    """Protocol for backoff delay calculation.

    Implementations compute the delay before the next retry attempt.
    Attempt numbers are 0-indexed (first retry = attempt 0).
    """

    def delay(self, attempt: int) -> float:
        """Calculate delay in seconds for given attempt number.

        Args:
            attempt: 0-indexed retry attempt number

        Returns:
            Delay in seconds before next retry
        """
        ...


@dataclass(frozen=True, slots=True)
class ExponentialBackoff:
    """Exponential backoff with optional jitter.

    Delay = min(base * (multiplier ^ attempt), max_delay) * jitter

    Attributes:
        base: Initial delay in seconds (default: 0.2)
        max_delay: Maximum delay cap in seconds (default: 30.0)
        multiplier: Exponential growth factor (default: 2.0)
        jitter: Randomize 0.5-1.5x (default: False)
    """

    base: float = 0.2
    max_delay: float = 30.0
    multiplier: float = 2.0
    jitter: bool = False

    def delay(self, attempt: int) -> float:
        d = min(self.base * (self.multiplier ** attempt), self.max_delay)
        return d * (0.5 + random.random()) if self.jitter else d


@dataclass(frozen=True, slots=True)
class ConstantBackoff:
    """Fixed delay between retries.

    Attributes:
        delay_seconds: Fixed delay in seconds (default: 1.0)
    """

    delay_seconds: float = 1.0

    def delay(self, attempt: int) -> float:
        return self.delay_seconds
