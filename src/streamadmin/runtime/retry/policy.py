"""Retry policy for rate-limited control-plane requests.

Pairs a backoff strategy with an attempt budget and a predicate deciding
which errors are transient. Only rate limiting is retried by default;
everything else propagates on first failure.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TYPE_CHECKING, Annotated, Callable, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field

from streamadmin.foundation.errors import classify_exception, is_rate_limited
from streamadmin.runtime.observability import get_logger

from .backoff import Backoff, ExponentialBackoff

if TYPE_CHECKING:
    from streamadmin.foundation.config import RetrySettings

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


class RetryPolicy(BaseModel):
    """Configurable retry policy for page and admin requests.

    Attributes:
        max_attempts: Total attempts including the first one (1 = no retries)
        backoff: Backoff strategy for delay calculation
        retryable: Predicate classifying an error as transient

    Example:
        >>> policy = RetryPolicy(
        ...     max_attempts=4,
        ...     backoff=ExponentialBackoff(base=0.5, max_delay=10.0),
        ... )
        >>> policy.get_delay(2)
        2.0
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,  # For Backoff protocol
        validate_default=True,
        extra="forbid",
        revalidate_instances="never",
    )

    max_attempts: Annotated[int, Field(ge=1, le=20)] = 6
    backoff: Backoff = Field(default_factory=ExponentialBackoff, repr=False)
    retryable: Callable[[BaseException], bool] = Field(default=is_rate_limited, exclude=True, repr=False)

    @computed_field
    @property
    def max_retries(self) -> int:
        """Retries allowed after the first attempt."""
        return self.max_attempts - 1

    @computed_field
    @property
    def is_disabled(self) -> bool:
        """Whether retries are effectively disabled."""
        return self.max_attempts == 1

    def should_retry(self, exc: BaseException, attempt: int) -> bool:
        """Determine if a failed attempt should be retried.

        Args:
            exc: Error raised by the attempt
            attempt: 0-indexed number of the attempt that failed

        Returns:
            True if retry should be attempted
        """
        if attempt + 1 >= self.max_attempts:
            return False
        return self.retryable(exc)

    def get_delay(self, attempt: int) -> float:
        """Get delay before retrying after the given failed attempt."""
        return self.backoff.delay(attempt)

    @classmethod
    def from_settings(cls, settings: RetrySettings) -> RetryPolicy:
        """Build a policy from configuration."""
        return cls(
            max_attempts=settings.max_attempts,
            backoff=ExponentialBackoff(
                base=settings.base_delay,
                max_delay=settings.max_delay,
                multiplier=settings.multiplier,
                jitter=settings.jitter,
            ),
        )

    def __hash__(self) -> int:
        """Hash for frozen model."""
        return hash((self.max_attempts, self.backoff, self.retryable))


# Singleton for no-retry policy
NO_RETRY = RetryPolicy(max_attempts=1)

DEFAULT_RETRY = RetryPolicy()


async def execute_with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    operation_name: str,
    *,
    sleep: Sleep = asyncio.sleep,
) -> T:
    """Execute async operation with retry policy.

    Re-invokes ``operation`` after the backoff delay while it fails with an
    error the policy deems retryable and attempts remain. The last error is
    re-raised unchanged once the budget is spent; non-retryable errors are
    re-raised immediately.

    Args:
        operation: Async callable performing one attempt
        policy: Retry policy configuration
        operation_name: Operation name for logging
        sleep: Awaitable delay function (injected in tests)
    """
    log = get_logger("streamadmin.retry").bind_operation(operation_name)
    attempt = 0
    while True:
        try:
            return await operation()
        except Exception as exc:
            if not policy.retryable(exc):
                raise
            if not policy.should_retry(exc, attempt):
                log.error("retries exhausted", attempts=attempt + 1, code=classify_exception(exc).value)
                raise
            delay = policy.get_delay(attempt)
            log.warning(
                "rate limited, retrying",
                attempt=attempt + 1,
                max_attempts=policy.max_attempts,
                delay=round(delay, 3),
            )
            await sleep(delay)
            attempt += 1
