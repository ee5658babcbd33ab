"""Retry policies for rate-limited requests.

Provides the backoff strategies and the retry policy applied when the
control plane rejects a request because of rate limiting.

Example:
    >>> from streamadmin.runtime.retry import RetryPolicy, ExponentialBackoff, execute_with_retry
    >>>
    >>> policy = RetryPolicy(
    ...     max_attempts=5,
    ...     backoff=ExponentialBackoff(base=0.2, max_delay=5.0),
    ... )
    >>> response = await execute_with_retry(lambda: api.list_streams(Limit=10), policy, "list_streams")
"""

from .backoff import Backoff, ConstantBackoff, ExponentialBackoff
from .policy import DEFAULT_RETRY, NO_RETRY, RetryPolicy, execute_with_retry

__all__ = [
    # Backoff strategies
    "Backoff",
    "ExponentialBackoff",
    "ConstantBackoff",
    # Policy
    "RetryPolicy",
    "DEFAULT_RETRY",
    "NO_RETRY",
    # Execution
    "execute_with_retry",
]
