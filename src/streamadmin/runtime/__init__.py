"""Runtime layer: logging, retry and pagination."""

from .observability import configure_from_settings, configure_logging, get_logger, log_context
from .retry import (
    DEFAULT_RETRY,
    NO_RETRY,
    Backoff,
    ConstantBackoff,
    ExponentialBackoff,
    RetryPolicy,
    execute_with_retry,
)
from .pagination import (
    NO_THROTTLE,
    Page,
    PageFetcher,
    PaginatedStream,
    StreamState,
    ThrottlePolicy,
    paginate,
)

__all__ = [
    # Logging
    "configure_from_settings", "configure_logging", "get_logger", "log_context",
    # Retry
    "Backoff", "ExponentialBackoff", "ConstantBackoff",
    "RetryPolicy", "DEFAULT_RETRY", "NO_RETRY", "execute_with_retry",
    # Pagination
    "Page", "PageFetcher", "PaginatedStream", "StreamState", "paginate",
    "ThrottlePolicy", "NO_THROTTLE",
]
