"""streamadmin - Async administration client for a stream-storage control plane.

Wraps the control plane's administrative API (create/delete/describe
streams, retention, tags, enhanced monitoring, shard splitting and merging,
consumers) and exposes its paginated listings as lazy async streams that
retry rate-limited requests and throttle page requests.

Quick Start:
    >>> from streamadmin import AdminClient
    >>>
    >>> async with AdminClient.build(lambda: session.create_client("kinesis")) as admin:
    ...     await admin.create_stream("orders", shard_count=2)
    ...     summary = await admin.describe_stream_summary("orders")
    ...     async with admin.list_tags_for_stream("orders") as tags:
    ...         async for tag in tags:
    ...             print(tag.key, tag.value)

Generic Pagination:
    >>> from streamadmin import Page, RetryPolicy, paginate
    >>>
    >>> async def fetch(token: str | None) -> Page[dict, str]:
    ...     resp = await api.list_things(cursor=token)
    ...     return Page(resp["items"], resp.get("cursor"))
    >>>
    >>> items = await paginate(fetch, retry=RetryPolicy(max_attempts=5), throttle=0.2).collect()
"""

from __future__ import annotations

__version__ = "0.1.0"

# Errors
from .foundation.errors import (
    ControlPlaneError,
    ControlPlaneException,
    ErrorCode,
    LimitExceededException,
    classify_exception,
    is_rate_limited,
)

# Configuration
from .foundation.config import StreamAdminSettings, clear_settings_cache, get_settings

# Runtime
from .runtime import (
    DEFAULT_RETRY,
    NO_RETRY,
    NO_THROTTLE,
    Backoff,
    ConstantBackoff,
    ExponentialBackoff,
    Page,
    PageFetcher,
    PaginatedStream,
    RetryPolicy,
    StreamState,
    ThrottlePolicy,
    configure_from_settings,
    configure_logging,
    execute_with_retry,
    get_logger,
    log_context,
    paginate,
)

# Admin client
from .admin import (
    AdminClient,
    Consumer,
    ConsumerDescription,
    ConsumerStatus,
    ControlPlaneApi,
    DescribeLimitsResponse,
    EncryptionType,
    EnhancedMonitoringStatus,
    MetricsName,
    ScalingType,
    Shard,
    StreamDescription,
    StreamDescriptionSummary,
    StreamStatus,
    Tag,
    UpdateShardCountResponse,
)

__all__ = [
    "__version__",
    # Errors
    "ErrorCode", "ControlPlaneError", "ControlPlaneException", "LimitExceededException",
    "classify_exception", "is_rate_limited",
    # Configuration
    "StreamAdminSettings", "get_settings", "clear_settings_cache",
    # Logging
    "configure_from_settings", "configure_logging", "get_logger", "log_context",
    # Retry
    "Backoff", "ExponentialBackoff", "ConstantBackoff", "RetryPolicy", "DEFAULT_RETRY", "NO_RETRY",
    "execute_with_retry",
    # Pagination
    "Page", "PageFetcher", "PaginatedStream", "StreamState", "ThrottlePolicy", "NO_THROTTLE", "paginate",
    # Admin
    "AdminClient", "ControlPlaneApi",
    "Consumer", "ConsumerDescription", "DescribeLimitsResponse", "EnhancedMonitoringStatus",
    "Shard", "StreamDescription", "StreamDescriptionSummary", "Tag", "UpdateShardCountResponse",
    "ConsumerStatus", "EncryptionType", "MetricsName", "ScalingType", "StreamStatus",
]
