"""Client for stream administration on the control plane.

Wraps an injected control-plane API (an aiobotocore-style client whose
methods take keyword arguments and return response mappings) with:
- Typed records for describe/monitoring/scaling responses
- ``None`` for operations whose response carries no data
- Paginated listings exposed as ``PaginatedStream`` with rate-limit retry
  and inter-page throttling

Errors from the API propagate unchanged.

Example:
    >>> async with AdminClient.build(lambda: session.create_client("kinesis")) as admin:
    ...     await admin.create_stream("orders", shard_count=4)
    ...     async with admin.list_streams() as names:
    ...         async for name in names:
    ...             print(name)
"""

from __future__ import annotations

import asyncio
import inspect
import time
from collections.abc import AsyncIterator, Awaitable, Mapping
from contextlib import AsyncExitStack, asynccontextmanager
from datetime import datetime
from typing import TYPE_CHECKING, Any, Callable, Protocol

from streamadmin.foundation.config import get_settings
from streamadmin.runtime.observability import get_logger
from streamadmin.runtime.pagination import Page, PaginatedStream, ThrottlePolicy
from streamadmin.runtime.retry import RetryPolicy

from .models import (
    Consumer,
    ConsumerDescription,
    DescribeLimitsResponse,
    EncryptionType,
    EnhancedMonitoringStatus,
    MetricsName,
    ScalingType,
    StreamDescription,
    StreamDescriptionSummary,
    Tag,
    UpdateShardCountResponse,
)

if TYPE_CHECKING:
    from streamadmin.foundation.config import StreamAdminSettings

Response = Mapping[str, Any]


class ControlPlaneApi(Protocol):
    """Remote control-plane operations used by ``AdminClient``.

    Matches the method names and keyword arguments of an aiobotocore
    Kinesis client.
    """

    def add_tags_to_stream(self, **kw: Any) -> Awaitable[Response]: ...
    def remove_tags_from_stream(self, **kw: Any) -> Awaitable[Response]: ...
    def create_stream(self, **kw: Any) -> Awaitable[Response]: ...
    def delete_stream(self, **kw: Any) -> Awaitable[Response]: ...
    def describe_limits(self, **kw: Any) -> Awaitable[Response]: ...
    def describe_stream(self, **kw: Any) -> Awaitable[Response]: ...
    def describe_stream_consumer(self, **kw: Any) -> Awaitable[Response]: ...
    def describe_stream_summary(self, **kw: Any) -> Awaitable[Response]: ...
    def enable_enhanced_monitoring(self, **kw: Any) -> Awaitable[Response]: ...
    def disable_enhanced_monitoring(self, **kw: Any) -> Awaitable[Response]: ...
    def increase_stream_retention_period(self, **kw: Any) -> Awaitable[Response]: ...
    def decrease_stream_retention_period(self, **kw: Any) -> Awaitable[Response]: ...
    def list_streams(self, **kw: Any) -> Awaitable[Response]: ...
    def list_tags_for_stream(self, **kw: Any) -> Awaitable[Response]: ...
    def list_stream_consumers(self, **kw: Any) -> Awaitable[Response]: ...
    def merge_shards(self, **kw: Any) -> Awaitable[Response]: ...
    def split_shard(self, **kw: Any) -> Awaitable[Response]: ...
    def start_stream_encryption(self, **kw: Any) -> Awaitable[Response]: ...
    def stop_stream_encryption(self, **kw: Any) -> Awaitable[Response]: ...
    def update_shard_count(self, **kw: Any) -> Awaitable[Response]: ...


ApiFactory = Callable[[], Any]


class AdminClient:
    """Administrative operations on streams.

    Args:
        api: Control-plane API handle, shared by all operations
        settings: Configuration for page sizes, retry and throttling
            (defaults to ``get_settings()``)
        sleep: Awaitable delay used by listings (injected in tests)
        clock: Monotonic clock used by listings (injected in tests)
    """

    __slots__ = ("_api", "_settings", "_sleep", "_clock", "_log")

    def __init__(
        self,
        api: ControlPlaneApi,
        *,
        settings: StreamAdminSettings | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._api = api
        self._settings = settings or get_settings()
        self._sleep = sleep
        self._clock = clock
        self._log = get_logger("streamadmin.admin")

    @property
    def api(self) -> ControlPlaneApi:
        return self._api

    @classmethod
    @asynccontextmanager
    async def build(
        cls,
        factory: ApiFactory,
        *,
        settings: StreamAdminSettings | None = None,
    ) -> AsyncIterator[AdminClient]:
        """Acquire an API handle from ``factory`` and release it on exit.

        The factory may return the handle, an awaitable of it, or an async
        context manager yielding it (as ``session.create_client`` does).
        Handles that are not context managers are closed with ``close()``.
        """
        async with AsyncExitStack() as stack:
            handle = factory()
            if hasattr(handle, "__aenter__"):
                api = await stack.enter_async_context(handle)
            else:
                api = await handle if inspect.isawaitable(handle) else handle
                if callable(close := getattr(api, "close", None)):
                    stack.push_async_callback(_close, close)
            yield cls(api, settings=settings)

    async def _call(self, operation: str, **params: Any) -> Response:
        self._log.debug("calling", operation=operation)
        return await getattr(self._api, operation)(**params)

    # ─────────────────────────────────────────────────────────────────────
    # Tags
    # ─────────────────────────────────────────────────────────────────────

    async def add_tags_to_stream(self, stream_name: str, tags: Mapping[str, str]) -> None:
        await self._call("add_tags_to_stream", StreamName=stream_name, Tags=dict(tags))

    async def remove_tags_from_stream(self, stream_name: str, tag_keys: list[str]) -> None:
        await self._call("remove_tags_from_stream", StreamName=stream_name, TagKeys=list(tag_keys))

    # ─────────────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────────────

    async def create_stream(self, name: str, shard_count: int) -> None:
        await self._call("create_stream", StreamName=name, ShardCount=shard_count)
        self._log.info("stream created", stream=name, shards=shard_count)

    async def delete_stream(self, name: str, enforce_consumer_deletion: bool = False) -> None:
        await self._call("delete_stream", StreamName=name, EnforceConsumerDeletion=enforce_consumer_deletion)
        self._log.info("stream deleted", stream=name)

    # ─────────────────────────────────────────────────────────────────────
    # Describe
    # ─────────────────────────────────────────────────────────────────────

    async def describe_limits(self) -> DescribeLimitsResponse:
        return DescribeLimitsResponse.model_validate(await self._call("describe_limits"))

    async def describe_stream(
        self,
        stream_name: str,
        shard_limit: int = 100,
        exclusive_start_shard_id: str | None = None,
    ) -> StreamDescription:
        params: dict[str, Any] = {"StreamName": stream_name, "Limit": shard_limit}
        if exclusive_start_shard_id is not None:
            params["ExclusiveStartShardId"] = exclusive_start_shard_id
        resp = await self._call("describe_stream", **params)
        return StreamDescription.model_validate(resp["StreamDescription"])

    async def describe_stream_consumer(
        self,
        consumer_arn: str | None = None,
        *,
        stream_arn: str | None = None,
        consumer_name: str | None = None,
    ) -> ConsumerDescription:
        """Describe a consumer by its ARN, or by stream ARN and consumer name."""
        if consumer_arn is not None:
            params = {"ConsumerARN": consumer_arn}
        elif stream_arn is not None and consumer_name is not None:
            params = {"StreamARN": stream_arn, "ConsumerName": consumer_name}
        else:
            raise ValueError("describe_stream_consumer needs consumer_arn, or stream_arn and consumer_name")
        resp = await self._call("describe_stream_consumer", **params)
        return ConsumerDescription.model_validate(resp["ConsumerDescription"])

    async def describe_stream_summary(self, stream_name: str) -> StreamDescriptionSummary:
        resp = await self._call("describe_stream_summary", StreamName=stream_name)
        return StreamDescriptionSummary.model_validate(resp["StreamDescriptionSummary"])

    # ─────────────────────────────────────────────────────────────────────
    # Monitoring, retention, shards, encryption
    # ─────────────────────────────────────────────────────────────────────

    async def enable_enhanced_monitoring(
        self, stream_name: str, metrics: list[MetricsName]
    ) -> EnhancedMonitoringStatus:
        resp = await self._call(
            "enable_enhanced_monitoring", StreamName=stream_name, ShardLevelMetrics=[m.value for m in metrics]
        )
        return EnhancedMonitoringStatus.model_validate(resp)

    async def disable_enhanced_monitoring(
        self, stream_name: str, metrics: list[MetricsName]
    ) -> EnhancedMonitoringStatus:
        resp = await self._call(
            "disable_enhanced_monitoring", StreamName=stream_name, ShardLevelMetrics=[m.value for m in metrics]
        )
        return EnhancedMonitoringStatus.model_validate(resp)

    async def increase_stream_retention_period(self, stream_name: str, retention_period_hours: int) -> None:
        await self._call(
            "increase_stream_retention_period", StreamName=stream_name, RetentionPeriodHours=retention_period_hours
        )

    async def decrease_stream_retention_period(self, stream_name: str, retention_period_hours: int) -> None:
        await self._call(
            "decrease_stream_retention_period", StreamName=stream_name, RetentionPeriodHours=retention_period_hours
        )

    async def merge_shards(self, stream_name: str, shard_to_merge: str, adjacent_shard_to_merge: str) -> None:
        await self._call(
            "merge_shards",
            StreamName=stream_name,
            ShardToMerge=shard_to_merge,
            AdjacentShardToMerge=adjacent_shard_to_merge,
        )

    async def split_shard(self, stream_name: str, shard_to_split: str, new_starting_hash_key: str) -> None:
        await self._call(
            "split_shard",
            StreamName=stream_name,
            ShardToSplit=shard_to_split,
            NewStartingHashKey=new_starting_hash_key,
        )

    async def start_stream_encryption(self, stream_name: str, encryption_type: EncryptionType, key_id: str) -> None:
        await self._call(
            "start_stream_encryption", StreamName=stream_name, EncryptionType=encryption_type.value, KeyId=key_id
        )

    async def stop_stream_encryption(self, stream_name: str, encryption_type: EncryptionType, key_id: str) -> None:
        await self._call(
            "stop_stream_encryption", StreamName=stream_name, EncryptionType=encryption_type.value, KeyId=key_id
        )

    async def update_shard_count(
        self,
        stream_name: str,
        target_shard_count: int,
        scaling_type: ScalingType = ScalingType.UNIFORM_SCALING,
    ) -> UpdateShardCountResponse:
        resp = await self._call(
            "update_shard_count",
            StreamName=stream_name,
            TargetShardCount=target_shard_count,
            ScalingType=scaling_type.value,
        )
        return UpdateShardCountResponse.model_validate(resp)

    # ─────────────────────────────────────────────────────────────────────
    # Paginated listings
    # ─────────────────────────────────────────────────────────────────────

    def list_streams(
        self,
        chunk_size: int | None = None,
        *,
        retry: RetryPolicy | None = None,
        throttle: ThrottlePolicy | float | None = None,
    ) -> PaginatedStream[str, str]:
        """Stream the names of all streams.

        Requests ``chunk_size`` names per page. When the server reports more
        streams, the next page starts after the last name of the current one.
        """
        limit = chunk_size or self._settings.pagination.stream_chunk_size

        async def fetch(token: str | None) -> Page[str, str]:
            params: dict[str, Any] = {"Limit": limit}
            if token is not None:
                params["ExclusiveStartStreamName"] = token
            resp = await self._call("list_streams", **params)
            names = list(resp.get("StreamNames", ()))
            return Page(names, names[-1] if names and resp.get("HasMoreStreams") else None)

        return self._paginate(fetch, "list_streams", retry, throttle, ThrottlePolicy.streams)

    def list_tags_for_stream(
        self,
        stream_name: str,
        chunk_size: int | None = None,
        *,
        retry: RetryPolicy | None = None,
        throttle: ThrottlePolicy | float | None = None,
    ) -> PaginatedStream[Tag, str]:
        """Stream the tags of a stream. Pages resume after the last tag key."""
        limit = chunk_size or self._settings.pagination.tag_chunk_size

        async def fetch(token: str | None) -> Page[Tag, str]:
            params: dict[str, Any] = {"StreamName": stream_name, "Limit": limit}
            if token is not None:
                params["ExclusiveStartTagKey"] = token
            resp = await self._call("list_tags_for_stream", **params)
            tags = [Tag.model_validate(t) for t in resp.get("Tags", ())]
            return Page(tags, tags[-1].key if tags and resp.get("HasMoreTags") else None)

        return self._paginate(fetch, "list_tags_for_stream", retry, throttle, ThrottlePolicy.tags)

    def list_stream_consumers(
        self,
        stream_arn: str,
        stream_creation_timestamp: datetime | None = None,
        chunk_size: int | None = None,
        *,
        retry: RetryPolicy | None = None,
        throttle: ThrottlePolicy | float | None = None,
    ) -> PaginatedStream[Consumer, str]:
        """Stream the consumers registered on a stream, following ``NextToken``."""
        limit = chunk_size or self._settings.pagination.consumer_chunk_size

        async def fetch(token: str | None) -> Page[Consumer, str]:
            params: dict[str, Any] = {"StreamARN": stream_arn, "MaxResults": limit}
            if stream_creation_timestamp is not None:
                params["StreamCreationTimestamp"] = stream_creation_timestamp
            if token is not None:
                params["NextToken"] = token
            resp = await self._call("list_stream_consumers", **params)
            consumers = [Consumer.model_validate(c) for c in resp.get("Consumers", ())]
            return Page(consumers, resp.get("NextToken") or None)

        return self._paginate(fetch, "list_stream_consumers", retry, throttle, ThrottlePolicy.consumers)

    def _paginate(
        self,
        fetch: Callable[[str | None], Awaitable[Page[Any, str]]],
        name: str,
        retry: RetryPolicy | None,
        throttle: ThrottlePolicy | float | None,
        default_throttle: Callable[..., ThrottlePolicy],
    ) -> PaginatedStream[Any, str]:
        return PaginatedStream(
            fetch,
            retry=retry or RetryPolicy.from_settings(self._settings.retry),
            throttle=default_throttle(self._settings.throttle) if throttle is None else throttle,
            name=name,
            sleep=self._sleep,
            clock=self._clock,
        )


async def _close(close: Callable[[], Any]) -> None:
    if inspect.isawaitable(result := close()):
        await result
