"""Token-paginated requests exposed as a lazy async stream.

A listing call on the control plane returns one page of items plus an opaque
continuation token. ``PaginatedStream`` keeps requesting pages, threading each
returned token into the next request, until a page comes back without one.
Items are handed out one at a time in server order.

Each page request is retried with backoff while the server rate limits it,
and consecutive page requests are spaced by a throttle interval.

Key Types:
    - Page: One batch of items and the token to resume from
    - PageFetcher: Caller-supplied ``async (token | None) -> Page``
    - PaginatedStream: Async iterator driving the fetcher
    - paginate: Convenience constructor

Example:
    >>> async def fetch(token: str | None) -> Page[str, str]:
    ...     resp = await api.list_streams(Limit=10, **({"ExclusiveStartStreamName": token} if token else {}))
    ...     names = resp["StreamNames"]
    ...     return Page(names, names[-1] if resp["HasMoreStreams"] else None)
    >>>
    >>> async with paginate(fetch, throttle=ThrottlePolicy(min_interval=0.2)) as names:
    ...     async for name in names:
    ...         print(name)
"""

from __future__ import annotations

import asyncio
import time
from collections import deque
from collections.abc import Awaitable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Callable, Generic, Protocol, TypeVar

from streamadmin.runtime.observability import get_logger
from streamadmin.runtime.retry import DEFAULT_RETRY, RetryPolicy, execute_with_retry

from .throttle import ThrottlePolicy

if TYPE_CHECKING:
    from types import TracebackType

T = TypeVar("T")
K = TypeVar("K")

__all__ = [
    "Page",
    "PageFetcher",
    "PaginatedStream",
    "StreamState",
    "paginate",
]


@dataclass(frozen=True, slots=True)
class Page(Generic[T, K]):
    """One server response: items in server order and the token to resume from.

    A ``next_token`` of None means there are no further pages.
    """

    items: Sequence[T]
    next_token: K | None = None

    @property
    def is_last(self) -> bool:
        return self.next_token is None


class PageFetcher(Protocol[T, K]):
    """Performs one page request. Receives None for the first page.

    Calling it twice with the same token must be safe.
    """

    def __call__(self, token: K | None, /) -> Awaitable[Page[T, K]]: ...


class StreamState(StrEnum):
    FETCHING = "fetching"
    DONE = "done"


class PaginatedStream(Generic[T, K]):
    """Lazy, pull-based sequence of items across all pages of a listing.

    Two states: FETCHING (holding the token for the next request, None before
    the first) and DONE. A page is only requested once the items of the
    previous page have all been consumed, and fetches never overlap.

    Errors:
        Retryable errors (rate limiting by default) are retried with the same
        token according to ``retry``. Any other error, or the last retryable
        one once attempts are exhausted, is raised unchanged from
        ``__anext__`` and the stream is DONE. Items already handed out stay
        delivered.

    Abandonment:
        ``aclose()`` (also called when leaving ``async with``) moves the stream
        to DONE and no further request is issued. Cancelling the consuming
        task while a request is in flight does the same; the request's result
        is discarded.

    Args:
        fetch: Page fetcher for this listing
        retry: Retry policy applied to each page request
        throttle: Minimum spacing between the starts of page requests
        name: Operation name used in logs
        sleep: Awaitable delay function (injected in tests)
        clock: Monotonic clock in seconds (injected in tests)
    """

    __slots__ = (
        "_fetch", "_retry", "_throttle", "_name", "_sleep", "_clock", "_log",
        "_state", "_token", "_buffer", "_last_start", "_pages", "_running",
    )

    def __init__(
        self,
        fetch: PageFetcher[T, K],
        *,
        retry: RetryPolicy = DEFAULT_RETRY,
        throttle: ThrottlePolicy | float = 0.0,
        name: str = "paginate",
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._fetch = fetch
        self._retry = retry
        self._throttle = throttle if isinstance(throttle, ThrottlePolicy) else ThrottlePolicy(min_interval=throttle)
        self._name = name
        self._sleep = sleep
        self._clock = clock
        self._log = get_logger("streamadmin.pagination").bind_operation(name)
        self._state = StreamState.FETCHING
        self._token: K | None = None
        self._buffer: deque[T] = deque()
        self._last_start: float | None = None
        self._pages = 0
        self._running = False

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def token(self) -> K | None:
        """Token the next page request will be issued with."""
        return self._token

    @property
    def pages_fetched(self) -> int:
        return self._pages

    def __aiter__(self) -> PaginatedStream[T, K]:
        return self

    async def __anext__(self) -> T:
        while not self._buffer:
            if self._state is StreamState.DONE:
                raise StopAsyncIteration
            await self._next_page()
        return self._buffer.popleft()

    async def _next_page(self) -> None:
        if self._running:
            raise RuntimeError(f"{self._name}: a page request is already in flight")
        self._running = True
        token = self._token
        try:
            if wait := self._throttle.remaining(self._last_start, self._clock()):
                await self._sleep(wait)
            page = await execute_with_retry(lambda: self._attempt(token), self._retry, self._name, sleep=self._sleep)
        except BaseException:
            self._state = StreamState.DONE
            raise
        finally:
            self._running = False

        if self._state is StreamState.DONE:
            # Closed while the request was in flight
            return
        self._pages += 1
        self._buffer.extend(page.items)
        self._log.debug("page fetched", page=self._pages, items=len(page.items), last=page.is_last)
        if page.is_last:
            self._state = StreamState.DONE
        else:
            self._token = page.next_token

    async def _attempt(self, token: K | None) -> Page[T, K]:
        if self._state is StreamState.DONE:
            # Closed during a throttle or backoff wait
            return Page(())
        self._last_start = self._clock()
        try:
            return await self._fetch(token)
        except Exception:
            if self._state is StreamState.DONE:
                # Closed while the request was in flight
                return Page(())
            raise

    async def aclose(self) -> None:
        """Abandon the stream. No further page is requested."""
        if self._state is StreamState.FETCHING:
            self._log.debug("stream closed", pages=self._pages, pending=len(self._buffer))
        self._state = StreamState.DONE
        self._buffer.clear()

    async def __aenter__(self) -> PaginatedStream[T, K]:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def collect(self, limit: int | None = None) -> list[T]:
        """Drain the stream into a list, stopping early after ``limit`` items."""
        out: list[T] = []
        if limit is not None and limit <= 0:
            await self.aclose()
            return out
        async for item in self:
            out.append(item)
            if limit is not None and len(out) >= limit:
                await self.aclose()
                break
        return out

    def __repr__(self) -> str:
        return f"PaginatedStream(name={self._name!r}, state={self._state.value}, pages={self._pages})"


def paginate(
    fetch: PageFetcher[T, K],
    *,
    retry: RetryPolicy = DEFAULT_RETRY,
    throttle: ThrottlePolicy | float = 0.0,
    name: str = "paginate",
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> PaginatedStream[T, K]:
    """Build a ``PaginatedStream`` over ``fetch``. No request is made until iteration starts."""
    return PaginatedStream(fetch, retry=retry, throttle=throttle, name=name, sleep=sleep, clock=clock)
