"""Paginated listing requests as lazy async streams.

Drives a caller-supplied page fetcher until the server stops returning a
continuation token, retrying rate-limited requests with backoff and spacing
page requests by a throttle interval.
"""

from .stream import Page, PageFetcher, PaginatedStream, StreamState, paginate
from .throttle import NO_THROTTLE, ThrottlePolicy

__all__ = [
    "Page",
    "PageFetcher",
    "PaginatedStream",
    "StreamState",
    "paginate",
    "ThrottlePolicy",
    "NO_THROTTLE",
]
