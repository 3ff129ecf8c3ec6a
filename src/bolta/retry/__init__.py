r"""Retry package implementing the resilient request execution engine.

Public API:
    - RetryPolicy: Configuration deciding whether and when to retry
    - StatusCodeMatcher and its variants: Retryable status code selection
    - RequestExecutor: Synchronous retry executor
    - AsyncRequestExecutor: Asynchronous retry executor
    - CancellationToken: Cooperative cancellation of a request
    - BlockingWaiter, AsyncWaiter: Suspension between attempts
"""

from __future__ import annotations

__all__ = [
    "AsyncRequestExecutor",
    "AsyncWaiter",
    "BlockingWaiter",
    "CancellationToken",
    "RangeStatusCodeMatcher",
    "RequestExecutor",
    "RetryPolicy",
    "SetStatusCodeMatcher",
    "SingleStatusCodeMatcher",
    "StatusCodeMatcher",
    "parse_status_matcher",
]

from bolta.retry.cancellation import CancellationToken
from bolta.retry.executor import RequestExecutor
from bolta.retry.executor_async import AsyncRequestExecutor
from bolta.retry.matcher import (
    RangeStatusCodeMatcher,
    SetStatusCodeMatcher,
    SingleStatusCodeMatcher,
    StatusCodeMatcher,
    parse_status_matcher,
)
from bolta.retry.policy import RetryPolicy
from bolta.retry.waiter import AsyncWaiter, BlockingWaiter
