r"""bolta - Bolta API client with a resilient request execution engine.

This package executes authenticated requests against the Bolta JSON API
and decodes the responses into typed values. Failed attempts are retried
according to an immutable retry policy, in blocking mode on the caller's
thread or in non-blocking mode on an asyncio event loop, with identical
retry decisions.

Key Features:
    - Fixed, random and exponential backoff strategies
    - Optional symmetric jitter
    - Retryable status codes selected by a single code, a set or a range
    - Optional retry of network errors (connection failures, timeouts)
    - Cooperative cancellation in both execution modes
    - Typed JSON decoding into dataclasses

Example:
    ```pycon
    >>> from bolta import BoltaClient, ClientConfig, RetryPolicy
    >>> from bolta.backoff import ExponentialBackoff
    >>> from bolta.retry import RangeStatusCodeMatcher
    >>> policy = RetryPolicy(
    ...     max_attempts=3,
    ...     backoff=ExponentialBackoff(base_delay_ms=200, multiplier=2.0, max_delay_ms=2000),
    ...     jitter_enabled=True,
    ...     jitter_factor=0.2,
    ...     status_matcher=RangeStatusCodeMatcher(500, 599),
    ... )
    >>> with BoltaClient(ClientConfig(api_key="test_secret", retry_policy=policy)) as client:  # doctest: +SKIP
    ...     request = client.new_request("GET", "/v1/customers/{}", "ck_123")
    ...     customer = client.execute(request, dict)
    ...

    ```
"""

from __future__ import annotations

__all__ = [
    "ApiError",
    "BoltaClient",
    "BoltaError",
    "CancellationToken",
    "ClientConfig",
    "ConfigurationError",
    "DecodeError",
    "EmptyResponseError",
    "EncodeError",
    "NetworkError",
    "RequestCancelledError",
    "RequestOptions",
    "RetryPolicy",
    "TransportError",
    "__version__",
]

from importlib.metadata import PackageNotFoundError, version

from bolta.client import BoltaClient, RequestOptions
from bolta.core.config import ClientConfig
from bolta.exceptions import (
    ApiError,
    BoltaError,
    ConfigurationError,
    DecodeError,
    EmptyResponseError,
    EncodeError,
    NetworkError,
    RequestCancelledError,
    TransportError,
)
from bolta.retry.cancellation import CancellationToken
from bolta.retry.policy import RetryPolicy

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
