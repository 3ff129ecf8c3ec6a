r"""Exception hierarchy for the Bolta API client.

Every error raised by the library derives from ``BoltaError``. Terminal
errors produced by the request executors carry enough context (status
code, response body, number of attempts, underlying cause) for the
caller to decide what to do next.
"""

from __future__ import annotations

__all__ = [
    "ApiError",
    "BoltaError",
    "ConfigurationError",
    "DecodeError",
    "EmptyResponseError",
    "EncodeError",
    "NetworkError",
    "RequestCancelledError",
    "TransportError",
]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping


class BoltaError(Exception):
    """Base class for all errors raised by the Bolta client."""


class ConfigurationError(BoltaError, ValueError):
    """Raised when a retry policy, backoff strategy, status matcher or
    client configuration is built with invalid parameters.

    Example:
        ```pycon
        >>> from bolta.backoff import FixedBackoff
        >>> from bolta.exceptions import ConfigurationError
        >>> try:
        ...     FixedBackoff(delay_ms=-1)
        ... except ConfigurationError as exc:
        ...     print(exc)
        ...
        delay_ms must be non-negative, got -1

        ```
    """


class TransportError(BoltaError):
    """Raised by transports when the HTTP exchange could not be
    completed (connection refused, DNS failure, timeout, aborted
    stream).

    Args:
        message: Description of the failure.
        cause: The underlying exception, if any.
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class NetworkError(BoltaError):
    """Terminal error for a request whose transport kept failing.

    Args:
        message: Description of the failure.
        attempts: Total number of attempts made.
        cause: The last transport-level exception.
    """

    def __init__(
        self,
        message: str,
        attempts: int,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.attempts = attempts
        self.cause = cause


class EmptyResponseError(NetworkError):
    """Raised when a successful response has no body but the caller
    expected a payload.

    It is never retried: the exchange itself completed.
    """


class ApiError(BoltaError):
    """Raised when the API answered with a non-2xx status code.

    Args:
        status_code: The HTTP status code.
        body: The raw response body as text, empty string when absent.
        method: The HTTP method of the request.
        url: The requested URL.
        headers: The response headers.

    Example:
        ```pycon
        >>> from bolta.exceptions import ApiError
        >>> error = ApiError(
        ...     status_code=400, body='{"code": "INVALID"}', method="POST", url="https://x"
        ... )
        >>> error.status_code
        400
        >>> str(error)
        'POST request to https://x failed with status 400'

        ```
    """

    def __init__(
        self,
        status_code: int,
        body: str = "",
        method: str = "",
        url: str = "",
        headers: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(f"{method} request to {url} failed with status {status_code}")
        self.status_code = status_code
        self.body = body
        self.method = method
        self.url = url
        self.headers = dict(headers or {})


class DecodeError(BoltaError):
    """Raised when a response body cannot be decoded into the requested
    type.

    Args:
        message: Description of the failure.
        body: The raw body that failed to decode.
    """

    def __init__(self, message: str, body: bytes | None = None) -> None:
        super().__init__(message)
        self.body = body


class EncodeError(BoltaError):
    """Raised when a request payload cannot be serialized."""


class RequestCancelledError(BoltaError):
    """Raised when the caller cancels a request while it is waiting to
    retry or before an attempt starts.

    Args:
        message: Description of the cancellation.
        attempts: Number of attempts made before the cancellation.
    """

    def __init__(self, message: str, attempts: int) -> None:
        super().__init__(message)
        self.attempts = attempts
