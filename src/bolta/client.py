r"""Client for the Bolta API.

This module provides the ``BoltaClient`` which attaches authentication
and content headers to requests and executes them, in blocking or
asynchronous mode, with the retry policy of its configuration.
"""

from __future__ import annotations

__all__ = ["BoltaClient", "RequestOptions"]

import base64
import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from bolta.http import headers as bolta_headers
from bolta.http.codec import JsonCodec
from bolta.http.request import HttpMethod, HttpRequest
from bolta.http.transport import (
    AsyncBaseTransport,
    AsyncHttpxTransport,
    BaseTransport,
    HttpxTransport,
    build_timeout,
)
from bolta.retry.executor import RequestExecutor
from bolta.retry.executor_async import AsyncRequestExecutor

if TYPE_CHECKING:
    import asyncio
    from types import TracebackType
    from typing import Self

    import httpx

    from bolta.core.config import ClientConfig
    from bolta.retry.cancellation import CancellationToken
    from bolta.retry.policy import RetryPolicy

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestOptions:
    """Per-request options.

    Args:
        headers: Additional headers, overriding the default ones.
        retry_policy: Optional retry policy replacing the client policy
            for this request.
        customer_key: Optional customer key sent in the ``Customer-Key``
            header.
        client_reference_id: Optional caller reference sent in the
            ``Bolta-Client-Reference-Id`` header.

    Example:
        ```pycon
        >>> from bolta.client import RequestOptions
        >>> options = RequestOptions(customer_key="ck_123", headers={"X-Trace": "1"})
        >>> options.all_headers()
        {'X-Trace': '1', 'Customer-Key': 'ck_123'}

        ```
    """

    headers: Mapping[str, str] = field(default_factory=dict)
    retry_policy: RetryPolicy | None = None
    customer_key: str | None = None
    client_reference_id: str | None = None

    def all_headers(self) -> dict[str, str]:
        """Return the headers defined by the options."""
        result = dict(self.headers)
        if self.customer_key is not None:
            result[bolta_headers.CUSTOMER_KEY] = self.customer_key
        if self.client_reference_id is not None:
            result[bolta_headers.BOLTA_CLIENT_REFERENCE_ID] = self.client_reference_id
        return result


class BoltaClient:
    r"""Client executing authenticated requests against the Bolta API.

    The client owns the transports it creates and closes them when used
    as a context manager, or when ``close``/``aclose`` is called.
    Transports passed to the constructor are left open.

    Args:
        config: The client configuration.
        transport: Optional blocking transport. Defaults to an
            ``HttpxTransport`` with the configured timeouts.
        async_transport: Optional non-blocking transport. Defaults to an
            ``AsyncHttpxTransport`` with the configured timeouts.
        codec: Optional codec. Defaults to ``JsonCodec``.

    Example:
        ```pycon
        >>> from bolta import BoltaClient, ClientConfig, RetryPolicy
        >>> config = ClientConfig(
        ...     api_key="test_secret",
        ...     retry_policy=RetryPolicy.from_dict(
        ...         {"max_attempts": 3, "retryable_status_codes": "500-599"}
        ...     ),
        ... )
        >>> with BoltaClient(config) as client:  # doctest: +SKIP
        ...     request = client.new_request("GET", "/v1/customers/{}", "ck_123")
        ...     customer = client.execute(request, dict)
        ...

        ```
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: BaseTransport | None = None,
        async_transport: AsyncBaseTransport | None = None,
        codec: JsonCodec | None = None,
    ) -> None:
        self._config = config
        self._codec = codec or JsonCodec()
        self._transport = transport
        self._async_transport = async_transport
        self._owns_transport = transport is None
        self._owns_async_transport = async_transport is None
        self._lock = threading.Lock()

    @property
    def config(self) -> ClientConfig:
        """The client configuration."""
        return self._config

    @property
    def codec(self) -> JsonCodec:
        """The codec encoding payloads and decoding responses."""
        return self._codec

    def build_url(self, path: str, *args: Any) -> str:
        """Build an absolute URL from a path template.

        Args:
            path: Path relative to the base URL, with ``{}`` placeholders.
            *args: Values substituted in the placeholders. They are
                percent-encoded.

        Returns:
            The absolute URL.

        Example:
            ```pycon
            >>> from bolta import BoltaClient, ClientConfig
            >>> client = BoltaClient(ClientConfig(api_key="test_secret"))
            >>> client.build_url("/v1/customers/{}", "a b")
            'https://xapi.bolta.io/v1/customers/a%20b'

            ```
        """
        return self._config.base_url + path.format(*(quote(str(arg), safe="") for arg in args))

    def new_request(
        self,
        method: HttpMethod | str,
        path: str,
        *args: Any,
        payload: Any = None,
    ) -> HttpRequest:
        """Create a request for a path of the API.

        Args:
            method: The HTTP method.
            path: Path template relative to the base URL.
            *args: Values substituted in the path template.
            payload: Optional object encoded as the JSON body.

        Returns:
            The request, without authentication headers.

        Raises:
            EncodeError: If the payload cannot be encoded.
        """
        body = self._codec.encode(payload) if payload is not None else None
        return HttpRequest(HttpMethod(str(method).upper()), self.build_url(path, *args), body=body)

    def execute(
        self,
        request: HttpRequest,
        response_type: Any = None,
        options: RequestOptions | None = None,
        token: CancellationToken | None = None,
    ) -> Any:
        """Execute a request, blocking until it terminates.

        Args:
            request: The request to execute.
            response_type: The type the body is decoded into, or ``None``
                when no payload is expected.
            options: Optional per-request options.
            token: Optional cancellation token.

        Returns:
            The decoded response body.

        Raises:
            ApiError: If the API answered with a non-2xx status.
            NetworkError: If the transport kept failing.
            DecodeError: If the body could not be decoded.
            RequestCancelledError: If the token was cancelled.
        """
        request = self._prepare(request, options)
        executor = RequestExecutor(
            self._policy(options), self._get_transport(), codec=self._codec
        )
        return executor.execute(request, response_type, token)

    async def execute_async(
        self,
        request: HttpRequest,
        response_type: Any = None,
        options: RequestOptions | None = None,
        token: CancellationToken | None = None,
    ) -> Any:
        """Execute a request without blocking the event loop.

        Args:
            request: The request to execute.
            response_type: The type the body is decoded into, or ``None``
                when no payload is expected.
            options: Optional per-request options.
            token: Optional cancellation token.

        Returns:
            The decoded response body.

        Raises:
            ApiError: If the API answered with a non-2xx status.
            NetworkError: If the transport kept failing.
            DecodeError: If the body could not be decoded.
            RequestCancelledError: If the token was cancelled.
        """
        return await self._async_executor(options).execute(
            self._prepare(request, options), response_type, token
        )

    def submit(
        self,
        request: HttpRequest,
        response_type: Any = None,
        options: RequestOptions | None = None,
        token: CancellationToken | None = None,
    ) -> asyncio.Task[Any]:
        """Schedule a request on the running event loop.

        Args:
            request: The request to execute.
            response_type: The type the body is decoded into, or ``None``
                when no payload is expected.
            options: Optional per-request options.
            token: Optional cancellation token.

        Returns:
            The task completing with the decoded body or the terminal
            error.
        """
        return self._async_executor(options).submit(
            self._prepare(request, options), response_type, token
        )

    def close(self) -> None:
        """Close the blocking transport if the client created it."""
        if not self._owns_transport:
            return
        with self._lock:
            transport, self._transport = self._transport, None
        if transport is not None:
            transport.close()

    async def aclose(self) -> None:
        """Close the transports created by the client."""
        if self._owns_async_transport:
            with self._lock:
                transport, self._async_transport = self._async_transport, None
            if transport is not None:
                await transport.aclose()
        self.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    def _prepare(self, request: HttpRequest, options: RequestOptions | None) -> HttpRequest:
        # Precedence: client defaults < request headers < per-call options
        layers: list[Mapping[str, str]] = [self._default_headers(), request.headers]
        if options is not None:
            layers.append(options.all_headers())
        request = replace(request, headers=_merge_headers(*layers))
        logger.debug(f"Executing API request: {request.method} {request.url}")
        return request

    def _default_headers(self) -> dict[str, str]:
        credentials = base64.b64encode(f"{self._config.api_key}:".encode()).decode("ascii")
        return {
            bolta_headers.AUTHORIZATION: f"Basic {credentials}",
            bolta_headers.CONTENT_TYPE: bolta_headers.APPLICATION_JSON_UTF8,
        }

    def _policy(self, options: RequestOptions | None) -> RetryPolicy:
        if options is not None and options.retry_policy is not None:
            return options.retry_policy
        return self._config.retry_policy

    def _async_executor(self, options: RequestOptions | None) -> AsyncRequestExecutor:
        return AsyncRequestExecutor(
            self._policy(options), self._get_async_transport(), codec=self._codec
        )

    def _get_transport(self) -> BaseTransport:
        if self._transport is None:
            with self._lock:
                if self._transport is None:
                    self._transport = HttpxTransport(timeout=self._timeout())
        return self._transport

    def _get_async_transport(self) -> AsyncBaseTransport:
        if self._async_transport is None:
            with self._lock:
                if self._async_transport is None:
                    self._async_transport = AsyncHttpxTransport(timeout=self._timeout())
        return self._async_transport

    def _timeout(self) -> httpx.Timeout:
        return build_timeout(
            connect_timeout=self._config.connect_timeout,
            read_timeout=self._config.read_timeout,
            write_timeout=self._config.write_timeout,
        )


def _merge_headers(*layers: Mapping[str, str]) -> dict[str, str]:
    """Merge header mappings, later layers overriding earlier ones.

    Header names are compared case-insensitively and the spelling of
    the overriding layer is kept.
    """
    merged: dict[str, str] = {}
    for layer in layers:
        for name, value in layer.items():
            for existing in [key for key in merged if key.lower() == name.lower()]:
                del merged[existing]
            merged[name] = value
    return merged
