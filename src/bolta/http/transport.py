r"""Transports sending ``HttpRequest`` objects over the network.

The request executors depend only on ``BaseTransport`` and
``AsyncBaseTransport``. The httpx-based implementations are the
default transports of ``BoltaClient``; tests and callers can provide any
other implementation.

Transports must raise ``TransportError`` when the exchange cannot be
completed, and must return every received response, whatever its status
code.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_CONNECT_TIMEOUT",
    "DEFAULT_READ_TIMEOUT",
    "DEFAULT_WRITE_TIMEOUT",
    "AsyncBaseTransport",
    "AsyncHttpxTransport",
    "BaseTransport",
    "HttpxTransport",
    "build_timeout",
]

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import httpx

from bolta.exceptions import TransportError
from bolta.http.response import HttpResponse

if TYPE_CHECKING:
    from types import TracebackType
    from typing import Self

    from bolta.http.request import HttpRequest

logger: logging.Logger = logging.getLogger(__name__)

# Per-attempt timeouts in seconds
# A timeout that fires is a network error for the retry policy
DEFAULT_CONNECT_TIMEOUT = 10.0
DEFAULT_READ_TIMEOUT = 30.0
DEFAULT_WRITE_TIMEOUT = 30.0


def build_timeout(
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
    read_timeout: float = DEFAULT_READ_TIMEOUT,
    write_timeout: float = DEFAULT_WRITE_TIMEOUT,
) -> httpx.Timeout:
    """Create the per-attempt httpx timeout.

    Args:
        connect_timeout: Seconds to wait for a connection.
        read_timeout: Seconds to wait for response data.
        write_timeout: Seconds to wait while sending the request.

    Returns:
        The httpx timeout. The pool timeout uses the connect timeout.

    Example:
        ```pycon
        >>> from bolta.http.transport import build_timeout
        >>> build_timeout(connect_timeout=5.0, read_timeout=20.0, write_timeout=20.0)
        Timeout(connect=5.0, read=20.0, write=20.0, pool=5.0)

        ```
    """
    return httpx.Timeout(
        connect=connect_timeout, read=read_timeout, write=write_timeout, pool=connect_timeout
    )


class BaseTransport(ABC):
    """Blocking transport capability."""

    @abstractmethod
    def send(self, request: HttpRequest) -> HttpResponse:
        """Send the request and return the received response.

        Args:
            request: The request to send.

        Returns:
            The response, whatever its status code.

        Raises:
            TransportError: If the exchange could not be completed.
        """

    def close(self) -> None:
        """Release the resources held by the transport."""

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


class AsyncBaseTransport(ABC):
    """Non-blocking transport capability."""

    @abstractmethod
    async def send(self, request: HttpRequest) -> HttpResponse:
        """Send the request and return the received response.

        Args:
            request: The request to send.

        Returns:
            The response, whatever its status code.

        Raises:
            TransportError: If the exchange could not be completed.
        """

    async def aclose(self) -> None:
        """Release the resources held by the transport."""

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()


class HttpxTransport(BaseTransport):
    """Blocking transport backed by ``httpx.Client``.

    Args:
        client: Optional httpx client. It is not closed by the transport.
            If ``None``, a client is created with ``timeout`` and closed by
            ``close``.
        timeout: Per-attempt timeout of the client created by the
            transport.

    Example:
        ```pycon
        >>> from bolta.http import HttpMethod, HttpRequest, HttpxTransport
        >>> with HttpxTransport() as transport:  # doctest: +SKIP
        ...     response = transport.send(HttpRequest(HttpMethod.GET, "https://xapi.bolta.io"))
        ...

        ```
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        timeout: httpx.Timeout | float | None = None,
    ) -> None:
        self._close_client = client is None
        self._client: httpx.Client = client or httpx.Client(
            timeout=timeout if timeout is not None else build_timeout()
        )

    def send(self, request: HttpRequest) -> HttpResponse:
        try:
            response = self._client.request(
                method=request.method.value,
                url=request.url,
                headers=dict(request.headers),
                content=request.body,
            )
        except httpx.RequestError as exc:
            raise _to_transport_error(request, exc) from exc
        return _to_response(response)

    def close(self) -> None:
        if self._close_client:
            self._client.close()


class AsyncHttpxTransport(AsyncBaseTransport):
    """Non-blocking transport backed by ``httpx.AsyncClient``.

    Args:
        client: Optional httpx async client. It is not closed by the
            transport. If ``None``, a client is created with ``timeout``
            and closed by ``aclose``.
        timeout: Per-attempt timeout of the client created by the
            transport.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: httpx.Timeout | float | None = None,
    ) -> None:
        self._close_client = client is None
        self._client: httpx.AsyncClient = client or httpx.AsyncClient(
            timeout=timeout if timeout is not None else build_timeout()
        )

    async def send(self, request: HttpRequest) -> HttpResponse:
        try:
            response = await self._client.request(
                method=request.method.value,
                url=request.url,
                headers=dict(request.headers),
                content=request.body,
            )
        except httpx.RequestError as exc:
            raise _to_transport_error(request, exc) from exc
        return _to_response(response)

    async def aclose(self) -> None:
        if self._close_client:
            await self._client.aclose()


def _to_response(response: httpx.Response) -> HttpResponse:
    return HttpResponse(
        status_code=response.status_code,
        headers=dict(response.headers),
        body=response.content or None,
    )


def _to_transport_error(request: HttpRequest, exc: httpx.RequestError) -> TransportError:
    if isinstance(exc, httpx.TimeoutException):
        message = f"{request.method} request to {request.url} timed out: {exc}"
    else:
        message = f"{request.method} request to {request.url} failed: {type(exc).__name__}: {exc}"
    logger.debug(message)
    return TransportError(message, cause=exc)
