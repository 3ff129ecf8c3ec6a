r"""Unit tests for the httpx-based transports."""

from __future__ import annotations

from unittest.mock import Mock

import httpx
import pytest

from bolta.exceptions import TransportError
from bolta.http import (
    AsyncHttpxTransport,
    HttpMethod,
    HttpRequest,
    HttpResponse,
    HttpxTransport,
)
from bolta.http.transport import build_timeout

URL = "https://xapi.bolta.io/v1/customers"


def _echo(request: httpx.Request) -> httpx.Response:
    return httpx.Response(
        201,
        headers={"X-Method": request.method, "X-Key": request.headers.get("Customer-Key", "")},
        content=request.content,
    )


def _raise(exc: Exception):
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc

    return handler


def test_build_timeout_defaults() -> None:
    assert build_timeout() == httpx.Timeout(connect=10.0, read=30.0, write=30.0, pool=10.0)


####################################
#     Tests for HttpxTransport     #
####################################


def test_httpx_transport_send() -> None:
    client = httpx.Client(transport=httpx.MockTransport(_echo))
    transport = HttpxTransport(client=client)
    request = HttpRequest(HttpMethod.POST, URL, headers={"Customer-Key": "ck"}, body=b'{"a": 1}')

    response = transport.send(request)

    assert isinstance(response, HttpResponse)
    assert response.status_code == 201
    assert response.headers["x-method"] == "POST"
    assert response.headers["x-key"] == "ck"
    assert response.body == b'{"a": 1}'


def test_httpx_transport_empty_body() -> None:
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(204)))
    response = HttpxTransport(client=client).send(HttpRequest(HttpMethod.DELETE, URL))
    assert response.status_code == 204
    assert response.body is None


def test_httpx_transport_returns_error_statuses() -> None:
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(503)))
    assert HttpxTransport(client=client).send(HttpRequest(HttpMethod.GET, URL)).status_code == 503


@pytest.mark.parametrize(
    ("exc", "message"),
    [
        (httpx.ConnectError("refused"), r"GET request to .* failed: ConnectError: refused"),
        (httpx.ReadTimeout("slow"), r"GET request to .* timed out: slow"),
    ],
)
def test_httpx_transport_request_error(exc: Exception, message: str) -> None:
    client = httpx.Client(transport=httpx.MockTransport(_raise(exc)))

    with pytest.raises(TransportError, match=message) as exc_info:
        HttpxTransport(client=client).send(HttpRequest(HttpMethod.GET, URL))

    assert exc_info.value.cause is exc
    assert exc_info.value.__cause__ is exc


def test_httpx_transport_does_not_close_external_client() -> None:
    client = Mock(spec=httpx.Client)
    HttpxTransport(client=client).close()
    client.close.assert_not_called()


def test_httpx_transport_closes_own_client() -> None:
    transport = HttpxTransport(timeout=5.0)
    with transport:
        pass
    assert transport._client.is_closed


#########################################
#     Tests for AsyncHttpxTransport     #
#########################################


@pytest.mark.asyncio
async def test_async_httpx_transport_send() -> None:
    client = httpx.AsyncClient(transport=httpx.MockTransport(_echo))
    transport = AsyncHttpxTransport(client=client)

    response = await transport.send(HttpRequest(HttpMethod.PUT, URL, body=b"[]"))

    assert response.status_code == 201
    assert response.headers["x-method"] == "PUT"
    assert response.body == b"[]"
    await client.aclose()


@pytest.mark.asyncio
async def test_async_httpx_transport_request_error() -> None:
    exc = httpx.ConnectTimeout("too slow")
    client = httpx.AsyncClient(transport=httpx.MockTransport(_raise(exc)))

    with pytest.raises(TransportError, match=r"timed out") as exc_info:
        await AsyncHttpxTransport(client=client).send(HttpRequest(HttpMethod.GET, URL))

    assert exc_info.value.cause is exc
    await client.aclose()


@pytest.mark.asyncio
async def test_async_httpx_transport_closes_own_client() -> None:
    async with AsyncHttpxTransport() as transport:
        pass
    assert transport._client.is_closed
