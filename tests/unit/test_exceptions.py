r"""Unit tests for the exception hierarchy."""

from __future__ import annotations

import pytest

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


@pytest.mark.parametrize(
    "error_type",
    [
        ApiError,
        ConfigurationError,
        DecodeError,
        EmptyResponseError,
        EncodeError,
        NetworkError,
        RequestCancelledError,
        TransportError,
    ],
)
def test_errors_derive_from_bolta_error(error_type: type[Exception]) -> None:
    assert issubclass(error_type, BoltaError)


def test_configuration_error_is_value_error() -> None:
    assert issubclass(ConfigurationError, ValueError)


def test_empty_response_error_is_network_error() -> None:
    error = EmptyResponseError("empty", attempts=1)
    assert isinstance(error, NetworkError)
    assert error.cause is None


def test_api_error() -> None:
    error = ApiError(
        status_code=422,
        body='{"code": "INVALID"}',
        method="POST",
        url="https://xapi.bolta.io/v1/payments",
        headers={"X-Request-Id": "r1"},
    )
    assert str(error) == "POST request to https://xapi.bolta.io/v1/payments failed with status 422"
    assert error.status_code == 422
    assert error.body == '{"code": "INVALID"}'
    assert error.headers == {"X-Request-Id": "r1"}


def test_api_error_defaults() -> None:
    error = ApiError(status_code=500)
    assert error.body == ""
    assert error.headers == {}


def test_network_error() -> None:
    cause = OSError("reset")
    error = NetworkError("failed", attempts=3, cause=cause)
    assert str(error) == "failed"
    assert error.attempts == 3
    assert error.cause is cause


def test_transport_error() -> None:
    cause = TimeoutError()
    assert TransportError("timed out", cause=cause).cause is cause


def test_decode_error() -> None:
    assert DecodeError("bad", body=b"{").body == b"{"


def test_request_cancelled_error() -> None:
    assert RequestCancelledError("cancelled", attempts=2).attempts == 2
