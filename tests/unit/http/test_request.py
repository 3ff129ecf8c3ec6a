r"""Unit tests for HttpRequest and HttpResponse."""

from __future__ import annotations

import pytest

from bolta.http import HttpMethod, HttpRequest, HttpResponse

#################################
#     Tests for HttpRequest     #
#################################


def test_http_request_defaults() -> None:
    request = HttpRequest(HttpMethod.GET, "https://xapi.bolta.io/v1/customers")
    assert request.method is HttpMethod.GET
    assert dict(request.headers) == {}
    assert request.body is None


def test_http_request_method_from_string() -> None:
    assert HttpRequest("POST", "https://x").method is HttpMethod.POST


def test_http_request_invalid_method() -> None:
    with pytest.raises(ValueError, match=r"PATCH"):
        HttpRequest("PATCH", "https://x")


def test_http_request_headers_are_read_only() -> None:
    request = HttpRequest(HttpMethod.GET, "https://x", headers={"A": "1"})
    with pytest.raises(TypeError):
        request.headers["B"] = "2"  # type: ignore[index]


def test_http_request_headers_copied() -> None:
    headers = {"A": "1"}
    request = HttpRequest(HttpMethod.GET, "https://x", headers=headers)
    headers["A"] = "2"
    assert request.headers["A"] == "1"


def test_http_request_with_headers() -> None:
    request = HttpRequest(HttpMethod.PUT, "https://x", headers={"A": "1", "B": "1"}, body=b"{}")
    updated = request.with_headers({"B": "2", "C": "3"})
    assert dict(updated.headers) == {"A": "1", "B": "2", "C": "3"}
    assert updated.body == b"{}"
    assert dict(request.headers) == {"A": "1", "B": "1"}


def test_http_method_str() -> None:
    assert str(HttpMethod.DELETE) == "DELETE"
    assert f"{HttpMethod.GET} request" == "GET request"


##################################
#     Tests for HttpResponse     #
##################################


@pytest.mark.parametrize(("status_code", "expected"), [(199, False), (200, True), (299, True), (300, False)])
def test_http_response_is_successful(status_code: int, expected: bool) -> None:
    assert HttpResponse(status_code).is_successful is expected


def test_http_response_text() -> None:
    assert HttpResponse(200, body="안녕".encode()).text == "안녕"
    assert HttpResponse(200).text == ""
    assert HttpResponse(200, body=b"\xff").text == "�"
