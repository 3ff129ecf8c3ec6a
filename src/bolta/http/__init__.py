r"""HTTP values, transports, codec and response classification."""

from __future__ import annotations

__all__ = [
    "AsyncBaseTransport",
    "AsyncHttpxTransport",
    "BaseTransport",
    "HttpMethod",
    "HttpRequest",
    "HttpResponse",
    "HttpxTransport",
    "JsonCodec",
    "classify_exception",
    "classify_response",
]

from bolta.http.classifier import classify_exception, classify_response
from bolta.http.codec import JsonCodec
from bolta.http.request import HttpMethod, HttpRequest
from bolta.http.response import HttpResponse
from bolta.http.transport import (
    AsyncBaseTransport,
    AsyncHttpxTransport,
    BaseTransport,
    HttpxTransport,
)
