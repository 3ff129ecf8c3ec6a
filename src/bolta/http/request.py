r"""Transport-agnostic representation of an outbound HTTP request."""

from __future__ import annotations

__all__ = ["HttpMethod", "HttpRequest"]

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType


class HttpMethod(str, Enum):
    """HTTP methods supported by the API."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class HttpRequest:
    """Immutable outbound request.

    The request executors never inspect the headers or the body; they are
    attached by the caller before execution.

    Args:
        method: The HTTP method.
        url: The absolute target URL.
        headers: Header names and values.
        body: Optional request body.

    Example:
        ```pycon
        >>> from bolta.http import HttpMethod, HttpRequest
        >>> request = HttpRequest(HttpMethod.GET, "https://xapi.bolta.io/customers/1")
        >>> request = request.with_headers({"Customer-Key": "abc"})
        >>> dict(request.headers)
        {'Customer-Key': 'abc'}

        ```
    """

    method: HttpMethod
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", HttpMethod(self.method))
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    def with_headers(self, headers: Mapping[str, str]) -> HttpRequest:
        """Create a copy of the request with additional headers.

        Headers given here override existing headers of the same name.

        Args:
            headers: The headers to add.

        Returns:
            A new request.
        """
        return replace(self, headers={**self.headers, **headers})
