r"""Transport-agnostic representation of a received HTTP response."""

from __future__ import annotations

__all__ = ["HttpResponse"]

from collections.abc import Mapping
from dataclasses import dataclass, field


@dataclass(frozen=True)
class HttpResponse:
    """Response of a completed HTTP exchange.

    Args:
        status_code: The HTTP status code.
        headers: The response headers.
        body: The raw body, ``None`` when the response has none.
    """

    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes | None = None

    @property
    def is_successful(self) -> bool:
        """Indicate if the status code is in the 2xx range."""
        return 200 <= self.status_code <= 299

    @property
    def text(self) -> str:
        """The body decoded as UTF-8, empty string when absent."""
        if not self.body:
            return ""
        return self.body.decode("utf-8", errors="replace")
