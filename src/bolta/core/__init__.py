r"""Client configuration, defaults and validation helpers."""

from __future__ import annotations

__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_CONNECT_TIMEOUT",
    "DEFAULT_READ_TIMEOUT",
    "DEFAULT_WRITE_TIMEOUT",
    "ClientConfig",
    "validate_api_key",
    "validate_base_url",
    "validate_timeout",
]

from bolta.core.config import (
    DEFAULT_BASE_URL,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_READ_TIMEOUT,
    DEFAULT_WRITE_TIMEOUT,
    ClientConfig,
)
from bolta.core.validation import validate_api_key, validate_base_url, validate_timeout
