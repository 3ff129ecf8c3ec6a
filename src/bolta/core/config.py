r"""Configuration dataclass and defaults for BoltaClient.

This module provides configuration constants and a dataclass-based
configuration object for the ``BoltaClient``.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_CONNECT_TIMEOUT",
    "DEFAULT_READ_TIMEOUT",
    "DEFAULT_WRITE_TIMEOUT",
    "ClientConfig",
]

from dataclasses import dataclass, field, replace
from typing import Any

from bolta.core.validation import validate_api_key, validate_base_url, validate_timeout
from bolta.http.transport import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_READ_TIMEOUT,
    DEFAULT_WRITE_TIMEOUT,
)
from bolta.retry.policy import RetryPolicy

DEFAULT_BASE_URL = "https://xapi.bolta.io"


@dataclass(frozen=True)
class ClientConfig:
    """Configuration of a ``BoltaClient``.

    Args:
        api_key: The secret API key. Required; masked in ``repr``.
        base_url: The base URL of the API.
        connect_timeout: Seconds to wait for a connection. Must be > 0.
        read_timeout: Seconds to wait for response data. Must be > 0.
        write_timeout: Seconds to wait while sending. Must be > 0.
        retry_policy: The retry policy applied to every request, unless a
            request overrides it. Defaults to a single attempt.

    Example:
        ```pycon
        >>> from bolta.core import ClientConfig
        >>> from bolta.retry import RetryPolicy
        >>> config = ClientConfig(api_key="test_secret")
        >>> config.base_url
        'https://xapi.bolta.io'
        >>> config.retry_policy.max_attempts
        1
        >>> "test_secret" in repr(config)
        False
        >>> config.merge(retry_policy=RetryPolicy(max_attempts=3)).retry_policy.max_attempts
        3

        ```
    """

    api_key: str = field(repr=False)
    base_url: str = DEFAULT_BASE_URL
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    read_timeout: float = DEFAULT_READ_TIMEOUT
    write_timeout: float = DEFAULT_WRITE_TIMEOUT
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy.no_retry)

    def __post_init__(self) -> None:
        """Validate configuration parameters after initialization.

        Raises:
            ConfigurationError: If any parameter fails validation.
        """
        validate_api_key(self.api_key)
        validate_base_url(self.base_url)
        validate_timeout(self.connect_timeout, name="connect_timeout")
        validate_timeout(self.read_timeout, name="read_timeout")
        validate_timeout(self.write_timeout, name="write_timeout")
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    def __repr__(self) -> str:
        return (
            f"ClientConfig(api_key='*****', base_url={self.base_url!r}, "
            f"connect_timeout={self.connect_timeout}, read_timeout={self.read_timeout}, "
            f"write_timeout={self.write_timeout}, retry_policy={self.retry_policy!r})"
        )

    def merge(self, **overrides: Any) -> ClientConfig:
        """Create a new config with specified parameters overridden.

        Only non-None override values are applied.

        Args:
            **overrides: Keyword arguments for parameters to override.

        Returns:
            A new ClientConfig instance with overrides applied.
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary format.

        The API key is not included.

        Returns:
            Dictionary with the configuration parameters.
        """
        return {
            "base_url": self.base_url,
            "connect_timeout": self.connect_timeout,
            "read_timeout": self.read_timeout,
            "write_timeout": self.write_timeout,
            "retry_policy": self.retry_policy.to_dict(),
        }
