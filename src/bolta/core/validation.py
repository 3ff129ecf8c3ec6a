r"""Parameter validation utilities for the client configuration.

This module provides validation functions for the client parameters to
ensure they meet the required constraints before any request is sent.
"""

from __future__ import annotations

__all__ = ["validate_api_key", "validate_base_url", "validate_timeout"]

from bolta.exceptions import ConfigurationError


def validate_timeout(timeout: float, name: str = "timeout") -> None:
    """Validate a timeout parameter.

    Args:
        timeout: Maximum seconds to wait. Must be > 0.
        name: The parameter name used in the error message.

    Raises:
        ConfigurationError: If timeout is <= 0.

    Example:
        ```pycon
        >>> from bolta.core.validation import validate_timeout
        >>> validate_timeout(10.0)
        >>> validate_timeout(0, name="read_timeout")  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        bolta.exceptions.ConfigurationError: read_timeout must be > 0, got 0

        ```
    """
    if timeout <= 0:
        msg = f"{name} must be > 0, got {timeout}"
        raise ConfigurationError(msg)


def validate_api_key(api_key: str | None) -> None:
    """Validate the API key.

    Args:
        api_key: The secret API key.

    Raises:
        ConfigurationError: If the key is missing or blank.
    """
    if api_key is None or not api_key.strip():
        msg = "API key is required"
        raise ConfigurationError(msg)


def validate_base_url(base_url: str) -> None:
    """Validate the base URL of the API.

    Args:
        base_url: The base URL, for example ``https://xapi.bolta.io``.

    Raises:
        ConfigurationError: If the URL does not use http or https.
    """
    if not base_url.startswith(("http://", "https://")):
        msg = f"base_url must start with http:// or https://, got {base_url!r}"
        raise ConfigurationError(msg)
