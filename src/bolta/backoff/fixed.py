r"""Fixed backoff strategy."""

from __future__ import annotations

__all__ = ["FixedBackoff"]

from bolta.backoff.base import BaseBackoffStrategy, check_finite_number
from bolta.exceptions import ConfigurationError


class FixedBackoff(BaseBackoffStrategy):
    """Fixed backoff strategy.

    Returns the same delay after every attempt, regardless of the attempt
    number.

    Args:
        delay_ms: The fixed delay in milliseconds (default: 1000).

    Raises:
        ConfigurationError: If ``delay_ms`` is not a finite number or is
            negative.

    Example:
        ```pycon
        >>> from bolta.backoff import FixedBackoff
        >>> backoff = FixedBackoff(delay_ms=250)
        >>> backoff.calculate_delay(1)
        250
        >>> backoff.calculate_delay(10)
        250

        ```
    """

    name = "fixed"

    def __init__(self, delay_ms: float = 1000) -> None:
        check_finite_number(delay_ms, "delay_ms")
        if delay_ms < 0:
            msg = f"delay_ms must be non-negative, got {delay_ms}"
            raise ConfigurationError(msg)

        self.delay_ms = delay_ms

    def calculate_delay(self, attempt: int) -> float:  # noqa: ARG002
        """Calculate fixed backoff delay.

        Args:
            attempt: The number of the attempt that just failed (unused).

        Returns:
            The fixed delay value in milliseconds.
        """
        return self.delay_ms

    def _params(self) -> dict[str, float]:
        return {"delay_ms": self.delay_ms}
