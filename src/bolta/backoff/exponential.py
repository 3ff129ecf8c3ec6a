r"""Exponential backoff strategy."""

from __future__ import annotations

__all__ = ["ExponentialBackoff"]

from bolta.backoff.base import BaseBackoffStrategy, check_finite_number
from bolta.exceptions import ConfigurationError


class ExponentialBackoff(BaseBackoffStrategy):
    """Exponential backoff strategy.

    Calculates delay as:
    ``min(base_delay_ms * multiplier ** (attempt - 1), max_delay_ms)``.
    The first attempt always yields ``base_delay_ms``.

    Args:
        base_delay_ms: The delay after the first attempt, in milliseconds.
        multiplier: Growth factor applied for every following attempt.
        max_delay_ms: Upper bound of the delay, in milliseconds.

    Raises:
        ConfigurationError: If a parameter is not a finite number,
            ``base_delay_ms`` is negative, ``multiplier`` is not positive
            or ``max_delay_ms`` is below ``base_delay_ms``.

    Example:
        ```pycon
        >>> from bolta.backoff import ExponentialBackoff
        >>> backoff = ExponentialBackoff(base_delay_ms=100, multiplier=2.0, max_delay_ms=500)
        >>> backoff.calculate_delay(1)
        100
        >>> backoff.calculate_delay(2)
        200.0
        >>> backoff.calculate_delay(3)
        400.0
        >>> backoff.calculate_delay(4)  # Would be 800.0, but capped
        500

        ```
    """

    name = "exponential"

    def __init__(
        self,
        base_delay_ms: float = 500,
        multiplier: float = 2.0,
        max_delay_ms: float = 30_000,
    ) -> None:
        check_finite_number(base_delay_ms, "base_delay_ms")
        check_finite_number(multiplier, "multiplier")
        check_finite_number(max_delay_ms, "max_delay_ms")
        if base_delay_ms < 0:
            msg = f"base_delay_ms must be non-negative, got {base_delay_ms}"
            raise ConfigurationError(msg)
        if multiplier <= 0:
            msg = f"multiplier must be positive, got {multiplier}"
            raise ConfigurationError(msg)
        if max_delay_ms < base_delay_ms:
            msg = (
                f"max_delay_ms must be >= base_delay_ms, got max_delay_ms={max_delay_ms} "
                f"and base_delay_ms={base_delay_ms}"
            )
            raise ConfigurationError(msg)

        self.base_delay_ms = base_delay_ms
        self.multiplier = multiplier
        self.max_delay_ms = max_delay_ms

    def calculate_delay(self, attempt: int) -> float:
        """Calculate exponential backoff delay.

        Args:
            attempt: The number of the attempt that just failed (1-indexed).

        Returns:
            The delay in milliseconds, capped at ``max_delay_ms``.
        """
        if attempt <= 1:
            return self.base_delay_ms
        try:
            delay = self.base_delay_ms * self.multiplier ** (attempt - 1)
        except OverflowError:
            return self.max_delay_ms
        return min(delay, self.max_delay_ms)

    def _params(self) -> dict[str, float]:
        return {
            "base_delay_ms": self.base_delay_ms,
            "multiplier": self.multiplier,
            "max_delay_ms": self.max_delay_ms,
        }
