r"""Random backoff strategy."""

from __future__ import annotations

__all__ = ["RandomBackoff"]

import random

from bolta.backoff.base import BaseBackoffStrategy, check_finite_number
from bolta.exceptions import ConfigurationError


class RandomBackoff(BaseBackoffStrategy):
    """Random backoff strategy.

    Draws a delay uniformly in ``[min_delay_ms, max_delay_ms]`` after
    every attempt. The attempt number does not influence the draw.

    Args:
        min_delay_ms: Lower bound of the delay in milliseconds.
        max_delay_ms: Upper bound of the delay in milliseconds.
        rng: Optional random source. Pass a seeded ``random.Random`` to
            get reproducible delays. Defaults to a private instance.

    Raises:
        ConfigurationError: If a bound is not a finite number,
            ``min_delay_ms`` is negative or ``max_delay_ms`` is smaller
            than ``min_delay_ms``.

    Example:
        ```pycon
        >>> import random
        >>> from bolta.backoff import RandomBackoff
        >>> backoff = RandomBackoff(min_delay_ms=100, max_delay_ms=200, rng=random.Random(0))
        >>> 100 <= backoff.calculate_delay(1) <= 200
        True
        >>> RandomBackoff(min_delay_ms=50, max_delay_ms=50).calculate_delay(3)
        50

        ```
    """

    name = "random"

    def __init__(
        self,
        min_delay_ms: float,
        max_delay_ms: float,
        rng: random.Random | None = None,
    ) -> None:
        check_finite_number(min_delay_ms, "min_delay_ms")
        check_finite_number(max_delay_ms, "max_delay_ms")
        if min_delay_ms < 0:
            msg = f"min_delay_ms must be non-negative, got {min_delay_ms}"
            raise ConfigurationError(msg)
        if max_delay_ms < min_delay_ms:
            msg = (
                f"max_delay_ms must be >= min_delay_ms, got max_delay_ms={max_delay_ms} "
                f"and min_delay_ms={min_delay_ms}"
            )
            raise ConfigurationError(msg)

        self.min_delay_ms = min_delay_ms
        self.max_delay_ms = max_delay_ms
        self.rng = rng if rng is not None else random.Random()  # noqa: S311

    def calculate_delay(self, attempt: int) -> float:  # noqa: ARG002
        """Draw a random backoff delay.

        Args:
            attempt: The number of the attempt that just failed (unused).

        Returns:
            A delay in milliseconds within the configured bounds.
        """
        if self.min_delay_ms == self.max_delay_ms:
            return self.min_delay_ms
        return self.rng.uniform(self.min_delay_ms, self.max_delay_ms)

    def _params(self) -> dict[str, float]:
        return {"min_delay_ms": self.min_delay_ms, "max_delay_ms": self.max_delay_ms}
