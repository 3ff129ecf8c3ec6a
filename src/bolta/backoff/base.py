r"""Abstract base class for backoff strategies."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy", "check_finite_number"]

import math
from abc import ABC, abstractmethod
from numbers import Real
from typing import Any, ClassVar

from bolta.exceptions import ConfigurationError


def check_finite_number(value: Any, name: str) -> None:
    """Check that a strategy parameter is a finite real number.

    Args:
        value: The parameter value.
        name: The parameter name used in the error message.

    Raises:
        ConfigurationError: If the value is a bool, is not a real number,
            or is NaN or infinite.

    Example:
        ```pycon
        >>> from bolta.backoff.base import check_finite_number
        >>> check_finite_number(100, "delay_ms")
        >>> check_finite_number(float("nan"), "delay_ms")  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        bolta.exceptions.ConfigurationError: delay_ms must be a finite number, got nan

        ```
    """
    if isinstance(value, bool) or not isinstance(value, Real) or not math.isfinite(value):
        msg = f"{name} must be a finite number, got {value!r}"
        raise ConfigurationError(msg)


class BaseBackoffStrategy(ABC):
    """Abstract base class for backoff strategies.

    A backoff strategy determines how long to wait before the next
    attempt, based only on the number of the attempt that just failed.
    Implementations validate their parameters in the constructor and
    must not block or have side effects in ``calculate_delay``.

    Attributes:
        name: Short identifier of the strategy used in configuration
            dictionaries (``{"type": name, ...}``).
    """

    name: ClassVar[str]

    @abstractmethod
    def calculate_delay(self, attempt: int) -> float:
        """Calculate the backoff delay following a given attempt.

        Args:
            attempt: The number of the attempt that just failed (1-indexed).
                For example, attempt=1 is the initial request.

        Returns:
            The delay in milliseconds before the next attempt.
        """

    def to_dict(self) -> dict[str, Any]:
        """Return the configuration dictionary describing the strategy.

        Returns:
            A dictionary with a ``type`` key and the strategy parameters.
        """
        return {"type": self.name, **self._params()}

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._params() == other._params()

    def __hash__(self) -> int:
        return hash((type(self).__name__, *self._params().items()))

    def __repr__(self) -> str:
        params = ", ".join(f"{key}={value!r}" for key, value in self._params().items())
        return f"{type(self).__name__}({params})"

    @abstractmethod
    def _params(self) -> dict[str, float]:
        """Return the parameters that define the strategy."""
