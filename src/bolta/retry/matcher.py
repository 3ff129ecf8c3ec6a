r"""HTTP status code matchers deciding which API errors are retryable.

This module provides the matchers a retry policy consults when the API
answers with an error status: a single code, a set of codes, or an
inclusive range of codes.
"""

from __future__ import annotations

__all__ = [
    "RangeStatusCodeMatcher",
    "SetStatusCodeMatcher",
    "SingleStatusCodeMatcher",
    "StatusCodeMatcher",
    "parse_status_matcher",
]

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import Any

from bolta.exceptions import ConfigurationError

MIN_STATUS_CODE = 100
MAX_STATUS_CODE = 599


def _check_status_code(code: Any, name: str = "status code") -> int:
    if isinstance(code, bool) or not isinstance(code, int):
        msg = f"{name} must be an integer, got {code!r}"
        raise ConfigurationError(msg)
    if not MIN_STATUS_CODE <= code <= MAX_STATUS_CODE:
        msg = f"Invalid HTTP {name}: {code}"
        raise ConfigurationError(msg)
    return code


class StatusCodeMatcher(ABC):
    """Predicate over HTTP status codes.

    ``matches`` must accept any integer and simply return ``False`` for
    codes outside the configured ones.
    """

    @abstractmethod
    def matches(self, status_code: int) -> bool:
        """Indicate if the status code is eligible for a retry.

        Args:
            status_code: The HTTP status code of the response.

        Returns:
            ``True`` if the status code matches, otherwise ``False``.
        """


class SingleStatusCodeMatcher(StatusCodeMatcher):
    """Match exactly one status code.

    Args:
        status_code: The status code to match.

    Example:
        ```pycon
        >>> from bolta.retry import SingleStatusCodeMatcher
        >>> matcher = SingleStatusCodeMatcher(503)
        >>> matcher.matches(503), matcher.matches(500)
        (True, False)

        ```
    """

    def __init__(self, status_code: int) -> None:
        self.status_code = _check_status_code(status_code)

    def matches(self, status_code: int) -> bool:
        return status_code == self.status_code

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SingleStatusCodeMatcher):
            return NotImplemented
        return self.status_code == other.status_code

    def __hash__(self) -> int:
        return hash(self.status_code)

    def __repr__(self) -> str:
        return f"SingleStatusCodeMatcher({self.status_code})"


class SetStatusCodeMatcher(StatusCodeMatcher):
    """Match any status code of a non-empty set.

    Args:
        status_codes: The status codes to match.

    Example:
        ```pycon
        >>> from bolta.retry import SetStatusCodeMatcher
        >>> matcher = SetStatusCodeMatcher([429, 502, 503])
        >>> matcher.matches(429), matcher.matches(500)
        (True, False)

        ```
    """

    def __init__(self, status_codes: Iterable[int]) -> None:
        codes = frozenset(_check_status_code(code) for code in status_codes)
        if not codes:
            msg = "status_codes must not be empty"
            raise ConfigurationError(msg)
        self.status_codes = codes

    def matches(self, status_code: int) -> bool:
        return status_code in self.status_codes

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SetStatusCodeMatcher):
            return NotImplemented
        return self.status_codes == other.status_codes

    def __hash__(self) -> int:
        return hash(self.status_codes)

    def __repr__(self) -> str:
        return f"SetStatusCodeMatcher({sorted(self.status_codes)})"


class RangeStatusCodeMatcher(StatusCodeMatcher):
    """Match status codes within an inclusive range.

    Args:
        min_code: The lowest matching status code.
        max_code: The highest matching status code.

    Example:
        ```pycon
        >>> from bolta.retry import RangeStatusCodeMatcher
        >>> matcher = RangeStatusCodeMatcher(500, 599)
        >>> matcher.matches(503), matcher.matches(404)
        (True, False)

        ```
    """

    def __init__(self, min_code: int, max_code: int) -> None:
        _check_status_code(min_code, name="status code min")
        _check_status_code(max_code, name="status code max")
        if min_code > max_code:
            msg = f"min_code must be <= max_code, got min_code={min_code} and max_code={max_code}"
            raise ConfigurationError(msg)
        self.min_code = min_code
        self.max_code = max_code

    def matches(self, status_code: int) -> bool:
        return self.min_code <= status_code <= self.max_code

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RangeStatusCodeMatcher):
            return NotImplemented
        return (self.min_code, self.max_code) == (other.min_code, other.max_code)

    def __hash__(self) -> int:
        return hash((self.min_code, self.max_code))

    def __repr__(self) -> str:
        return f"RangeStatusCodeMatcher({self.min_code}, {self.max_code})"


def parse_status_matcher(value: Any) -> StatusCodeMatcher | None:
    """Build a status code matcher from a configuration value.

    Accepted values:
    - ``None``: no matcher
    - a ``StatusCodeMatcher``: returned unchanged
    - an ``int``: ``SingleStatusCodeMatcher``
    - a mapping with ``min`` and ``max`` keys, or a ``"min-max"`` string:
      ``RangeStatusCodeMatcher``
    - any other iterable of ints: ``SetStatusCodeMatcher``

    Args:
        value: The configuration value.

    Returns:
        The matcher, or ``None``.

    Raises:
        ConfigurationError: If the value cannot be turned into a matcher.

    Example:
        ```pycon
        >>> from bolta.retry import parse_status_matcher
        >>> parse_status_matcher(503)
        SingleStatusCodeMatcher(503)
        >>> parse_status_matcher("500-599")
        RangeStatusCodeMatcher(500, 599)
        >>> parse_status_matcher({"min": 500, "max": 504})
        RangeStatusCodeMatcher(500, 504)
        >>> parse_status_matcher([503, 429])
        SetStatusCodeMatcher([429, 503])

        ```
    """
    if value is None or isinstance(value, StatusCodeMatcher):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return SingleStatusCodeMatcher(value)
    if isinstance(value, Mapping):
        if set(value) != {"min", "max"}:
            msg = f"range status matcher expects 'min' and 'max' keys, got {sorted(value)}"
            raise ConfigurationError(msg)
        return RangeStatusCodeMatcher(value["min"], value["max"])
    if isinstance(value, str):
        low, sep, high = value.partition("-")
        if not sep or not low.strip().isdigit() or not high.strip().isdigit():
            msg = f"status code range must look like '500-599', got {value!r}"
            raise ConfigurationError(msg)
        return RangeStatusCodeMatcher(int(low), int(high))
    if isinstance(value, Iterable):
        return SetStatusCodeMatcher(value)
    msg = f"Cannot build a status code matcher from {value!r}"
    raise ConfigurationError(msg)
