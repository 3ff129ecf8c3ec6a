r"""Retry policy deciding whether, and after how long, to retry.

This module provides the immutable ``RetryPolicy`` shared by every
request of a client, and its dictionary-based configuration surface.
"""

from __future__ import annotations

__all__ = ["DEFAULT_JITTER_FACTOR", "DEFAULT_MAX_ATTEMPTS", "RetryPolicy"]

import logging
import random
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from bolta.backoff import (
    BaseBackoffStrategy,
    ExponentialBackoff,
    FixedBackoff,
    RandomBackoff,
)
from bolta.backoff.base import check_finite_number
from bolta.exceptions import ConfigurationError
from bolta.retry.matcher import (
    RangeStatusCodeMatcher,
    SetStatusCodeMatcher,
    SingleStatusCodeMatcher,
    StatusCodeMatcher,
    parse_status_matcher,
)

logger: logging.Logger = logging.getLogger(__name__)

# Total attempts = initial attempt + retries
DEFAULT_MAX_ATTEMPTS = 3

# Default delay between attempts when no strategy is configured
DEFAULT_BACKOFF_DELAY_MS = 1000

# Jitter factor used when jitter is enabled without an explicit factor
# A factor of 0.1 perturbs each delay by up to +/-10%
DEFAULT_JITTER_FACTOR = 0.1

_BACKOFF_TYPES: dict[str, type[BaseBackoffStrategy]] = {
    FixedBackoff.name: FixedBackoff,
    RandomBackoff.name: RandomBackoff,
    ExponentialBackoff.name: ExponentialBackoff,
}

_OPTION_KEYS = frozenset(
    {"max_attempts", "backoff", "jitter", "retryable_status_codes", "retry_on_network_error"}
)


@dataclass(frozen=True)
class RetryPolicy:
    """Immutable configuration governing the attempts of a request.

    A policy is built once, when the client is configured, and shared by
    reference across all requests. Both decision methods are pure apart
    from the random draw used for jitter.

    Args:
        max_attempts: Total number of attempts, including the first one.
            Must be >= 1.
        backoff: Strategy computing the delay after a failed attempt.
            Required if ``max_attempts > 1``.
        jitter_enabled: Whether to randomly perturb each delay.
        jitter_factor: Relative amplitude of the jitter, in ``[0, 1]``.
            Only used when ``jitter_enabled`` is ``True``.
        status_matcher: Optional matcher selecting the API error status
            codes that are retried.
        retry_on_network_error: Whether transport failures are retried.
        rng: Optional random source used for jitter. Defaults to the
            ``random`` module.

    Raises:
        ConfigurationError: If a parameter is invalid.

    Example:
        ```pycon
        >>> from bolta.backoff import ExponentialBackoff
        >>> from bolta.retry import RangeStatusCodeMatcher, RetryPolicy
        >>> policy = RetryPolicy(
        ...     max_attempts=3,
        ...     backoff=ExponentialBackoff(base_delay_ms=100, multiplier=2.0, max_delay_ms=1000),
        ...     status_matcher=RangeStatusCodeMatcher(500, 599),
        ... )
        >>> policy.should_retry(1, 503, is_network_error=False)
        True
        >>> policy.should_retry(1, 404, is_network_error=False)
        False
        >>> policy.should_retry(3, 503, is_network_error=False)
        False
        >>> policy.delay_for_attempt(2)
        200.0

        ```
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    backoff: BaseBackoffStrategy | None = field(
        default_factory=lambda: FixedBackoff(DEFAULT_BACKOFF_DELAY_MS)
    )
    jitter_enabled: bool = False
    jitter_factor: float = DEFAULT_JITTER_FACTOR
    status_matcher: StatusCodeMatcher | None = None
    retry_on_network_error: bool = True
    rng: random.Random | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        """Validate the policy parameters.

        Raises:
            ConfigurationError: If any parameter fails validation.
        """
        if isinstance(self.max_attempts, bool) or not isinstance(self.max_attempts, int):
            msg = f"max_attempts must be an integer, got {self.max_attempts!r}"
            raise ConfigurationError(msg)
        if self.max_attempts < 1:
            msg = f"max_attempts must be >= 1, got {self.max_attempts}"
            raise ConfigurationError(msg)
        if self.max_attempts > 1 and self.backoff is None:
            msg = "backoff is required when max_attempts > 1"
            raise ConfigurationError(msg)
        check_finite_number(self.jitter_factor, "jitter_factor")
        if not 0.0 <= self.jitter_factor <= 1.0:
            msg = f"jitter_factor must be between 0.0 and 1.0, got {self.jitter_factor}"
            raise ConfigurationError(msg)
        _check_bool(self.jitter_enabled, "jitter_enabled")
        _check_bool(self.retry_on_network_error, "retry_on_network_error")

    @classmethod
    def no_retry(cls) -> RetryPolicy:
        """Create a policy that performs a single attempt.

        Returns:
            A policy with ``max_attempts=1``.

        Example:
            ```pycon
            >>> from bolta.retry import RetryPolicy
            >>> RetryPolicy.no_retry().should_retry(1, None, is_network_error=True)
            False

            ```
        """
        return cls(max_attempts=1, backoff=None, retry_on_network_error=False)

    def should_retry(
        self,
        attempt: int,
        status_code: int | None,
        is_network_error: bool,
    ) -> bool:
        """Decide whether a failed attempt should be followed by another
        one.

        The checks are performed in this order:
        1. no attempt left (``attempt >= max_attempts``): ``False``
        2. network error and ``retry_on_network_error``: ``True``
        3. status code present and matched by the status matcher: ``True``
        4. otherwise: ``False``

        Args:
            attempt: The number of the attempt that just failed (1-indexed).
            status_code: The status code of the API error, or ``None``
                for a network error.
            is_network_error: Whether the attempt failed at the transport
                level.

        Returns:
            ``True`` if another attempt should be made.
        """
        if attempt >= self.max_attempts:
            return False
        if is_network_error and self.retry_on_network_error:
            return True
        if status_code is not None and self.status_matcher is not None:
            return self.status_matcher.matches(status_code)
        return False

    def delay_for_attempt(self, attempt: int) -> float:
        """Compute the delay preceding the attempt after ``attempt``.

        The backoff delay is scaled by ``1 + U(-jitter_factor, +jitter_factor)``
        when jitter is enabled, so the result can be lower or higher than
        the backoff delay. It is clamped at zero.

        Args:
            attempt: The number of the attempt that just failed (1-indexed).

        Returns:
            The delay in milliseconds.
        """
        delay = self.backoff.calculate_delay(attempt) if self.backoff is not None else 0.0
        if not self.jitter_enabled or self.jitter_factor == 0:
            return delay

        rng = self.rng if self.rng is not None else random
        jitter = rng.uniform(-self.jitter_factor, self.jitter_factor)
        jittered = max(delay * (1 + jitter), 0.0)
        logger.debug(f"Jittered delay {jittered:.1f}ms (base={delay:.1f}ms, jitter={jitter:+.3f})")
        return jittered

    @classmethod
    def from_dict(cls, options: Mapping[str, Any]) -> RetryPolicy:
        """Build a policy from a configuration dictionary.

        Args:
            options: Mapping with the optional keys ``max_attempts``,
                ``backoff``, ``jitter``, ``retryable_status_codes`` and
                ``retry_on_network_error``. ``backoff`` is a strategy, ``None``
                or a mapping with a ``type`` key (``fixed``, ``random`` or
                ``exponential``) and the strategy parameters. ``jitter`` is
                ``None``/``False`` (disabled), ``True``, a factor, or a
                mapping with ``enabled`` and ``factor`` keys.
                ``retryable_status_codes`` accepts any value understood by
                ``parse_status_matcher``.

        Returns:
            The retry policy.

        Raises:
            ConfigurationError: If an option is unknown or invalid.

        Example:
            ```pycon
            >>> from bolta.retry import RetryPolicy
            >>> policy = RetryPolicy.from_dict(
            ...     {
            ...         "max_attempts": 4,
            ...         "backoff": {"type": "fixed", "delay_ms": 200},
            ...         "jitter": {"enabled": True, "factor": 0.2},
            ...         "retryable_status_codes": "500-599",
            ...         "retry_on_network_error": False,
            ...     }
            ... )
            >>> policy.max_attempts, policy.jitter_factor
            (4, 0.2)
            >>> policy.status_matcher
            RangeStatusCodeMatcher(500, 599)

            ```
        """
        unknown = set(options) - _OPTION_KEYS
        if unknown:
            msg = f"Unknown retry options: {sorted(unknown)}"
            raise ConfigurationError(msg)

        kwargs: dict[str, Any] = {}
        if "max_attempts" in options:
            kwargs["max_attempts"] = options["max_attempts"]
        if "backoff" in options:
            kwargs["backoff"] = _parse_backoff(options["backoff"])
        if "jitter" in options:
            kwargs["jitter_enabled"], kwargs["jitter_factor"] = _parse_jitter(options["jitter"])
        if "retryable_status_codes" in options:
            kwargs["status_matcher"] = parse_status_matcher(options["retryable_status_codes"])
        if "retry_on_network_error" in options:
            kwargs["retry_on_network_error"] = options["retry_on_network_error"]
        return cls(**kwargs)

    def merge(self, **overrides: Any) -> RetryPolicy:
        """Create a new policy with specified fields overridden.

        Only non-None override values are applied, and the new policy is
        validated again.

        Args:
            **overrides: Fields to override.

        Returns:
            A new policy with overrides applied.

        Example:
            ```pycon
            >>> from bolta.retry import RetryPolicy
            >>> policy = RetryPolicy(max_attempts=3)
            >>> policy.merge(max_attempts=5).max_attempts
            5
            >>> policy.max_attempts  # Original unchanged
            3

            ```
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)

    def to_dict(self) -> dict[str, Any]:
        """Convert the policy to its configuration dictionary.

        The result can be passed back to ``from_dict``. The random source
        is not part of the configuration.

        Returns:
            Dictionary with the retry options.
        """
        return {
            "max_attempts": self.max_attempts,
            "backoff": self.backoff.to_dict() if self.backoff is not None else None,
            "jitter": {"enabled": self.jitter_enabled, "factor": self.jitter_factor},
            "retryable_status_codes": _matcher_to_config(self.status_matcher),
            "retry_on_network_error": self.retry_on_network_error,
        }


def _parse_backoff(value: Any) -> BaseBackoffStrategy | None:
    if value is None or isinstance(value, BaseBackoffStrategy):
        return value
    if not isinstance(value, Mapping):
        msg = f"backoff must be a mapping with a 'type' key, got {value!r}"
        raise ConfigurationError(msg)
    params = dict(value)
    backoff_type = params.pop("type", None)
    if backoff_type not in _BACKOFF_TYPES:
        msg = f"Unknown backoff type {backoff_type!r}, expected one of {sorted(_BACKOFF_TYPES)}"
        raise ConfigurationError(msg)
    try:
        return _BACKOFF_TYPES[backoff_type](**params)
    except TypeError as exc:
        msg = f"Invalid parameters for {backoff_type} backoff: {exc}"
        raise ConfigurationError(msg) from exc


def _parse_jitter(value: Any) -> tuple[bool, float]:
    if value is None or value is False:
        return (False, DEFAULT_JITTER_FACTOR)
    if value is True:
        return (True, DEFAULT_JITTER_FACTOR)
    if isinstance(value, (int, float)):
        return (True, _to_factor(value))
    if isinstance(value, Mapping):
        unknown = set(value) - {"enabled", "factor"}
        if unknown:
            msg = f"Unknown jitter options: {sorted(unknown)}"
            raise ConfigurationError(msg)
        return (value.get("enabled", True), _to_factor(value.get("factor", DEFAULT_JITTER_FACTOR)))
    msg = f"jitter must be a bool, a factor or a mapping, got {value!r}"
    raise ConfigurationError(msg)


def _to_factor(value: Any) -> float:
    msg = f"jitter factor must be a number, got {value!r}"
    if isinstance(value, bool):
        raise ConfigurationError(msg)
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(msg) from exc


def _check_bool(value: Any, name: str) -> None:
    if not isinstance(value, bool):
        msg = f"{name} must be a bool, got {value!r}"
        raise ConfigurationError(msg)


def _matcher_to_config(matcher: StatusCodeMatcher | None) -> Any:
    if isinstance(matcher, SingleStatusCodeMatcher):
        return matcher.status_code
    if isinstance(matcher, SetStatusCodeMatcher):
        return sorted(matcher.status_codes)
    if isinstance(matcher, RangeStatusCodeMatcher):
        return {"min": matcher.min_code, "max": matcher.max_code}
    return matcher
