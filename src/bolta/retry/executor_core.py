r"""Shared core logic for retry executors.

This module holds the attempt state machine used by both the blocking
and the asynchronous executors. Given the classified outcome of an
attempt, ``next_step`` decides whether the request succeeded, must be
retried after a delay, or failed with a terminal error. Because both
executors delegate every decision here, they make identical decisions
for identical outcomes.
"""

from __future__ import annotations

__all__ = [
    "NETWORK_EXCEPTIONS",
    "AttemptState",
    "Fail",
    "Finish",
    "Retry",
    "Step",
    "check_cancelled",
    "next_step",
]

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

from bolta.exceptions import (
    ApiError,
    BoltaError,
    EmptyResponseError,
    NetworkError,
    RequestCancelledError,
    TransportError,
)
from bolta.http.outcome import (
    ApiFailure,
    DecodeFailure,
    EmptyBody,
    NetworkFailure,
    Outcome,
    Success,
)

if TYPE_CHECKING:
    from bolta.http.request import HttpRequest
    from bolta.retry.cancellation import CancellationToken
    from bolta.retry.policy import RetryPolicy

logger: logging.Logger = logging.getLogger(__name__)

# Exceptions raised by a transport that are classified as network errors.
# asyncio.TimeoutError is only an OSError subclass from Python 3.11
NETWORK_EXCEPTIONS: tuple[type[BaseException], ...] = (
    TransportError,
    OSError,
    asyncio.TimeoutError,
)


@dataclass
class AttemptState:
    """Mutable state of one logical request.

    It is created when the request starts, owned by a single executor
    call, and discarded when the call terminates.

    Attributes:
        attempt: The number of the current attempt (1-indexed).
        last_failure: The outcome of the last failed attempt, if any.
    """

    attempt: int = 1
    last_failure: Outcome | None = None

    def advance(self) -> None:
        """Move to the next attempt."""
        self.attempt += 1


@dataclass(frozen=True)
class Finish:
    """The request succeeded with ``value``."""

    value: Any


@dataclass(frozen=True)
class Retry:
    """Wait ``delay_ms`` milliseconds, then make another attempt."""

    delay_ms: float


@dataclass(frozen=True)
class Fail:
    """The request failed with a terminal ``error``.

    ``cause`` is chained to the error when it is raised.
    """

    error: BoltaError
    cause: BaseException | None = None


Step = Union[Finish, Retry, Fail]


def next_step(
    policy: RetryPolicy,
    state: AttemptState,
    outcome: Outcome,
    request: HttpRequest,
) -> Step:
    """Decide what follows the outcome of the current attempt.

    Args:
        policy: The retry policy of the request.
        state: The state of the request. ``last_failure`` is updated for
            failed attempts.
        outcome: The classified outcome of the current attempt.
        request: The request, used in log and error messages.

    Returns:
        ``Finish`` for a success, ``Retry`` when the policy allows another
        attempt, otherwise ``Fail`` with the terminal error.

    Example:
        ```pycon
        >>> from bolta.backoff import FixedBackoff
        >>> from bolta.http import HttpMethod, HttpRequest, HttpResponse
        >>> from bolta.http.outcome import ApiFailure
        >>> from bolta.retry import RangeStatusCodeMatcher, RetryPolicy
        >>> from bolta.retry.executor_core import AttemptState, next_step
        >>> policy = RetryPolicy(
        ...     max_attempts=2,
        ...     backoff=FixedBackoff(100),
        ...     status_matcher=RangeStatusCodeMatcher(500, 599),
        ... )
        >>> request = HttpRequest(HttpMethod.GET, "https://xapi.bolta.io/customers")
        >>> state = AttemptState()
        >>> next_step(policy, state, ApiFailure(HttpResponse(503)), request)
        Retry(delay_ms=100)
        >>> state.advance()
        >>> type(next_step(policy, state, ApiFailure(HttpResponse(503)), request).error)
        <class 'bolta.exceptions.ApiError'>

        ```
    """
    attempt = state.attempt
    max_attempts = policy.max_attempts
    method, url = request.method, request.url

    if isinstance(outcome, Success):
        if attempt > 1:
            logger.debug(f"{method} request to {url} succeeded on attempt {attempt}/{max_attempts}")
        return Finish(outcome.value)

    if isinstance(outcome, DecodeFailure):
        logger.error(f"{method} request to {url} returned an undecodable body: {outcome.error}")
        return Fail(outcome.error, cause=outcome.error.__cause__)

    if isinstance(outcome, EmptyBody):
        error = EmptyResponseError(
            f"{method} request to {url} returned an empty response "
            f"(status {outcome.response.status_code})",
            attempts=attempt,
        )
        return Fail(error)

    state.last_failure = outcome

    if isinstance(outcome, ApiFailure):
        if policy.should_retry(attempt, outcome.status_code, is_network_error=False):
            delay_ms = policy.delay_for_attempt(attempt)
            logger.warning(
                f"{method} request to {url} failed with status {outcome.status_code} on attempt "
                f"{attempt}/{max_attempts}, retrying in {delay_ms:.0f}ms"
            )
            return Retry(delay_ms)
        logger.debug(
            f"{method} request to {url} failed with status {outcome.status_code} "
            f"on attempt {attempt}/{max_attempts}"
        )
        error = ApiError(
            status_code=outcome.status_code,
            body=outcome.body,
            method=str(method),
            url=url,
            headers=outcome.response.headers,
        )
        return Fail(error)

    if isinstance(outcome, NetworkFailure):
        cause = outcome.cause
        if policy.should_retry(attempt, None, is_network_error=True):
            delay_ms = policy.delay_for_attempt(attempt)
            logger.warning(
                f"Network error on attempt {attempt}/{max_attempts} for {method} request to {url}: "
                f"{cause}, retrying in {delay_ms:.0f}ms"
            )
            return Retry(delay_ms)
        logger.error(
            f"Network error occurred while executing {method} request to {url} "
            f"(attempt {attempt}/{max_attempts}): {cause}"
        )
        error = NetworkError(
            f"{method} request to {url} failed after {attempt} attempt(s): {cause}",
            attempts=attempt,
            cause=cause,
        )
        return Fail(error, cause=cause)

    msg = f"Unknown outcome: {outcome!r}"
    raise TypeError(msg)


def check_cancelled(
    token: CancellationToken | None,
    attempts: int,
    request: HttpRequest,
) -> None:
    """Raise if the request was cancelled by the caller.

    Args:
        token: Optional cancellation token of the request.
        attempts: Number of attempts made so far.
        request: The request, used in the error message.

    Raises:
        RequestCancelledError: If the token is cancelled.
    """
    if token is not None and token.cancelled:
        logger.debug(f"{request.method} request to {request.url} cancelled after {attempts} attempt(s)")
        msg = f"{request.method} request to {request.url} was cancelled after {attempts} attempt(s)"
        raise RequestCancelledError(msg, attempts=attempts)
