r"""Synchronous retry executor for HTTP requests.

This module provides the RequestExecutor class that executes requests
on the caller's thread with automatic retry logic.
"""

from __future__ import annotations

__all__ = ["RequestExecutor"]

import logging
from typing import TYPE_CHECKING, Any

from bolta.http.classifier import classify_exception, classify_response
from bolta.http.codec import JsonCodec
from bolta.retry.executor_core import (
    NETWORK_EXCEPTIONS,
    AttemptState,
    Fail,
    Finish,
    check_cancelled,
    next_step,
)
from bolta.retry.waiter import BlockingWaiter

if TYPE_CHECKING:
    from bolta.http.outcome import Outcome
    from bolta.http.request import HttpRequest
    from bolta.http.transport import BaseTransport
    from bolta.retry.cancellation import CancellationToken
    from bolta.retry.policy import RetryPolicy

logger: logging.Logger = logging.getLogger(__name__)


class RequestExecutor:
    """Executes requests with automatic retry logic, blocking the
    caller.

    The executor is stateless between calls: each call to ``execute``
    owns its attempt state, so one executor can serve concurrent
    requests from several threads if its transport allows it.

    Args:
        policy: The retry policy.
        transport: The blocking transport.
        codec: Codec decoding response bodies. Defaults to ``JsonCodec``.
        waiter: Waiter suspending the thread between attempts. Defaults to
            ``BlockingWaiter``.

    Example:
        ```pycon
        >>> from bolta.http import HttpMethod, HttpRequest, HttpxTransport
        >>> from bolta.retry import RequestExecutor, RetryPolicy
        >>> executor = RequestExecutor(RetryPolicy(max_attempts=3), HttpxTransport())
        >>> customer = executor.execute(
        ...     HttpRequest(HttpMethod.GET, "https://xapi.bolta.io/v1/customers/1"), dict
        ... )  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        policy: RetryPolicy,
        transport: BaseTransport,
        codec: JsonCodec | None = None,
        waiter: BlockingWaiter | None = None,
    ) -> None:
        self.policy = policy
        self.transport = transport
        self.codec = codec or JsonCodec()
        self.waiter = waiter or BlockingWaiter()

    def execute(
        self,
        request: HttpRequest,
        response_type: Any = None,
        token: CancellationToken | None = None,
    ) -> Any:
        """Execute the request with automatic retry logic.

        The loop handles:
        - Successful responses (2xx): returns the decoded body, or
          ``None`` when ``response_type`` is ``None``
        - API errors (non-2xx): retried when the policy status matcher
          matches, otherwise raised as ``ApiError``
        - Network errors: retried when the policy allows it, otherwise
          raised as ``NetworkError``
        - Empty or undecodable bodies: raised immediately, never retried

        Args:
            request: The request to send.
            response_type: The type the body is decoded into, or ``None``
                when no payload is expected.
            token: Optional cancellation token, checked before every
                attempt and waking up the wait between attempts.

        Returns:
            The decoded response body.

        Raises:
            ApiError: If the last attempt returned a non-2xx status.
            NetworkError: If the last attempt failed at the transport
                level, or a payload was expected but the body was empty.
            DecodeError: If the body could not be decoded.
            RequestCancelledError: If the token was cancelled.
        """
        state = AttemptState()
        while True:
            check_cancelled(token, state.attempt - 1, request)
            outcome = self._attempt(request, response_type, state)
            step = next_step(self.policy, state, outcome, request)
            if isinstance(step, Finish):
                return step.value
            if isinstance(step, Fail):
                raise step.error from step.cause

            self.waiter.wait(step.delay_ms, token)
            check_cancelled(token, state.attempt, request)
            state.advance()

    def _attempt(self, request: HttpRequest, response_type: Any, state: AttemptState) -> Outcome:
        logger.debug(
            f"Executing {request.method} request to {request.url} "
            f"(attempt {state.attempt}/{self.policy.max_attempts})"
        )
        try:
            response = self.transport.send(request)
        except NETWORK_EXCEPTIONS as exc:
            return classify_exception(exc)
        return classify_response(response, response_type, self.codec)
