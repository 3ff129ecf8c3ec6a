r"""Asynchronous retry executor for HTTP requests.

This module provides the AsyncRequestExecutor class that executes
requests as asyncio tasks with automatic retry logic. The waits between
attempts are event loop timers, so no thread is blocked.
"""

from __future__ import annotations

__all__ = ["AsyncRequestExecutor"]

import asyncio
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
from bolta.retry.waiter import AsyncWaiter

if TYPE_CHECKING:
    from bolta.http.outcome import Outcome
    from bolta.http.request import HttpRequest
    from bolta.http.transport import AsyncBaseTransport
    from bolta.retry.cancellation import CancellationToken
    from bolta.retry.policy import RetryPolicy

logger: logging.Logger = logging.getLogger(__name__)


class AsyncRequestExecutor:
    """Executes async requests with automatic retry logic.

    The retry decisions are the same as ``RequestExecutor``'s: both
    executors delegate them to ``next_step``.

    Args:
        policy: The retry policy.
        transport: The non-blocking transport.
        codec: Codec decoding response bodies. Defaults to ``JsonCodec``.
        waiter: Waiter scheduling the next attempt. Defaults to
            ``AsyncWaiter``.

    Example:
        ```pycon
        >>> import asyncio
        >>> from bolta.http import AsyncHttpxTransport, HttpMethod, HttpRequest
        >>> from bolta.retry import AsyncRequestExecutor, RetryPolicy
        >>>
        >>> async def main():
        ...     async with AsyncHttpxTransport() as transport:
        ...         executor = AsyncRequestExecutor(RetryPolicy(max_attempts=3), transport)
        ...         handle = executor.submit(
        ...             HttpRequest(HttpMethod.GET, "https://xapi.bolta.io/v1/customers/1"), dict
        ...         )
        ...         return await handle
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        policy: RetryPolicy,
        transport: AsyncBaseTransport,
        codec: JsonCodec | None = None,
        waiter: AsyncWaiter | None = None,
    ) -> None:
        self.policy = policy
        self.transport = transport
        self.codec = codec or JsonCodec()
        self.waiter = waiter or AsyncWaiter()

    async def execute(
        self,
        request: HttpRequest,
        response_type: Any = None,
        token: CancellationToken | None = None,
    ) -> Any:
        """Execute the async request with automatic retry logic.

        Cancelling the task running this coroutine interrupts the current
        attempt or wait with ``asyncio.CancelledError`` and no further
        attempt is made.

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
            outcome = await self._attempt(request, response_type, state)
            step = next_step(self.policy, state, outcome, request)
            if isinstance(step, Finish):
                return step.value
            if isinstance(step, Fail):
                raise step.error from step.cause

            await self.waiter.wait(step.delay_ms, token)
            check_cancelled(token, state.attempt, request)
            state.advance()

    def submit(
        self,
        request: HttpRequest,
        response_type: Any = None,
        token: CancellationToken | None = None,
    ) -> asyncio.Task[Any]:
        """Schedule the request and return its result handle.

        The task is created before the first attempt starts. It completes
        exactly once, with the decoded body or with the terminal error.
        Must be called from a running event loop.

        Args:
            request: The request to send.
            response_type: The type the body is decoded into, or ``None``
                when no payload is expected.
            token: Optional cancellation token.

        Returns:
            The task running the request. Cancel it to stop the request.
        """
        loop = asyncio.get_running_loop()
        return loop.create_task(self.execute(request, response_type, token))

    async def _attempt(
        self, request: HttpRequest, response_type: Any, state: AttemptState
    ) -> Outcome:
        logger.debug(
            f"Executing {request.method} request to {request.url} "
            f"(attempt {state.attempt}/{self.policy.max_attempts})"
        )
        try:
            response = await self.transport.send(request)
        except NETWORK_EXCEPTIONS as exc:
            return classify_exception(exc)
        return classify_response(response, response_type, self.codec)
