r"""Waiters suspending a request between two attempts.

The retry loop is written once against the waiter abstraction: the
blocking executor suspends the calling thread, the asynchronous executor
suspends its task on the event loop timer.
"""

from __future__ import annotations

__all__ = ["AsyncWaiter", "BlockingWaiter"]

import asyncio
import logging
import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bolta.retry.cancellation import CancellationToken

logger: logging.Logger = logging.getLogger(__name__)


class BlockingWaiter:
    """Suspend the calling thread.

    Without a token the waiter uses ``time.sleep``. With a token it waits
    on the token, so cancelling it from another thread ends the wait
    immediately.
    """

    def wait(self, delay_ms: float, token: CancellationToken | None = None) -> None:
        """Wait for ``delay_ms`` milliseconds or until the token is
        cancelled.

        Args:
            delay_ms: The delay in milliseconds.
            token: Optional cancellation token.
        """
        seconds = delay_ms / 1000
        if token is None:
            time.sleep(seconds)
            return
        if token.wait(seconds):
            logger.debug(f"Wait of {delay_ms:.0f}ms interrupted by cancellation")


class AsyncWaiter:
    """Suspend the current task without blocking the event loop.

    Cancelling the task interrupts the wait with ``asyncio.CancelledError``.
    Cancelling the token, from any thread, ends the wait early.
    """

    async def wait(self, delay_ms: float, token: CancellationToken | None = None) -> None:
        """Wait for ``delay_ms`` milliseconds or until the token is
        cancelled.

        Args:
            delay_ms: The delay in milliseconds.
            token: Optional cancellation token.
        """
        seconds = delay_ms / 1000
        if token is None:
            await asyncio.sleep(seconds)
            return

        loop = asyncio.get_running_loop()
        woken: asyncio.Future[None] = loop.create_future()

        def _wake() -> None:
            if not woken.done():
                woken.set_result(None)

        unregister = token.add_callback(lambda: loop.call_soon_threadsafe(_wake))
        try:
            await asyncio.wait({woken}, timeout=seconds)
        finally:
            unregister()
            woken.cancel()
        if token.cancelled:
            logger.debug(f"Wait of {delay_ms:.0f}ms interrupted by cancellation")
