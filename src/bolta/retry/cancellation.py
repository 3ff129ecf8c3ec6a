r"""Cooperative cancellation of in-flight requests.

A ``CancellationToken`` is handed to an executor by the caller and can
be cancelled from any thread. Executors check it before every attempt
and waiters are woken up by it, so a cancelled request never starts
another attempt.
"""

from __future__ import annotations

__all__ = ["CancellationToken"]

import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


class CancellationToken:
    """Thread-safe, one-shot cancellation flag.

    Example:
        ```pycon
        >>> from bolta.retry import CancellationToken
        >>> token = CancellationToken()
        >>> token.cancelled
        False
        >>> token.cancel()
        >>> token.cancelled
        True

        ```
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: list[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:
        """Indicate if ``cancel`` was called."""
        return self._event.is_set()

    def cancel(self) -> None:
        """Cancel the token and run the registered callbacks.

        Calling it more than once has no additional effect.
        """
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def wait(self, timeout: float) -> bool:
        """Block until the token is cancelled or the timeout expires.

        Args:
            timeout: Maximum number of seconds to wait.

        Returns:
            ``True`` if the token was cancelled.
        """
        return self._event.wait(timeout)

    def add_callback(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Register a callback run once when the token is cancelled.

        The callback runs immediately if the token is already cancelled.

        Args:
            callback: Function called without arguments, possibly from
                another thread.

        Returns:
            A function unregistering the callback.
        """
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return lambda: self._remove_callback(callback)
        callback()
        return lambda: None

    def _remove_callback(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)
