"""
Trailing-edge debounce on an asyncio-compatible event loop.

Each call supersedes the pending one; only the arguments of the last
call in a burst are applied, once the delay elapses without another call.
"""

import asyncio
import logging
from typing import Any, Callable, Optional, Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """The part of asyncio.AbstractEventLoop the debouncer needs."""

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle: ...


class Debouncer:
    """Delays calls to func until `delay` seconds pass without a new call."""

    def __init__(
        self,
        func: Callable[..., Any],
        delay: float,
        loop: Optional[Scheduler] = None,
    ):
        self.func = func
        self.delay = delay
        self._loop = loop
        self._handle: Optional[TimerHandle] = None
        self._pending_args: tuple = ()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def __call__(self, *args: Any) -> None:
        self.cancel()
        self._pending_args = args

        loop = self._loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                # No event loop to defer on; apply right away.
                logger.debug("[Debouncer] No running loop, calling immediately")
                self._fire()
                return

        self._handle = loop.call_later(self.delay, self._fire)

    def cancel(self) -> None:
        """Drop the pending call, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._pending_args = ()

    def flush(self) -> bool:
        """
        Run the pending call now.

        Returns:
            True if a call was pending
        """
        if self._handle is None:
            return False
        self._handle.cancel()
        self._fire()
        return True

    def _fire(self) -> None:
        args = self._pending_args
        self._handle = None
        self._pending_args = ()
        self.func(*args)
