"""Periodic snapshot refresh.

A single asyncio task sleeps for the configured interval and then awaits
the refresh callback, forever, until cancelled. Reconfiguring always
cancels the running task first, so one scheduler never has two timers.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from typing import Any

_logger = logging.getLogger(__name__)


class RefreshScheduler:
    """Cancelable periodic timer driving snapshot refreshes.

    Parameters
    ----------
    callback
        Coroutine function invoked on every tick.
    sleep
        Awaitable used to wait between ticks; injectable for tests.
    """

    def __init__(
        self,
        callback: Callable[[], Awaitable[Any]],
        *,
        interval: float = 30.0,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        logger: logging.Logger | None = None,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._callback = callback
        self._sleep = sleep
        self._logger = logger or _logger
        self._enabled = False
        self._interval = float(interval)
        self._task: asyncio.Task[None] | None = None

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def is_armed(self) -> bool:
        """Whether a timer task is currently pending."""
        return self._task is not None and not self._task.done()

    def configure(self, *, enabled: bool, interval: float | None = None) -> None:
        """Cancel the current timer and re-arm it if *enabled*.

        Must be called from inside the running event loop.
        """
        if interval is not None:
            if interval <= 0:
                raise ValueError(f"interval must be positive, got {interval}")
            self._interval = float(interval)
        self.cancel()
        self._enabled = enabled
        if enabled:
            self._task = asyncio.get_running_loop().create_task(self._run(), name="machine-status-refresh")
            self._logger.debug("Auto-refresh armed every %.0fs", self._interval)

    def cancel(self) -> None:
        """Cancel the pending timer (a tick in progress is cancelled too)."""
        task = self._task
        self._task = None
        if task is not None and not task.done():
            task.cancel()
            self._logger.debug("Auto-refresh timer cancelled")

    async def aclose(self) -> None:
        """Disable and wait for the timer task to finish cancelling."""
        self._enabled = False
        task = self._task
        self.cancel()
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def _run(self) -> None:
        while True:
            await self._sleep(self._interval)
            try:
                await self._callback()
            except asyncio.CancelledError:
                raise
            except Exception:
                self._logger.warning("Scheduled refresh failed", exc_info=True)
