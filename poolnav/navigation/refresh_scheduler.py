"""Debounced rebuild scheduling.

Change notifications arrive in bursts; the scheduler restarts a short timer
on each one and runs a single rebuild once the burst is over.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable
from typing import Protocol

from poolnav.constants.timeouts import REFRESH_DEBOUNCE_SECONDS

logger = logging.getLogger(__name__)


class Timer(Protocol):
    """Anything with a ``stop`` method, e.g. a Textual ``Timer``."""

    def stop(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], Timer]


class _LoopTimer:
    """One-shot asyncio timer exposing ``stop``."""

    def __init__(self, handle: asyncio.TimerHandle) -> None:
        self._handle = handle

    def stop(self) -> None:
        self._handle.cancel()


def loop_timer_factory(delay: float, callback: Callable[[], None]) -> Timer:
    """Default timer factory bound to the running asyncio loop."""
    loop = asyncio.get_running_loop()
    return _LoopTimer(loop.call_later(delay, callback))


class RefreshScheduler:
    """Coalesces change notifications into single rebuilds.

    Args:
        rebuild: Callable run once per quiet window.
        timer_factory: Creates one-shot timers; defaults to the asyncio loop.
        delay: Length of the quiet window in seconds.
        loop: Loop that owns the scheduler, used to marshal notifications
            from other threads. Taken from the running loop when omitted.
    """

    def __init__(
        self,
        rebuild: Callable[[], None],
        timer_factory: TimerFactory | None = None,
        delay: float = REFRESH_DEBOUNCE_SECONDS,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._rebuild = rebuild
        self._timer_factory = timer_factory or loop_timer_factory
        self._delay = delay
        self._loop = loop
        self._timer: Timer | None = None
        self._rebuilding = False
        self._deferred = False

    @property
    def is_pending(self) -> bool:
        """True while a quiet window is running or a deferred one is queued."""
        return self._timer is not None or self._deferred

    @property
    def is_rebuilding(self) -> bool:
        return self._rebuilding

    def notify_changed(self) -> None:
        """Restart the quiet window."""
        if self._rebuilding:
            self._deferred = True
            return
        self._stop_timer()
        if self._loop is None:
            # Custom timer factories may run without a loop.
            with contextlib.suppress(RuntimeError):
                self._loop = asyncio.get_running_loop()
        self._timer = self._timer_factory(self._delay, self._on_timer)

    def bind_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        """Set the loop that owns the scheduler ahead of any notification."""
        self._loop = loop

    def notify_changed_threadsafe(self) -> None:
        """``notify_changed`` for callers outside the owning loop's thread."""
        if self._loop is None:
            raise RuntimeError("RefreshScheduler has no event loop to marshal onto")
        self._loop.call_soon_threadsafe(self.notify_changed)

    def flush(self) -> None:
        """Run a pending rebuild now instead of waiting for the window."""
        if self._timer is None or self._rebuilding:
            return
        self._stop_timer()
        self._run()

    def cancel(self) -> None:
        """Drop any pending window without rebuilding."""
        self._stop_timer()
        self._deferred = False

    def _stop_timer(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer = None

    def _on_timer(self) -> None:
        self._timer = None
        self._run()

    def _run(self) -> None:
        self._rebuilding = True
        try:
            self._rebuild()
        except Exception:
            logger.exception("Tree rebuild failed")
            raise
        finally:
            self._rebuilding = False
            if self._deferred:
                self._deferred = False
                self.notify_changed()


__all__ = [
    "RefreshScheduler",
    "Timer",
    "TimerFactory",
    "loop_timer_factory",
]
