"""Tick sources — periodic callbacks that drive the countdown engine.

The engine only ever talks to the :class:`TickSource` protocol, so the real
loop can be swapped for :class:`ManualTickSource` in tests or when embedding
the engine in another event loop.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Protocol

logger = logging.getLogger(__name__)

TickCallback = Callable[[], None]


class TickSource(Protocol):
    """A periodic event source with a synchronous stop."""

    @property
    def active(self) -> bool: ...

    def start(self, interval_ms: int, callback: TickCallback) -> None: ...

    def stop(self) -> None: ...


def _check_interval(interval_ms: int) -> None:
    if interval_ms <= 0:
        raise ValueError(f"interval_ms must be positive, got {interval_ms}")


class ManualTickSource:
    """A tick source that only fires when told to.

    Each firing is delivered only while the source is active, so a callback
    that stops the source (pause, cancel, completion) drops the rest.
    """

    def __init__(self) -> None:
        self._callback: TickCallback | None = None
        self.interval_ms: int = 0
        self.start_count: int = 0

    @property
    def active(self) -> bool:
        return self._callback is not None

    def start(self, interval_ms: int, callback: TickCallback) -> None:
        _check_interval(interval_ms)
        self.interval_ms = interval_ms
        self._callback = callback
        self.start_count += 1

    def stop(self) -> None:
        self._callback = None

    def fire(self, count: int = 1) -> int:
        """Deliver up to *count* firings and return how many were delivered."""
        delivered = 0
        for _ in range(count):
            if self._callback is None:
                break
            self._callback()
            delivered += 1
        return delivered


class LoopTickSource:
    """A blocking, single-threaded tick loop.

    :meth:`start` arms the source; :meth:`run` then sleeps until each deadline
    and fires once per wake-up until the source is stopped.  A late wake-up
    still delivers exactly one firing and the next deadline is rescheduled
    from the current time, so missed ticks are never replayed.
    """

    def __init__(
        self,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._sleep = sleep
        self._clock = clock
        self._callback: TickCallback | None = None
        self._interval: float = 0.0
        self._deadline: float = 0.0

    @property
    def active(self) -> bool:
        return self._callback is not None

    def start(self, interval_ms: int, callback: TickCallback) -> None:
        _check_interval(interval_ms)
        self._interval = interval_ms / 1000.0
        self._callback = callback
        self._deadline = self._clock() + self._interval

    def stop(self) -> None:
        self._callback = None

    def run(self) -> None:
        """Block, firing the callback each interval, until :meth:`stop` is called.

        ``KeyboardInterrupt`` raised while sleeping propagates to the caller
        with the source still armed.
        """
        while self._callback is not None:
            delay = self._deadline - self._clock()
            if delay > 0:
                self._sleep(delay)

            callback = self._callback
            if callback is None:
                logger.debug("Tick source stopped while sleeping; dropping firing")
                break

            now = self._clock()
            self._deadline += self._interval
            if self._deadline <= now:
                logger.debug("Tick fired late; rescheduling without catch-up")
                self._deadline = now + self._interval
            callback()
