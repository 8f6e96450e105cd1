"""Countdown engine — a tick-driven state machine for a single countdown.

The engine knows nothing about how it is displayed.  A presentation layer
sets the selectors, issues commands and subscribes to snapshots; a
:class:`~tminus.core.ticker.TickSource` calls :meth:`CountdownEngine.tick`
once per interval while the countdown is running.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable

from tminus.core.ticker import TickSource
from tminus.core.timefmt import as_time_string

logger = logging.getLogger(__name__)


class TimerState(Enum):
    """Possible states of the countdown."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


HOURS_RANGE = range(0, 24)
MINUTES_RANGE = range(0, 60)
SECONDS_RANGE = range(0, 60)

DEFAULT_INTERVAL_MS = 1000
DEFAULT_SELECTION = (0, 0, 10)


@dataclass(frozen=True)
class TimerSnapshot:
    """Everything a view needs to render one frame."""

    state: TimerState
    remaining_seconds: int
    progress: float
    completion: datetime
    configured_duration: int
    run_duration: int

    @property
    def time_string(self) -> str:
        return as_time_string(self.remaining_seconds)


Listener = Callable[[TimerSnapshot], None]


def _check_range(name: str, value: int, valid: range) -> None:
    if value not in valid:
        raise ValueError(f"{name} must be between {valid.start} and {valid.stop - 1}, got {value}")


class CountdownEngine:
    """Counts a configured duration down to zero, one tick at a time.

    Commands that are not valid for the current state are ignored and return
    ``False``; nothing here raises for a bad transition.  The progress
    denominator is the duration captured by :meth:`start`, so it stays fixed
    for the whole run.
    """

    def __init__(
        self,
        tick_source: TickSource,
        *,
        hours: int = DEFAULT_SELECTION[0],
        minutes: int = DEFAULT_SELECTION[1],
        seconds: int = DEFAULT_SELECTION[2],
        now: Callable[[], datetime] = datetime.now,
        interval_ms: int = DEFAULT_INTERVAL_MS,
    ) -> None:
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        self._tick_source = tick_source
        self._now = now
        self._interval_ms = interval_ms
        self._state: TimerState = TimerState.IDLE
        self._hours: int = 0
        self._minutes: int = 0
        self._seconds: int = 0
        self._run_duration: int = 0
        self._remaining: int = 0
        self._progress: float = 0.0
        self._completion: datetime = now()
        self._listeners: list[Listener] = []
        self.set_duration(hours, minutes, seconds)

    # -- selectors -----------------------------------------------------------

    def set_hours(self, hours: int) -> bool:
        """Select *hours* (0--23).  Ignored unless IDLE."""
        return self.set_duration(hours, self._minutes, self._seconds)

    def set_minutes(self, minutes: int) -> bool:
        """Select *minutes* (0--59).  Ignored unless IDLE."""
        return self.set_duration(self._hours, minutes, self._seconds)

    def set_seconds(self, seconds: int) -> bool:
        """Select *seconds* (0--59).  Ignored unless IDLE."""
        return self.set_duration(self._hours, self._minutes, seconds)

    def set_duration(self, hours: int, minutes: int, seconds: int) -> bool:
        """Select all three fields at once.

        Ignored unless IDLE, whatever the values; an out-of-range value only
        raises ``ValueError`` when the selection would actually be applied.
        """
        if self._ignored("select", TimerState.IDLE):
            return False
        _check_range("hours", hours, HOURS_RANGE)
        _check_range("minutes", minutes, MINUTES_RANGE)
        _check_range("seconds", seconds, SECONDS_RANGE)
        self._hours, self._minutes, self._seconds = hours, minutes, seconds
        return True

    # -- commands ------------------------------------------------------------

    def start(self) -> bool:
        """Begin counting down the selected duration.

        A zero duration completes immediately: the engine stays IDLE and the
        tick source is never started.
        """
        if self._ignored("start", TimerState.IDLE):
            return False

        duration = self.get_configured_duration()
        if duration == 0:
            logger.info("Zero duration selected; countdown completes immediately")
            return False

        self._run_duration = duration
        self._remaining = duration
        self._progress = 1.0
        self._begin_running()
        logger.info("Countdown started: %s", as_time_string(duration))
        self._notify()
        return True

    def pause(self) -> bool:
        """Freeze the countdown.  Valid only from RUNNING."""
        if self._ignored("pause", TimerState.RUNNING):
            return False
        self._tick_source.stop()
        self._state = TimerState.PAUSED
        logger.info("Countdown paused at %s", as_time_string(self._remaining))
        self._notify()
        return True

    def resume(self) -> bool:
        """Continue a paused countdown.  Valid only from PAUSED."""
        if self._ignored("resume", TimerState.PAUSED):
            return False
        self._begin_running()
        logger.info("Countdown resumed at %s", as_time_string(self._remaining))
        self._notify()
        return True

    def cancel(self) -> bool:
        """Abandon the countdown and return to IDLE."""
        if self._state == TimerState.IDLE:
            logger.debug("cancel() ignored in idle state")
            return False
        self._reset()
        logger.info("Countdown cancelled")
        self._notify()
        return True

    def tick(self) -> None:
        """Advance the countdown by one interval.

        The engine finishes one tick *after* the readout reaches zero, so the
        zero frame is shown for a full interval before returning to IDLE.
        """
        if self._state != TimerState.RUNNING:
            logger.debug("Dropping tick delivered in %s state", self._state.value)
            return

        self._remaining -= 1
        self._progress = self._remaining / self._run_duration
        if self._remaining < 0:
            self._reset()
            logger.info("Countdown complete")
        self._notify()

    def close(self) -> None:
        """Stop the tick source and release all listeners."""
        if self._state != TimerState.IDLE:
            self._reset()
        self._tick_source.stop()
        self._listeners.clear()

    # -- observation ---------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* with a snapshot after every change.

        Returns a callable that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def snapshot(self) -> TimerSnapshot:
        return TimerSnapshot(
            state=self._state,
            remaining_seconds=self._remaining,
            progress=self.get_progress(),
            completion=self._completion,
            configured_duration=self.get_configured_duration(),
            run_duration=self._run_duration,
        )

    def get_state(self) -> TimerState:
        return self._state

    def get_remaining(self) -> int:
        return self._remaining

    def get_progress(self) -> float:
        """Return the remaining fraction of the current run, within [0.0, 1.0]."""
        return min(max(self._progress, 0.0), 1.0)

    def get_completion(self) -> datetime:
        """Return the projected wall-clock time of completion."""
        return self._completion

    def get_configured_duration(self) -> int:
        return self._hours * 3600 + self._minutes * 60 + self._seconds

    def get_run_duration(self) -> int:
        """Return the duration captured by the last successful :meth:`start`."""
        return self._run_duration

    def get_selection(self) -> tuple[int, int, int]:
        return self._hours, self._minutes, self._seconds

    # -- private helpers -----------------------------------------------------

    def _ignored(self, command: str, required: TimerState) -> bool:
        if self._state == required:
            return False
        logger.debug("%s() ignored in %s state", command, self._state.value)
        return True

    def _begin_running(self) -> None:
        """Project the completion instant, enter RUNNING and arm the tick source."""
        self._completion = self._now() + timedelta(seconds=self._remaining)
        self._state = TimerState.RUNNING
        self._tick_source.start(self._interval_ms, self.tick)

    def _reset(self) -> None:
        self._tick_source.stop()
        self._state = TimerState.IDLE
        self._remaining = 0
        self._progress = 0.0

    def _notify(self) -> None:
        if not self._listeners:
            return
        snap = self.snapshot()
        for listener in list(self._listeners):
            listener(snap)
