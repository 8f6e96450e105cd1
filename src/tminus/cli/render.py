"""Text rendering of engine snapshots for the terminal."""

from __future__ import annotations

from tminus.core.engine import TimerSnapshot, TimerState
from tminus.core.timefmt import format_completion

_RING_WIDTH = 20


def render_ring(progress: float, width: int = _RING_WIDTH) -> str:
    """Draw *progress* (0.0--1.0) as a ``[####----]`` bar of *width* cells."""
    progress = min(max(progress, 0.0), 1.0)
    filled = round(progress * width)
    return "[" + "#" * filled + "-" * (width - filled) + "]"


def render_status(snapshot: TimerSnapshot) -> str:
    """Return the one-line status ``HH:MM:SS  [ring]  NN%  ends HH:MM``."""
    line = (
        f"{snapshot.time_string}  {render_ring(snapshot.progress)}  "
        f"{snapshot.progress * 100:3.0f}%  ends {format_completion(snapshot.completion)}"
    )
    if snapshot.state == TimerState.PAUSED:
        line += "  (paused)"
    return line
