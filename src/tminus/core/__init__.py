from tminus.core.engine import CountdownEngine, TimerSnapshot, TimerState
from tminus.core.ticker import LoopTickSource, ManualTickSource, TickSource
from tminus.core.timefmt import as_time_string, format_completion

__all__ = [
    "CountdownEngine",
    "LoopTickSource",
    "ManualTickSource",
    "TickSource",
    "TimerSnapshot",
    "TimerState",
    "as_time_string",
    "format_completion",
]
