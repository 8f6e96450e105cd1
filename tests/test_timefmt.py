"""Tests for time formatting and status rendering."""

from datetime import datetime

import pytest

from tminus.cli.render import render_ring, render_status
from tminus.core.engine import TimerSnapshot, TimerState
from tminus.core.timefmt import as_time_string, format_completion


class TestAsTimeString:
    """as_time_string formats seconds as zero-padded HH:MM:SS."""

    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [
            (0, "00:00:00"),
            (59, "00:00:59"),
            (60, "00:01:00"),
            (3661, "01:01:01"),
            (86399, "23:59:59"),
            (360000, "100:00:00"),
        ],
    )
    def test_examples(self, seconds: int, expected: str) -> None:
        assert as_time_string(seconds) == expected

    def test_negative_raises_value_error(self) -> None:
        with pytest.raises(ValueError):
            as_time_string(-1)


class TestFormatCompletion:
    def test_hour_and_minute_only(self) -> None:
        assert format_completion(datetime(2024, 5, 1, 9, 5, 59)) == "09:05"


class TestRender:
    """The terminal status line."""

    def test_ring_full_and_empty(self) -> None:
        assert render_ring(1.0, width=4) == "[####]"
        assert render_ring(0.0, width=4) == "[----]"

    def test_ring_clamps_out_of_range(self) -> None:
        assert render_ring(1.5, width=4) == "[####]"
        assert render_ring(-0.5, width=4) == "[----]"

    def test_status_line(self) -> None:
        snap = TimerSnapshot(
            state=TimerState.RUNNING,
            remaining_seconds=7,
            progress=0.7,
            completion=datetime(2024, 5, 1, 14, 32),
            configured_duration=10,
            run_duration=10,
        )
        assert render_status(snap) == "00:00:07  [##############------]   70%  ends 14:32"

    def test_status_line_marks_paused(self) -> None:
        snap = TimerSnapshot(
            state=TimerState.PAUSED,
            remaining_seconds=7,
            progress=0.7,
            completion=datetime(2024, 5, 1, 14, 32),
            configured_duration=10,
            run_duration=10,
        )
        assert render_status(snap).endswith("(paused)")
