"""CLI entry point for tminus.

Uses Click to expose the ``tminus`` command group.  ``tminus run`` drives a
:class:`~tminus.core.engine.CountdownEngine` with a blocking
:class:`~tminus.core.ticker.LoopTickSource` and redraws a status line after
every change.
"""

from __future__ import annotations

import logging
import sys

import click

import tminus
from tminus.cli.render import render_status
from tminus.core.engine import (
    DEFAULT_SELECTION,
    HOURS_RANGE,
    MINUTES_RANGE,
    SECONDS_RANGE,
    CountdownEngine,
    TimerSnapshot,
    TimerState,
)
from tminus.core.ticker import LoopTickSource
from tminus.core.timefmt import as_time_string

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _int_range(valid: range) -> click.IntRange:
    return click.IntRange(valid.start, valid.stop - 1)


def _selection(
    hours: int | None, minutes: int | None, seconds: int | None
) -> tuple[int, int, int]:
    """Resolve the duration options.

    With no option given the engine's default selection applies; otherwise
    any omitted field counts as zero.
    """
    if hours is None and minutes is None and seconds is None:
        return DEFAULT_SELECTION
    return hours or 0, minutes or 0, seconds or 0


def _ask_resume() -> bool:
    """Prompt after Ctrl-C; aborting the prompt counts as cancel."""
    try:
        choice = click.prompt(
            "[r]esume or [c]ancel", type=click.Choice(["r", "c"]), default="r"
        )
    except click.Abort:
        return False
    return choice == "r"


def _drive(engine: CountdownEngine, ticker: LoopTickSource) -> bool:
    """Run the tick loop until the countdown ends.

    Returns ``True`` if the countdown completed and ``False`` if the user
    cancelled it.
    """
    while engine.get_state() != TimerState.IDLE:
        try:
            ticker.run()
        except KeyboardInterrupt:
            if not engine.pause():
                continue
            click.echo()
            if _ask_resume():
                engine.resume()
            else:
                engine.cancel()
                return False
    return True


@click.group()
@click.version_option(version=tminus.__version__, prog_name="tminus")
@click.option("-v", "--verbose", is_flag=True, help="Log state changes to stderr.")
def cli(verbose: bool) -> None:
    """tminus: a countdown timer for the terminal."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=_LOG_FORMAT)


@cli.command()
@click.option("-H", "--hours", type=_int_range(HOURS_RANGE))
@click.option("-m", "--minutes", type=_int_range(MINUTES_RANGE))
@click.option("-s", "--seconds", type=_int_range(SECONDS_RANGE))
@click.option("--bell/--no-bell", default=True, help="Ring the terminal bell when time is up.")
def run(hours: int | None, minutes: int | None, seconds: int | None, bell: bool) -> None:
    """Count down the given duration in the foreground.

    Without any duration option the countdown runs for 10 seconds; once one
    option is given, the others default to 0.  Press Ctrl-C to pause; you can
    then resume or cancel.
    """
    ticker = LoopTickSource()
    hours, minutes, seconds = _selection(hours, minutes, seconds)
    engine = CountdownEngine(ticker, hours=hours, minutes=minutes, seconds=seconds)
    last: list[TimerSnapshot] = []

    def redraw(snapshot: TimerSnapshot) -> None:
        if snapshot.state != TimerState.IDLE:
            last[:] = [snapshot]
            click.echo("\r" + render_status(snapshot), nl=False)

    engine.subscribe(redraw)
    try:
        if not engine.start():
            click.echo("Nothing to count down", err=True)
            sys.exit(1)
        completed = _drive(engine, ticker)
    finally:
        engine.close()

    click.echo()
    if completed:
        click.echo("Time's up!" + ("\a" if bell else ""))
        return
    remaining = last[-1].remaining_seconds if last else 0
    click.echo(f"Countdown cancelled at {as_time_string(remaining)}", err=True)
    sys.exit(1)


@cli.command(name="format")
@click.argument("seconds", type=click.IntRange(min=0))
def format_(seconds: int) -> None:
    """Print SECONDS as HH:MM:SS."""
    click.echo(as_time_string(seconds))
