"""Time formatting helpers shared by the engine and the CLI."""

from __future__ import annotations

from datetime import datetime


def as_time_string(total_seconds: int) -> str:
    """Format *total_seconds* as ``HH:MM:SS``.

    Hours are not wrapped at 24, so very large values simply widen the first
    field.
    """
    if total_seconds < 0:
        raise ValueError(f"total_seconds must be non-negative, got {total_seconds}")
    hours = total_seconds // 3600
    minutes = total_seconds // 60 % 60
    seconds = total_seconds % 60
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def format_completion(instant: datetime) -> str:
    """Render a completion instant as local ``HH:MM``."""
    return instant.strftime("%H:%M")
