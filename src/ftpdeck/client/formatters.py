"""Human-readable formatting of sizes, speeds, durations and timestamps."""

from __future__ import annotations

import math
from datetime import datetime, timezone

_UNITS = ["B", "KB", "MB", "GB", "TB"]


def format_file_size(size: float) -> str:
    """Format a byte count, e.g. 1536 -> "1.5 KB"."""
    if size <= 0:
        return "0 B"
    i = 0
    value = float(size)
    while value >= 1024 and i < len(_UNITS) - 1:
        value /= 1024
        i += 1
    if i == 0:
        return f"{value:.0f} {_UNITS[i]}"
    return f"{value:.1f} {_UNITS[i]}"


def format_speed(bytes_per_sec: float) -> str:
    return f"{format_file_size(bytes_per_sec)}/s"


def format_duration(seconds: float) -> str:
    """Format an ETA, e.g. 75 -> "1m 15s"; "--" when unknown."""
    if seconds < 0 or not math.isfinite(seconds):
        return "--"
    if seconds < 60:
        return f"{math.ceil(seconds)}s"
    if seconds < 3600:
        minutes = int(seconds // 60)
        secs = math.ceil(seconds % 60)
        return f"{minutes}m {secs}s"
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    return f"{hours}h {minutes}m"


def format_timestamp(ts: str | None) -> str:
    """Render an engine timestamp in local time.

    Naive "YYYY-MM-DD HH:MM:SS" values are stored in UTC by the engine.
    Unparsable input is returned unchanged.
    """
    if not ts:
        return "--"
    try:
        parsed = datetime.fromisoformat(ts.replace("Z", "+00:00"))
    except ValueError:
        return ts
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone().strftime("%Y-%m-%d %H:%M:%S")
