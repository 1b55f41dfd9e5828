"""Destination path helpers.

This module provides:
- join_path: join a pane directory and an entry name
- generate_rename: timestamped name used when the user picks "rename"
"""

from __future__ import annotations

import time


def join_path(directory: str, name: str) -> str:
    """Join a directory and a name with a single forward slash.

    Both panes use forward-slash paths, so this does not go through
    os.path.join.
    """
    if directory.endswith("/"):
        return f"{directory}{name}"
    return f"{directory}/{name}"


def generate_rename(filename: str, timestamp_ms: int | None = None) -> str:
    """Generate a non-conflicting name by inserting a timestamp.

    Format: base_<epochMillis>.ext, or name_<epochMillis> without a dot.
    The extension is whatever follows the last dot, so ".bashrc" becomes
    "_<epochMillis>.bashrc".

    Args:
        filename: Original file name.
        timestamp_ms: Milliseconds since the epoch (defaults to now).

    Returns:
        The new file name.
    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    base, dot, ext = filename.rpartition(".")
    if not dot:
        return f"{filename}_{timestamp_ms}"
    return f"{base}_{timestamp_ms}.{ext}"
