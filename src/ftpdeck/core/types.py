"""Shared enums for ftpdeck.

These values travel over the wire to and from the transfer engine, so
they are string enums whose values match the engine's JSON.
"""

from __future__ import annotations

from enum import Enum


class TransferDirection(str, Enum):
    """Which way bytes move."""

    UPLOAD = "upload"
    DOWNLOAD = "download"


class TransferStatus(str, Enum):
    """Status of a transfer as recorded in the engine's history."""

    PENDING = "pending"
    TRANSFERRING = "transferring"
    SUCCESS = "success"
    FAILED = "failed"
    CANCELLED = "cancelled"


class OverwriteDecision(str, Enum):
    """Answer to "the destination already exists"."""

    OVERWRITE = "overwrite"
    SKIP = "skip"
    RENAME = "rename"
