"""Data types exchanged between the orchestration core and the engine.

This module provides:
- FileEntry: one row of a directory listing (a selection item)
- ActiveTransfer: latest progress snapshot of an in-flight transfer
- HistoryRecord: one persisted transfer attempt
- PendingConflict: an item waiting for an overwrite decision
- TransferEvent / TransferFailedEvent: terminal event payloads
- BatchDispatch: what one upload/download batch dispatched
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ftpdeck.core.types import TransferDirection, TransferStatus

TransferId = str


@dataclass
class FileEntry:
    """A file or directory shown in one of the two panes."""

    name: str
    path: str
    is_dir: bool = False
    size: int = 0
    modified: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FileEntry:
        """Create from API response dictionary."""
        return cls(
            name=data["name"],
            path=data["path"],
            is_dir=bool(data.get("is_dir", False)),
            size=int(data.get("size", 0)),
            modified=data.get("modified"),
        )


@dataclass
class ActiveTransfer:
    """Progress snapshot for one transfer id.

    Attributes:
        transfer_id: Engine-assigned correlation key.
        filename: Name shown to the user.
        total_bytes: Size of the file being transferred.
        transferred_bytes: Bytes moved so far.
        speed_bytes_per_sec: Current throughput.
        eta_seconds: Estimated time remaining.
        percentage: Completion in the 0-100 range.
    """

    transfer_id: TransferId
    filename: str
    total_bytes: int = 0
    transferred_bytes: int = 0
    speed_bytes_per_sec: float = 0.0
    eta_seconds: float = 0.0
    percentage: float = 0.0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ActiveTransfer:
        """Create from a transfer-progress event payload."""
        return cls(
            transfer_id=data["transfer_id"],
            filename=data.get("filename", ""),
            total_bytes=int(data.get("total_bytes", 0)),
            transferred_bytes=int(data.get("transferred_bytes", 0)),
            speed_bytes_per_sec=float(data.get("speed_bytes_per_sec", 0.0)),
            eta_seconds=float(data.get("eta_seconds", 0.0)),
            percentage=float(data.get("percentage", 0.0)),
        )


@dataclass
class HistoryRecord:
    """One transfer attempt as recorded by the engine's store."""

    id: int
    host_id: int
    filename: str
    remote_path: str
    local_path: str
    direction: TransferDirection
    file_size: int
    transferred_size: int
    status: TransferStatus
    error_message: str | None = None
    started_at: str | None = None
    finished_at: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HistoryRecord:
        """Create from API response dictionary."""
        return cls(
            id=data["id"],
            host_id=data["host_id"],
            filename=data["filename"],
            remote_path=data["remote_path"],
            local_path=data["local_path"],
            direction=TransferDirection(data["direction"]),
            file_size=data.get("file_size", 0),
            transferred_size=data.get("transferred_size", 0),
            status=TransferStatus(data["status"]),
            error_message=data.get("error_message"),
            started_at=data.get("started_at"),
            finished_at=data.get("finished_at"),
        )


@dataclass
class PendingConflict:
    """A file whose destination already exists."""

    host_id: int
    local_path: str
    remote_path: str
    filename: str
    file_size: int
    direction: TransferDirection

    @property
    def destination(self) -> str:
        """Path that would be overwritten."""
        if self.direction == TransferDirection.UPLOAD:
            return self.remote_path
        return self.local_path


@dataclass
class TransferEvent:
    """Payload of transfer-complete and transfer-cancelled events."""

    transfer_id: TransferId
    filename: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TransferEvent:
        return cls(transfer_id=data["transfer_id"], filename=data.get("filename", ""))


@dataclass
class TransferFailedEvent:
    """Payload of transfer-failed events."""

    transfer_id: TransferId
    filename: str
    error: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TransferFailedEvent:
        return cls(
            transfer_id=data["transfer_id"],
            filename=data.get("filename", ""),
            error=data.get("error", ""),
        )


@dataclass
class QueueSummary:
    """Aggregate view over all active transfers."""

    count: int = 0
    total_bytes: int = 0
    transferred_bytes: int = 0

    @property
    def percentage(self) -> int:
        """Overall completion, rounded to a whole percent."""
        if self.total_bytes <= 0:
            return 0
        return round(self.transferred_bytes / self.total_bytes * 100)


@dataclass
class BatchDispatch:
    """What a single upload/download batch handed to the engine.

    Attributes:
        transfer_ids: Every id returned by a start request, in dispatch order.
        skipped: Names of files the user chose to skip.
        failed: Names of entries whose dispatch raised.
    """

    transfer_ids: list[TransferId] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
