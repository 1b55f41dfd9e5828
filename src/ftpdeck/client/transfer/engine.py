"""Boundary of the external transfer engine.

The engine performs protocol I/O, byte movement, resume bookkeeping and
history persistence. This package only talks to it through the
TransferEngine protocol below; EngineClient (ftpdeck.client.api) is the
HTTP implementation, and tests substitute an in-memory fake.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ftpdeck.client.transfer.types import FileEntry, HistoryRecord, TransferId


class TransferEngine(Protocol):
    """Requests the orchestration core issues to the engine."""

    async def remote_file_exists(self, host_id: int, path: str) -> bool:
        """Check whether a path exists on the remote host."""
        ...

    async def local_file_exists(self, path: str) -> bool:
        """Check whether a path exists on the local machine."""
        ...

    async def start_upload(
        self,
        host_id: int,
        local_path: str,
        remote_path: str,
        filename: str,
        file_size: int,
    ) -> TransferId:
        """Queue a single-file upload and return its transfer id."""
        ...

    async def start_download(
        self,
        host_id: int,
        remote_path: str,
        local_path: str,
        filename: str,
        file_size: int,
    ) -> TransferId:
        """Queue a single-file download and return its transfer id."""
        ...

    async def start_directory_upload(
        self, host_id: int, local_dir: str, remote_dir: str
    ) -> list[TransferId]:
        """Queue every file below local_dir; one id per file."""
        ...

    async def start_directory_download(
        self, host_id: int, remote_dir: str, local_dir: str
    ) -> list[TransferId]:
        """Queue every file below remote_dir; one id per file."""
        ...

    async def cancel_transfer(self, transfer_id: TransferId) -> None:
        """Ask the engine to cancel a transfer."""
        ...

    async def retry_transfer(self, history_id: int) -> TransferId:
        """Re-submit a recorded transfer; returns a fresh id."""
        ...

    async def get_history(self, host_id: int | None = None) -> list[HistoryRecord]:
        """Fetch transfer history for one host, or all hosts."""
        ...

    async def clear_history(self) -> None:
        """Delete all transfer history."""
        ...

    async def list_directory(self, host_id: int, path: str) -> list[FileEntry]:
        """List a remote directory."""
        ...
