"""Registry of active transfers and transfer history.

This module provides:
- TransferRegistry: the session's view of "what is transferring now"
  and "what happened"

Active entries are keyed by transfer id. They are created by the first
progress event for an id and dropped by its terminal event; start
requests never create entries, so a transfer that fails before reporting
progress leaves nothing behind.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ftpdeck.client.transfer.types import ActiveTransfer, HistoryRecord, QueueSummary

if TYPE_CHECKING:
    from collections.abc import Iterator

    from ftpdeck.client.transfer.engine import TransferEngine
    from ftpdeck.client.transfer.types import TransferId

logger = logging.getLogger(__name__)


class TransferRegistry:
    """Tracks active transfers by id and caches transfer history.

    All mutation goes through the methods below. None of them awaits
    between reading and writing the active map, so interleaved event
    handlers on one event loop cannot observe a half-applied update.

    Usage:
        registry = TransferRegistry(engine)
        registry.record_progress(ActiveTransfer("t1", "a.txt", 100, 50))
        await registry.fetch_history(host_id=1)
        registry.remove_active("t1")
    """

    def __init__(self, engine: TransferEngine) -> None:
        self._engine = engine
        self._active: dict[TransferId, ActiveTransfer] = {}
        self._history: list[HistoryRecord] = []
        self._loading = False

    @property
    def active_transfers(self) -> list[ActiveTransfer]:
        """Snapshot of active transfers, oldest first."""
        return list(self._active.values())

    @property
    def history(self) -> list[HistoryRecord]:
        """Last successfully fetched history."""
        return list(self._history)

    @property
    def loading(self) -> bool:
        """True while a history fetch is in flight."""
        return self._loading

    def get(self, transfer_id: TransferId) -> ActiveTransfer | None:
        return self._active.get(transfer_id)

    def __len__(self) -> int:
        return len(self._active)

    def __contains__(self, transfer_id: object) -> bool:
        return transfer_id in self._active

    def __iter__(self) -> Iterator[ActiveTransfer]:
        return iter(self.active_transfers)

    # === Event-driven state ===

    def record_progress(self, update: ActiveTransfer) -> None:
        """Merge a progress update (last write wins)."""
        if update.transfer_id not in self._active:
            logger.debug("Tracking transfer %s (%s)", update.transfer_id, update.filename)
        self._active[update.transfer_id] = update

    def remove_active(self, transfer_id: TransferId) -> None:
        """Stop tracking a transfer. Unknown ids are ignored."""
        if self._active.pop(transfer_id, None) is not None:
            logger.debug("Transfer %s no longer active", transfer_id)

    def summary(self) -> QueueSummary:
        """Aggregate counts over all active transfers."""
        return QueueSummary(
            count=len(self._active),
            total_bytes=sum(t.total_bytes for t in self._active.values()),
            transferred_bytes=sum(t.transferred_bytes for t in self._active.values()),
        )

    # === History ===

    async def fetch_history(self, host_id: int | None = None) -> list[HistoryRecord]:
        """Refresh history from the engine.

        Args:
            host_id: Only fetch this host's history; all hosts when None.

        Returns:
            The new history list.

        Raises:
            Whatever the engine raises. The cached history is left as it
            was, and loading is reset either way.
        """
        self._loading = True
        try:
            history = await self._engine.get_history(host_id)
            self._history = list(history)
            return self.history
        finally:
            self._loading = False

    async def clear_history(self) -> None:
        """Clear history in the engine's store, then locally."""
        await self._engine.clear_history()
        self._history = []
        logger.info("Transfer history cleared")

    # === Engine pass-through ===

    async def start_upload(
        self,
        host_id: int,
        local_path: str,
        remote_path: str,
        filename: str,
        file_size: int,
    ) -> TransferId:
        return await self._engine.start_upload(
            host_id, local_path, remote_path, filename, file_size
        )

    async def start_download(
        self,
        host_id: int,
        remote_path: str,
        local_path: str,
        filename: str,
        file_size: int,
    ) -> TransferId:
        return await self._engine.start_download(
            host_id, remote_path, local_path, filename, file_size
        )

    async def start_directory_upload(
        self, host_id: int, local_dir: str, remote_dir: str
    ) -> list[TransferId]:
        return list(await self._engine.start_directory_upload(host_id, local_dir, remote_dir))

    async def start_directory_download(
        self, host_id: int, remote_dir: str, local_dir: str
    ) -> list[TransferId]:
        return list(await self._engine.start_directory_download(host_id, remote_dir, local_dir))

    async def cancel_transfer(self, transfer_id: TransferId) -> None:
        """Request cancellation.

        The active entry stays until the engine's cancelled event arrives.
        """
        await self._engine.cancel_transfer(transfer_id)
        logger.info("Cancellation requested for %s", transfer_id)

    async def retry_transfer(self, history_id: int) -> TransferId:
        """Re-submit a recorded transfer under a new id."""
        transfer_id = await self._engine.retry_transfer(history_id)
        logger.info("Retrying history entry %d as %s", history_id, transfer_id)
        return transfer_id
