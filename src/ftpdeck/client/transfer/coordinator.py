"""Transfer coordinator for dispatching upload/download batches.

This module provides:
- TransferCoordinator: turns a pane selection into engine requests

The coordinator is the dispatch half of the transfer core:
1. Validates the batch (connected host, non-empty selection)
2. Arms a fresh conflict scope (resets "overwrite all")
3. Hands each directory to the engine's recursive transfer
4. Checks each file's destination, asks the ConflictGate when it exists,
   and starts the transfer the user chose

Ordering:
    Directories are dispatched before files, and both one at a time in
    selection order. Files must be sequential: awaiting each decision
    before looking at the next file is what keeps at most one conflict
    pending in the gate.

Failure isolation:
    | Step that fails        | Effect                                 |
    |------------------------|----------------------------------------|
    | directory request      | notify, continue with next entry       |
    | existence check        | notify, continue with next file        |
    | conflict decision      | notify, continue with next file        |
    | start request          | notify, continue with next file        |

Completion is not observed here; it arrives through the EventBridge.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from ftpdeck.client import notifications
from ftpdeck.client.transfer.naming import generate_rename, join_path
from ftpdeck.client.transfer.types import BatchDispatch, PendingConflict
from ftpdeck.core.types import OverwriteDecision, TransferDirection

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from ftpdeck.client.notifications import Notifier
    from ftpdeck.client.transfer.conflict import ConflictGate
    from ftpdeck.client.transfer.engine import TransferEngine
    from ftpdeck.client.transfer.registry import TransferRegistry
    from ftpdeck.client.transfer.types import FileEntry, TransferId

logger = logging.getLogger(__name__)


class TransferCoordinator:
    """Dispatches one batch of uploads or downloads at a time.

    Usage:
        coordinator = TransferCoordinator(registry, gate, engine, notifier)
        dispatch = await coordinator.upload(host_id, selected, "/remote/dir")
    """

    def __init__(
        self,
        registry: TransferRegistry,
        gate: ConflictGate,
        engine: TransferEngine,
        notifier: Notifier,
        default_download_dir: str = "/tmp",
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the coordinator.

        Args:
            registry: Registry whose start requests reach the engine.
            gate: Conflict gate consulted when a destination exists.
            engine: Engine used for destination existence checks.
            notifier: Where warnings, errors and progress notes go.
            default_download_dir: Destination when a download names none.
            clock: Seconds since the epoch; used for rename timestamps.
        """
        self._registry = registry
        self._gate = gate
        self._engine = engine
        self._notifier = notifier
        self._default_download_dir = default_download_dir
        self._clock = clock

    async def upload(
        self,
        host_id: int | None,
        entries: Sequence[FileEntry],
        remote_dir: str,
    ) -> BatchDispatch:
        """Upload local entries into remote_dir on host_id."""
        return await self._run_batch(
            TransferDirection.UPLOAD, host_id, entries, remote_dir
        )

    async def download(
        self,
        host_id: int | None,
        entries: Sequence[FileEntry],
        local_dir: str | None = None,
    ) -> BatchDispatch:
        """Download remote entries into local_dir."""
        return await self._run_batch(
            TransferDirection.DOWNLOAD,
            host_id,
            entries,
            local_dir or self._default_download_dir,
        )

    async def _run_batch(
        self,
        direction: TransferDirection,
        host_id: int | None,
        entries: Sequence[FileEntry],
        dest_dir: str,
    ) -> BatchDispatch:
        dispatch = BatchDispatch()

        if not host_id:
            self._notifier.notify(notifications.warning("Connect to a host first"))
            return dispatch
        if not entries:
            self._notifier.notify(notifications.warning(
                f"Select the files or directories to {direction.value}"
            ))
            return dispatch

        directories = [e for e in entries if e.is_dir]
        files = [e for e in entries if not e.is_dir]

        self._gate.reset_overwrite_all()
        logger.info(
            "Starting %s batch: %d directories, %d files -> %s",
            direction.value,
            len(directories),
            len(files),
            dest_dir,
        )

        for directory in directories:
            await self._dispatch_directory(direction, host_id, directory, dest_dir, dispatch)

        for entry in files:
            await self._dispatch_file(direction, host_id, entry, dest_dir, dispatch)

        logger.info(
            "%s batch dispatched: %d transfers, %d skipped, %d failed",
            direction.value.capitalize(),
            len(dispatch.transfer_ids),
            len(dispatch.skipped),
            len(dispatch.failed),
        )
        return dispatch

    async def _dispatch_directory(
        self,
        direction: TransferDirection,
        host_id: int,
        directory: FileEntry,
        dest_dir: str,
        dispatch: BatchDispatch,
    ) -> None:
        target = join_path(dest_dir, directory.name)
        try:
            if direction == TransferDirection.UPLOAD:
                ids = await self._registry.start_directory_upload(
                    host_id, directory.path, target
                )
            else:
                ids = await self._registry.start_directory_download(
                    host_id, directory.path, target
                )
        except Exception as e:
            logger.warning("Directory %s of %s failed: %s", direction.value, directory.name, e)
            logger.debug("Full traceback:", exc_info=True)
            dispatch.failed.append(directory.name)
            self._notifier.notify(
                notifications.dispatch_failed(f"directory {directory.name}", direction.value, e)
            )
            return

        dispatch.transfer_ids.extend(ids)
        self._notifier.notify(
            notifications.directory_queued(directory.name, direction.value, len(ids))
        )

    async def _dispatch_file(
        self,
        direction: TransferDirection,
        host_id: int,
        entry: FileEntry,
        dest_dir: str,
        dispatch: BatchDispatch,
    ) -> None:
        destination = join_path(dest_dir, entry.name)
        filename = entry.name

        try:
            if await self._destination_exists(direction, host_id, destination):
                decision = await self._gate.request_decision(
                    self._conflict_for(direction, host_id, entry, destination)
                )
                if decision == OverwriteDecision.SKIP:
                    logger.info("Skipping %s", entry.name)
                    dispatch.skipped.append(entry.name)
                    return
                if decision == OverwriteDecision.RENAME:
                    filename = generate_rename(entry.name, int(self._clock() * 1000))
                    destination = join_path(dest_dir, filename)
                    logger.info("Renaming %s to %s", entry.name, filename)

            transfer_id = await self._start(direction, host_id, entry, destination, filename)
        except Exception as e:
            logger.warning("%s of %s failed: %s", direction.value.capitalize(), entry.name, e)
            logger.debug("Full traceback:", exc_info=True)
            dispatch.failed.append(entry.name)
            self._notifier.notify(notifications.dispatch_failed(entry.name, direction.value, e))
            return

        dispatch.transfer_ids.append(transfer_id)

    async def _destination_exists(
        self, direction: TransferDirection, host_id: int, destination: str
    ) -> bool:
        if direction == TransferDirection.UPLOAD:
            return await self._engine.remote_file_exists(host_id, destination)
        return await self._engine.local_file_exists(destination)

    def _conflict_for(
        self,
        direction: TransferDirection,
        host_id: int,
        entry: FileEntry,
        destination: str,
    ) -> PendingConflict:
        if direction == TransferDirection.UPLOAD:
            local_path, remote_path = entry.path, destination
        else:
            local_path, remote_path = destination, entry.path
        return PendingConflict(
            host_id=host_id,
            local_path=local_path,
            remote_path=remote_path,
            filename=entry.name,
            file_size=entry.size,
            direction=direction,
        )

    async def _start(
        self,
        direction: TransferDirection,
        host_id: int,
        entry: FileEntry,
        destination: str,
        filename: str,
    ) -> TransferId:
        if direction == TransferDirection.UPLOAD:
            transfer_id = await self._registry.start_upload(
                host_id, entry.path, destination, filename, entry.size
            )
        else:
            transfer_id = await self._registry.start_download(
                host_id, entry.path, destination, filename, entry.size
            )
        logger.info("Queued %s %s -> %s (%s)", direction.value, entry.path, destination, transfer_id)
        return transfer_id
