"""Per-session wiring of the transfer core.

A TransferSession owns one registry, one conflict gate, one coordinator,
one event channel and one bridge. Everything that needs them receives
the session (or one of its parts) explicitly; there is no module-level
state.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from ftpdeck.client.transfer.bridge import EventBridge
from ftpdeck.client.transfer.conflict import ConflictGate
from ftpdeck.client.transfer.coordinator import TransferCoordinator
from ftpdeck.client.transfer.events import EventChannel, EventKind
from ftpdeck.client.transfer.registry import TransferRegistry

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable

    from ftpdeck.client.notifications import Notifier
    from ftpdeck.client.transfer.engine import TransferEngine
    from ftpdeck.client.transfer.events import Subscription
    from ftpdeck.client.transfer.listener import EngineEventListener
    from ftpdeck.client.transfer.types import TransferId

logger = logging.getLogger(__name__)

_TERMINAL_KINDS = (EventKind.COMPLETE, EventKind.FAILED, EventKind.CANCELLED)

# Terminal ids remembered for wait_for callers that have not asked yet
_SETTLED_LIMIT = 1000


class TransferSession:
    """Transfer core for one application session.

    Usage:
        async with TransferSession(engine, notifier, listener_factory=...) as session:
            dispatch = await session.coordinator.upload(1, entries, "/srv")
            await session.wait_for(dispatch.transfer_ids)
    """

    def __init__(
        self,
        engine: TransferEngine,
        notifier: Notifier,
        default_download_dir: str = "/tmp",
        refresh_local: Callable[[], Awaitable[None] | None] | None = None,
        refresh_remote: Callable[[], Awaitable[None] | None] | None = None,
        listener_factory: Callable[[EventChannel], EngineEventListener] | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            engine: Transfer engine all requests go to.
            notifier: Destination for user-facing messages.
            default_download_dir: Used by download batches with no target.
            refresh_local: Re-list the local pane.
            refresh_remote: Re-list the remote pane.
            listener_factory: Builds the event listener feeding the channel;
                without one, events must be emitted on the channel directly.
        """
        self.engine = engine
        self.channel = EventChannel()
        self.registry = TransferRegistry(engine)
        self.gate = ConflictGate()
        self.coordinator = TransferCoordinator(
            self.registry,
            self.gate,
            engine,
            notifier,
            default_download_dir=default_download_dir,
        )
        self.bridge = EventBridge(
            self.registry,
            notifier,
            refresh_local=refresh_local,
            refresh_remote=refresh_remote,
        )
        self.listener = listener_factory(self.channel) if listener_factory else None

        self._subscription: Subscription | None = None
        self._settle_unlisteners: list[Callable[[], None]] = []
        self._settled: dict[TransferId, None] = {}
        self._settled_changed = asyncio.Condition()

    @property
    def started(self) -> bool:
        return self._subscription is not None

    async def start(self) -> None:
        """Attach the bridge and start receiving events."""
        if self.started:
            return
        self._subscription = self.bridge.attach(self.channel)
        self._settle_unlisteners = [
            self.channel.listen(kind, self._on_settled) for kind in _TERMINAL_KINDS
        ]
        if self.listener:
            self.listener.start()
        logger.debug("Transfer session started")

    async def stop(self) -> None:
        """Stop receiving events and detach every handler."""
        if self.listener:
            await self.listener.stop()
        if self._subscription:
            self._subscription.close()
            self._subscription = None
        for unlisten in self._settle_unlisteners:
            unlisten()
        self._settle_unlisteners = []
        logger.debug("Transfer session stopped")

    async def __aenter__(self) -> TransferSession:
        await self.start()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.stop()

    async def wait_for(
        self, transfer_ids: Iterable[TransferId], timeout: float | None = None
    ) -> None:
        """Wait until every given transfer reached a terminal event.

        Terminal events seen before the call count. The ids are consumed:
        once this returns (or times out) they are forgotten.

        Raises:
            TimeoutError: If timeout elapses first.
        """
        remaining = set(transfer_ids)

        async def _wait() -> None:
            async with self._settled_changed:
                await self._settled_changed.wait_for(
                    lambda: all(t in self._settled for t in remaining)
                )

        try:
            await asyncio.wait_for(_wait(), timeout=timeout)
        finally:
            for transfer_id in remaining:
                self._settled.pop(transfer_id, None)

    async def _on_settled(self, payload: dict[str, Any]) -> None:
        async with self._settled_changed:
            self._settled[payload["transfer_id"]] = None
            # Drop the oldest ids beyond the limit
            while len(self._settled) > _SETTLED_LIMIT:
                del self._settled[next(iter(self._settled))]
            self._settled_changed.notify_all()
