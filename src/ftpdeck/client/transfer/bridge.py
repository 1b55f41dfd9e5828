"""Bridge from engine lifecycle events to session state.

Architecture:
    Engine ─push─► EngineEventListener ─► EventChannel ─► EventBridge
                                                            │
                              TransferRegistry ◄────────────┤
                              Notifier         ◄────────────┤
                              pane re-listing  ◄────────────┘

| Event     | Registry               | Then                                   |
|-----------|------------------------|----------------------------------------|
| progress  | record_progress        |                                        |
| complete  | remove_active          | refresh history, notify, re-list panes |
| failed    | remove_active          | refresh history, notify error          |
| cancelled | remove_active          | refresh history, notify                |
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ftpdeck.client import notifications
from ftpdeck.client.transfer.events import EventKind, Subscription
from ftpdeck.client.transfer.types import (
    ActiveTransfer,
    TransferEvent,
    TransferFailedEvent,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from ftpdeck.client.notifications import Notifier
    from ftpdeck.client.transfer.events import EventChannel
    from ftpdeck.client.transfer.registry import TransferRegistry

logger = logging.getLogger(__name__)


class EventBridge:
    """Applies engine events to the registry and the user interface.

    Usage:
        bridge = EventBridge(registry, notifier, refresh_local=..., refresh_remote=...)
        subscription = bridge.attach(channel)
        ...
        subscription.close()
    """

    def __init__(
        self,
        registry: TransferRegistry,
        notifier: Notifier,
        refresh_local: Callable[[], Awaitable[None] | None] | None = None,
        refresh_remote: Callable[[], Awaitable[None] | None] | None = None,
    ) -> None:
        """Initialize the bridge.

        Args:
            registry: Registry that receives progress and removals.
            notifier: Where completion/failure/cancellation messages go.
            refresh_local: Re-list the local pane after a completed transfer.
            refresh_remote: Re-list the remote pane after a completed transfer.
        """
        self._registry = registry
        self._notifier = notifier
        self._refresh_local = refresh_local
        self._refresh_remote = refresh_remote

    def attach(self, channel: EventChannel) -> Subscription:
        """Register all four handlers on channel.

        Returns:
            Subscription that removes all of them together.
        """
        return Subscription([
            channel.listen(EventKind.PROGRESS, self.on_progress),
            channel.listen(EventKind.COMPLETE, self.on_complete),
            channel.listen(EventKind.FAILED, self.on_failed),
            channel.listen(EventKind.CANCELLED, self.on_cancelled),
        ])

    def on_progress(self, payload: dict[str, Any]) -> None:
        self._registry.record_progress(ActiveTransfer.from_dict(payload))

    async def on_complete(self, payload: dict[str, Any]) -> None:
        event = TransferEvent.from_dict(payload)
        logger.info("Transfer complete: %s (%s)", event.filename, event.transfer_id)
        self._registry.remove_active(event.transfer_id)
        await self._refresh_history()
        self._notifier.notify(notifications.transfer_complete(event.filename))
        await self._refresh_panes()

    async def on_failed(self, payload: dict[str, Any]) -> None:
        event = TransferFailedEvent.from_dict(payload)
        logger.warning(
            "Transfer failed: %s (%s): %s", event.filename, event.transfer_id, event.error
        )
        self._registry.remove_active(event.transfer_id)
        await self._refresh_history()
        self._notifier.notify(notifications.transfer_failed(event.filename, event.error))

    async def on_cancelled(self, payload: dict[str, Any]) -> None:
        event = TransferEvent.from_dict(payload)
        logger.info("Transfer cancelled: %s (%s)", event.filename, event.transfer_id)
        self._registry.remove_active(event.transfer_id)
        await self._refresh_history()
        self._notifier.notify(notifications.transfer_cancelled(event.filename))

    async def _refresh_history(self) -> None:
        try:
            await self._registry.fetch_history()
        except Exception as e:
            logger.warning("Failed to refresh transfer history: %s", e)

    async def _refresh_panes(self) -> None:
        for refresh in (self._refresh_local, self._refresh_remote):
            if refresh is None:
                continue
            try:
                result = refresh()
                if result is not None:
                    await result
            except Exception as e:
                logger.warning("Failed to refresh directory listing: %s", e)
