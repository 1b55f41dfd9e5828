"""In-process channel for engine lifecycle events.

This module provides:
- EventKind: the four transfer lifecycle events pushed by the engine
- EventChannel: listen/emit pub-sub that the WebSocket listener feeds
- Subscription: a handle that removes a group of listeners together
"""

from __future__ import annotations

import inspect
import logging
from collections import defaultdict
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    """Event names as sent by the engine."""

    PROGRESS = "transfer-progress"
    COMPLETE = "transfer-complete"
    FAILED = "transfer-failed"
    CANCELLED = "transfer-cancelled"


class EventChannel:
    """Dispatches engine events to registered handlers.

    Handlers receive the raw JSON payload. Coroutine handlers are awaited
    in registration order; a handler that raises is logged and the
    remaining handlers still run.
    """

    def __init__(self) -> None:
        self._handlers: dict[EventKind, list[Callable[[dict[str, Any]], Any]]] = (
            defaultdict(list)
        )

    def listen(
        self,
        kind: EventKind,
        handler: Callable[[dict[str, Any]], Awaitable[None] | None],
    ) -> Callable[[], None]:
        """Register a handler.

        Returns:
            A function that unregisters this handler; calling it more
            than once is harmless.
        """
        self._handlers[kind].append(handler)

        def unlisten() -> None:
            handlers = self._handlers.get(kind, [])
            if handler in handlers:
                handlers.remove(handler)

        return unlisten

    def listener_count(self, kind: EventKind | None = None) -> int:
        if kind is not None:
            return len(self._handlers.get(kind, []))
        return sum(len(h) for h in self._handlers.values())

    async def emit(self, kind: EventKind, payload: dict[str, Any]) -> None:
        """Deliver an event to every handler registered for kind."""
        if not self.listener_count(kind):
            logger.debug("No handler for %s %s", kind.value, payload.get("transfer_id"))
            return
        for handler in list(self._handlers.get(kind, [])):
            try:
                result = handler(payload)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Handler for %s failed", kind.value)


class Subscription:
    """Scoped registration of several handlers.

    Usage:
        with bridge.attach(channel):
            ...  # handlers active
        # all handlers removed
    """

    def __init__(self, unlisteners: list[Callable[[], None]]) -> None:
        self._unlisteners = unlisteners

    @property
    def active(self) -> bool:
        return bool(self._unlisteners)

    def close(self) -> None:
        """Remove every handler of this subscription."""
        unlisteners, self._unlisteners = self._unlisteners, []
        for unlisten in unlisteners:
            unlisten()

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
