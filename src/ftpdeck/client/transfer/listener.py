"""WebSocket listener for the engine's transfer event stream.

This module provides:
- EngineEventListener: WebSocket client that receives pushed lifecycle
  events and emits them on an EventChannel

Architecture:
    Engine ─push─► EngineEventListener ─► EventChannel ─► EventBridge

Message format:
    {"event": "transfer-progress", "payload": {"transfer_id": "...", ...}}

The listener runs as a task on the caller's event loop and reconnects
after reconnect_delay whenever the connection drops.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import ssl
from typing import TYPE_CHECKING, Any

import websockets
from websockets.exceptions import WebSocketException

from ftpdeck.client.transfer.events import EventKind

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from websockets.asyncio.client import ClientConnection

    from ftpdeck.client.transfer.events import EventChannel
    from ftpdeck.core.config import EngineConfig

logger = logging.getLogger(__name__)


class EngineEventListener:
    """Receives engine lifecycle events over a WebSocket.

    Usage:
        listener = EngineEventListener(config, channel)
        listener.start()
        ...
        await listener.stop()
    """

    def __init__(
        self,
        config: EngineConfig,
        channel: EventChannel,
        reconnect_delay: float | None = None,
    ) -> None:
        """Initialize the listener.

        Args:
            config: Engine configuration with URL and token.
            channel: Channel to emit decoded events on.
            reconnect_delay: Seconds between reconnection attempts
                (defaults to config.reconnect_delay).
        """
        self._config = config
        self._channel = channel
        self._reconnect_delay = (
            config.reconnect_delay if reconnect_delay is None else reconnect_delay
        )
        self._ws: ClientConnection | None = None
        self._task: asyncio.Task[None] | None = None
        self._stopping = asyncio.Event()

    @property
    def connected(self) -> bool:
        return self._ws is not None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def ws_url(self) -> str:
        return self._config.ws_url

    def start(self) -> None:
        """Start listening on the running event loop."""
        if self.running:
            logger.warning("EngineEventListener already running")
            return
        self._stopping = asyncio.Event()
        self._task = asyncio.create_task(self._run(), name="EngineEventListener")
        logger.info("EngineEventListener started")

    async def stop(self) -> None:
        """Stop listening and close the connection."""
        self._stopping.set()
        await self._disconnect()

        task, self._task = self._task, None
        if task:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        logger.info("EngineEventListener stopped")

    async def _run(self) -> None:
        first_attempt = True
        while not self._stopping.is_set():
            try:
                async for message in self._session():
                    await self.handle_message(message)
                logger.info("Connection closed by engine")
            except (WebSocketException, OSError) as e:
                # Lost connections and the first refusal warn; repeated refusals do not
                log = logger.warning if self.connected or first_attempt else logger.debug
                log("Event stream unavailable (%s): %s", self.ws_url, e)
            except Exception:
                logger.exception("Unexpected event stream failure")
            finally:
                await self._disconnect()
            first_attempt = False

            if await self._stopped_within(self._reconnect_delay):
                break
            logger.info("Reconnecting to event stream")

    async def _session(self) -> AsyncIterator[str]:
        """Connect, then yield text messages until the engine closes."""
        self._ws = await websockets.connect(
            self.ws_url,
            ssl=self._ssl_context(),
            open_timeout=self._config.timeout,
            close_timeout=5,
        )
        logger.info("Connected to event stream")
        while not self._stopping.is_set():
            try:
                raw = await self._ws.recv()
            except websockets.ConnectionClosed:
                return
            yield raw.decode("utf-8") if isinstance(raw, bytes) else raw

    def _ssl_context(self) -> ssl.SSLContext | None:
        if not self._config.is_secure:
            return None
        context = ssl.create_default_context()
        if not self._config.verify_ssl:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        return context

    async def _stopped_within(self, delay: float) -> bool:
        """Wait up to delay seconds; True if stop() was called meanwhile."""
        try:
            await asyncio.wait_for(self._stopping.wait(), timeout=delay)
        except TimeoutError:
            return False
        return True

    async def _disconnect(self) -> None:
        ws, self._ws = self._ws, None
        if ws is not None:
            with contextlib.suppress(WebSocketException):
                await ws.close()

    async def handle_message(self, message: str) -> None:
        """Decode one engine message and emit it on the channel.

        Malformed messages and unknown event names are logged and dropped.
        """
        decoded = _decode(message)
        if decoded is not None:
            await self._channel.emit(*decoded)


def _decode(message: str) -> tuple[EventKind, dict[str, Any]] | None:
    try:
        data = json.loads(message)
    except json.JSONDecodeError:
        data = None
    if not isinstance(data, dict):
        logger.warning("Unreadable event message: %.100s", message)
        return None

    try:
        kind = EventKind(data.get("event"))
    except ValueError:
        logger.debug("Ignoring event %r", data.get("event"))
        return None

    payload = data.get("payload")
    if not isinstance(payload, dict) or "transfer_id" not in payload:
        logger.warning("%s event without transfer_id: %s", kind.value, data)
        return None
    return kind, payload
