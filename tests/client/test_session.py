"""Tests for TransferSession wiring."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, MagicMock

import pytest

from ftpdeck.client.session import TransferSession
from ftpdeck.client.transfer.events import EventKind
from ftpdeck.client.transfer.types import FileEntry

if TYPE_CHECKING:
    from tests.conftest import FakeEngine, RecordingNotifier


class TestLifecycle:
    """Tests for start/stop."""

    @pytest.mark.asyncio
    async def test_start_attaches_bridge(
        self, engine: FakeEngine, notifier: RecordingNotifier
    ) -> None:
        """Events reach the registry only while started."""
        session = TransferSession(engine, notifier)
        await session.channel.emit(EventKind.PROGRESS, {"transfer_id": "a"})
        assert len(session.registry) == 0

        async with session:
            assert session.started is True
            await session.channel.emit(EventKind.PROGRESS, {"transfer_id": "a"})
            assert "a" in session.registry

        assert session.started is False
        assert session.channel.listener_count() == 0

    @pytest.mark.asyncio
    async def test_listener_started_and_stopped(
        self, engine: FakeEngine, notifier: RecordingNotifier
    ) -> None:
        """The listener built by the factory follows the session."""
        listener = MagicMock()
        listener.stop = AsyncMock()
        factory = MagicMock(return_value=listener)

        async with TransferSession(engine, notifier, listener_factory=factory) as session:
            factory.assert_called_once_with(session.channel)
            listener.start.assert_called_once()

        listener.stop.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_start_twice_registers_once(
        self, engine: FakeEngine, notifier: RecordingNotifier
    ) -> None:
        session = TransferSession(engine, notifier)

        await session.start()
        await session.start()

        assert session.channel.listener_count(EventKind.PROGRESS) == 1
        await session.stop()

    @pytest.mark.asyncio
    async def test_sessions_are_independent(
        self, engine: FakeEngine, notifier: RecordingNotifier
    ) -> None:
        """Two sessions share no state."""
        first = TransferSession(engine, notifier)
        second = TransferSession(engine, notifier)

        async with first, second:
            await first.channel.emit(EventKind.PROGRESS, {"transfer_id": "a"})

        assert "a" in first.registry
        assert "a" not in second.registry
        assert first.gate is not second.gate

    @pytest.mark.asyncio
    async def test_default_download_dir(
        self, engine: FakeEngine, notifier: RecordingNotifier
    ) -> None:
        session = TransferSession(engine, notifier, default_download_dir="/data")

        await session.coordinator.download(1, [FileEntry(name="a", path="/srv/a")])

        assert engine.calls_to("start_download")[0][2] == "/data/a"


class TestWaitFor:
    """Tests for waiting on terminal events."""

    @pytest.mark.asyncio
    async def test_returns_when_all_settled(
        self, engine: FakeEngine, notifier: RecordingNotifier
    ) -> None:
        """Each terminal kind counts as settled."""
        async with TransferSession(engine, notifier) as session:
            waiter = asyncio.create_task(session.wait_for(["a", "b", "c"], timeout=2))
            await asyncio.sleep(0)

            await session.channel.emit(EventKind.COMPLETE, {"transfer_id": "a"})
            await session.channel.emit(EventKind.FAILED, {"transfer_id": "b", "error": "x"})
            assert not waiter.done()
            await session.channel.emit(EventKind.CANCELLED, {"transfer_id": "c"})

            await waiter

            assert session._settled == {}

    @pytest.mark.asyncio
    async def test_progress_does_not_settle(
        self, engine: FakeEngine, notifier: RecordingNotifier
    ) -> None:
        async with TransferSession(engine, notifier) as session:
            await session.channel.emit(EventKind.PROGRESS, {"transfer_id": "a"})
            assert "a" not in session._settled

    @pytest.mark.asyncio
    async def test_already_settled(
        self, engine: FakeEngine, notifier: RecordingNotifier
    ) -> None:
        """Events seen before waiting are not lost."""
        async with TransferSession(engine, notifier) as session:
            await session.channel.emit(EventKind.COMPLETE, {"transfer_id": "a"})

            await session.wait_for(["a"], timeout=1)

    @pytest.mark.asyncio
    async def test_empty(self, engine: FakeEngine, notifier: RecordingNotifier) -> None:
        async with TransferSession(engine, notifier) as session:
            await session.wait_for([], timeout=1)

    @pytest.mark.asyncio
    async def test_timeout(self, engine: FakeEngine, notifier: RecordingNotifier) -> None:
        """Raises when a transfer never settles."""
        async with TransferSession(engine, notifier) as session:
            with pytest.raises(TimeoutError):
                await session.wait_for(["never"], timeout=0.05)

    @pytest.mark.asyncio
    async def test_timeout_forgets_ids(
        self, engine: FakeEngine, notifier: RecordingNotifier
    ) -> None:
        """Ids of a timed-out wait are not kept either."""
        async with TransferSession(engine, notifier) as session:
            await session.channel.emit(EventKind.COMPLETE, {"transfer_id": "a"})
            with pytest.raises(TimeoutError):
                await session.wait_for(["a", "never"], timeout=0.05)

            assert session._settled == {}

    @pytest.mark.asyncio
    async def test_unawaited_ids_are_bounded(
        self,
        engine: FakeEngine,
        notifier: RecordingNotifier,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Without a waiter, only the most recent terminal ids are remembered."""
        monkeypatch.setattr("ftpdeck.client.session._SETTLED_LIMIT", 3)
        async with TransferSession(engine, notifier) as session:
            for n in range(10):
                await session.channel.emit(EventKind.COMPLETE, {"transfer_id": f"t{n}"})

            assert list(session._settled) == ["t7", "t8", "t9"]
            await session.wait_for(["t9"], timeout=1)
            assert list(session._settled) == ["t7", "t8"]
