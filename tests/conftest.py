"""Shared fixtures: an in-memory transfer engine and a recording notifier."""

from __future__ import annotations

import itertools
from typing import Any

import pytest

from ftpdeck.client.notifications import Notification, NotificationType
from ftpdeck.client.transfer.types import FileEntry, HistoryRecord
from ftpdeck.core.types import TransferDirection, TransferStatus


class FakeEngine:
    """TransferEngine that records every request.

    Existence is answered from remote_existing/local_existing; failures
    are injected per operation (optionally per path) with fail().
    """

    def __init__(self) -> None:
        self.remote_existing: set[str] = set()
        self.local_existing: set[str] = set()
        self.directory_sizes: dict[str, int] = {}
        self.listings: dict[str, list[FileEntry]] = {}
        self.history: list[HistoryRecord] = []
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self._failures: dict[tuple[str, str | None], Exception] = {}
        self._ids = itertools.count(1)

    def fail(self, operation: str, error: Exception, path: str | None = None) -> None:
        self._failures[(operation, path)] = error

    def calls_to(self, operation: str) -> list[tuple[Any, ...]]:
        return [args for name, args in self.calls if name == operation]

    def _record(self, operation: str, *args: Any, path: str | None = None) -> None:
        self.calls.append((operation, args))
        error = self._failures.get((operation, path)) or self._failures.get((operation, None))
        if error is not None:
            raise error

    def _next_id(self) -> str:
        return f"tid-{next(self._ids)}"

    async def __aenter__(self) -> FakeEngine:
        return self

    async def __aexit__(self, *args: object) -> None:
        pass

    async def remote_file_exists(self, host_id: int, path: str) -> bool:
        self._record("remote_file_exists", host_id, path, path=path)
        return path in self.remote_existing

    async def local_file_exists(self, path: str) -> bool:
        self._record("local_file_exists", path, path=path)
        return path in self.local_existing

    async def start_upload(
        self, host_id: int, local_path: str, remote_path: str, filename: str, file_size: int
    ) -> str:
        self._record(
            "start_upload", host_id, local_path, remote_path, filename, file_size,
            path=local_path,
        )
        return self._next_id()

    async def start_download(
        self, host_id: int, remote_path: str, local_path: str, filename: str, file_size: int
    ) -> str:
        self._record(
            "start_download", host_id, remote_path, local_path, filename, file_size,
            path=remote_path,
        )
        return self._next_id()

    async def start_directory_upload(
        self, host_id: int, local_dir: str, remote_dir: str
    ) -> list[str]:
        self._record("start_directory_upload", host_id, local_dir, remote_dir, path=local_dir)
        return [self._next_id() for _ in range(self.directory_sizes.get(local_dir, 0))]

    async def start_directory_download(
        self, host_id: int, remote_dir: str, local_dir: str
    ) -> list[str]:
        self._record("start_directory_download", host_id, remote_dir, local_dir, path=remote_dir)
        return [self._next_id() for _ in range(self.directory_sizes.get(remote_dir, 0))]

    async def cancel_transfer(self, transfer_id: str) -> None:
        self._record("cancel_transfer", transfer_id)

    async def retry_transfer(self, history_id: int) -> str:
        self._record("retry_transfer", history_id)
        return self._next_id()

    async def get_history(self, host_id: int | None = None) -> list[HistoryRecord]:
        self._record("get_history", host_id)
        if host_id is None:
            return list(self.history)
        return [h for h in self.history if h.host_id == host_id]

    async def clear_history(self) -> None:
        self._record("clear_history")
        self.history = []

    async def list_directory(self, host_id: int, path: str) -> list[FileEntry]:
        self._record("list_directory", host_id, path, path=path)
        return list(self.listings.get(path, []))


class RecordingNotifier:
    """Notifier that keeps every notification."""

    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    def of_type(self, type_: NotificationType) -> list[Notification]:
        return [n for n in self.notifications if n.type == type_]


def make_history_record(
    id: int = 1,
    host_id: int = 1,
    filename: str = "test.txt",
    status: TransferStatus = TransferStatus.SUCCESS,
    error_message: str | None = None,
) -> HistoryRecord:
    """Create a HistoryRecord for testing."""
    return HistoryRecord(
        id=id,
        host_id=host_id,
        filename=filename,
        remote_path=f"/remote/{filename}",
        local_path=f"/local/{filename}",
        direction=TransferDirection.UPLOAD,
        file_size=1024,
        transferred_size=1024 if status == TransferStatus.SUCCESS else 512,
        status=status,
        error_message=error_message,
        started_at="2025-01-01 00:00:00",
    )


@pytest.fixture
def engine() -> FakeEngine:
    """Create an in-memory transfer engine."""
    return FakeEngine()


@pytest.fixture
def notifier() -> RecordingNotifier:
    """Create a notifier that records notifications."""
    return RecordingNotifier()


@pytest.fixture
def history_factory() -> Any:
    """Factory for HistoryRecord instances."""
    return make_history_record
