"""Tests for notification system."""

from unittest.mock import MagicMock, patch

import pytest

from ftpdeck.client import notifications
from ftpdeck.client.notifications import (
    ConsoleNotifier,
    Notification,
    NotificationType,
    SystemNotifier,
    send_system_notification,
)


class TestNotification:
    """Tests for Notification dataclass."""

    def test_notification_default_type(self) -> None:
        """Should default to INFO type."""
        notif = Notification(title="Title", message="Message")
        assert notif.type == NotificationType.INFO


class TestLifecycleMessages:
    """Tests for transfer lifecycle message helpers."""

    def test_transfer_complete(self) -> None:
        notif = notifications.transfer_complete("a.txt")
        assert notif.message == "a.txt transfer complete"
        assert notif.type == NotificationType.SUCCESS

    def test_transfer_failed(self) -> None:
        """Should include the engine's error text."""
        notif = notifications.transfer_failed("a.txt", "connection reset")
        assert notif.message == "a.txt transfer failed: connection reset"
        assert notif.type == NotificationType.ERROR
        assert "Failed" in notif.title

    def test_transfer_cancelled(self) -> None:
        notif = notifications.transfer_cancelled("a.txt")
        assert notif.message == "a.txt cancelled"
        assert notif.type == NotificationType.INFO

    def test_directory_queued(self) -> None:
        """Should include direction and file count."""
        notif = notifications.directory_queued("photos", "download", 12)
        assert notif.message == "Directory photos queued for download (12 files)"

    def test_dispatch_failed(self) -> None:
        notif = notifications.dispatch_failed("a.txt", "upload", RuntimeError("denied"))
        assert notif.message == "Failed to upload a.txt: denied"
        assert notif.type == NotificationType.ERROR


class TestConsoleNotifier:
    """Tests for ConsoleNotifier."""

    def test_info_goes_to_stdout(self, capsys: pytest.CaptureFixture[str]) -> None:
        ConsoleNotifier().notify(notifications.transfer_complete("a.txt"))

        captured = capsys.readouterr()
        assert "a.txt transfer complete" in captured.out
        assert captured.err == ""

    def test_error_goes_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Errors should be written to stderr."""
        ConsoleNotifier().notify(notifications.transfer_failed("a.txt", "boom"))

        captured = capsys.readouterr()
        assert "a.txt transfer failed: boom" in captured.err
        assert captured.out == ""


class TestSendSystemNotification:
    """Tests for send_system_notification function."""

    @patch("ftpdeck.client.notifications._notify_windows")
    @patch("ftpdeck.client.notifications.platform.system")
    def test_windows_notification(
        self, mock_system: MagicMock, mock_notify: MagicMock
    ) -> None:
        """Should use Windows notification on Windows."""
        mock_system.return_value = "Windows"
        mock_notify.return_value = True

        notif = Notification(title="Test", message="Message")

        assert send_system_notification(notif) is True
        mock_notify.assert_called_once_with(notif)

    @patch("ftpdeck.client.notifications._notify_macos")
    @patch("ftpdeck.client.notifications.platform.system")
    def test_macos_notification(
        self, mock_system: MagicMock, mock_notify: MagicMock
    ) -> None:
        """Should use macOS notification on Darwin."""
        mock_system.return_value = "Darwin"
        mock_notify.return_value = True

        notif = Notification(title="Test", message="Message")

        assert send_system_notification(notif) is True
        mock_notify.assert_called_once_with(notif)

    @patch("ftpdeck.client.notifications._notify_linux")
    @patch("ftpdeck.client.notifications.platform.system")
    def test_linux_notification(
        self, mock_system: MagicMock, mock_notify: MagicMock
    ) -> None:
        """Should use Linux notification on Linux."""
        mock_system.return_value = "Linux"
        mock_notify.return_value = True

        notif = Notification(title="Test", message="Message")

        assert send_system_notification(notif) is True
        mock_notify.assert_called_once_with(notif)

    @patch("ftpdeck.client.notifications.platform.system")
    def test_unsupported_platform(self, mock_system: MagicMock) -> None:
        """Should return False on unsupported platform."""
        mock_system.return_value = "FreeBSD"

        assert send_system_notification(Notification(title="T", message="M")) is False

    @patch("ftpdeck.client.notifications.subprocess.run")
    def test_linux_missing_notify_send(self, mock_run: MagicMock) -> None:
        """A missing notify-send binary is reported as failure."""
        mock_run.side_effect = FileNotFoundError()

        assert notifications._notify_linux(Notification(title="T", message="M")) is False

    @patch("ftpdeck.client.notifications.subprocess.run")
    def test_linux_error_is_critical(self, mock_run: MagicMock) -> None:
        """Errors are sent with critical urgency."""
        notifications._notify_linux(notifications.transfer_failed("a.txt", "boom"))

        args = mock_run.call_args[0][0]
        assert args[args.index("--urgency") + 1] == "critical"


class TestSystemNotifier:
    """Tests for SystemNotifier fallback."""

    @patch("ftpdeck.client.notifications.send_system_notification")
    def test_uses_system_when_available(self, mock_send: MagicMock) -> None:
        mock_send.return_value = True
        fallback = MagicMock()

        SystemNotifier(fallback=fallback).notify(Notification(title="T", message="M"))

        fallback.notify.assert_not_called()

    @patch("ftpdeck.client.notifications.send_system_notification")
    def test_falls_back_on_failure(self, mock_send: MagicMock) -> None:
        """Should hand the notification to the fallback."""
        mock_send.return_value = False
        fallback = MagicMock()
        notif = Notification(title="T", message="M")

        SystemNotifier(fallback=fallback).notify(notif)

        fallback.notify.assert_called_once_with(notif)
