"""User-facing notifications for ftpdeck.

This module provides:
- Notification / NotificationType: what to tell the user
- ConsoleNotifier: coloured terminal output via click
- SystemNotifier: native OS notifications (Windows toast, macOS
  notification center, Linux notify-send) with console fallback
- Message helpers for the transfer lifecycle
"""

from __future__ import annotations

import logging
import os
import platform
import subprocess
from dataclasses import dataclass
from enum import Enum, auto
from typing import Protocol

import click

logger = logging.getLogger(__name__)

APP_NAME = "ftpdeck"


class NotificationType(Enum):
    """Type of notification."""

    INFO = auto()
    SUCCESS = auto()
    WARNING = auto()
    ERROR = auto()


@dataclass
class Notification:
    """Represents a notification to display."""

    title: str
    message: str
    type: NotificationType = NotificationType.INFO


class Notifier(Protocol):
    """Anything that can show a Notification to the user."""

    def notify(self, notification: Notification) -> None: ...


_CONSOLE_COLOURS = {
    NotificationType.INFO: None,
    NotificationType.SUCCESS: "green",
    NotificationType.WARNING: "yellow",
    NotificationType.ERROR: "red",
}


class ConsoleNotifier:
    """Print notifications to the terminal."""

    def notify(self, notification: Notification) -> None:
        click.secho(
            notification.message,
            fg=_CONSOLE_COLOURS.get(notification.type),
            err=notification.type == NotificationType.ERROR,
        )


# === Desktop back-ends ===
#
# Each back-end shells out to the platform's own notifier and reports
# whether it succeeded, so SystemNotifier can fall back to the console.

# Title and message arrive through the environment, never interpolated
_TOAST_SCRIPT = """
[Windows.UI.Notifications.ToastNotificationManager, Windows.UI.Notifications, ContentType = WindowsRuntime] | Out-Null
$xml = [Windows.UI.Notifications.ToastNotificationManager]::GetTemplateContent(
    [Windows.UI.Notifications.ToastTemplateType]::ToastText02)
$text = $xml.GetElementsByTagName("text")
$text.Item(0).AppendChild($xml.CreateTextNode($env:FTPDECK_TITLE)) | Out-Null
$text.Item(1).AppendChild($xml.CreateTextNode($env:FTPDECK_MESSAGE)) | Out-Null
$notifier = [Windows.UI.Notifications.ToastNotificationManager]::CreateToastNotifier($env:FTPDECK_APP)
$notifier.Show([Windows.UI.Notifications.ToastNotification]::new($xml))
"""

_LINUX_URGENCY = {
    NotificationType.ERROR: "critical",
    NotificationType.WARNING: "normal",
    NotificationType.SUCCESS: "normal",
    NotificationType.INFO: "low",
}


def _run(argv: list[str], env: dict[str, str] | None = None) -> bool:
    try:
        subprocess.run(
            argv,
            capture_output=True,
            check=True,
            env=env,
            creationflags=getattr(subprocess, "CREATE_NO_WINDOW", 0),
        )
    except FileNotFoundError:
        logger.debug("%s not found", argv[0])
        return False
    except (OSError, subprocess.CalledProcessError) as e:
        logger.debug("%s failed: %s", argv[0], e)
        return False
    return True


def _notify_windows(notification: Notification) -> bool:
    env = {
        **os.environ,
        "FTPDECK_APP": APP_NAME,
        "FTPDECK_TITLE": notification.title,
        "FTPDECK_MESSAGE": notification.message,
    }
    return _run(
        ["powershell", "-NoProfile", "-ExecutionPolicy", "Bypass", "-Command", _TOAST_SCRIPT],
        env=env,
    )


def _applescript_string(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _notify_macos(notification: Notification) -> bool:
    script = (
        f"display notification {_applescript_string(notification.message)} "
        f"with title {_applescript_string(notification.title)}"
    )
    return _run(["osascript", "-e", script])


def _notify_linux(notification: Notification) -> bool:
    return _run([
        "notify-send",
        "--urgency", _LINUX_URGENCY[notification.type],
        "--app-name", APP_NAME,
        notification.title,
        notification.message,
    ])


def send_system_notification(notification: Notification) -> bool:
    """Show a desktop notification.

    Returns:
        True if the platform notifier accepted it.
    """
    system = platform.system()
    if system == "Windows":
        return _notify_windows(notification)
    if system == "Darwin":
        return _notify_macos(notification)
    if system == "Linux":
        return _notify_linux(notification)
    logger.debug("No desktop notifications on %s", system)
    return False


class SystemNotifier:
    """Native OS notifications, falling back to the console."""

    def __init__(self, fallback: Notifier | None = None) -> None:
        self._fallback = fallback or ConsoleNotifier()

    def notify(self, notification: Notification) -> None:
        if not send_system_notification(notification):
            self._fallback.notify(notification)


# === Transfer lifecycle messages ===


def transfer_complete(filename: str) -> Notification:
    return Notification(
        title=f"{APP_NAME} - Transfer Complete",
        message=f"{filename} transfer complete",
        type=NotificationType.SUCCESS,
    )


def transfer_failed(filename: str, error: str) -> Notification:
    return Notification(
        title=f"{APP_NAME} - Transfer Failed",
        message=f"{filename} transfer failed: {error}",
        type=NotificationType.ERROR,
    )


def transfer_cancelled(filename: str) -> Notification:
    return Notification(
        title=f"{APP_NAME} - Transfer Cancelled",
        message=f"{filename} cancelled",
        type=NotificationType.INFO,
    )


def directory_queued(name: str, direction: str, file_count: int) -> Notification:
    """Directory handed to the engine; direction is "upload" or "download"."""
    return Notification(
        title=f"{APP_NAME} - Directory Queued",
        message=f"Directory {name} queued for {direction} ({file_count} files)",
        type=NotificationType.INFO,
    )


def dispatch_failed(name: str, direction: str, error: object) -> Notification:
    return Notification(
        title=f"{APP_NAME} - Error",
        message=f"Failed to {direction} {name}: {error}",
        type=NotificationType.ERROR,
    )


def warning(message: str) -> Notification:
    return Notification(
        title=f"{APP_NAME} - Warning",
        message=message,
        type=NotificationType.WARNING,
    )
