"""Shared configuration classes for ftpdeck.

This module defines the configuration used to reach the transfer engine,
both for its HTTP command API and its WebSocket event stream.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class EngineConfig:
    """Configuration for connecting to a transfer engine.

    Used by both the HTTP client (EngineClient) and the WebSocket event
    listener (EngineEventListener) to ensure consistent connection settings.

    Attributes:
        engine_url: Base URL of the engine (e.g., "http://127.0.0.1:7420").
        token: Authentication token for this client.
        timeout: Request/connection timeout in seconds.
        verify_ssl: Whether to verify SSL certificates (default True).
        reconnect_delay: Seconds to wait before reconnecting the event stream.
        default_download_dir: Local directory used when a download batch
            names no destination.
    """

    engine_url: str
    token: str
    timeout: float = 30.0
    verify_ssl: bool = True
    reconnect_delay: float = 5.0
    default_download_dir: str = "/tmp"

    def __post_init__(self) -> None:
        """Normalize engine URL."""
        self.engine_url = self.engine_url.rstrip("/")

    @property
    def ws_url(self) -> str:
        """Get WebSocket URL for the transfer event stream.

        Returns:
            WebSocket URL with token in path.
        """
        url = self.engine_url
        if url.startswith("https://"):
            url = "wss://" + url[8:]
        elif url.startswith("http://"):
            url = "ws://" + url[7:]
        return f"{url}/ws/events/{self.token}"

    @property
    def is_secure(self) -> bool:
        """Check if using HTTPS/WSS."""
        return self.engine_url.startswith("https://")
