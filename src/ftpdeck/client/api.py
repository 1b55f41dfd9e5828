"""HTTP client for the transfer engine's command API.

This module provides:
- EngineClient: async HTTP implementation of the TransferEngine protocol
- EngineError and subclasses for failed requests
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from ftpdeck.client.transfer.types import FileEntry, HistoryRecord

if TYPE_CHECKING:
    from ftpdeck.client.transfer.types import TransferId
    from ftpdeck.core.config import EngineConfig

logger = logging.getLogger(__name__)


class EngineError(Exception):
    """Base exception for engine API errors."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(EngineError):
    """Authentication failed."""


class NotFoundError(EngineError):
    """Resource not found."""


class EngineClient:
    """Async HTTP client for the transfer engine.

    Usage:
        async with EngineClient(config) as engine:
            transfer_id = await engine.start_upload(1, "/a.txt", "/srv/a.txt", "a.txt", 10)
    """

    def __init__(
        self,
        config: EngineConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the engine client.

        Args:
            config: Engine configuration with URL, token and settings.
            transport: Optional transport override.
        """
        self._config = config
        self._client = httpx.AsyncClient(
            base_url=config.engine_url,
            timeout=config.timeout,
            verify=config.verify_ssl,
            headers={"Authorization": f"Bearer {config.token}"},
            transport=transport,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> EngineClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    def _handle_response(self, response: httpx.Response) -> httpx.Response:
        """Handle API response and raise appropriate exceptions."""
        if response.status_code < 400:
            return response
        try:
            body = response.json()
        except ValueError:
            body = None
        detail = body.get("detail") if isinstance(body, dict) else None
        if response.status_code == 401:
            raise AuthenticationError("Invalid or expired token", 401)
        if response.status_code == 404:
            raise NotFoundError(detail or "Resource not found", 404)
        raise EngineError(detail or response.text or "Unknown error", response.status_code)

    async def _get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        response = self._handle_response(await self._client.get(url, params=params))
        return response.json()

    async def _post_json(self, url: str, body: dict[str, Any] | None = None) -> Any:
        response = self._handle_response(await self._client.post(url, json=body))
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # === Health check ===

    async def health_check(self) -> bool:
        """Check if the engine is reachable."""
        try:
            response = await self._client.get("/health")
            return response.status_code == 200
        except httpx.RequestError:
            return False

    # === Existence checks ===

    async def remote_file_exists(self, host_id: int, path: str) -> bool:
        data = await self._get_json(f"/api/hosts/{host_id}/exists", params={"path": path})
        return bool(data["exists"])

    async def local_file_exists(self, path: str) -> bool:
        data = await self._get_json("/api/local/exists", params={"path": path})
        return bool(data["exists"])

    async def list_directory(self, host_id: int, path: str) -> list[FileEntry]:
        """List a remote directory.

        Args:
            host_id: Connected host.
            path: Remote directory.

        Returns:
            Entries of the directory.
        """
        data = await self._get_json(f"/api/hosts/{host_id}/files", params={"path": path})
        return [FileEntry.from_dict(e) for e in data]

    # === Transfers ===

    async def start_upload(
        self,
        host_id: int,
        local_path: str,
        remote_path: str,
        filename: str,
        file_size: int,
    ) -> TransferId:
        data = await self._post_json(
            "/api/transfers/upload",
            {
                "host_id": host_id,
                "local_path": local_path,
                "remote_path": remote_path,
                "filename": filename,
                "file_size": file_size,
            },
        )
        return str(data["transfer_id"])

    async def start_download(
        self,
        host_id: int,
        remote_path: str,
        local_path: str,
        filename: str,
        file_size: int,
    ) -> TransferId:
        data = await self._post_json(
            "/api/transfers/download",
            {
                "host_id": host_id,
                "remote_path": remote_path,
                "local_path": local_path,
                "filename": filename,
                "file_size": file_size,
            },
        )
        return str(data["transfer_id"])

    async def start_directory_upload(
        self, host_id: int, local_dir: str, remote_dir: str
    ) -> list[TransferId]:
        data = await self._post_json(
            "/api/transfers/upload-directory",
            {"host_id": host_id, "local_dir": local_dir, "remote_dir": remote_dir},
        )
        return [str(t) for t in data["transfer_ids"]]

    async def start_directory_download(
        self, host_id: int, remote_dir: str, local_dir: str
    ) -> list[TransferId]:
        data = await self._post_json(
            "/api/transfers/download-directory",
            {"host_id": host_id, "remote_dir": remote_dir, "local_dir": local_dir},
        )
        return [str(t) for t in data["transfer_ids"]]

    async def cancel_transfer(self, transfer_id: TransferId) -> None:
        await self._post_json(f"/api/transfers/{transfer_id}/cancel")

    async def retry_transfer(self, history_id: int) -> TransferId:
        data = await self._post_json(f"/api/history/{history_id}/retry")
        return str(data["transfer_id"])

    # === History ===

    async def get_history(self, host_id: int | None = None) -> list[HistoryRecord]:
        """Fetch transfer history.

        Args:
            host_id: Only this host's history; all hosts when None.
        """
        params = {}
        if host_id is not None:
            params["host_id"] = str(host_id)
        data = await self._get_json("/api/history", params=params)
        return [HistoryRecord.from_dict(h) for h in data]

    async def clear_history(self) -> None:
        self._handle_response(await self._client.delete("/api/history"))
