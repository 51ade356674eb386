"""Async client for the upload relay's HTTP API.

Mirrors the calls the browser page makes (check-repo, create-repo,
upload) so the same orchestration can be driven from Python.
"""

from __future__ import annotations

import json
import logging
from pathlib import PurePosixPath
from typing import Any, Dict, Optional

import httpx

from config import HTTP_TIMEOUT, timeout_or_none
from core.errors import ExternalServiceError, ValidationError
from core.models import FileEntry, UploadConfig, UploadResult, Visibility
from core.paths import join_repo_path

logger = logging.getLogger(__name__)


class RelayClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: Optional[float] = timeout_or_none(HTTP_TIMEOUT),
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = (base_url or "").strip().rstrip("/")
        if not self._base_url:
            raise ValidationError("Missing relay URL")
        self._timeout = timeout
        self._transport = transport

    async def check_repo(self, config: UploadConfig) -> bool:
        data = await self._post(
            "/api/check-repo",
            json={"token": config.token, "username": config.owner, "repoName": config.repo},
        )
        if data.get("error"):
            raise ExternalServiceError(f"Repository check failed: {data['error']}")
        return bool(data.get("exists"))

    async def create_repo(self, config: UploadConfig, visibility: Visibility) -> Dict[str, Any]:
        return await self._post(
            "/api/create-repo",
            json={"token": config.token, "repoName": config.repo, "visibility": visibility},
        )

    async def upload(self, config: UploadConfig, entry: FileEntry, data: bytes) -> UploadResult:
        form = {
            "token": config.token,
            "username": config.owner,
            "repoName": config.repo,
            "branch": config.branch,
            "message": config.message,
            "path": config.target_path,
            "relativePath": entry.repo_path,
        }
        filename = PurePosixPath(entry.repo_path).name or "file"
        body = await self._post("/api/upload", data=form, files={"file": (filename, data)})
        path = join_repo_path(config.target_path, entry.repo_path)
        if body.get("success"):
            return UploadResult(path=body.get("path") or path, success=True, url=body.get("url"))
        return UploadResult(path=path, success=False, error=body.get("error") or "Upload failed")

    # --- HTTP helpers ---

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self._base_url, timeout=self._timeout, transport=self._transport)

    async def _post(self, url: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            async with self._create_client() as client:
                resp = await client.post(url, **kwargs)
        except httpx.HTTPError as e:
            raise ExternalServiceError(f"Relay request failed (POST {url}): {e}") from e

        logger.debug("Relay POST %s -> %d", url, resp.status_code)
        try:
            data = resp.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ExternalServiceError(f"Relay returned a malformed response (POST {url}): {e}") from e
        if not isinstance(data, dict):
            raise ExternalServiceError(f"Relay returned an unexpected payload (POST {url})")
        return data
