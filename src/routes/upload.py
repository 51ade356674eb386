"""Relay route that uploads one browser-submitted file to GitHub.

Registers `POST /api/upload` (multipart). The file is staged under the
staging directory, handed to the reconciler and the staged copy is
removed whether the upload succeeds or fails.
"""

from __future__ import annotations

import asyncio
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, File, Form, UploadFile

from clients.github import normalize_config
from config import DEFAULT_BRANCH, WEB_COMMIT_MESSAGE
from core.errors import ValidationError
from core.models import UploadConfig
from routes.common import GatewayFactory, json_error
from upload.reconcile import reconcile

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 1024 * 1024


async def _stage_upload(file: UploadFile, staging_dir: Path) -> Path:
    staging_dir.mkdir(parents=True, exist_ok=True)
    fd, name = tempfile.mkstemp(dir=staging_dir, prefix="upload-")
    staged = Path(name)
    try:
        with os.fdopen(fd, "wb") as out:
            while True:
                chunk = await file.read(_CHUNK_SIZE)
                if not chunk:
                    break
                await asyncio.to_thread(out.write, chunk)
    except BaseException:
        staged.unlink(missing_ok=True)
        raise
    return staged


def register(app: FastAPI, *, gateway_factory: GatewayFactory, staging_dir: Path) -> None:
    @app.post("/api/upload")
    async def upload(
        file: Optional[UploadFile] = File(None),
        token: str = Form(""),
        username: str = Form(""),
        repoName: str = Form(""),
        branch: str = Form(""),
        message: str = Form(""),
        path: str = Form(""),
        relativePath: str = Form(""),
    ):
        """Create or update `path/relativePath` with the uploaded bytes.

        Returns {success: true, path, url} or {success: false, error}.
        """
        if file is None:
            return json_error(400, success=False, error="No file provided")

        try:
            config = normalize_config(
                UploadConfig(
                    token=token,
                    owner=username,
                    repo=repoName,
                    branch=branch or DEFAULT_BRANCH,
                    message=message or WEB_COMMIT_MESSAGE,
                    target_path=path,
                )
            )
        except ValidationError as e:
            return json_error(400, success=False, error=str(e))

        staged = await _stage_upload(file, staging_dir)
        try:
            data = await asyncio.to_thread(staged.read_bytes)
            result = await reconcile(
                config,
                data,
                relativePath or file.filename or "",
                gateway=gateway_factory(config.token),
            )
        finally:
            # Never leave staged bytes behind, on success or failure
            staged.unlink(missing_ok=True)

        if result.success:
            return {"success": True, "path": result.path, "url": result.url}
        return {"success": False, "error": result.error}
