"""Create-or-update a single file in a GitHub repository.

The reconcile step looks up the current blob SHA of the target path and
submits a Contents API write that carries that SHA only when the path
already exists. Every failure is reported in the returned UploadResult;
nothing is retried.
"""

from __future__ import annotations

import base64
import logging
from typing import Any, Dict, Optional

from core.errors import ExternalServiceError, RemoteLookupError
from core.interfaces import ContentGateway
from core.models import UploadConfig, UploadResult
from core.paths import join_repo_path

logger = logging.getLogger(__name__)


def build_write_payload(config: UploadConfig, content_b64: str, sha: Optional[str]) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "message": config.message,
        "content": content_b64,
        "branch": config.branch,
    }
    # sha is the optimistic-concurrency precondition for overwriting
    if sha:
        payload["sha"] = sha
    return payload


async def reconcile(
    config: UploadConfig,
    data: bytes,
    repo_path: str,
    *,
    gateway: ContentGateway,
) -> UploadResult:
    """Write `data` to `target_path/repo_path` on `config.branch`.

    `config` must already be validated (see clients.github.inputs.normalize_config).
    """
    path = join_repo_path(config.target_path, repo_path)
    if not path:
        return UploadResult(path=path, success=False, error="path must be non-empty")

    try:
        ref = await gateway.get_content_ref(config.owner, config.repo, path, config.branch)
    except RemoteLookupError as e:
        logger.warning("Lookup failed for %s: %s", path, e)
        return UploadResult(path=path, success=False, error=str(e))

    logger.debug("%s %s on %s", "Updating" if ref.exists else "Creating", path, config.branch)

    content_b64 = base64.b64encode(data).decode("ascii")
    payload = build_write_payload(config, content_b64, ref.sha)

    try:
        resp = await gateway.put_content(config.owner, config.repo, path, payload)
    except ExternalServiceError as e:
        logger.error("Upload failed for %s: %s", path, e)
        return UploadResult(path=path, success=False, error=str(e))

    if not resp.ok:
        error = resp.message or "Failed to upload file"
        logger.warning("GitHub rejected %s (status=%d): %s", path, resp.status, error)
        return UploadResult(path=path, success=False, error=error)

    body = resp.data if isinstance(resp.data, dict) else {}
    content = body.get("content") or {}
    logger.info("Uploaded %s (%d bytes)", path, len(data))
    return UploadResult(
        path=path,
        success=True,
        url=content.get("html_url"),
        sha=content.get("sha"),
    )
