"""Walk a local file or directory and reconcile every file, in order."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from core.errors import LocalReadError, NotFoundError
from core.interfaces import ContentGateway
from core.models import BatchSummary, UploadConfig, UploadResult
from core.paths import join_repo_path
from sources.local_source import LocalSource
from upload.reconcile import reconcile

logger = logging.getLogger(__name__)

ResultCallback = Callable[[UploadResult], None]


async def walk(
    config: UploadConfig,
    root: Path,
    *,
    gateway: ContentGateway,
    on_result: Optional[ResultCallback] = None,
) -> BatchSummary:
    """Upload `root` (file or directory tree) and aggregate the outcome.

    The full entry list is built before the first upload. Files are sent
    one at a time and a failure never stops the batch.
    """
    source = LocalSource(root=root)
    entries = await source.list_entries()
    logger.info("Uploading %d file(s) from %s to %s:%s", len(entries), source.root, config.full_name, config.branch)

    summary = BatchSummary()
    for entry in entries:
        try:
            data = await source.read_bytes(entry)
        except (OSError, LocalReadError, NotFoundError) as e:
            path = join_repo_path(config.target_path, entry.repo_path)
            result = UploadResult(path=path, success=False, error=str(e))
        else:
            result = await reconcile(config, data, entry.repo_path, gateway=gateway)

        summary.add(result)
        if on_result is not None:
            on_result(result)

    logger.info("Batch finished: %d succeeded, %d failed", summary.success_count, summary.failed_count)
    return summary
