"""Sequential upload session driven through the relay server.

Python counterpart of the browser page's orchestration: an explicit
UploadSession carries the configuration, the queued entries, the log
and the progress counters, and `run_session` walks it through
check-repo, optional create-repo (with a bounded readiness poll) and
one upload at a time.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Awaitable, Callable, List, Optional

from clients.github.inputs import normalize_config
from clients.relay_client import RelayClient
from config import REPO_READY_INTERVAL, REPO_READY_TIMEOUT
from core.errors import ExternalServiceError, LocalReadError, NotFoundError, RepositoryNotReadyError, ValidationError
from core.models import BatchSummary, FileEntry, UploadConfig, UploadResult, Visibility
from core.paths import join_repo_path
from sources.local_source import read_entry

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    "info": logging.INFO,
    "success": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


@dataclass
class UploadSession:
    config: UploadConfig
    visibility: Visibility = "private"
    auto_create: bool = False

    entries: List[FileEntry] = field(default_factory=list)
    log: List[str] = field(default_factory=list)
    completed: int = 0
    total: int = 0

    @property
    def percent(self) -> int:
        return round(self.completed * 100 / self.total) if self.total else 0

    def add_log(self, message: str, level: str = "info") -> None:
        self.log.append(f"[{datetime.now().strftime('%H:%M:%S')}] {message}")
        logger.log(_LOG_LEVELS.get(level, logging.INFO), message)


async def wait_until_queryable(
    check: Callable[[], Awaitable[bool]],
    *,
    timeout: float = REPO_READY_TIMEOUT,
    interval: float = REPO_READY_INTERVAL,
    what: str = "repository",
) -> None:
    """Poll `check` until it returns True or `timeout` seconds have elapsed."""
    deadline = time.monotonic() + max(0.0, float(timeout))
    while True:
        if await check():
            return
        if time.monotonic() >= deadline:
            raise RepositoryNotReadyError(f"{what} was not ready after {timeout:g}s")
        await asyncio.sleep(max(0.0, float(interval)))


async def _ensure_repository(
    session: UploadSession,
    relay: RelayClient,
    *,
    ready_timeout: float,
    ready_interval: float,
) -> None:
    config = session.config
    if await relay.check_repo(config):
        return

    if not session.auto_create:
        session.add_log("Repository not found. Enable auto-create or create it manually.", "error")
        raise NotFoundError(f"Repository not found: {config.full_name}")

    session.add_log("Repository not found. Creating new repository...", "warning")
    created = await relay.create_repo(config, session.visibility)
    if not created.get("success"):
        error = created.get("error") or "Failed to create repository"
        session.add_log(f"Failed to create repository: {error}", "error")
        raise ExternalServiceError(f"Failed to create repository {config.full_name}: {error}")

    session.add_log(f"Repository '{config.repo}' created", "success")
    await wait_until_queryable(
        lambda: relay.check_repo(config),
        timeout=ready_timeout,
        interval=ready_interval,
        what=f"Repository {config.full_name}",
    )


async def run_session(
    session: UploadSession,
    relay: RelayClient,
    *,
    ready_timeout: float = REPO_READY_TIMEOUT,
    ready_interval: float = REPO_READY_INTERVAL,
    on_result: Optional[Callable[[UploadResult], None]] = None,
) -> BatchSummary:
    """Upload every queued entry through the relay, strictly one after another.

    Raises ConfigurationError before any request when credentials are
    missing, NotFoundError when the repository is absent and auto-create is
    off (no file is attempted), RepositoryNotReadyError when a created
    repository never becomes queryable.
    """
    try:
        session.config = normalize_config(session.config)
    except ValidationError as e:
        session.add_log(str(e), "error")
        raise

    summary = BatchSummary()
    if not session.entries:
        session.add_log("No files queued for upload", "warning")
        return summary

    config = session.config
    session.add_log(f"Starting upload to {config.full_name}...")
    await _ensure_repository(session, relay, ready_timeout=ready_timeout, ready_interval=ready_interval)

    session.total = len(session.entries)
    session.completed = 0
    for entry in session.entries:
        try:
            data = await read_entry(entry)
            result = await relay.upload(config, entry, data)
        except (ExternalServiceError, LocalReadError, NotFoundError, OSError) as e:
            result = UploadResult(path=join_repo_path(config.target_path, entry.repo_path), success=False, error=str(e))

        summary.add(result)
        if result.success:
            session.completed += 1
            session.add_log(f"✓ {result.path} ({session.completed}/{session.total}, {session.percent}%)", "success")
        else:
            session.add_log(f"✗ {result.path}: {result.error}", "error")
        if on_result is not None:
            on_result(result)

    if summary.failed_count == 0:
        session.add_log(f"Upload complete! All {summary.total} file(s) uploaded.", "success")
    else:
        session.add_log(f"Upload complete. {summary.success_count}/{summary.total} file(s) uploaded.", "warning")

    session.entries = []
    return summary
