"""Immutable dataclasses for the upload pipeline.

Includes the upload configuration record, the file entries produced by
enumeration, the remote content reference returned by lookups and the
per-file / per-batch results reported back to the front ends.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Literal, Optional

from config import CLI_COMMIT_MESSAGE, DEFAULT_BRANCH


Visibility = Literal["private", "public"]


@dataclass(frozen=True)
class UploadConfig:
    """Where and how files are written.

    Field groups:
    - Credentials: token
    - Target: owner, repo, branch, target_path
    - Commit: message
    """

    token: str
    owner: str
    repo: str

    branch: str = DEFAULT_BRANCH
    message: str = CLI_COMMIT_MESSAGE
    target_path: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    def __repr__(self) -> str:
        # keep the token out of logs and tracebacks
        return (
            f"UploadConfig(owner={self.owner!r}, repo={self.repo!r}, branch={self.branch!r}, "
            f"message={self.message!r}, target_path={self.target_path!r})"
        )


@dataclass(frozen=True)
class FileEntry:
    """A file queued for upload.

    `repo_path` is relative to the walk root (posix, no leading slash);
    the configured target path is joined later by the reconciler.
    Exactly one of `local_path` / `data` carries the bytes.
    """

    repo_path: str
    size: int

    local_path: Optional[Path] = None
    data: Optional[bytes] = None
    # set when enumeration could not read this path; reading it fails
    error: Optional[str] = None


@dataclass(frozen=True)
class RemoteFileRef:
    # sha is None when the path does not exist at the branch tip
    path: str
    sha: Optional[str] = None

    @property
    def exists(self) -> bool:
        return self.sha is not None


@dataclass(frozen=True)
class UploadResult:
    path: str
    success: bool

    url: Optional[str] = None
    error: Optional[str] = None
    sha: Optional[str] = None


@dataclass
class BatchSummary:
    success_count: int = 0
    failed_count: int = 0
    results: List[UploadResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.success_count + self.failed_count

    def add(self, result: UploadResult) -> None:
        self.results.append(result)
        if result.success:
            self.success_count += 1
        else:
            self.failed_count += 1


@dataclass(frozen=True)
class GatewayResponse:
    """Uniform (ok, status, data) view of a GitHub API response."""

    ok: bool
    status: int
    data: Any = None

    @property
    def message(self) -> Optional[str]:
        if isinstance(self.data, dict):
            msg = self.data.get("message")
            return str(msg) if msg else None
        return None
