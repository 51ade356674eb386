from __future__ import annotations

from dataclasses import replace
from typing import Optional

from config import DEFAULT_BRANCH
from core.errors import ConfigurationError, ValidationError
from core.models import UploadConfig, Visibility
from core.paths import normalize_posix_relpath


def normalize_ref(ref: Optional[str]) -> str:
    ref_clean = (ref or DEFAULT_BRANCH).strip()
    if not ref_clean:
        raise ValidationError("branch must be non-empty")
    return ref_clean


def normalize_path(path: str) -> str:
    # Keep GitHub paths stable and OS-independent:
    # - Convert "\" to "/"
    # - Drop leading "/", repeated "/" and "./" markers
    # - Require a non-empty relative path
    path_clean = normalize_posix_relpath(path)
    if not path_clean:
        raise ValidationError("path must be non-empty")
    return path_clean


def normalize_visibility(visibility: Optional[str]) -> Visibility:
    v = (visibility or "private").strip().lower()
    if v not in ("private", "public"):
        raise ValidationError(f"visibility must be 'private' or 'public', got {visibility!r}")
    return "private" if v == "private" else "public"


def normalize_config(config: UploadConfig) -> UploadConfig:
    """Validate the fields every network call needs and trim the rest.

    Raises ConfigurationError naming every missing field before any
    request is attempted.
    """
    token = (config.token or "").strip()
    owner = (config.owner or "").strip()
    repo = (config.repo or "").strip()

    missing = [
        name
        for name, value in (("token", token), ("username", owner), ("repo", repo))
        if not value
    ]
    if missing:
        raise ConfigurationError(f"Missing required configuration ({', '.join(missing)})")

    return replace(
        config,
        token=token,
        owner=owner,
        repo=repo,
        branch=normalize_ref(config.branch),
        target_path=normalize_posix_relpath(config.target_path),
    )
