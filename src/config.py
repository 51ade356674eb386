"""Configuration and environment helpers for the project.

Provides small helpers to read typed environment variables and exposes
project-level configuration constants used across the codebase (e.g.
GITHUB_API_URL, HTTP_VERIFY, STAGING_DIR, relay host/port and the
repository readiness polling limits).
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Values from a local .env act as defaults beneath the real environment
load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


def timeout_or_none(seconds: float) -> Optional[float]:
    """Map a non-positive timeout to None (httpx: wait forever)."""
    return float(seconds) if seconds and seconds > 0 else None


# GitHub
GITHUB_API_URL = os.environ.get("GITHUB_API_URL", "https://api.github.com").strip().rstrip("/")
USER_AGENT = "github-uploader"

# Network / HTTP
HTTP_VERIFY = _env_bool("HTTP_VERIFY", True)
HTTP_TIMEOUT = _env_float("HTTP_TIMEOUT", 0.0)

# Upload defaults
DEFAULT_BRANCH = "main"
CLI_COMMIT_MESSAGE = "Upload via CLI"
WEB_COMMIT_MESSAGE = "Upload file via GitHub Uploader"

# Relay server
HOST = os.environ.get("HOST", "0.0.0.0").strip()
PORT = _env_int("PORT", 3000)
STAGING_DIR = Path(os.environ.get("STAGING_DIR", "uploads").strip() or "uploads")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"

# Repository readiness after auto-create
REPO_READY_TIMEOUT = _env_float("REPO_READY_TIMEOUT", 30.0)
REPO_READY_INTERVAL = _env_float("REPO_READY_INTERVAL", 1.0)
