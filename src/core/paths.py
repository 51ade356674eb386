from __future__ import annotations

from typing import Tuple

"""
Path utilities used across the project.

Provides consistent POSIX-style normalization for repository paths so the
same file always lands at the same location regardless of the OS or of
stray slashes in user input.
"""


def split_posix(p: str) -> Tuple[str, ...]:
    """Split a path into non-empty POSIX segments, dropping '.' markers."""
    s = (p or "").strip().replace("\\", "/")
    return tuple(seg for seg in s.split("/") if seg and seg != ".")


def normalize_posix_relpath(p: str) -> str:
    """Normalize a user path to a clean POSIX relative path.

    Converts backslashes to '/', trims whitespace, removes leading '/',
    collapses repeated '/' and drops './' markers. Segment order is kept.
    """
    return "/".join(split_posix(p))


def join_repo_path(prefix: str, rel_path: str) -> str:
    """Join a target prefix and a relative path into a normalized repo path.

    An empty prefix leaves the relative path unchanged (after normalization).
    """
    return "/".join(split_posix(prefix) + split_posix(rel_path))
