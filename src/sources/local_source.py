from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List

from core.errors import LocalReadError, NotFoundError, ValidationError
from core.models import FileEntry


"""Local filesystem enumeration for uploads.

Turns a file or directory into a flat, deterministic list of FileEntry
objects before any upload starts, with repository paths relative to the
walk root in POSIX form.
"""


class LocalSource:
    # Local filesystem source of upload entries.

    def __init__(self, *, root: Path) -> None:
        self._root = Path(root).resolve()

    @property
    def root(self) -> Path:
        return self._root

    def _collect(self, directory: Path, out: List[FileEntry]) -> None:
        try:
            children = sorted(directory.iterdir(), key=lambda c: c.name)
        except OSError as e:
            if directory == self._root:
                raise
            # An unreadable subtree becomes one failed entry; the rest of the walk goes on
            out.append(
                FileEntry(
                    repo_path=directory.relative_to(self._root).as_posix(),
                    size=0,
                    local_path=directory,
                    error=f"Cannot read directory: {e}",
                )
            )
            return

        # Depth-first; siblings sorted by name so runs are reproducible
        for p in children:
            if p.is_dir():
                self._collect(p, out)
            elif p.is_file():
                out.append(
                    FileEntry(
                        # Use POSIX-style paths to keep repo paths stable across OSes
                        repo_path=p.relative_to(self._root).as_posix(),
                        size=p.stat().st_size,
                        local_path=p,
                    )
                )

    async def list_entries(self) -> List[FileEntry]:
        """Enumerate every file under the root (or the root itself if it is a file)."""

        def _do() -> List[FileEntry]:
            if not self._root.exists():
                raise NotFoundError(f"{self._root} does not exist")

            if self._root.is_file():
                return [
                    FileEntry(
                        repo_path=self._root.name,
                        size=self._root.stat().st_size,
                        local_path=self._root,
                    )
                ]

            out: List[FileEntry] = []
            self._collect(self._root, out)
            return out

        # Offload blocking filesystem IO to a thread to keep async loop responsive
        return await asyncio.to_thread(_do)

    async def read_bytes(self, entry: FileEntry) -> bytes:
        return await read_entry(entry)


async def read_entry(entry: FileEntry) -> bytes:
    """Return an entry's bytes, from memory or from disk."""
    if entry.error:
        raise LocalReadError(entry.error)
    if entry.data is not None:
        return entry.data
    if entry.local_path is None:
        raise ValidationError(f"Entry has no content: {entry.repo_path}")

    p = entry.local_path

    def _do() -> bytes:
        if not p.is_file():
            raise NotFoundError(f"File not found: {p}")
        return p.read_bytes()

    return await asyncio.to_thread(_do)
