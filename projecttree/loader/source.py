"""Data sources the directory loader enumerates.

A data source lists one directory at a time and reads file bytes; both calls
are coroutines and fail with ``Unreadable``. ``FileSystemDataSource`` runs the
blocking ``os.scandir``/read calls in worker threads.
"""

from __future__ import annotations

import asyncio
import os
import posixpath
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from ..tree_model import Unreadable


def extension_of(name: str) -> str:
    """Return the lower-cased suffix of ``name`` including the dot."""
    _stem, ext = posixpath.splitext(name)
    return ext.lower()


@dataclass(frozen=True)
class SourceEntry:
    """One directory listing record."""

    name: str
    is_dir: bool
    extension: str = field(default="")

    def __post_init__(self) -> None:
        if not self.extension and not self.is_dir:
            object.__setattr__(self, "extension", extension_of(self.name))


class DataSource(Protocol):
    async def list_entries(self, path: str) -> Sequence[SourceEntry]: ...

    async def read_content(self, path: str) -> bytes: ...


def join_path(parent: str, name: str) -> str:
    return os.path.join(parent, name)


class FileSystemDataSource:
    """List and read the local filesystem.

    Hidden names (leading dot) are skipped unless ``show_hidden``. With
    ``sort_entries`` directories come first, then names case-insensitively;
    otherwise the platform's ``scandir`` order is kept.
    """

    def __init__(self, *, show_hidden: bool = False, sort_entries: bool = True) -> None:
        self.show_hidden = show_hidden
        self.sort_entries = sort_entries

    def _scan(self, path: str) -> list[SourceEntry]:
        entries: list[SourceEntry] = []
        try:
            with os.scandir(path) as iterator:
                for child in iterator:
                    name = child.name
                    if not self.show_hidden and name.startswith("."):
                        continue
                    try:
                        is_dir = child.is_dir(follow_symlinks=False)
                    except OSError:
                        is_dir = False
                    entries.append(SourceEntry(name=name, is_dir=is_dir))
        except OSError as exc:
            raise Unreadable(path, f"cannot list {path}: {exc.strerror or exc}") from exc

        if self.sort_entries:
            entries.sort(key=lambda item: (not item.is_dir, item.name.lower()))
        return entries

    async def list_entries(self, path: str) -> Sequence[SourceEntry]:
        return await asyncio.to_thread(self._scan, path)

    async def read_content(self, path: str) -> bytes:
        try:
            return await asyncio.to_thread(Path(path).read_bytes)
        except OSError as exc:
            raise Unreadable(path, f"cannot read {path}: {exc.strerror or exc}") from exc


__all__ = [
    "SourceEntry",
    "DataSource",
    "FileSystemDataSource",
    "extension_of",
    "join_path",
]
