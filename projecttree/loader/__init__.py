"""Populate project trees from filesystem-like data sources."""

from __future__ import annotations

from .directory_loader import DEFAULT_MAX_CONCURRENCY, DirectoryLoader, MimeLookup
from .source import DataSource, FileSystemDataSource, SourceEntry, extension_of, join_path

__all__ = [
    "DEFAULT_MAX_CONCURRENCY",
    "DirectoryLoader",
    "MimeLookup",
    "DataSource",
    "FileSystemDataSource",
    "SourceEntry",
    "extension_of",
    "join_path",
]
