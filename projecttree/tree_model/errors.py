"""Error taxonomy for tree loading and mutation.

Lookup misses are never raised; resolvers return ``None`` instead.
"""

from __future__ import annotations


class TreeError(Exception):
    """Base class for project-tree errors."""


class Unreadable(TreeError):
    """Raised by a data source when a path cannot be listed or read."""

    def __init__(self, path: str, message: str = "") -> None:
        self.path = path
        super().__init__(message or f"unreadable: {path}")


class RootUnreadable(TreeError):
    """The project root could not be listed; no tree is produced."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"cannot read project root: {path}")


class SubtreeUnreadable(TreeError):
    """A directory below the root could not be listed.

    Recorded on the store rather than raised; the directory keeps zero children.
    """

    def __init__(self, path: str, cause: BaseException | None = None) -> None:
        self.path = path
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"cannot read directory {path}{detail}")


class InvalidParent(TreeError):
    """Insert/append target cannot hold children or is not part of the tree."""

    def __init__(self, node_id: str, reason: str = "node cannot have children") -> None:
        self.node_id = node_id
        super().__init__(f"{reason}: {node_id}")


__all__ = [
    "TreeError",
    "Unreadable",
    "RootUnreadable",
    "SubtreeUnreadable",
    "InvalidParent",
]
