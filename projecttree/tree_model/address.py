"""Index-path addressing of tree nodes.

A ``PathAddress`` is the ordered list of child indices leading from the root
to a node. Addresses are only meaningful against the tree they were captured
from; after children are reordered or removed, re-resolve by node id.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass

from .types import TreeNode

ADDRESS_URI_SCHEME = "tree://"


@dataclass(frozen=True)
class PathAddress:
    """Position of a node as child indices from the root (root is ``()``)."""

    indices: tuple[int, ...] = ()

    def __str__(self) -> str:
        return ".".join(str(index) for index in self.indices)

    def __len__(self) -> int:
        return len(self.indices)

    @property
    def is_root(self) -> bool:
        return not self.indices

    def child(self, index: int) -> PathAddress:
        return PathAddress(self.indices + (index,))

    def parent(self) -> PathAddress | None:
        if not self.indices:
            return None
        return PathAddress(self.indices[:-1])

    def to_uri(self) -> str:
        """Serialize as a drag-and-drop reference (``tree://0.3.1``)."""
        return f"{ADDRESS_URI_SCHEME}{self}"

    @classmethod
    def parse(cls, text: str) -> PathAddress | None:
        """Parse a dot-joined index string; ``None`` when malformed."""
        text = text.strip()
        if not text:
            return cls(())
        indices: list[int] = []
        for part in text.split("."):
            if not (part.isascii() and part.isdigit()):
                return None
            indices.append(int(part))
        return cls(tuple(indices))

    @classmethod
    def from_uri(cls, uri: str) -> PathAddress | None:
        if not uri.startswith(ADDRESS_URI_SCHEME):
            return None
        return cls.parse(uri[len(ADDRESS_URI_SCHEME):])


def resolve(root: TreeNode, address: PathAddress | str) -> TreeNode | None:
    """Return the node at ``address`` below ``root`` or ``None`` on any miss."""
    if isinstance(address, str):
        parsed = PathAddress.parse(address)
        if parsed is None:
            return None
        address = parsed

    node = root
    for index in address.indices:
        if index < 0 or index >= len(node.children):
            return None
        node = node.children[index]
    return node


def address_of(root: TreeNode, target: TreeNode) -> PathAddress | None:
    """Find ``target`` by identity walking down from ``root``."""
    queue: deque[tuple[TreeNode, PathAddress]] = deque([(root, PathAddress())])
    while queue:
        node, address = queue.popleft()
        if node is target:
            return address
        for index, child in enumerate(node.children):
            queue.append((child, address.child(index)))
    return None


__all__ = [
    "ADDRESS_URI_SCHEME",
    "PathAddress",
    "resolve",
    "address_of",
]
