"""Node datatypes for the in-memory project tree."""

from __future__ import annotations

import posixpath
import weakref
from enum import Enum, IntEnum

from .errors import InvalidParent

ROOT_ID = "root"


class Expansion(IntEnum):
    COLLAPSED = 0
    EXPANDED = 1


class Selection(IntEnum):
    NOT_SELECTED = 0
    SELECTED = 1


class NodeKind(str, Enum):
    DIRECTORY = "directory"
    FILE = "file"


def default_label(node_id: str) -> str:
    """Return the final path segment of ``node_id`` (or the id itself)."""
    stripped = node_id.rstrip("/\\")
    if not stripped:
        return node_id
    return posixpath.basename(stripped.replace("\\", "/")) or stripped


class TreeNode:
    """One file or directory entry with mutable view state.

    Nodes compare by identity. ``children`` is owned by this node; ``parent``
    is a weak back-reference used for lookups only.
    """

    __slots__ = (
        "_id",
        "label",
        "kind",
        "mime_type",
        "children",
        "expansion",
        "selection",
        "disabled",
        "content",
        "_parent_ref",
        "__weakref__",
    )

    def __init__(
        self,
        node_id: str,
        kind: NodeKind = NodeKind.FILE,
        *,
        label: str | None = None,
        mime_type: str | None = None,
        disabled: bool = False,
        content: bytes | None = None,
    ) -> None:
        if kind is NodeKind.DIRECTORY and content is not None:
            raise ValueError("directory nodes never carry content")
        self._id = node_id
        self.label = label if label is not None else default_label(node_id)
        self.kind = kind
        self.mime_type = None if kind is NodeKind.DIRECTORY else mime_type
        self.children: list[TreeNode] = []
        self.expansion = Expansion.COLLAPSED
        self.selection = Selection.NOT_SELECTED
        self.disabled = disabled
        self.content = content
        self._parent_ref: weakref.ref[TreeNode] | None = None

    def __repr__(self) -> str:
        return f"TreeNode({self._id!r}, {self.kind.value}, children={len(self.children)})"

    @property
    def id(self) -> str:
        return self._id

    @property
    def parent(self) -> TreeNode | None:
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @property
    def can_have_children(self) -> bool:
        return self.kind is NodeKind.DIRECTORY

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def has_toggle(self) -> bool:
        """Whether a view should draw a disclosure affordance for this node."""
        return bool(self.children) or self.kind is NodeKind.DIRECTORY

    @property
    def is_expanded(self) -> bool:
        return self.expansion is Expansion.EXPANDED

    @property
    def is_selected(self) -> bool:
        return self.selection is Selection.SELECTED

    def is_ancestor_or_self(self, other: TreeNode) -> bool:
        """Whether ``other`` is this node or one of its ancestors."""
        current: TreeNode | None = self
        while current is not None:
            if current is other:
                return True
            current = current.parent
        return False

    def _check_attachable(self, child: TreeNode) -> None:
        if child.parent is not None:
            raise ValueError(f"node already has a parent: {child.id}")
        if self.is_ancestor_or_self(child):
            raise ValueError(f"node cannot be appended under its own subtree: {child.id}")

    def append_child(self, child: TreeNode) -> TreeNode:
        """Append ``child`` and point its weak parent reference here."""
        if not self.can_have_children:
            raise InvalidParent(self._id)
        self._check_attachable(child)
        child._parent_ref = weakref.ref(self)
        self.children.append(child)
        return child

    def extend_children(self, children: list[TreeNode]) -> None:
        """Append several children in order as one step."""
        if not self.can_have_children:
            raise InvalidParent(self._id)
        seen: set[int] = set()
        for child in children:
            self._check_attachable(child)
            if id(child) in seen:
                raise ValueError(f"node listed twice: {child.id}")
            seen.add(id(child))
        for child in children:
            child._parent_ref = weakref.ref(self)
        self.children.extend(children)

    def clear_children(self) -> None:
        """Detach every child (used when a subtree is reloaded)."""
        for child in self.children:
            child._parent_ref = None
        self.children = []

    def toggle_expansion(self) -> Expansion:
        if self.expansion is Expansion.EXPANDED:
            self.expansion = Expansion.COLLAPSED
        else:
            self.expansion = Expansion.EXPANDED
        return self.expansion


def make_root(label: str = ROOT_ID) -> TreeNode:
    """Create the sentinel root directory node."""
    return TreeNode(ROOT_ID, NodeKind.DIRECTORY, label=label)


__all__ = [
    "ROOT_ID",
    "Expansion",
    "Selection",
    "NodeKind",
    "TreeNode",
    "default_label",
    "make_root",
]
