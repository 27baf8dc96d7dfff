"""Tree ownership, traversal, lookup, and mutation.

``TreeStore`` owns the root node and is the single mutation boundary for a
loaded project. Mutations request a re-render through ``mark_changed``;
requests made inside ``batch()`` coalesce into one tree-changed notification.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from typing import TypeVar

from .address import PathAddress, address_of, resolve
from .errors import InvalidParent, SubtreeUnreadable
from .types import Expansion, NodeKind, Selection, TreeNode, make_root

logger = logging.getLogger(__name__)

T = TypeVar("T")

TreeChangedHook = Callable[[], None]
SelectionChangedHook = Callable[[TreeNode, bool], None]

INSERTED_ID_PREFIX = "inserted:"


def walk(roots: TreeNode | Iterable[TreeNode], visit: Callable[[TreeNode], T | None]) -> T | None:
    """Breadth-first traversal returning the first truthy ``visit`` result."""
    if isinstance(roots, TreeNode):
        queue: deque[TreeNode] = deque([roots])
    else:
        queue = deque(roots)
    while queue:
        node = queue.popleft()
        result = visit(node)
        if result:
            return result
        queue.extend(node.children)
    return None


class TreeStore:
    """Owner of one project tree plus its single notification subscriber."""

    def __init__(
        self,
        root: TreeNode | None = None,
        *,
        root_path: str | None = None,
        on_tree_changed: TreeChangedHook | None = None,
        on_selection_changed: SelectionChangedHook | None = None,
    ) -> None:
        self.root = root if root is not None else make_root()
        self.root_path = root_path
        self.on_tree_changed = on_tree_changed
        self.on_selection_changed = on_selection_changed
        self.load_errors: list[SubtreeUnreadable] = []
        self._batch_depth = 0
        self._render_pending = False
        self._inserted_count = 0

    # Traversal and lookup

    def iter_nodes(self) -> Iterator[TreeNode]:
        """Yield every node in breadth-first order, root first."""
        queue: deque[TreeNode] = deque([self.root])
        while queue:
            node = queue.popleft()
            yield node
            queue.extend(node.children)

    def walk(self, visit: Callable[[TreeNode], T | None]) -> T | None:
        return walk(self.root, visit)

    def find(self, predicate: Callable[[TreeNode], bool]) -> TreeNode | None:
        return walk(self.root, lambda node: node if predicate(node) else None)

    def find_by_id(self, node_id: str) -> TreeNode | None:
        return self.find(lambda node: node.id == node_id)

    def find_by_label(self, label: str) -> TreeNode | None:
        return self.find(lambda node: node.label == label)

    def resolve(self, address: PathAddress | str) -> TreeNode | None:
        return resolve(self.root, address)

    def address_of(self, node: TreeNode) -> PathAddress | None:
        return address_of(self.root, node)

    def contains(self, node: TreeNode) -> bool:
        """Whether ``node`` is attached somewhere under this store's root."""
        return node.is_ancestor_or_self(self.root)

    def insert_target(self, parent: TreeNode | None = None) -> TreeNode:
        """Return the node ``insert`` would append to, validating it."""
        target = parent if parent is not None else self.project_root
        if not self.contains(target):
            raise InvalidParent(target.id, "node is not part of this tree")
        if not target.can_have_children:
            raise InvalidParent(target.id)
        return target

    def selected_nodes(self) -> list[TreeNode]:
        return [node for node in self.iter_nodes() if node.selection is Selection.SELECTED]

    @property
    def selected(self) -> TreeNode | None:
        return self.find(lambda node: node.selection is Selection.SELECTED)

    @property
    def project_root(self) -> TreeNode:
        """Default insert target: the first root child, else the root."""
        if self.root.children:
            return self.root.children[0]
        return self.root

    # State resets

    def reset_selection(self) -> None:
        """Deselect every node."""
        for node in self.iter_nodes():
            node.selection = Selection.NOT_SELECTED

    def collapse_empty_leaves(self) -> None:
        """Collapse every node that has no children."""
        for node in self.iter_nodes():
            if not node.children:
                node.expansion = Expansion.COLLAPSED

    # Mutation

    def insert(
        self,
        content: bytes,
        parent: TreeNode | None = None,
        *,
        node_id: str | None = None,
        label: str | None = None,
        mime_type: str | None = None,
    ) -> TreeNode:
        """Append a new file node carrying ``content`` and notify observers.

        Raises ``InvalidParent`` without mutating anything when the target is
        a file node or does not belong to this store.
        """
        target = self.insert_target(parent)

        if node_id is None:
            self._inserted_count += 1
            node_id = f"{INSERTED_ID_PREFIX}{self._inserted_count}"
        node = TreeNode(
            node_id,
            NodeKind.FILE,
            label=label,
            mime_type=mime_type,
            content=content,
        )
        target.append_child(node)
        self.mark_changed()
        return node

    # Notifications

    @contextmanager
    def batch(self) -> Iterator[TreeStore]:
        """Coalesce change requests into one notification on exit."""
        self._batch_depth += 1
        try:
            yield self
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0:
                self.flush_changes()

    def mark_changed(self) -> None:
        """Request a re-render; delivered now unless a batch is open."""
        self._render_pending = True
        if self._batch_depth == 0:
            self.flush_changes()

    @property
    def render_pending(self) -> bool:
        return self._render_pending

    def flush_changes(self) -> bool:
        """Deliver a pending tree-changed notification, returning whether one fired."""
        if not self._render_pending:
            return False
        self._render_pending = False
        if self.on_tree_changed is not None:
            try:
                self.on_tree_changed()
            except Exception:
                logger.exception("tree-changed subscriber failed")
        return True

    def notify_selection_changed(self, node: TreeNode, is_toggle: bool) -> None:
        if self.on_selection_changed is None:
            return
        try:
            self.on_selection_changed(node, is_toggle)
        except Exception:
            logger.exception("selection-changed subscriber failed for %s", node.id)


__all__ = [
    "TreeChangedHook",
    "SelectionChangedHook",
    "TreeStore",
    "walk",
]
