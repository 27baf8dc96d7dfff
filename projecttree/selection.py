"""Click/keyboard selection state machine layered on ``TreeStore``.

Row activation enforces single selection and always reveals the activated
branch; toggle gestures only flip expansion. Every transition ends with a
re-render request, which the store coalesces inside ``TreeStore.batch()``.
"""

from __future__ import annotations

from dataclasses import dataclass

from .tree_model import (
    Expansion,
    PathAddress,
    Selection,
    TreeNode,
    TreeStore,
    row_index_of,
    visible_rows,
)


@dataclass(frozen=True)
class FocusRestore:
    """Where keyboard focus should land after a toggle re-render.

    ``row_index`` is the visible-row position that held focus before the
    toggle; ``node`` is whatever occupies that position afterwards, or
    ``None`` when the row list no longer reaches that far.
    """

    row_index: int | None
    node: TreeNode | None


class SelectionController:
    """Apply activation, reveal, and keyboard transitions to one store."""

    def __init__(self, store: TreeStore) -> None:
        self.store = store
        self._last_activated: TreeNode | None = None

    @property
    def last_activated(self) -> TreeNode | None:
        """Most recently selected node, re-resolved by id after a subtree reload."""
        node = self._last_activated
        if node is None or self.store.contains(node):
            return node
        replacement = self.store.find_by_id(node.id)
        self._last_activated = replacement
        return replacement

    def activate(
        self,
        node: TreeNode | None,
        is_toggle_gesture: bool = False,
        force_collapse_first: bool = False,
    ) -> TreeNode | None:
        """Run one activation transition on ``node`` and request a re-render."""
        if node is None:
            return None
        store = self.store

        if force_collapse_first:
            node.expansion = Expansion.COLLAPSED

        if is_toggle_gesture:
            node.toggle_expansion()
            store.notify_selection_changed(node, True)
        else:
            if node.selection is Selection.NOT_SELECTED:
                store.reset_selection()

            if not node.children and node.expansion is Expansion.COLLAPSED:
                store.collapse_empty_leaves()

            if node.expansion is Expansion.COLLAPSED:
                node.expansion = Expansion.EXPANDED

            store.notify_selection_changed(node, False)

            if not node.disabled:
                node.selection = Selection.SELECTED
                self._last_activated = node

        store.mark_changed()
        return node

    def activate_address(
        self,
        address: PathAddress | str,
        is_toggle_gesture: bool = False,
    ) -> TreeNode | None:
        """Activate the node a view row points at; stale addresses are no-ops."""
        node = self.store.resolve(address)
        if node is None or node is self.store.root:
            return None
        return self.activate(node, is_toggle_gesture)

    def reveal(self, node_id: str) -> TreeNode | None:
        """Expand and select the node with ``node_id``.

        Ancestors are left as they are; use ``expand_ancestors`` first for a
        breadcrumb-style reveal.
        """
        node = self.store.find_by_id(node_id)
        if node is None:
            return None
        node.selection = Selection.NOT_SELECTED
        return self.activate(node, is_toggle_gesture=False, force_collapse_first=True)

    def expand_ancestors(self, node: TreeNode) -> int:
        """Expand every ancestor below the root; returns how many changed."""
        changed = 0
        parent = node.parent
        while parent is not None and parent is not self.store.root:
            if parent.expansion is not Expansion.EXPANDED:
                parent.expansion = Expansion.EXPANDED
                changed += 1
            parent = parent.parent
        if changed:
            self.store.mark_changed()
        return changed

    def keyboard_activate(self, focused: TreeNode | None) -> FocusRestore:
        """Toggle ``focused`` and report which row should regain focus."""
        if focused is None:
            return FocusRestore(row_index=None, node=None)
        row_index = row_index_of(visible_rows(self.store), focused)
        self.activate(focused, is_toggle_gesture=True)
        if row_index is None:
            return FocusRestore(row_index=None, node=None)
        rows = visible_rows(self.store)
        if row_index >= len(rows):
            return FocusRestore(row_index=row_index, node=None)
        return FocusRestore(row_index=row_index, node=rows[row_index].node)


__all__ = [
    "FocusRestore",
    "SelectionController",
]
