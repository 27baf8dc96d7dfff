"""Visible-row projection of a tree for view layers and the CLI outline."""

from __future__ import annotations

from dataclasses import dataclass

from .address import PathAddress
from .store import TreeStore
from .types import NodeKind, TreeNode


@dataclass(frozen=True)
class VisibleRow:
    """One row a view would draw: the node, its address, and its depth."""

    node: TreeNode
    address: PathAddress
    depth: int

    @property
    def has_toggle(self) -> bool:
        return self.node.has_toggle


def visible_rows(store: TreeStore) -> list[VisibleRow]:
    """Return root children in pre-order, descending only into expanded nodes."""
    rows: list[VisibleRow] = []
    root = store.root
    stack: list[tuple[TreeNode, PathAddress, int]] = [
        (child, PathAddress((index,)), 0)
        for index, child in reversed(list(enumerate(root.children)))
    ]
    while stack:
        node, address, depth = stack.pop()
        rows.append(VisibleRow(node=node, address=address, depth=depth))
        if node.is_expanded and node.children:
            for index in range(len(node.children) - 1, -1, -1):
                stack.append((node.children[index], address.child(index), depth + 1))
    return rows


def row_index_of(rows: list[VisibleRow], node: TreeNode) -> int | None:
    for idx, row in enumerate(rows):
        if row.node is node:
            return idx
    return None


def format_row(row: VisibleRow, *, show_address: bool = False) -> str:
    """Render one row as a plain-text outline line."""
    node = row.node
    indent = "  " * row.depth
    if node.has_toggle:
        marker = "▾ " if node.is_expanded else "▸ "
    else:
        marker = "  "
    name = node.label + ("/" if node.kind is NodeKind.DIRECTORY else "")
    selected = " *" if node.is_selected else ""
    prefix = f"{row.address}\t" if show_address else ""
    return f"{prefix}{indent}{marker}{name}{selected}"


__all__ = [
    "VisibleRow",
    "visible_rows",
    "row_index_of",
    "format_row",
]
