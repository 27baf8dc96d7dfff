"""In-memory project tree: nodes, addressing, ownership, and row projection.

This package contains non-UI tree primitives:
- node datatypes with expansion/selection state and weak parent links
- index-path addresses and their dotted/URI serialization
- the owning store with BFS lookup, selection resets, and insert
- visible-row projection used by views to map rows back to nodes
"""

from __future__ import annotations

from .address import ADDRESS_URI_SCHEME, PathAddress, address_of, resolve
from .errors import InvalidParent, RootUnreadable, SubtreeUnreadable, TreeError, Unreadable
from .rows import VisibleRow, format_row, row_index_of, visible_rows
from .store import SelectionChangedHook, TreeChangedHook, TreeStore, walk
from .types import ROOT_ID, Expansion, NodeKind, Selection, TreeNode, default_label, make_root

__all__ = [
    "ROOT_ID",
    "Expansion",
    "Selection",
    "NodeKind",
    "TreeNode",
    "default_label",
    "make_root",
    "ADDRESS_URI_SCHEME",
    "PathAddress",
    "resolve",
    "address_of",
    "TreeStore",
    "TreeChangedHook",
    "SelectionChangedHook",
    "walk",
    "VisibleRow",
    "visible_rows",
    "row_index_of",
    "format_row",
    "TreeError",
    "Unreadable",
    "RootUnreadable",
    "SubtreeUnreadable",
    "InvalidParent",
]
