"""Asynchronous, failure-tolerant population of a ``TreeStore``.

Each directory is listed once; its children are appended in the data source's
enumeration order in a single step, then sibling subdirectories are populated
concurrently. A listing failure below the root is logged and recorded on the
store, leaving that directory empty. A failure on the root aborts the load.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable, Sequence

from ..mime import guess_mime_type
from ..tree_model import (
    Expansion,
    InvalidParent,
    NodeKind,
    RootUnreadable,
    Selection,
    SelectionChangedHook,
    SubtreeUnreadable,
    TreeChangedHook,
    TreeNode,
    TreeStore,
    Unreadable,
    default_label,
    make_root,
)
from .source import DataSource, SourceEntry, extension_of, join_path

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENCY = 8

MimeLookup = Callable[[str], str | None]


class DirectoryLoader:
    """Build and resynchronize project trees from a ``DataSource``."""

    def __init__(
        self,
        data_source: DataSource,
        *,
        mime_lookup: MimeLookup = guess_mime_type,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        on_tree_changed: TreeChangedHook | None = None,
        on_selection_changed: SelectionChangedHook | None = None,
    ) -> None:
        self.data_source = data_source
        self.mime_lookup = mime_lookup
        self.max_concurrency = max(1, max_concurrency)
        self.on_tree_changed = on_tree_changed
        self.on_selection_changed = on_selection_changed

    async def load(self, root_path: str) -> TreeStore:
        """Load the whole tree under ``root_path``.

        Raises ``RootUnreadable`` when the root itself cannot be listed.
        """
        semaphore = asyncio.Semaphore(self.max_concurrency)
        try:
            entries = await self._list(root_path, semaphore)
        except Unreadable as exc:
            logger.error("cannot read project root %s: %s", root_path, exc)
            raise RootUnreadable(root_path) from exc

        store = TreeStore(
            make_root(label=default_label(root_path)),
            root_path=root_path,
            on_tree_changed=self.on_tree_changed,
            on_selection_changed=self.on_selection_changed,
        )
        await self._populate(store, store.root, root_path, entries, semaphore)
        logger.debug(
            "loaded %s: %d nodes, %d unreadable directories",
            root_path,
            sum(1 for _node in store.iter_nodes()) - 1,
            len(store.load_errors),
        )
        store.mark_changed()
        return store

    async def reload(self, store: TreeStore, node: TreeNode | None = None) -> TreeNode:
        """Replace ``node``'s subtree (default: the whole tree) with a fresh listing.

        Expansion and selection are carried over to nodes whose ids survive.
        """
        target = node if node is not None else store.root
        if not target.can_have_children:
            raise InvalidParent(target.id)
        path = self._path_of(store, target)

        expanded_ids: set[str] = set()
        selected_ids: set[str] = set()
        for child in _descendants(target):
            if child.expansion is Expansion.EXPANDED:
                expanded_ids.add(child.id)
            if child.selection is Selection.SELECTED:
                selected_ids.add(child.id)

        semaphore = asyncio.Semaphore(self.max_concurrency)
        try:
            entries = await self._list(path, semaphore)
        except Unreadable as exc:
            target.clear_children()
            self._record_failure(store, path, exc)
            store.mark_changed()
            return target

        target.clear_children()
        await self._populate(store, target, path, entries, semaphore)
        for child in _descendants(target):
            if child.id in expanded_ids:
                child.expansion = Expansion.EXPANDED
            if child.id in selected_ids:
                child.selection = Selection.SELECTED
        store.mark_changed()
        return target

    async def insert_from_source(
        self,
        store: TreeStore,
        source_path: str,
        parent: TreeNode | None = None,
        *,
        label: str | None = None,
        node_id: str | None = None,
    ) -> TreeNode:
        """Read ``source_path`` through the data source and insert it as a file node.

        The target is validated before reading, so ``InvalidParent`` and
        ``Unreadable`` both leave the tree unmutated.
        """
        target = store.insert_target(parent)

        content = await self.data_source.read_content(source_path)
        name = label if label is not None else default_label(source_path)
        if node_id is None:
            node_id = join_path(self._path_of(store, target), name)
        return store.insert(
            content,
            target,
            node_id=node_id,
            label=name,
            mime_type=self.mime_lookup(extension_of(name)),
        )

    def _path_of(self, store: TreeStore, node: TreeNode) -> str:
        if node is store.root:
            return store.root_path if store.root_path is not None else os.curdir
        return node.id

    async def _list(self, path: str, semaphore: asyncio.Semaphore) -> Sequence[SourceEntry]:
        """List ``path``; any data-source failure surfaces as ``Unreadable``."""
        async with semaphore:
            try:
                return await self.data_source.list_entries(path)
            except Unreadable:
                raise
            except Exception as exc:
                raise Unreadable(path, f"cannot list {path}: {exc!r}") from exc

    def _node_for(self, parent_path: str, entry: SourceEntry) -> TreeNode:
        node_id = join_path(parent_path, entry.name)
        if entry.is_dir:
            return TreeNode(node_id, NodeKind.DIRECTORY, label=entry.name)
        return TreeNode(
            node_id,
            NodeKind.FILE,
            label=entry.name,
            mime_type=self.mime_lookup(entry.extension),
        )

    def _record_failure(self, store: TreeStore, path: str, exc: BaseException) -> None:
        failure = SubtreeUnreadable(path, exc)
        logger.warning("%s", failure)
        store.load_errors.append(failure)

    async def _populate(
        self,
        store: TreeStore,
        node: TreeNode,
        path: str,
        entries: Sequence[SourceEntry],
        semaphore: asyncio.Semaphore,
    ) -> None:
        # Appended in one step so concurrent subtrees never interleave here.
        children = [self._node_for(path, entry) for entry in entries]
        node.extend_children(children)

        directories = [child for child in children if child.kind is NodeKind.DIRECTORY]
        if directories:
            await asyncio.gather(
                *(self._load_subtree(store, child, semaphore) for child in directories)
            )

    async def _load_subtree(self, store: TreeStore, node: TreeNode, semaphore: asyncio.Semaphore) -> None:
        try:
            entries = await self._list(node.id, semaphore)
        except Unreadable as exc:
            self._record_failure(store, node.id, exc)
            return
        await self._populate(store, node, node.id, entries, semaphore)


def _descendants(node: TreeNode) -> list[TreeNode]:
    out: list[TreeNode] = []
    stack = list(node.children)
    while stack:
        current = stack.pop()
        out.append(current)
        stack.extend(current.children)
    return out


__all__ = [
    "DEFAULT_MAX_CONCURRENCY",
    "DirectoryLoader",
    "MimeLookup",
]
