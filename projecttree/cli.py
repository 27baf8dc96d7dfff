"""Command-line front door for projecttree.

Loads a project directory into a tree, applies expansion/reveal requests,
and prints the visible outline.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from functools import partial
from pathlib import Path

from . import config
from .loader import DirectoryLoader, FileSystemDataSource
from .mime import guess_mime_type
from .selection import SelectionController
from .tree_model import Expansion, NodeKind, RootUnreadable, TreeStore, format_row, visible_rows

LOG_FORMAT = "%(levelname)s | %(name)s | %(message)s"


def _nonnegative_int(value: str) -> int:
    """argparse type for non-negative integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("value must be >= 0")
    return parsed


def expand_to_depth(store: TreeStore, depth: int) -> None:
    """Expand directories whose depth below the root is less than ``depth``."""
    stack = [(child, 0) for child in store.root.children]
    while stack:
        node, level = stack.pop()
        if level >= depth or node.kind is not NodeKind.DIRECTORY:
            continue
        node.expansion = Expansion.EXPANDED
        stack.extend((child, level + 1) for child in node.children)


def load_project(root: Path, show_hidden: bool) -> TreeStore:
    """Synchronously load ``root`` with config-driven loader settings."""
    loader = DirectoryLoader(
        FileSystemDataSource(show_hidden=show_hidden),
        mime_lookup=partial(guess_mime_type, overrides=config.load_mime_overrides()),
        max_concurrency=config.load_listing_concurrency(),
    )
    return asyncio.run(loader.load(str(root)))


def render_outline(store: TreeStore, show_addresses: bool = False) -> str:
    lines = [format_row(row, show_address=show_addresses) for row in visible_rows(store)]
    return "".join(line + "\n" for line in lines)


def main(argv: list[str] | None = None, default_path: Path | None = None) -> None:
    """Parse CLI arguments, load the project tree, and print its outline.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is used.
    """
    parser = argparse.ArgumentParser(description="Print a project directory as an expandable tree outline.")
    parser.add_argument("path", nargs="?", default=None, help="Project directory. Defaults to current directory.")
    parser.add_argument(
        "--show-hidden",
        action="store_true",
        default=None,
        help="Include dot-files (default: persisted preference).",
    )
    parser.add_argument(
        "--depth",
        type=_nonnegative_int,
        default=0,
        help="Expand directories up to this depth (default: 0).",
    )
    parser.add_argument("--reveal", metavar="ID", help="Expand ancestors of, expand, and select this node.")
    parser.add_argument("--addresses", action="store_true", help="Prefix rows with their dotted tree address.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log loader diagnostics to stderr.")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format=LOG_FORMAT)

    if default_path is None:
        default_path = Path.cwd()
    root = Path(args.path or default_path).resolve()
    if not root.is_dir():
        raise SystemExit(f"Not a directory: {root}")

    show_hidden = config.load_show_hidden() if args.show_hidden is None else args.show_hidden
    try:
        store = load_project(root, show_hidden)
    except RootUnreadable as exc:
        raise SystemExit(str(exc)) from exc

    expand_to_depth(store, args.depth)

    if args.reveal is not None:
        node_id = args.reveal if os.path.isabs(args.reveal) else os.path.join(str(root), args.reveal)
        controller = SelectionController(store)
        node = store.find_by_id(node_id)
        if node is None:
            raise SystemExit(f"No tree node with id: {node_id}")
        controller.expand_ancestors(node)
        controller.reveal(node_id)

    sys.stdout.write(render_outline(store, show_addresses=args.addresses))


if __name__ == "__main__":
    main()
