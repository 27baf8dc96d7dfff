"""Public package surface for projecttree.

Exports ``main`` for programmatic CLI invocation.
The tree engine lives in ``projecttree.tree_model``, ``projecttree.loader``,
and ``projecttree.selection``.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)

__all__ = ["main"]
