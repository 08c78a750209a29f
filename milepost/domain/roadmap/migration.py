"""Backfill of fields introduced after the first stored documents.

Documents written before statuses and weights existed lack ``status`` and
``progressWeight``. The backfill runs once when the server starts. Each
node is checked individually, so a tree that was only partly migrated is
completed on the next run.
"""

from .models import Node
from .progress import DEFAULT_WEIGHT, compute_progress
from .status import status_from_progress
from .traversal import iter_nodes


def needs_migration(root: Node) -> bool:
    """Check if any node lacks a status or a progress weight."""
    return any(
        node.status is None or node.progress_weight is None for node in iter_nodes(root)
    )


def backfill_defaults(root: Node) -> int:
    """Fill in missing ``status`` and ``progress_weight`` on every node.

    Existing values are never overwritten, so running this twice leaves
    the tree unchanged the second time.

    Returns:
        Number of nodes that were modified
    """
    touched = 0
    for node in iter_nodes(root):
        changed = False
        if node.status is None:
            node.status = status_from_progress(compute_progress(node))
            changed = True
        if node.progress_weight is None:
            node.progress_weight = DEFAULT_WEIGHT
            changed = True
        if changed:
            touched += 1
    return touched
