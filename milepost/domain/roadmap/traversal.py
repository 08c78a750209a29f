"""Tree index: lookup and mutation of nodes by id.

All functions walk the tree through ``Node.children`` or the fixed
``CHILD_COLLECTIONS`` list, so callers never need to know which
collection a level of the tree uses. Misses are reported with ``None``
or ``False``, never by raising.
"""

from collections.abc import Iterator

from .models import CHILD_COLLECTIONS, Node


# =============================================================================
# Fundamental Operations
# =============================================================================


def iter_nodes(root: Node) -> Iterator[Node]:
    """Yield every node of the subtree in depth-first pre-order."""
    yield root
    for child in root.children:
        yield from iter_nodes(child)


def collect_ids(root: Node) -> set[str]:
    """Return the ids of every node in the subtree."""
    return {node.id for node in iter_nodes(root)}


def find_by_id(root: Node, node_id: str) -> Node | None:
    """Find a node by id (depth-first).

    Args:
        root: Node to start the search from (included in the search)
        node_id: Id to look for

    Returns:
        The matching node, or None if no node has that id
    """
    if root.id == node_id:
        return root
    for child in root.children:
        found = find_by_id(child, node_id)
        if found is not None:
            return found
    return None


def find_parent(root: Node, node_id: str) -> Node | None:
    """Find the node whose child collections contain ``node_id``.

    Searches all five collections of every node, like ``remove_by_id``.
    Returns None for the root itself or an unknown id.
    """
    for name in CHILD_COLLECTIONS:
        items = root.collection(name)
        if not items:
            continue
        if any(item.id == node_id for item in items):
            return root
        for item in items:
            found = find_parent(item, node_id)
            if found is not None:
                return found
    return None


def insert_child(root: Node, parent_id: str, new_node: Node) -> bool:
    """Append ``new_node`` under the node with id ``parent_id``.

    The landing collection is the parent's populated collection; failing
    that its first present (empty) collection; failing that a new
    ``pipelines`` list.

    Args:
        root: Root of the tree
        parent_id: Id of the node that receives the child
        new_node: Node (possibly with its own subtree) to insert

    Returns:
        True if inserted. False if the parent does not exist or an id in
        ``new_node``'s subtree is already used in the tree.
    """
    parent = find_by_id(root, parent_id)
    if parent is None:
        return False

    if collect_ids(new_node) & collect_ids(root):
        return False

    name = parent.child_collection_name()
    if name is None:
        name = next(
            (n for n in CHILD_COLLECTIONS if parent.collection(n) is not None),
            "pipelines",
        )

    items = parent.collection(name)
    if items is None:
        setattr(parent, name, [new_node])
    else:
        items.append(new_node)
    return True


def remove_by_id(root: Node, node_id: str) -> Node | None:
    """Remove the first node with ``node_id`` and return it.

    Searches every child collection of every node depth-first and stops
    at the first hit. The root itself is never removed.

    Returns:
        The removed node (with its subtree), or None if not found
    """
    for name in CHILD_COLLECTIONS:
        items = root.collection(name)
        if not items:
            continue
        for index, item in enumerate(items):
            if item.id == node_id:
                return items.pop(index)
        for item in items:
            removed = remove_by_id(item, node_id)
            if removed is not None:
                return removed
    return None


# =============================================================================
# Counting
# =============================================================================


def count_all(node: Node) -> int:
    """Count the nodes of the subtree, including ``node`` itself."""
    return sum(1 for _ in iter_nodes(node))


def count_validated(node: Node) -> int:
    """Count validated nodes of the subtree, including ``node`` itself."""
    return sum(1 for item in iter_nodes(node) if item.validated)
