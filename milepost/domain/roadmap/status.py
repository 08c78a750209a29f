"""Status engine.

Status is an explicit lifecycle field that only the user changes. This
module never writes it on its own initiative: it compares status with the
derived progress, flags implausible combinations and recommends moves.

Lifecycle::

    not_started -> in_progress -> review -> completed
         \\              |           /
          +---------> blocked <----+
    blocked -> not_started | in_progress
"""

from .models import Node, NodeInsight, NodeStatus
from .progress import compute_progress, progress_source

# Progress limits outside of which a status looks wrong.
NOT_STARTED_MAX_PROGRESS = 15
REVIEW_MIN_PROGRESS = 10
COMPLETED_MIN_PROGRESS = 75

TRANSITIONS: dict[NodeStatus, frozenset[NodeStatus]] = {
    NodeStatus.NOT_STARTED: frozenset({NodeStatus.IN_PROGRESS, NodeStatus.BLOCKED}),
    NodeStatus.IN_PROGRESS: frozenset(
        {
            NodeStatus.REVIEW,
            NodeStatus.COMPLETED,
            NodeStatus.BLOCKED,
            NodeStatus.NOT_STARTED,
        }
    ),
    NodeStatus.REVIEW: frozenset(
        {NodeStatus.COMPLETED, NodeStatus.IN_PROGRESS, NodeStatus.BLOCKED}
    ),
    NodeStatus.COMPLETED: frozenset({NodeStatus.IN_PROGRESS}),
    NodeStatus.BLOCKED: frozenset({NodeStatus.NOT_STARTED, NodeStatus.IN_PROGRESS}),
}

# Stable display order for transition lists.
STATUS_ORDER: tuple[NodeStatus, ...] = (
    NodeStatus.NOT_STARTED,
    NodeStatus.IN_PROGRESS,
    NodeStatus.REVIEW,
    NodeStatus.COMPLETED,
    NodeStatus.BLOCKED,
)


def effective_status(node: Node) -> NodeStatus:
    """Return the node's status, treating an absent one as not started."""
    return node.status or NodeStatus.NOT_STARTED


def is_divergent(node: Node) -> bool:
    """Check whether the status is implausible given the node's progress.

    ``in_progress`` and ``blocked`` are compatible with any progress.
    """
    progress = compute_progress(node)
    status = effective_status(node)

    if status == NodeStatus.NOT_STARTED:
        return progress > NOT_STARTED_MAX_PROGRESS
    if status == NodeStatus.REVIEW:
        return progress < REVIEW_MIN_PROGRESS
    if status == NodeStatus.COMPLETED:
        return progress < COMPLETED_MIN_PROGRESS
    return False


def suggest_status(node: Node) -> NodeStatus:
    """Recommend a status for the node from its progress.

    Advisory only; the caller decides whether to offer it. ``blocked`` is
    never recommended: a blocked node is nudged back to ``in_progress``.
    """
    progress = compute_progress(node)
    current = effective_status(node)

    if progress == 0:
        return NodeStatus.NOT_STARTED
    if progress == 100:
        return NodeStatus.COMPLETED
    if progress >= 80 and current == NodeStatus.IN_PROGRESS:
        return NodeStatus.REVIEW
    if progress >= 90:
        return NodeStatus.REVIEW
    if progress >= 1 and current == NodeStatus.NOT_STARTED:
        return NodeStatus.IN_PROGRESS
    if progress < 25 and current == NodeStatus.REVIEW:
        return NodeStatus.IN_PROGRESS
    if current == NodeStatus.BLOCKED:
        return NodeStatus.IN_PROGRESS
    return current


def allowed_transitions(node: Node) -> set[NodeStatus]:
    """Statuses the user may be offered from the node's current status.

    The fixed table is amended by progress: at 100 ``completed`` is always
    offered, at 0 ``review`` never is.
    """
    current = effective_status(node)
    allowed = set(TRANSITIONS[current])
    progress = compute_progress(node)

    if progress == 100 and current != NodeStatus.COMPLETED:
        allowed.add(NodeStatus.COMPLETED)
    if progress == 0 and current != NodeStatus.NOT_STARTED:
        allowed.discard(NodeStatus.REVIEW)
    return allowed


def check_transition(node: Node, new_status: NodeStatus) -> bool:
    """Return True if ``new_status`` is an offered move from the node's status."""
    return new_status in allowed_transitions(node)


def apply_status(node: Node, new_status: NodeStatus) -> None:
    """Write ``new_status`` to the node without any checks."""
    node.status = new_status


def status_from_progress(progress: int) -> NodeStatus:
    """Initial status for nodes stored before statuses existed."""
    if progress <= 0:
        return NodeStatus.NOT_STARTED
    if progress < 50:
        return NodeStatus.IN_PROGRESS
    if progress < 100:
        return NodeStatus.REVIEW
    return NodeStatus.COMPLETED


def describe(node: Node) -> NodeInsight:
    """Collect the derived state of ``node`` in one record."""
    allowed = allowed_transitions(node)
    return NodeInsight(
        id=node.id,
        title=node.title,
        progress=compute_progress(node),
        source=progress_source(node),
        status=effective_status(node),
        divergent=is_divergent(node),
        suggested_status=suggest_status(node),
        allowed_transitions=[s for s in STATUS_ORDER if s in allowed],
    )
