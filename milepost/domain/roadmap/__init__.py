"""Roadmap domain - the node tree and its derived state.

Key Types:
    Node - Any element of the roadmap tree
    NodeType - Informational node kind
    NodeStatus - Explicit lifecycle status
    ProgressSource - Provenance of a progress value
    RoadmapDocument - Persisted tree plus timestamp
    NodeInsight - Derived state of one node

Tree Index:
    find_by_id, find_parent, insert_child, remove_by_id,
    count_all, count_validated, iter_nodes, collect_ids

Progress Engine:
    compute_progress, progress_source, parse_progress_input, clamp_progress

Status Engine:
    effective_status, is_divergent, suggest_status, allowed_transitions,
    check_transition, apply_status, status_from_progress, describe

Migration:
    needs_migration, backfill_defaults
"""

from .events import (
    DomainEvent,
    NodeAdded,
    NodeRemoved,
    NodeUpdated,
    ProgressChanged,
    StatusChanged,
    ValidationToggled,
)
from .migration import backfill_defaults, needs_migration
from .models import (
    CHILD_COLLECTIONS,
    Node,
    NodeInsight,
    NodeStatus,
    NodeType,
    ProgressSource,
    RoadmapDocument,
    generate_id,
)
from .progress import (
    clamp_progress,
    compute_progress,
    parse_progress_input,
    progress_source,
)
from .status import (
    TRANSITIONS,
    allowed_transitions,
    apply_status,
    check_transition,
    describe,
    effective_status,
    is_divergent,
    status_from_progress,
    suggest_status,
)
from .traversal import (
    collect_ids,
    count_all,
    count_validated,
    find_by_id,
    find_parent,
    insert_child,
    iter_nodes,
    remove_by_id,
)

__all__ = [
    # Models
    "CHILD_COLLECTIONS",
    "Node",
    "NodeInsight",
    "NodeStatus",
    "NodeType",
    "ProgressSource",
    "RoadmapDocument",
    "generate_id",
    # Tree index
    "collect_ids",
    "count_all",
    "count_validated",
    "find_by_id",
    "find_parent",
    "insert_child",
    "iter_nodes",
    "remove_by_id",
    # Progress
    "clamp_progress",
    "compute_progress",
    "parse_progress_input",
    "progress_source",
    # Status
    "TRANSITIONS",
    "allowed_transitions",
    "apply_status",
    "check_transition",
    "describe",
    "effective_status",
    "is_divergent",
    "status_from_progress",
    "suggest_status",
    # Migration
    "backfill_defaults",
    "needs_migration",
    # Events
    "DomainEvent",
    "NodeAdded",
    "NodeRemoved",
    "NodeUpdated",
    "ProgressChanged",
    "StatusChanged",
    "ValidationToggled",
]
