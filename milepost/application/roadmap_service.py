"""Roadmap application service.

``RoadmapSession`` owns the in-memory tree and is the only place that
mutates it. Every mutation returns a ``Result`` and records a domain event;
lookups of unknown ids come back as ``Err`` so callers can report them.
"""

import logging

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from milepost.domain.roadmap import (
    DomainEvent,
    Node,
    NodeAdded,
    NodeInsight,
    NodeRemoved,
    NodeStatus,
    NodeType,
    NodeUpdated,
    ProgressChanged,
    StatusChanged,
    ValidationToggled,
    apply_status,
    check_transition,
    compute_progress,
    count_all,
    count_validated,
    describe,
    effective_status,
    find_by_id,
    find_parent,
    insert_child,
    is_divergent,
    iter_nodes,
    parse_progress_input,
    remove_by_id,
)
from milepost.domain.shared import Err, Ok, Result

logger = logging.getLogger(__name__)

DEFAULT_ROOT_TITLE = "CustomGPT Expansion & Enhancement"

# Empty collection a freshly created node starts with, by kind.
DEFAULT_COLLECTION: dict[NodeType, str | None] = {
    NodeType.ROOT: "axes",
    NodeType.AXIS: "pipelines",
    NodeType.PIPELINE: "phases",
    NodeType.COMPONENT: "tasks",
    NodeType.PHASE: "tasks",
    NodeType.TASK: None,
}


class ItemUpdate(BaseModel):
    """Partial edit of a node. Only fields that were provided are applied."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str | None = None
    description: str | None = None
    progress: int | float | str | None = None
    progress_override: int | float | str | None = None
    progress_weight: int | float | None = Field(default=None, gt=0)
    validated: bool | None = None
    status: NodeStatus | None = None
    start_date: str | None = None
    end_date: str | None = None
    estimated_weeks: int | float | None = None


class RoadmapOverview(BaseModel):
    """Summary counters shown above every view."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    overall_progress: int
    total_items: int
    validated_items: int
    active_axes: int
    total_axes: int
    divergent_items: int

    @property
    def validated_percent(self) -> float:
        """Share of validated items."""
        if self.total_items == 0:
            return 0.0
        return round(self.validated_items / self.total_items * 100, 1)

    @property
    def active_percent(self) -> float:
        """Share of axes with any progress."""
        if self.total_axes == 0:
            return 0.0
        return round(self.active_axes / self.total_axes * 100, 1)


def new_node(title: str, node_type: NodeType) -> Node:
    """Create a node in its initial state: no progress, not started."""
    node = Node(
        title=title,
        type=node_type,
        progress=0,
        progress_weight=1,
        validated=False,
        status=NodeStatus.NOT_STARTED,
    )
    collection = DEFAULT_COLLECTION[node_type]
    if collection is not None:
        setattr(node, collection, [])
    return node


def default_root(title: str = DEFAULT_ROOT_TITLE) -> Node:
    """The minimal tree used when no stored roadmap is available."""
    return Node(
        id="root",
        title=title,
        type=NodeType.ROOT,
        progress=0,
        validated=False,
        axes=[],
    )


class RoadmapSession:
    """Owner of one roadmap tree.

    Args:
        root: Root node of the tree to manage
        strict_transitions: Refuse status changes that ``allowed_transitions``
            does not offer. Off by default, where the allowed set is only
            guidance for the user interface.
    """

    def __init__(self, root: Node, strict_transitions: bool = False) -> None:
        self.root = root
        self.strict_transitions = strict_transitions
        self.events: list[DomainEvent] = []

    # =========================================================================
    # Helpers
    # =========================================================================

    def _record(self, event: DomainEvent) -> None:
        self.events.append(event)
        logger.info(f"{type(event).__name__}: {event.model_dump(exclude={'event_id', 'timestamp'})}")

    def _require(self, node_id: str) -> Result[Node, str]:
        node = find_by_id(self.root, node_id)
        if node is None:
            return Err(f"Item not found: {node_id}")
        return Ok(node)

    def get(self, node_id: str) -> Node | None:
        """Look up a node by id."""
        return find_by_id(self.root, node_id)

    def breadcrumbs(self, node_id: str) -> list[Node]:
        """Nodes from the root down to ``node_id``, or [] for an unknown id."""
        node = find_by_id(self.root, node_id)
        if node is None:
            return []
        trail = [node]
        parent = find_parent(self.root, node.id)
        while parent is not None:
            trail.insert(0, parent)
            parent = find_parent(self.root, parent.id)
        return trail

    # =========================================================================
    # Structure
    # =========================================================================

    def add_axis(self, title: str) -> Result[Node, str]:
        """Append a new axis under the root."""
        title = title.strip()
        if not title:
            return Err("Title must not be empty")

        axis = new_node(title, NodeType.AXIS)
        if self.root.axes is None:
            self.root.axes = []
        self.root.axes.append(axis)
        self._record(NodeAdded(node_id=axis.id, parent_id=self.root.id, title=title))
        return Ok(axis)

    def add_sub_item(
        self,
        parent_id: str,
        title: str,
        node_type: NodeType = NodeType.PIPELINE,
    ) -> Result[Node, str]:
        """Create a node and insert it under ``parent_id``."""
        title = title.strip()
        if not title:
            return Err("Title must not be empty")
        if find_by_id(self.root, parent_id) is None:
            return Err(f"Item not found: {parent_id}")

        item = new_node(title, node_type)
        if not insert_child(self.root, parent_id, item):
            return Err(f"Could not insert '{title}' under {parent_id}")
        self._record(NodeAdded(node_id=item.id, parent_id=parent_id, title=title))
        return Ok(item)

    def attach(self, parent_id: str, subtree: Node) -> Result[Node, str]:
        """Insert an existing node (with its children) under ``parent_id``."""
        if find_by_id(self.root, parent_id) is None:
            return Err(f"Item not found: {parent_id}")
        if not insert_child(self.root, parent_id, subtree):
            return Err(f"Duplicate id in inserted subtree: {subtree.id}")
        self._record(NodeAdded(node_id=subtree.id, parent_id=parent_id, title=subtree.title))
        return Ok(subtree)

    def delete_item(self, node_id: str) -> Result[Node, str]:
        """Delete a node and its whole subtree. The root cannot be deleted."""
        if node_id == self.root.id:
            return Err("The root item cannot be deleted")

        parent = find_parent(self.root, node_id)
        if parent is None:
            return Err(f"Item not found: {node_id}")

        removed = remove_by_id(parent, node_id)
        self._record(
            NodeRemoved(
                node_id=removed.id,
                parent_id=parent.id,
                title=removed.title,
                subtree_size=count_all(removed),
            )
        )
        return Ok(removed)

    # =========================================================================
    # Edits
    # =========================================================================

    def edit_item(self, node_id: str, update: ItemUpdate) -> Result[Node, str]:
        """Apply a partial edit.

        Progress values go through the same parsing and clamping as the
        inline editor; status goes through ``set_status`` so strict mode
        applies to edits too.
        """
        found = self._require(node_id)
        if isinstance(found, Err):
            return found
        node = found.value
        provided = update.model_fields_set
        changed: list[str] = []

        if "title" in provided:
            title = (update.title or "").strip()
            if not title:
                return Err("Title must not be empty")
        if "progress" in provided and update.progress is not None:
            if parse_progress_input(update.progress) is None:
                return Err(f"Invalid progress value: {update.progress!r}")
        if "progress_override" in provided and update.progress_override is not None:
            if parse_progress_input(update.progress_override) is None:
                return Err(f"Invalid progress value: {update.progress_override!r}")
        if "status" in provided and update.status is not None and self.strict_transitions:
            if update.status != effective_status(node) and not check_transition(node, update.status):
                return Err(self._refusal(node, update.status))

        if "title" in provided:
            node.title = title
            changed.append("title")
        for field in ("description", "start_date", "end_date", "estimated_weeks"):
            if field in provided:
                setattr(node, field, getattr(update, field))
                changed.append(field)
        if "progress_weight" in provided:
            node.progress_weight = update.progress_weight
            changed.append("progress_weight")
        if "validated" in provided and update.validated is not None:
            node.validated = update.validated
            changed.append("validated")
        if "progress" in provided:
            self._write_progress(node, update.progress, override=False)
            changed.append("progress")
        if "progress_override" in provided:
            self._write_progress(node, update.progress_override, override=True)
            changed.append("progress_override")
        if "status" in provided and update.status is not None:
            self._write_status(node, update.status)
            changed.append("status")

        if changed:
            self._record(NodeUpdated(node_id=node.id, fields=changed))
        return Ok(node)

    def set_progress(self, node_id: str, raw: object) -> Result[Node, str]:
        """Inline progress edit: reject non-numeric input, clamp the rest."""
        found = self._require(node_id)
        if isinstance(found, Err):
            return found
        if parse_progress_input(raw) is None:
            return Err(f"Invalid progress value: {raw!r}")
        self._write_progress(found.value, raw, override=False)
        return found

    def reset_progress(self, node_id: str) -> Result[Node, str]:
        """Drop a stored progress value so the node is derived again."""
        found = self._require(node_id)
        if isinstance(found, Err):
            return found
        self._write_progress(found.value, None, override=False)
        return found

    def set_override(self, node_id: str, raw: object | None) -> Result[Node, str]:
        """Set (or clear with None) the progress override of a node."""
        found = self._require(node_id)
        if isinstance(found, Err):
            return found
        if raw is not None and parse_progress_input(raw) is None:
            return Err(f"Invalid progress value: {raw!r}")
        self._write_progress(found.value, raw, override=True)
        return found

    def _write_progress(self, node: Node, raw: object | None, override: bool) -> None:
        value = None if raw is None else parse_progress_input(raw)
        field = "progress_override" if override else "progress"
        old = getattr(node, field)
        setattr(node, field, value)
        if old != value:
            self._record(
                ProgressChanged(
                    node_id=node.id, old_progress=old, new_progress=value, override=override
                )
            )

    def toggle_validation(self, node_id: str) -> Result[Node, str]:
        """Flip the validated flag of a node."""
        found = self._require(node_id)
        if isinstance(found, Err):
            return found
        node = found.value
        node.validated = not node.validated
        self._record(ValidationToggled(node_id=node.id, validated=node.validated))
        return Ok(node)

    def toggle_task_validation(self, node_id: str) -> Result[Node, str]:
        """Flip the validated flag of a task and set its progress to match."""
        result = self.toggle_validation(node_id)
        if isinstance(result, Ok):
            node = result.value
            self._write_progress(node, 100 if node.validated else 0, override=False)
        return result

    # =========================================================================
    # Status
    # =========================================================================

    def set_status(self, node_id: str, status: NodeStatus) -> Result[Node, str]:
        """Change the explicit status of a node.

        In strict mode a target outside ``allowed_transitions`` is refused;
        otherwise any status is written.
        """
        found = self._require(node_id)
        if isinstance(found, Err):
            return found
        node = found.value

        if (
            self.strict_transitions
            and status != effective_status(node)
            and not check_transition(node, status)
        ):
            logger.warning(self._refusal(node, status))
            return Err(self._refusal(node, status))

        self._write_status(node, status)
        return Ok(node)

    def _write_status(self, node: Node, status: NodeStatus) -> None:
        old = effective_status(node)
        apply_status(node, status)
        self._record(
            StatusChanged(
                node_id=node.id, old_status=old, new_status=status, divergent=is_divergent(node)
            )
        )

    @staticmethod
    def _refusal(node: Node, status: NodeStatus) -> str:
        return (
            f"Transition {effective_status(node).value} -> {status.value} "
            f"is not allowed for '{node.title}'"
        )

    # =========================================================================
    # Derived state
    # =========================================================================

    def insight(self, node_id: str) -> Result[NodeInsight, str]:
        """Derived progress and status information for one node."""
        found = self._require(node_id)
        if isinstance(found, Err):
            return found
        return Ok(describe(found.value))

    def divergent_nodes(self) -> list[NodeInsight]:
        """Insights for every node whose status disagrees with its progress."""
        return [describe(node) for node in iter_nodes(self.root) if is_divergent(node)]

    def overview(self) -> RoadmapOverview:
        """Summary counters for the whole tree."""
        axes = self.root.axes or []
        return RoadmapOverview(
            overall_progress=compute_progress(self.root),
            total_items=count_all(self.root),
            validated_items=count_validated(self.root),
            active_axes=sum(1 for axis in axes if compute_progress(axis) > 0),
            total_axes=len(axes),
            divergent_items=sum(1 for node in iter_nodes(self.root) if is_divergent(node)),
        )

    def export_document(self) -> dict:
        """The tree in export form, ``{"roadmap": ...}``."""
        return {"roadmap": self.root.to_json()}
