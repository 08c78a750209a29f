"""Roadmap domain models.

Every element of the roadmap (root, axis, pipeline/component, phase, task)
is a ``Node``. The JSON document keeps the camelCase keys written by the
browser client, so the models alias their fields and preserve keys they do
not know about.
"""

import logging
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

# Priority order used wherever a node's children are looked up.
CHILD_COLLECTIONS: tuple[str, ...] = ("axes", "pipelines", "components", "phases", "tasks")


class NodeType(str, Enum):
    """Informational kind of a roadmap node."""

    ROOT = "root"
    AXIS = "axis"
    PIPELINE = "pipeline"
    COMPONENT = "component"
    PHASE = "phase"
    TASK = "task"


class NodeStatus(str, Enum):
    """Explicit lifecycle status, set only by the user."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    REVIEW = "review"
    COMPLETED = "completed"
    BLOCKED = "blocked"


class ProgressSource(str, Enum):
    """Which rule produced a node's progress value."""

    OVERRIDE = "override"
    MANUAL = "manual"
    DIRECT = "direct"
    CALCULATED = "calculated"


def generate_id() -> str:
    """Return a fresh opaque node id."""
    return str(uuid4())


class Node(BaseModel):
    """A node in the roadmap tree.

    At most one of the child collections is expected to be populated.
    Which one depends on depth (root -> axes, axis -> pipelines,
    components or phases, pipeline -> phases or tasks, phase -> tasks).
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    id: str = Field(default_factory=generate_id)
    title: str = Field(min_length=1)
    type: NodeType | None = None
    description: str | None = None

    progress: int | None = None
    progress_override: int | None = None
    progress_weight: int | float | None = Field(default=None, gt=0)
    validated: bool = False
    status: NodeStatus | None = None

    start_date: str | None = None
    end_date: str | None = None
    estimated_weeks: int | float | None = None

    axes: list["Node"] | None = None
    pipelines: list["Node"] | None = None
    components: list["Node"] | None = None
    phases: list["Node"] | None = None
    tasks: list["Node"] | None = None

    @model_validator(mode="after")
    def _warn_on_mixed_collections(self) -> "Node":
        populated = [name for name in CHILD_COLLECTIONS if getattr(self, name)]
        if len(populated) > 1:
            logger.warning(
                f"Node '{self.id}' has several child collections {populated}; "
                f"only '{populated[0]}' is traversed"
            )
        return self

    def collection(self, name: str) -> list["Node"] | None:
        """Return the child collection called ``name`` (may be None)."""
        if name not in CHILD_COLLECTIONS:
            raise ValueError(f"Unknown child collection: {name}")
        return getattr(self, name)

    def child_collection_name(self) -> str | None:
        """Name of the first non-empty child collection, in priority order."""
        for name in CHILD_COLLECTIONS:
            if getattr(self, name):
                return name
        return None

    @property
    def children(self) -> list["Node"]:
        """Children from the populated collection, or an empty list."""
        name = self.child_collection_name()
        if name is None:
            return []
        return getattr(self, name)

    def is_leaf(self) -> bool:
        """Check if this node has no children in any collection."""
        return self.child_collection_name() is None

    def to_json(self) -> dict:
        """Serialize with the wire-format keys, omitting absent fields.

        Absent and null are not told apart: a stored ``"description": null``
        or a null unknown key is dropped, so the output is equivalent to the
        input document rather than byte-identical.
        """
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class RoadmapDocument(BaseModel):
    """The persisted document: the whole tree plus its save timestamp."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    roadmap: Node
    last_modified: str | None = None

    def to_json(self) -> dict:
        data: dict = {"roadmap": self.roadmap.to_json()}
        if self.last_modified is not None:
            data["lastModified"] = self.last_modified
        return data


class NodeInsight(BaseModel):
    """Derived state of one node, as shown next to it in every view."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    progress: int
    source: ProgressSource
    status: NodeStatus
    divergent: bool
    suggested_status: NodeStatus
    allowed_transitions: list[NodeStatus] = Field(default_factory=list)
