"""Roadmap domain events.

Immutable records of the changes a session makes to the tree. The
session keeps them in order and logs them; nothing is replayed from them.
"""

from datetime import UTC, datetime
from uuid import uuid4

from pydantic import BaseModel, Field

from .models import NodeStatus


class DomainEvent(BaseModel):
    """Base class for all roadmap events."""

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    model_config = {"frozen": True}


class NodeAdded(DomainEvent):
    """A node was inserted under ``parent_id``."""

    node_id: str
    parent_id: str
    title: str


class NodeRemoved(DomainEvent):
    """A node and its subtree were deleted."""

    node_id: str
    parent_id: str
    title: str
    subtree_size: int


class NodeUpdated(DomainEvent):
    """Fields of a node were edited."""

    node_id: str
    fields: list[str]


class StatusChanged(DomainEvent):
    """The explicit status of a node changed."""

    node_id: str
    old_status: NodeStatus
    new_status: NodeStatus
    divergent: bool


class ProgressChanged(DomainEvent):
    """A stored progress value (direct or override) changed."""

    node_id: str
    old_progress: int | None
    new_progress: int | None
    override: bool = False


class ValidationToggled(DomainEvent):
    """The validated flag of a node was flipped."""

    node_id: str
    validated: bool
