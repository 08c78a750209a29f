"""Application service layer for Milepost.

Services orchestrate domain operations on an in-memory tree. They do not
perform I/O; loading and saving belong to the storage infrastructure.

Example usage:
    >>> from milepost.application import RoadmapSession
    >>> from milepost.domain.shared import Ok
    >>>
    >>> session = RoadmapSession(root)
    >>> result = session.add_axis("Tool Integration via MCP")
    >>> if isinstance(result, Ok):
    ...     print(result.value.id)
"""

from milepost.application.roadmap_service import (
    DEFAULT_ROOT_TITLE,
    ItemUpdate,
    RoadmapOverview,
    RoadmapSession,
    default_root,
    new_node,
)

__all__ = [
    "DEFAULT_ROOT_TITLE",
    "ItemUpdate",
    "RoadmapOverview",
    "RoadmapSession",
    "default_root",
    "new_node",
]
