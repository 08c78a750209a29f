"""Request/Response schemas for the Milepost API.

Responses that carry the tree are built from ``Node.to_json()`` so the
wire format matches the stored document exactly; these models cover the
remaining bodies.
"""

from typing import Any

from pydantic import BaseModel, model_validator

from milepost.domain.roadmap import Node, collect_ids, count_all


class SaveRoadmapRequest(BaseModel):
    """Body of ``POST /api/roadmap``: the complete tree."""

    roadmap: Node

    @model_validator(mode="after")
    def _ids_are_unique(self) -> "SaveRoadmapRequest":
        if len(collect_ids(self.roadmap)) != count_all(self.roadmap):
            raise ValueError("Item ids must be unique across the roadmap")
        return self


class SaveRoadmapResponse(BaseModel):
    """Acknowledgement of a whole-tree write."""

    success: bool = True
    data: dict[str, Any]


class ServiceInfo(BaseModel):
    name: str
    version: str
