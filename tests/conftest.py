"""Shared fixtures for the Milepost test suite."""

from pathlib import Path

import pytest

from milepost.domain.roadmap import Node
from milepost.infrastructure.storage import RoadmapRepository


def build_tree() -> Node:
    """Small two-axis roadmap.

    Derived progress: axis-a 40 (from its pipeline), comp-1 67
    (100, 100, 0), axis-b 67, root 54 (53.5 rounded half-up).
    """
    return Node.model_validate(
        {
            "id": "root",
            "title": "Roadmap",
            "type": "root",
            "axes": [
                {
                    "id": "axis-a",
                    "title": "Axis A",
                    "type": "axis",
                    "pipelines": [
                        {"id": "pipe-1", "title": "Pipeline 1", "type": "pipeline", "progress": 40},
                    ],
                },
                {
                    "id": "axis-b",
                    "title": "Axis B",
                    "type": "axis",
                    "components": [
                        {
                            "id": "comp-1",
                            "title": "Component 1",
                            "type": "component",
                            "tasks": [
                                {"id": "task-1", "title": "Task 1", "progress": 100, "status": "completed"},
                                {"id": "task-2", "title": "Task 2", "validated": True},
                                {"id": "task-3", "title": "Task 3"},
                            ],
                        },
                    ],
                },
            ],
        }
    )


@pytest.fixture
def tree() -> Node:
    return build_tree()


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    """A data file holding ``build_tree()`` as saved by the repository."""
    path = tmp_path / "roadmap.json"
    RoadmapRepository(path).save(build_tree())
    return path
