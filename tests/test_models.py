"""Tests for the roadmap node model and its JSON form."""

import logging

import pytest
from pydantic import ValidationError

from milepost.domain.roadmap import Node, NodeStatus, NodeType, RoadmapDocument


def test_parses_camel_case_keys():
    node = Node.model_validate(
        {
            "id": "n1",
            "title": "Node",
            "progressOverride": 30,
            "progressWeight": 2,
            "startDate": "2024-01-01",
            "estimatedWeeks": 3,
            "status": "in_progress",
        }
    )

    assert node.progress_override == 30
    assert node.progress_weight == 2
    assert node.start_date == "2024-01-01"
    assert node.estimated_weeks == 3
    assert node.status == NodeStatus.IN_PROGRESS


def test_to_json_uses_camel_case_and_drops_absent_fields():
    node = Node(id="n1", title="Node", progress_weight=1, type=NodeType.TASK)

    data = node.to_json()

    assert data == {
        "id": "n1",
        "title": "Node",
        "type": "task",
        "progressWeight": 1,
        "validated": False,
    }


def test_unknown_keys_survive_a_round_trip():
    node = Node.model_validate({"id": "n1", "title": "Node", "owner": "ops", "tags": ["a"]})

    data = node.to_json()

    assert data["owner"] == "ops"
    assert data["tags"] == ["a"]


def test_generated_ids_are_unique():
    assert Node(title="A").id != Node(title="B").id


def test_empty_title_is_rejected():
    with pytest.raises(ValidationError):
        Node(title="")


def test_non_positive_weight_is_rejected():
    with pytest.raises(ValidationError):
        Node(title="A", progress_weight=0)


def test_children_follow_collection_priority():
    node = Node.model_validate(
        {
            "id": "p",
            "title": "Parent",
            "tasks": [{"id": "t", "title": "Task"}],
            "phases": [{"id": "ph", "title": "Phase"}],
        }
    )

    assert node.child_collection_name() == "phases"
    assert [child.id for child in node.children] == ["ph"]


def test_mixed_collections_log_a_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="milepost.domain.roadmap.models"):
        Node.model_validate(
            {
                "id": "p",
                "title": "Parent",
                "pipelines": [{"id": "a", "title": "A"}],
                "tasks": [{"id": "b", "title": "B"}],
            }
        )

    assert "several child collections" in caplog.text


def test_empty_collections_make_a_leaf():
    node = Node(title="Leaf", tasks=[], phases=[])

    assert node.is_leaf()
    assert node.children == []
    assert node.child_collection_name() is None


def test_collection_rejects_unknown_names():
    with pytest.raises(ValueError):
        Node(title="A").collection("children")


def test_document_to_json(tree):
    document = RoadmapDocument(roadmap=tree, last_modified="2024-05-01T10:00:00.000Z")

    data = document.to_json()

    assert data["lastModified"] == "2024-05-01T10:00:00.000Z"
    assert data["roadmap"]["id"] == "root"


def test_document_round_trip_keeps_tree(tree):
    data = RoadmapDocument(roadmap=tree).to_json()

    restored = RoadmapDocument.model_validate(data)

    assert "lastModified" not in data
    assert restored.roadmap.to_json() == tree.to_json()


def test_to_json_drops_null_values_but_reloads_equal():
    node = Node.model_validate({"id": "n1", "title": "Node", "description": None, "owner": None})

    data = node.to_json()

    assert "description" not in data
    assert "owner" not in data
    assert Node.model_validate(data).to_json() == data
