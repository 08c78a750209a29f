"""Tests for RoadmapSession operations."""

import pytest

from milepost.application import ItemUpdate, RoadmapSession, default_root, new_node
from milepost.domain.roadmap import (
    Node,
    NodeAdded,
    NodeRemoved,
    NodeStatus,
    NodeType,
    NodeUpdated,
    ProgressChanged,
    StatusChanged,
    ValidationToggled,
    compute_progress,
)
from milepost.domain.shared import Err, Ok


@pytest.fixture
def session(tree) -> RoadmapSession:
    return RoadmapSession(tree)


# =============================================================================
# Structure
# =============================================================================


def test_new_node_initial_state():
    node = new_node("Phase", NodeType.PHASE)

    assert node.progress == 0
    assert node.progress_weight == 1
    assert node.status == NodeStatus.NOT_STARTED
    assert node.validated is False
    assert node.tasks == []


def test_default_root():
    root = default_root("Plan")

    assert root.id == "root"
    assert root.title == "Plan"
    assert root.axes == []
    assert compute_progress(root) == 0


def test_add_axis(session):
    result = session.add_axis("  Axis C  ")

    assert isinstance(result, Ok)
    axis = result.value
    assert axis.title == "Axis C"
    assert session.root.axes[-1] is axis
    assert axis.pipelines == []
    assert isinstance(session.events[-1], NodeAdded)
    assert session.events[-1].parent_id == "root"


def test_add_axis_rejects_blank_title(session):
    assert isinstance(session.add_axis("   "), Err)
    assert len(session.root.axes) == 2


def test_add_sub_item(session):
    result = session.add_sub_item("comp-1", "Task 4", NodeType.TASK)

    assert isinstance(result, Ok)
    assert session.get("comp-1").tasks[-1].title == "Task 4"


def test_add_sub_item_unknown_parent(session):
    result = session.add_sub_item("missing", "X")

    assert isinstance(result, Err)
    assert "missing" in result.error


def test_attach_refuses_duplicate_ids(session):
    result = session.attach("axis-a", Node(id="task-1", title="Clash"))

    assert isinstance(result, Err)


def test_delete_item(session):
    result = session.delete_item("axis-b")

    assert isinstance(result, Ok)
    assert session.get("task-1") is None
    event = session.events[-1]
    assert isinstance(event, NodeRemoved)
    assert event.parent_id == "root"
    assert event.subtree_size == 5


def test_root_cannot_be_deleted(session):
    assert isinstance(session.delete_item("root"), Err)
    assert session.get("root") is session.root


def test_delete_unknown_item(session):
    assert isinstance(session.delete_item("missing"), Err)


def test_delete_nested_item_reports_parent(session):
    session.delete_item("task-2")

    assert session.events[-1].parent_id == "comp-1"
    assert [task.id for task in session.get("comp-1").tasks] == ["task-1", "task-3"]


def test_breadcrumbs(session):
    trail = session.breadcrumbs("task-3")

    assert [node.id for node in trail] == ["root", "axis-b", "comp-1", "task-3"]
    assert [node.id for node in session.breadcrumbs("root")] == ["root"]
    assert session.breadcrumbs("missing") == []


# =============================================================================
# Edits
# =============================================================================


def test_edit_item_applies_only_provided_fields(session):
    result = session.edit_item("task-3", ItemUpdate(title="Renamed", progress="70"))

    assert isinstance(result, Ok)
    node = session.get("task-3")
    assert node.title == "Renamed"
    assert node.progress == 70
    assert node.validated is False
    event = session.events[-1]
    assert isinstance(event, NodeUpdated)
    assert event.fields == ["title", "progress"]


def test_edit_item_accepts_camel_case_payload(session):
    update = ItemUpdate.model_validate({"progressWeight": 3, "startDate": "2024-02-01"})

    session.edit_item("task-3", update)

    node = session.get("task-3")
    assert node.progress_weight == 3
    assert node.start_date == "2024-02-01"


def test_edit_item_rejects_invalid_progress(session):
    result = session.edit_item("task-3", ItemUpdate(title="New", progress="abc"))

    assert isinstance(result, Err)
    assert session.get("task-3").title == "Task 3"


def test_edit_item_unknown_id(session):
    assert isinstance(session.edit_item("missing", ItemUpdate(title="X")), Err)


def test_set_progress_clamps(session):
    session.set_progress("task-3", "150")
    assert session.get("task-3").progress == 100

    session.set_progress("task-3", -5)
    assert session.get("task-3").progress == 0


def test_set_progress_rejects_non_numeric(session):
    result = session.set_progress("task-3", "abc")

    assert isinstance(result, Err)
    assert session.get("task-3").progress is None


def test_set_progress_records_change(session):
    session.set_progress("pipe-1", 55)

    event = session.events[-1]
    assert isinstance(event, ProgressChanged)
    assert (event.old_progress, event.new_progress, event.override) == (40, 55, False)


def test_reset_progress_lets_group_aggregate(session):
    session.set_progress("comp-1", 10)
    assert compute_progress(session.get("comp-1")) == 10

    session.reset_progress("comp-1")

    assert compute_progress(session.get("comp-1")) == 67


def test_set_and_clear_override(session):
    session.set_override("axis-b", 5)
    assert compute_progress(session.get("axis-b")) == 5

    session.set_override("axis-b", None)
    assert compute_progress(session.get("axis-b")) == 67


def test_toggle_validation(session):
    result = session.toggle_validation("task-2")

    assert result.value.validated is False
    assert isinstance(session.events[-1], ValidationToggled)


def test_toggle_task_validation_sets_progress(session):
    session.toggle_task_validation("task-3")
    assert session.get("task-3").validated is True
    assert session.get("task-3").progress == 100

    session.toggle_task_validation("task-3")
    assert session.get("task-3").validated is False
    assert session.get("task-3").progress == 0


# =============================================================================
# Status
# =============================================================================


def test_set_status_is_advisory_by_default(session):
    result = session.set_status("task-3", NodeStatus.COMPLETED)

    assert isinstance(result, Ok)
    assert session.get("task-3").status == NodeStatus.COMPLETED
    event = session.events[-1]
    assert isinstance(event, StatusChanged)
    assert event.old_status == NodeStatus.NOT_STARTED
    assert event.divergent is True


def test_strict_mode_refuses_unlisted_transition(tree):
    session = RoadmapSession(tree, strict_transitions=True)

    result = session.set_status("task-3", NodeStatus.COMPLETED)

    assert isinstance(result, Err)
    assert "not allowed" in result.error
    assert session.get("task-3").status is None
    assert session.events == []


def test_strict_mode_allows_listed_transition(tree):
    session = RoadmapSession(tree, strict_transitions=True)

    assert isinstance(session.set_status("task-3", NodeStatus.IN_PROGRESS), Ok)
    assert isinstance(session.set_status("task-1", NodeStatus.COMPLETED), Ok)


def test_strict_mode_applies_to_edits(tree):
    session = RoadmapSession(tree, strict_transitions=True)

    result = session.edit_item("task-3", ItemUpdate(status=NodeStatus.REVIEW))

    assert isinstance(result, Err)


def test_set_status_unknown_id(session):
    assert isinstance(session.set_status("missing", NodeStatus.REVIEW), Err)


# =============================================================================
# Derived state
# =============================================================================


def test_insight(session):
    result = session.insight("task-1")

    assert result.value.progress == 100
    assert result.value.divergent is False


def test_divergent_nodes(session):
    ids = {insight.id for insight in session.divergent_nodes()}

    assert ids == {"root", "axis-a", "pipe-1", "axis-b", "comp-1", "task-2"}


def test_overview(session):
    stats = session.overview()

    assert stats.overall_progress == 54
    assert stats.total_items == 8
    assert stats.validated_items == 1
    assert stats.active_axes == 2
    assert stats.total_axes == 2
    assert stats.divergent_items == 6
    assert stats.validated_percent == 12.5
    assert stats.active_percent == 100.0


def test_overview_of_empty_roadmap():
    stats = RoadmapSession(default_root()).overview()

    assert stats.total_items == 1
    assert stats.total_axes == 0
    assert stats.active_percent == 0.0


def test_export_document(session):
    document = session.export_document()

    assert list(document) == ["roadmap"]
    assert document["roadmap"] == session.root.to_json()
