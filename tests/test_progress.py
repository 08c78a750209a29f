"""Tests for the progress engine."""

import math

import pytest

from milepost.domain.roadmap import (
    Node,
    ProgressSource,
    clamp_progress,
    compute_progress,
    iter_nodes,
    parse_progress_input,
    progress_source,
)
from milepost.infrastructure.storage.seed import build_seed_roadmap


def test_sample_tree_progress(tree):
    by_id = {node.id: compute_progress(node) for node in iter_nodes(tree)}

    assert by_id["axis-a"] == 40
    assert by_id["comp-1"] == 67
    assert by_id["axis-b"] == 67
    assert by_id["root"] == 54


def test_pipeline_value_rolls_up_to_root():
    root = Node.model_validate(
        {
            "id": "root",
            "title": "Root",
            "axes": [
                {"id": "a", "title": "A", "pipelines": [{"id": "p", "title": "P", "progress": 40}]},
            ],
        }
    )

    assert compute_progress(root.axes[0]) == 40
    assert compute_progress(root) == 40


def test_override_wins_over_everything():
    node = Node(
        title="Pinned",
        progress=10,
        progress_override=90,
        tasks=[Node(title="T", progress=0)],
    )

    assert compute_progress(node) == 90
    assert progress_source(node) == ProgressSource.OVERRIDE


def test_manual_progress_ignores_children():
    node = Node(title="Group", progress=25, tasks=[Node(title="T", progress=100)])

    assert compute_progress(node) == 25
    assert progress_source(node) == ProgressSource.MANUAL


def test_leaf_without_progress_uses_validated_flag():
    assert compute_progress(Node(title="Done", validated=True)) == 100
    assert compute_progress(Node(title="Open")) == 0
    assert progress_source(Node(title="Open")) == ProgressSource.CALCULATED


def test_leaf_progress_is_direct():
    node = Node(title="Task", progress=70, validated=True)

    assert compute_progress(node) == 70
    assert progress_source(node) == ProgressSource.DIRECT


def test_weighted_mean():
    node = Node(
        title="Group",
        tasks=[
            Node(title="Heavy", progress=100, progress_weight=3),
            Node(title="Light", progress=0, progress_weight=1),
        ],
    )

    assert compute_progress(node) == 75


def test_missing_weight_counts_as_one():
    node = Node(title="Group", tasks=[Node(title="A", progress=60), Node(title="B", progress=20)])

    assert compute_progress(node) == 40


def test_rounds_half_up():
    node = Node(title="Group", tasks=[Node(title="A", progress=0), Node(title="B", progress=1)])

    # 0.5 rounds to 1, where round() would give 0
    assert compute_progress(node) == 1


def test_group_with_empty_collections_is_a_leaf():
    node = Node(title="Group", tasks=[], validated=True)

    assert compute_progress(node) == 100
    assert progress_source(node) == ProgressSource.CALCULATED


def test_seed_roadmap_progress_in_bounds():
    root = build_seed_roadmap("Seed")

    for node in iter_nodes(root):
        assert 0 <= compute_progress(node) <= 100


@pytest.mark.parametrize(
    "raw, expected",
    [
        (50, 50),
        ("42", 42),
        (" 42.9 ", 42),
        (42.9, 42),
        (150, 100),
        ("-5", 0),
        (0, 0),
    ],
)
def test_parse_progress_input_accepts_numbers(raw, expected):
    assert parse_progress_input(raw) == expected


@pytest.mark.parametrize("raw", ["abc", "", None, True, math.nan, math.inf, "inf", [50]])
def test_parse_progress_input_rejects_non_numbers(raw):
    assert parse_progress_input(raw) is None


def test_clamp_progress():
    assert clamp_progress(-1) == 0
    assert clamp_progress(101) == 100
    assert clamp_progress(55) == 55
