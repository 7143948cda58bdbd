"""Unit tests for core types and layout options."""

import pytest
from pydantic import ValidationError

from jobgraph.config import DEFAULT_NODE_COLOR
from jobgraph.core.types import (
    ForceSettings,
    GraphEdge,
    GraphModel,
    GraphNode,
    JobRecord,
    LayeredSettings,
    LayoutAlgorithmKind,
    LayoutDirection,
    LayoutOptions,
    TreeSettings,
)


class TestJobRecord:
    def test_reads_job_key(self):
        record = JobRecord.model_validate({"job": "build", "dependencies": ["fetch"]})
        assert record.id == "build"
        assert record.dependencies == ("fetch",)

    def test_accepts_id_keyword(self):
        assert JobRecord(id="build").id == "build"

    def test_empty_color_uses_default(self):
        record = JobRecord.model_validate({"job": "a", "color": ""})
        assert record.color == DEFAULT_NODE_COLOR

    def test_empty_id_rejected(self):
        with pytest.raises(ValidationError):
            JobRecord(id="")

    def test_comparison_key_tracks_content(self):
        a = JobRecord(id="a", sources=["x"])
        b = JobRecord(id="a", sources=["x"])
        c = JobRecord(id="a", sources=["y"])
        assert a.comparison_key() == b.comparison_key()
        assert a.comparison_key() != c.comparison_key()


class TestGraphTypes:
    def test_edge_id_is_derived(self):
        edge = GraphEdge.connect("fetch", "build")
        assert edge.id == "fetch->build"

    def test_node_at_returns_copy(self):
        node = GraphNode.from_record(JobRecord(id="a"))
        moved = node.at(10, 20)

        assert (moved.position.x, moved.position.y) == (10, 20)
        assert (node.position.x, node.position.y) == (0, 0)
        assert moved.render_key() == node.render_key()

    def test_to_dict_shape(self):
        node = GraphNode.from_record(JobRecord(id="a")).at(1.5, 2.5)
        model = GraphModel(nodes=(node,), edges=())
        data = model.to_dict()

        assert data["nodes"][0]["id"] == "a"
        assert data["nodes"][0]["position"] == {"x": 1.5, "y": 2.5}
        assert data["nodes"][0]["metadata"]["label"] == "a"
        assert data["edges"] == []


class TestLayoutOptions:
    @pytest.mark.parametrize("alias,expected", [
        ("TB", LayoutDirection.DOWN),
        ("BT", LayoutDirection.UP),
        ("LR", LayoutDirection.RIGHT),
        ("rl", LayoutDirection.LEFT),
        ("down", LayoutDirection.DOWN),
    ])
    def test_direction_aliases(self, alias, expected):
        assert LayoutOptions(direction=alias).direction == expected

    def test_invalid_direction(self):
        with pytest.raises(ValidationError):
            LayoutOptions(direction="sideways")

    def test_algorithm_from_name(self):
        options = LayoutOptions(algorithm="force")
        assert isinstance(options.algorithm, ForceSettings)
        assert options.kind == LayoutAlgorithmKind.FORCE

    def test_algorithm_from_mapping(self):
        options = LayoutOptions(algorithm={"kind": "mrtree", "search_order": "bfs"})
        assert isinstance(options.algorithm, TreeSettings)
        assert options.algorithm.search_order == "bfs"

    def test_defaults(self):
        options = LayoutOptions()
        assert isinstance(options.algorithm, LayeredSettings)
        assert options.direction == LayoutDirection.DOWN
        assert options.effective_layer_spacing == pytest.approx(75.0)

    def test_explicit_layer_spacing(self):
        assert LayoutOptions(layer_spacing=10).effective_layer_spacing == 10

    def test_with_changes_validates(self):
        options = LayoutOptions().with_changes(direction="LR", algorithm="stress", spacing=20)
        assert options.direction == LayoutDirection.RIGHT
        assert options.kind == LayoutAlgorithmKind.STRESS
        assert options.spacing == 20

    def test_with_changes_ignores_none(self):
        base = LayoutOptions(spacing=30)
        assert base.with_changes(spacing=None) == base

    def test_direction_axes(self):
        assert LayoutDirection.LEFT.is_rotated and LayoutDirection.LEFT.is_reversed
        assert LayoutDirection.UP.is_reversed and not LayoutDirection.UP.is_rotated
        assert not LayoutDirection.DOWN.is_rotated and not LayoutDirection.DOWN.is_reversed
