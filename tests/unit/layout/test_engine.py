"""Unit tests for the layout engine and its fallback path."""

import asyncio
import math

import pytest

from jobgraph.core.builder import build_graph_model
from jobgraph.core.errors import LayoutError
from jobgraph.core.types import GraphModel, GraphNode, JobRecord, LayoutOptions
from jobgraph.layout import stress as stress_module
from jobgraph.layout.base import LayoutAlgorithm
from jobgraph.layout.engine import AlgorithmRegistry, LayoutEngine, compute_layout
from jobgraph.layout.grid import GridLayout, grid_cell
from jobgraph.layout.tree import TreeLayout, spanning_forest
from jobgraph.core.graph import JobGraph


def job(job_id, *deps):
    return JobRecord(id=job_id, dependencies=deps)


def pipeline_model():
    return build_graph_model([
        job("fetch"),
        job("lint", "fetch"),
        job("build", "fetch"),
        job("test", "build", "lint"),
        job("deploy", "test"),
        job("docs"),
    ])


def nodes(count):
    return [GraphNode.from_record(JobRecord(id=f"n{i}")) for i in range(count)]


class RaisingLayout(LayoutAlgorithm):
    name = "layered"

    def compute(self, nodes, edges, options, deadline=None):
        raise LayoutError(self.name, "boom")


class CrashingLayout(LayoutAlgorithm):
    name = "layered"

    def compute(self, nodes, edges, options, deadline=None):
        raise ZeroDivisionError("division by zero")


class SpinningLayout(LayoutAlgorithm):
    name = "layered"

    def compute(self, nodes, edges, options, deadline=None):
        while True:
            deadline.check()


class NaNLayout(LayoutAlgorithm):
    name = "layered"

    def compute(self, nodes, edges, options, deadline=None):
        return {node.id: (math.nan, 0.0) for node in nodes}


class PartialLayout(LayoutAlgorithm):
    name = "layered"

    def compute(self, nodes, edges, options, deadline=None):
        return {nodes[0].id: (0.0, 0.0)}


def engine_with(algorithm):
    registry = AlgorithmRegistry()
    registry.register(algorithm)
    return LayoutEngine(registry=registry)


class TestLayoutEngine:
    @pytest.mark.parametrize("algorithm", ["layered", "force", "tree", "stress"])
    def test_every_algorithm_places_every_node(self, algorithm):
        model = pipeline_model()
        result = LayoutEngine().layout(model, LayoutOptions(algorithm=algorithm))

        assert result.used_fallback is False
        assert result.algorithm == algorithm
        assert result.node_ids == model.node_ids
        assert result.edges == model.edges
        assert all(node.position.is_finite() for node in result.nodes)

    def test_metadata_survives_layout(self):
        model = pipeline_model()
        result = LayoutEngine().layout(model)
        for before, after in zip(model.nodes, result.nodes):
            assert before.metadata == after.metadata

    def test_empty_model(self):
        result = LayoutEngine().layout(GraphModel())
        assert result.nodes == ()
        assert result.used_fallback is False

    @pytest.mark.parametrize("algorithm", [
        RaisingLayout(), CrashingLayout(), NaNLayout(), PartialLayout(),
    ])
    def test_failures_fall_back_to_grid(self, algorithm, caplog):
        model = pipeline_model()
        with caplog.at_level("WARNING"):
            result = engine_with(algorithm).layout(model)

        assert result.used_fallback is True
        assert result.algorithm == "grid"
        assert result.edges == model.edges
        assert len({(n.position.x, n.position.y) for n in result.nodes}) == len(model.nodes)
        assert "using grid fallback" in caplog.text

    def test_timeout_falls_back_to_grid(self, caplog):
        model = pipeline_model()
        options = LayoutOptions(time_budget=0.01)
        with caplog.at_level("WARNING"):
            result = engine_with(SpinningLayout()).layout(model, options)

        assert result.used_fallback is True
        assert "time budget" in caplog.text

    def test_unregistered_algorithm_falls_back(self):
        result = LayoutEngine(registry=AlgorithmRegistry()).layout(pipeline_model())
        assert result.used_fallback is True

    def test_stress_over_limit_falls_back(self, monkeypatch):
        monkeypatch.setattr(stress_module, "STRESS_MAX_NODES", 2)
        result = LayoutEngine().layout(pipeline_model(), LayoutOptions(algorithm="stress"))
        assert result.used_fallback is True
        assert result.algorithm == "grid"

    @pytest.mark.parametrize("algorithm", ["force", "stress"])
    def test_seeded_algorithms_are_deterministic(self, algorithm):
        model = pipeline_model()
        options = LayoutOptions(algorithm=algorithm)
        first = LayoutEngine().layout(model, options)
        second = LayoutEngine().layout(model, options)
        assert first == second

    @pytest.mark.parametrize("algorithm", ["force", "stress"])
    def test_physical_layouts_start_at_origin(self, algorithm):
        result = LayoutEngine().layout(pipeline_model(), LayoutOptions(algorithm=algorithm))
        assert min(n.position.x for n in result.nodes) == pytest.approx(0.0)
        assert min(n.position.y for n in result.nodes) == pytest.approx(0.0)

    @pytest.mark.parametrize("algorithm", ["layered", "force", "tree", "stress"])
    def test_single_node(self, algorithm):
        model = build_graph_model([job("solo")])
        result = LayoutEngine().layout(model, LayoutOptions(algorithm=algorithm))
        assert result.used_fallback is False
        assert result.nodes[0].position.is_finite()

    def test_layout_async(self):
        result = asyncio.run(LayoutEngine().layout_async(pipeline_model()))
        assert result.algorithm == "layered"

    def test_compute_layout_helper(self):
        result = compute_layout(pipeline_model(), direction="LR", algorithm="mrtree", spacing=10)
        assert result.algorithm == "tree"


class TestGridLayout:
    def test_row_major_placement(self):
        positions = GridLayout().compute(nodes(4))
        assert positions == {
            "n0": (0.0, 0.0),
            "n1": (222.0, 0.0),
            "n2": (0.0, 86.0),
            "n3": (222.0, 86.0),
        }

    @pytest.mark.parametrize("count", [0, 1, 2, 5, 100, 10000])
    def test_distinct_non_negative(self, count):
        positions = GridLayout().compute(nodes(count))
        assert len(positions) == count
        assert len(set(positions.values())) == count
        assert all(x >= 0 and y >= 0 for x, y in positions.values())

    def test_grid_cell(self):
        assert grid_cell(0, 1) == (0, 0)
        assert grid_cell(4, 5) == (1, 1)
        assert grid_cell(0, 0) == (0, 0)


class TestTreeLayout:
    def fork_model(self):
        return build_graph_model([job("A"), job("B", "A"), job("C", "A")])

    def test_parent_centred_over_children(self):
        model = self.fork_model()
        positions = TreeLayout().compute(model.nodes, model.edges, LayoutOptions())
        assert positions == {
            "A": (111.0, 0.0),
            "B": (0.0, 111.0),
            "C": (222.0, 111.0),
        }

    def test_right_direction(self):
        model = self.fork_model()
        positions = TreeLayout().compute(model.nodes, model.edges, LayoutOptions(direction="LR"))
        assert positions == {
            "A": (0.0, 43.0),
            "B": (247.0, 0.0),
            "C": (247.0, 86.0),
        }

    def test_up_direction_mirrors_depth(self):
        model = self.fork_model()
        positions = TreeLayout().compute(model.nodes, model.edges, LayoutOptions(direction="BT"))
        assert positions["A"] == (111.0, 111.0)
        assert positions["B"] == (0.0, 0.0)

    def test_shared_dependent_claimed_once(self):
        model = build_graph_model([job("A"), job("B"), job("C", "A", "B")])
        roots, children = spanning_forest(JobGraph(model.nodes, model.edges))
        assert roots == ["A", "B"]
        assert children["A"] == ["C"]
        assert children["B"] == []

    def test_cycle_only_graph(self):
        model = build_graph_model([job("A", "B"), job("B", "A")])
        positions = TreeLayout().compute(model.nodes, model.edges, LayoutOptions())
        assert set(positions) == {"A", "B"}
        assert positions["A"] != positions["B"]

    def test_bfs_order(self):
        model = build_graph_model([job("A"), job("B", "A"), job("C", "B"), job("D", "A")])
        options = LayoutOptions(algorithm={"kind": "tree", "search_order": "bfs"})
        positions = TreeLayout().compute(model.nodes, model.edges, options)
        assert len(set(positions.values())) == 4
