"""Unit tests for the rustworkx-backed JobGraph."""

import numpy as np

from jobgraph.core.builder import build_graph_model
from jobgraph.core.graph import JobGraph
from jobgraph.core.types import GraphEdge, JobRecord


def job(job_id, *deps):
    return JobRecord(id=job_id, dependencies=deps)


class TestJobGraph:
    def test_neighbours_in_emission_order(self):
        model = build_graph_model([job("a"), job("b"), job("c", "b", "a")])
        graph = JobGraph(model.nodes, model.edges)

        assert graph.predecessors("c") == ["b", "a"]
        assert graph.successors("a") == ["c"]
        assert graph.roots() == ["a", "b"]
        assert graph.is_acyclic()

    def test_ignores_dangling_and_parallel_edges(self):
        model = build_graph_model([job("a"), job("b")])
        edges = [
            GraphEdge.connect("a", "b"),
            GraphEdge.connect("a", "b"),
            GraphEdge.connect("a", "ghost"),
        ]
        graph = JobGraph(model.nodes, edges)

        assert graph.edge_count == 1
        assert graph.has_edge("a", "b")
        assert not graph.has_edge("a", "ghost")

    def test_stats(self):
        model = build_graph_model([job("a"), job("b", "a"), job("lonely")])
        stats = JobGraph(model.nodes, model.edges).get_stats()
        assert stats == {"total_nodes": 3, "total_edges": 1, "roots": 2, "orphans": 1}

    def test_undirected_distances(self):
        model = build_graph_model([job("a"), job("b", "a"), job("c", "b"), job("d")])
        dist = JobGraph(model.nodes, model.edges).undirected_distances()

        assert dist.shape == (4, 4)
        assert dist[0, 2] == 2
        assert dist[2, 0] == 2
        # disconnected pairs sit one hop past the longest path
        assert dist[0, 3] == 3
        assert np.all(np.diag(dist) == 0)

    def test_cycle_detected(self):
        model = build_graph_model([job("a", "b"), job("b", "a")])
        assert not JobGraph(model.nodes, model.edges).is_acyclic()
