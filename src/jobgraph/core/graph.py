"""
Job Graph backed by rustworkx.

Layout algorithms need fast neighbour access in a deterministic order and,
for the physical simulations, the native rustworkx routines. This module
manages:
- The bimap between string node ids and rustworkx integer indices.
- Predecessor/successor lists kept in edge emission order.
- Conversions from rustworkx index mappings back to node ids.
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Sequence, Tuple

import numpy as np
import rustworkx as rx

from .types import GraphEdge, GraphNode


class JobGraph:
    """
    Read-only view of one node/edge set.

    Built once per layout run; edges whose endpoints are missing are ignored.
    """

    def __init__(self, nodes: Sequence[GraphNode], edges: Iterable[GraphEdge]):
        self._graph = rx.PyDiGraph(multigraph=False)
        self._id_to_idx: Dict[str, int] = {}
        self._idx_to_id: Dict[int, str] = {}
        self._order: List[str] = []
        self._preds: Dict[str, List[str]] = defaultdict(list)
        self._succs: Dict[str, List[str]] = defaultdict(list)

        for node in nodes:
            if node.id in self._id_to_idx:
                continue
            idx = self._graph.add_node(node.id)
            self._id_to_idx[node.id] = idx
            self._idx_to_id[idx] = node.id
            self._order.append(node.id)

        for edge in edges:
            self._add_edge(edge.source, edge.target)

    def _add_edge(self, source: str, target: str) -> None:
        if source not in self._id_to_idx or target not in self._id_to_idx:
            return
        u = self._id_to_idx[source]
        v = self._id_to_idx[target]
        if self._graph.has_edge(u, v):
            return
        self._graph.add_edge(u, v, None)
        self._preds[target].append(source)
        self._succs[source].append(target)

    @property
    def node_ids(self) -> List[str]:
        """Node ids in input order."""
        return list(self._order)

    @property
    def node_count(self) -> int:
        return self._graph.num_nodes()

    @property
    def edge_count(self) -> int:
        return self._graph.num_edges()

    def predecessors(self, node_id: str) -> List[str]:
        """Dependencies of node_id, in emission order."""
        return self._preds.get(node_id, [])

    def successors(self, node_id: str) -> List[str]:
        """Dependents of node_id, in emission order."""
        return self._succs.get(node_id, [])

    def has_edge(self, source: str, target: str) -> bool:
        u = self._id_to_idx.get(source)
        v = self._id_to_idx.get(target)
        if u is None or v is None:
            return False
        return self._graph.has_edge(u, v)

    def is_acyclic(self) -> bool:
        return rx.is_directed_acyclic_graph(self._graph)

    def roots(self) -> List[str]:
        """Nodes without dependencies, in input order."""
        return [nid for nid in self._order if not self._preds.get(nid)]

    def spring_positions(
        self,
        iterations: int,
        repulsive_exponent: int,
        seed: int,
        scale: float,
    ) -> Dict[str, Tuple[float, float]]:
        """Run the native spring simulation and key the result by node id."""
        mapping = rx.spring_layout(
            self._graph,
            repulsive_exponent=repulsive_exponent,
            num_iter=iterations,
            seed=seed,
            scale=scale,
        )
        return {
            self._idx_to_id[idx]: (float(xy[0]), float(xy[1]))
            for idx, xy in mapping.items()
        }

    def undirected_distances(self) -> np.ndarray:
        """
        All-pairs hop distances ignoring edge direction.

        Rows and columns follow input order. Disconnected pairs get one more
        than the largest finite distance so every pair has a target length.
        """
        n = self.node_count
        if n == 0:
            return np.zeros((0, 0))

        raw = rx.distance_matrix(self._graph, as_undirected=True, null_value=np.inf)
        order = [self._id_to_idx[nid] for nid in self._order]
        dist = np.asarray(raw, dtype=float)[np.ix_(order, order)]
        off_diagonal = ~np.eye(n, dtype=bool)
        dist[off_diagonal & (dist <= 0)] = np.inf
        np.fill_diagonal(dist, 0.0)

        finite = dist[np.isfinite(dist)]
        longest = finite.max() if finite.size else 0.0
        dist[~np.isfinite(dist)] = longest + 1.0
        return dist

    def get_stats(self) -> Dict[str, int]:
        orphans = len([
            nid for nid in self._order
            if not self._preds.get(nid) and not self._succs.get(nid)
        ])
        return {
            "total_nodes": self.node_count,
            "total_edges": self.edge_count,
            "roots": len(self.roots()),
            "orphans": orphans,
        }
