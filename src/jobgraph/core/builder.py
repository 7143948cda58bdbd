"""
Graph Model Builder.

Turns a batch of job records into the node/edge set consumed by the layout
engine. Node order follows record order; edge order follows record order,
then dependency order within each record.
"""

import logging
from typing import Dict, List, Sequence

from .types import GraphEdge, GraphModel, GraphNode, JobRecord

logger = logging.getLogger(__name__)


class GraphModelBuilder:
    """
    Normalizes job records into a GraphModel.

    Dependencies on ids outside the batch are dropped without error. Cycles
    are left in place; the layout engine copes with them.
    """

    def __init__(self, dedupe_edges: bool = True):
        """
        Args:
            dedupe_edges: Collapse repeated dependency entries into a single
                edge. When False, repeats are kept as parallel edges sharing
                the same id.
        """
        self.dedupe_edges = dedupe_edges

    def build(self, records: Sequence[JobRecord]) -> GraphModel:
        nodes: List[GraphNode] = []
        known: Dict[str, JobRecord] = {}

        for record in records:
            if record.id in known:
                logger.warning(f"Duplicate job id '{record.id}' ignored")
                continue
            known[record.id] = record
            nodes.append(GraphNode.from_record(record))

        edges: List[GraphEdge] = []
        seen_edges = set()
        dropped = 0

        for record in known.values():
            for dep in record.dependencies:
                if dep not in known:
                    dropped += 1
                    continue
                edge = GraphEdge.connect(dep, record.id)
                if self.dedupe_edges:
                    if edge.id in seen_edges:
                        continue
                    seen_edges.add(edge.id)
                edges.append(edge)

        if dropped:
            logger.debug(f"Dropped {dropped} dependency reference(s) to unknown jobs")

        return GraphModel(nodes=tuple(nodes), edges=tuple(edges))


def build_graph_model(records: Sequence[JobRecord], dedupe_edges: bool = True) -> GraphModel:
    """Convenience wrapper around GraphModelBuilder.build."""
    return GraphModelBuilder(dedupe_edges=dedupe_edges).build(records)
