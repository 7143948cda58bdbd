"""
Force-directed layout.

Delegates the spring simulation to rustworkx, which runs a bounded number of
iterations from a seeded start, then scales the unit box to pixel space.
"""

import logging
import math
from typing import Optional, Sequence

from ..core.types import ForceSettings, GraphEdge, GraphNode, LayoutOptions
from .base import Deadline, LayoutAlgorithm, Positions

logger = logging.getLogger(__name__)


class ForceLayout(LayoutAlgorithm):
    """Spring embedder; direction is ignored."""

    name = "force"

    def compute(
        self,
        nodes: Sequence[GraphNode],
        edges: Sequence[GraphEdge],
        options: LayoutOptions,
        deadline: Optional[Deadline] = None,
    ) -> Positions:
        if not nodes:
            return {}
        if len(nodes) == 1:
            return {nodes[0].id: (0.0, 0.0)}

        settings = options.algorithm
        if not isinstance(settings, ForceSettings):
            settings = ForceSettings()

        if deadline:
            deadline.check()

        graph = self._graph(nodes, edges)
        extent = max(options.node_width, options.node_height) + options.spacing
        scale = extent * math.sqrt(graph.node_count)

        raw = graph.spring_positions(
            iterations=settings.iterations,
            repulsive_exponent=settings.repulsive_exponent,
            seed=settings.seed,
            scale=scale,
        )

        # The native call cannot be interrupted; reject late results instead
        if deadline:
            deadline.check()

        logger.debug(f"Spring layout placed {len(raw)} node(s) at scale {scale:.1f}")
        return _translate_to_origin(raw)


def _translate_to_origin(positions: Positions) -> Positions:
    if not positions:
        return positions
    min_x = min(x for x, _ in positions.values())
    min_y = min(y for _, y in positions.values())
    return {nid: (x - min_x, y - min_y) for nid, (x, y) in positions.items()}
