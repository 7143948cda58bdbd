"""
Grid fallback layout.

Places nodes row by row in input order on a square-ish grid. Pure
arithmetic, so it cannot fail for any node count.
"""

import math
from typing import Optional, Sequence

from ..core.types import GraphEdge, GraphNode, LayoutOptions
from .base import Deadline, LayoutAlgorithm, Positions


def grid_cell(index: int, count: int):
    """(row, col) of the index-th node on a grid sized for count nodes."""
    cols = max(1, math.ceil(math.sqrt(count)))
    return index // cols, index % cols


class GridLayout(LayoutAlgorithm):
    """Deterministic last-resort placement; ignores edges and direction."""

    name = "grid"

    def compute(
        self,
        nodes: Sequence[GraphNode],
        edges: Sequence[GraphEdge] = (),
        options: Optional[LayoutOptions] = None,
        deadline: Optional[Deadline] = None,
    ) -> Positions:
        options = options or LayoutOptions()
        step_x = options.node_width + options.spacing
        step_y = options.node_height + options.spacing

        positions: Positions = {}
        for index, node in enumerate(nodes):
            row, col = grid_cell(index, len(nodes))
            positions[node.id] = (col * step_x, row * step_y)
        return positions
