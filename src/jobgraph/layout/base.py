"""
Base classes for layout algorithms.

Every strategy implements a single capability, `compute`, which maps node
ids to (x, y). Strategies may raise LayoutError; the engine turns that into
a grid fallback.
"""

import time
from abc import ABC, abstractmethod
from typing import Dict, Optional, Sequence, Tuple

from ..core.errors import LayoutTimeoutError
from ..core.graph import JobGraph
from ..core.types import GraphEdge, GraphNode, LayoutDirection, LayoutOptions

Positions = Dict[str, Tuple[float, float]]


class Deadline:
    """Wall-clock budget shared by the iterations of one layout run."""

    def __init__(self, algorithm: str, seconds: float):
        self.algorithm = algorithm
        self.seconds = seconds
        self._expires_at = time.monotonic() + seconds

    def expired(self) -> bool:
        return time.monotonic() >= self._expires_at

    def check(self) -> None:
        """Raise LayoutTimeoutError once the budget is spent."""
        if self.expired():
            raise LayoutTimeoutError(
                self.algorithm, f"exceeded time budget of {self.seconds:.2f}s"
            )


class LayoutAlgorithm(ABC):
    """
    Abstract base class for layout strategies.

    Subclasses must define `name` and implement `compute`.
    """

    name: str = "abstract"

    @abstractmethod
    def compute(
        self,
        nodes: Sequence[GraphNode],
        edges: Sequence[GraphEdge],
        options: LayoutOptions,
        deadline: Optional[Deadline] = None,
    ) -> Positions:
        """
        Compute a position for every node.

        Args:
            nodes: Nodes in input order.
            edges: Edges between those nodes.
            options: Direction, spacing and algorithm settings.
            deadline: Budget to check between iterations.

        Returns:
            Positions: Mapping from node id to (x, y).
        """
        raise NotImplementedError

    def _graph(self, nodes: Sequence[GraphNode], edges: Sequence[GraphEdge]) -> JobGraph:
        return JobGraph(nodes, edges)


def orient(
    depth: float,
    breadth: float,
    max_depth: float,
    direction: LayoutDirection,
) -> Tuple[float, float]:
    """
    Map a (depth, breadth) pair onto screen coordinates.

    Depth is the primary axis. Reversed directions mirror it within
    [0, max_depth]; rotated directions put it on x.
    """
    if direction.is_reversed:
        depth = max_depth - depth
    if direction.is_rotated:
        return depth, breadth
    return breadth, depth


def axis_steps(options: LayoutOptions) -> Tuple[float, float]:
    """
    Distance between consecutive layers and between siblings.

    Returns:
        Tuple[float, float]: (layer step along depth, sibling step along breadth)
    """
    if options.direction.is_rotated:
        depth_extent, breadth_extent = options.node_width, options.node_height
    else:
        depth_extent, breadth_extent = options.node_height, options.node_width
    return (
        depth_extent + options.effective_layer_spacing,
        breadth_extent + options.spacing,
    )
