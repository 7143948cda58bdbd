"""
Rank-based (layered) layout.

Phases:
  1. Rank assignment (longest dependency chain ending at each node)
  2. Layer grouping
  3. Crossing reduction (barycenter sweeps)
  4. Coordinate assignment
"""

import logging
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from ..core.graph import JobGraph
from ..core.types import GraphEdge, GraphNode, LayeredSettings, LayoutOptions
from .base import Deadline, LayoutAlgorithm, Positions, axis_steps, orient

logger = logging.getLogger(__name__)


# =============================================================================
# Rank Assignment
# =============================================================================


def assign_ranks(graph: JobGraph) -> Dict[str, int]:
    """
    Rank every node by the longest dependency chain that ends at it.

    Roots get rank 0 and a dependent gets one more than its highest-ranked
    dependency. The walk is an explicit-stack DFS over dependencies started
    from each node in input order.

    Cyclic input: when a dependency is met again while its own rank is still
    being computed, that dependency counts as having a rank equal to the
    current traversal depth (the number of open frames). The result is
    degenerate but the walk always terminates, and depth never exceeds the
    node count.
    """
    ranks: Dict[str, int] = {}

    for root in graph.node_ids:
        if root in ranks:
            continue

        stack: List[Tuple[str, Iterator[str]]] = [(root, iter(graph.predecessors(root)))]
        on_path = {root}
        best: Dict[str, int] = {root: 0}

        while stack:
            node, deps = stack[-1]
            dep = next(deps, None)

            if dep is None:
                stack.pop()
                on_path.discard(node)
                ranks[node] = best.pop(node)
                if stack:
                    parent = stack[-1][0]
                    best[parent] = max(best[parent], ranks[node] + 1)
                continue

            if dep in ranks:
                best[node] = max(best[node], ranks[dep] + 1)
            elif dep in on_path:
                best[node] = max(best[node], len(stack) + 1)
            else:
                stack.append((dep, iter(graph.predecessors(dep))))
                on_path.add(dep)
                best[dep] = 0

    return ranks


def group_layers(node_ids: Sequence[str], ranks: Dict[str, int]) -> List[List[str]]:
    """Bucket nodes by rank, keeping input order inside each bucket."""
    if not node_ids:
        return []
    layers: List[List[str]] = [[] for _ in range(max(ranks.values()) + 1)]
    for node_id in node_ids:
        layers[ranks[node_id]].append(node_id)
    return layers


# =============================================================================
# Crossing Reduction
# =============================================================================


def _count_between(upper: List[str], lower: List[str], graph: JobGraph) -> int:
    """Count crossings between two adjacent layers (inversion count)."""
    lower_pos = {nid: i for i, nid in enumerate(lower)}
    pairs: List[Tuple[int, int]] = []
    for u_pos, src in enumerate(upper):
        for tgt in graph.successors(src):
            if tgt in lower_pos:
                pairs.append((u_pos, lower_pos[tgt]))
    pairs.sort()

    # Fenwick tree over lower positions
    tree = [0] * (len(lower) + 1)
    crossings = 0
    for inserted, (_, l_pos) in enumerate(pairs):
        i = l_pos + 1
        not_greater = 0
        while i > 0:
            not_greater += tree[i]
            i -= i & -i
        crossings += inserted - not_greater
        i = l_pos + 1
        while i <= len(lower):
            tree[i] += 1
            i += i & -i
    return crossings


def count_crossings(layers: List[List[str]], graph: JobGraph) -> int:
    return sum(
        _count_between(layers[i], layers[i + 1], graph)
        for i in range(len(layers) - 1)
    )


def _barycenter_sort(layer: List[str], neighbours, slot: Dict[str, int]) -> List[str]:
    def key(node_id: str) -> float:
        positions = [slot[nb] for nb in neighbours(node_id) if nb in slot]
        if not positions:
            return float(slot[node_id])
        return sum(positions) / len(positions)

    # sorted() is stable, so ties keep their current order
    return sorted(layer, key=key)


def order_layers(
    layers: List[List[str]],
    graph: JobGraph,
    sweeps: int,
    deadline: Optional[Deadline] = None,
) -> List[List[str]]:
    """
    Reorder nodes within layers to reduce edge crossings.

    Each sweep sorts layers top-down by the barycenter of their
    dependencies, then bottom-up by the barycenter of their dependents.
    The ordering with the fewest crossings is kept; sweeping stops early
    once a sweep brings no improvement.
    """
    ordering = [list(layer) for layer in layers]
    best = [list(layer) for layer in ordering]
    best_crossings = count_crossings(best, graph)

    for _ in range(sweeps):
        if best_crossings == 0:
            break
        if deadline:
            deadline.check()

        slot = {nid: i for layer in ordering for i, nid in enumerate(layer)}
        for idx in range(1, len(ordering)):
            ordering[idx] = _barycenter_sort(ordering[idx], graph.predecessors, slot)
            slot.update({nid: i for i, nid in enumerate(ordering[idx])})

        for idx in range(len(ordering) - 2, -1, -1):
            ordering[idx] = _barycenter_sort(ordering[idx], graph.successors, slot)
            slot.update({nid: i for i, nid in enumerate(ordering[idx])})

        crossings = count_crossings(ordering, graph)
        if crossings >= best_crossings:
            break
        best = [list(layer) for layer in ordering]
        best_crossings = crossings

    logger.debug(f"Layer ordering settled with {best_crossings} crossing(s)")
    return best


# =============================================================================
# Layout
# =============================================================================


class LayeredLayout(LayoutAlgorithm):
    """Hierarchical layout: depth from rank, breadth from in-layer order."""

    name = "layered"

    def compute(
        self,
        nodes: Sequence[GraphNode],
        edges: Sequence[GraphEdge],
        options: LayoutOptions,
        deadline: Optional[Deadline] = None,
    ) -> Positions:
        if not nodes:
            return {}

        settings = options.algorithm
        sweeps = settings.sweeps if isinstance(settings, LayeredSettings) else 0

        graph = self._graph(nodes, edges)
        ranks = assign_ranks(graph)
        # Cyclic input can leave rank gaps; empty layers take no space
        layers = [layer for layer in group_layers(graph.node_ids, ranks) if layer]
        layers = order_layers(layers, graph, sweeps, deadline)

        layer_step, sibling_step = axis_steps(options)
        widest = max(len(layer) for layer in layers)
        max_breadth = (widest - 1) * sibling_step
        max_depth = (len(layers) - 1) * layer_step

        positions: Positions = {}
        for rank, layer in enumerate(layers):
            offset = (max_breadth - (len(layer) - 1) * sibling_step) / 2
            depth = rank * layer_step
            for order, node_id in enumerate(layer):
                breadth = offset + order * sibling_step
                positions[node_id] = orient(depth, breadth, max_depth, options.direction)
        return positions
