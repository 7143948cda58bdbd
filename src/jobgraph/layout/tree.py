"""
Tree layout.

Extracts a spanning forest from the dependency graph (each node hangs under
the first dependency that reaches it) and places subtrees side by side,
centring every parent over its children.
"""

from collections import deque
from typing import Dict, List, Optional, Sequence, Tuple

from ..core.graph import JobGraph
from ..core.types import GraphEdge, GraphNode, LayoutOptions, TreeSettings
from .base import Deadline, LayoutAlgorithm, Positions, axis_steps, orient


def spanning_forest(graph: JobGraph, search_order: str = "dfs") -> Tuple[List[str], Dict[str, List[str]]]:
    """
    Split the graph into trees.

    Trees are grown from dependency-free nodes in input order; nodes still
    unclaimed afterwards (only possible inside cycles) start trees of their
    own, again in input order.

    Returns:
        Tuple[List[str], Dict[str, List[str]]]: (tree roots, children per node)
    """
    children: Dict[str, List[str]] = {nid: [] for nid in graph.node_ids}
    claimed = set()
    roots: List[str] = []

    def grow(root: str) -> None:
        claimed.add(root)
        roots.append(root)
        if search_order == "bfs":
            queue = deque([root])
            while queue:
                node = queue.popleft()
                for succ in graph.successors(node):
                    if succ not in claimed:
                        claimed.add(succ)
                        children[node].append(succ)
                        queue.append(succ)
            return

        stack = [(root, iter(graph.successors(root)))]
        while stack:
            parent, succs = stack[-1]
            succ = next(succs, None)
            if succ is None:
                stack.pop()
            elif succ not in claimed:
                claimed.add(succ)
                children[parent].append(succ)
                stack.append((succ, iter(graph.successors(succ))))

    for root in graph.roots():
        if root not in claimed:
            grow(root)
    for node_id in graph.node_ids:
        if node_id not in claimed:
            grow(node_id)

    return roots, children


class TreeLayout(LayoutAlgorithm):
    """Tidy-tree placement over a spanning forest."""

    name = "tree"

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
        order = settings.search_order if isinstance(settings, TreeSettings) else "dfs"

        graph = self._graph(nodes, edges)
        roots, children = spanning_forest(graph, order)

        slot: Dict[str, float] = {}
        level: Dict[str, int] = {}
        next_slot = 0

        for root in roots:
            if deadline:
                deadline.check()

            # Post-order without recursion: a node is placed after its children
            stack = [(root, 0, False)]
            while stack:
                node, depth, expanded = stack.pop()
                level[node] = depth
                kids = children[node]
                if not kids:
                    slot[node] = float(next_slot)
                    next_slot += 1
                elif expanded:
                    slot[node] = (slot[kids[0]] + slot[kids[-1]]) / 2
                else:
                    stack.append((node, depth, True))
                    for kid in reversed(kids):
                        stack.append((kid, depth + 1, False))

        layer_step, sibling_step = axis_steps(options)
        max_depth = max(level.values()) * layer_step

        return {
            nid: orient(level[nid] * layer_step, slot[nid] * sibling_step, max_depth, options.direction)
            for nid in graph.node_ids
        }
