"""
Stress majorization layout (SMACOF).

Target distances are undirected hop counts times the desired edge length.
Each iteration applies the Guttman transform, which never increases stress,
and the loop stops on relative improvement below the tolerance or after
the configured number of iterations.
"""

import logging
from typing import Optional, Sequence

import numpy as np

from ..config import STRESS_MAX_NODES
from ..core.errors import LayoutError
from ..core.types import GraphEdge, GraphNode, LayoutOptions, StressSettings
from .base import Deadline, LayoutAlgorithm, Positions

logger = logging.getLogger(__name__)


def _pairwise(x: np.ndarray) -> np.ndarray:
    diff = x[:, None, :] - x[None, :, :]
    return np.sqrt((diff ** 2).sum(axis=-1))


def _stress(x: np.ndarray, target: np.ndarray, weights: np.ndarray) -> float:
    return float((weights * (_pairwise(x) - target) ** 2).sum() / 2)


class StressLayout(LayoutAlgorithm):
    """Distance-preserving layout; direction is ignored."""

    name = "stress"

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
        if len(nodes) > STRESS_MAX_NODES:
            raise LayoutError(self.name, f"{len(nodes)} nodes exceeds limit of {STRESS_MAX_NODES}")

        settings = options.algorithm
        if not isinstance(settings, StressSettings):
            settings = StressSettings()
        edge_length = settings.desired_edge_length or (options.spacing * 2) or options.node_width

        graph = self._graph(nodes, edges)
        n = graph.node_count
        target = graph.undirected_distances() * edge_length

        weights = np.zeros_like(target)
        off_diagonal = ~np.eye(n, dtype=bool)
        weights[off_diagonal] = 1.0 / target[off_diagonal] ** 2

        laplacian = -weights
        np.fill_diagonal(laplacian, weights.sum(axis=1))
        laplacian_inv = np.linalg.pinv(laplacian)

        rng = np.random.default_rng(settings.seed)
        x = rng.uniform(0.0, edge_length * np.sqrt(n), size=(n, 2))
        stress = _stress(x, target, weights)

        for iteration in range(settings.iterations):
            if deadline:
                deadline.check()

            current = _pairwise(x)
            with np.errstate(divide="ignore", invalid="ignore"):
                ratio = np.where(current > 0, target / current, 0.0)
            b = -weights * ratio
            np.fill_diagonal(b, 0.0)
            np.fill_diagonal(b, -b.sum(axis=1))

            x = laplacian_inv @ (b @ x)
            new_stress = _stress(x, target, weights)
            if stress > 0 and (stress - new_stress) / stress < settings.tolerance:
                logger.debug(f"Stress converged after {iteration + 1} iteration(s)")
                stress = new_stress
                break
            stress = new_stress

        x = x - x.min(axis=0)
        return {
            nid: (float(x[i, 0]), float(x[i, 1]))
            for i, nid in enumerate(graph.node_ids)
        }
