"""
Layout Engine for jobgraph.

Dispatches to the selected algorithm and guarantees a complete result:
any failure, timeout or unusable output is reported as an Err at this
boundary, logged, and replaced by the grid fallback.
"""

import asyncio
import logging
import math
from dataclasses import dataclass
from typing import Dict, Optional

from ..core.errors import LayoutError
from ..core.result import Err, Ok, Result
from ..core.types import GraphModel, LayoutAlgorithmKind, LayoutOptions, LayoutResult
from .base import Deadline, LayoutAlgorithm, Positions
from .force import ForceLayout
from .grid import GridLayout
from .layered import LayeredLayout
from .stress import StressLayout
from .tree import TreeLayout

logger = logging.getLogger(__name__)


@dataclass
class LayoutFailure:
    """Structured error for a layout attempt."""
    algorithm: str
    message: str
    cause: Exception | None = None


class AlgorithmRegistry:
    """Registry of layout strategies keyed by algorithm kind."""

    def __init__(self):
        self._algorithms: Dict[str, LayoutAlgorithm] = {}

    def register(self, algorithm: LayoutAlgorithm) -> None:
        self._algorithms[algorithm.name] = algorithm

    def get(self, kind: str) -> Optional[LayoutAlgorithm]:
        return self._algorithms.get(str(kind))


def create_default_registry() -> AlgorithmRegistry:
    registry = AlgorithmRegistry()
    registry.register(LayeredLayout())
    registry.register(ForceLayout())
    registry.register(TreeLayout())
    registry.register(StressLayout())
    return registry


class LayoutEngine:
    """
    Central entry point for layout computation.

    `layout` never raises for a well-formed GraphModel: it returns the
    selected algorithm's positions when they are usable, otherwise the grid.
    """

    def __init__(self, registry: AlgorithmRegistry | None = None):
        self._registry = registry or create_default_registry()
        self._fallback = GridLayout()
        self._logger = logging.getLogger(f"{__name__}.LayoutEngine")

    @property
    def registry(self) -> AlgorithmRegistry:
        return self._registry

    def layout(self, model: GraphModel, options: LayoutOptions | None = None) -> LayoutResult:
        options = options or LayoutOptions()
        kind = options.kind.value

        if not model.nodes:
            return LayoutResult(nodes=(), edges=model.edges, algorithm=kind)

        outcome = self._run(kind, model, options)
        if outcome.is_ok():
            positions = outcome.unwrap()
            used_fallback = False
            algorithm = kind
        else:
            failure: LayoutFailure = outcome.error
            self._logger.warning(
                f"Layout '{failure.algorithm}' failed, using grid fallback: {failure.message}"
            )
            positions = self._fallback.compute(model.nodes, model.edges, options)
            used_fallback = True
            algorithm = self._fallback.name

        nodes = tuple(node.at(*positions[node.id]) for node in model.nodes)
        return LayoutResult(
            nodes=nodes,
            edges=model.edges,
            algorithm=algorithm,
            used_fallback=used_fallback,
        )

    async def layout_async(
        self, model: GraphModel, options: LayoutOptions | None = None
    ) -> LayoutResult:
        """
        Lay out without blocking the event loop.

        Yields one loop turn so pending UI work can flush, then runs the
        computation in a worker thread; timers such as the search debounce
        keep firing while it runs. Algorithms hold no per-run state, so
        overlapping runs are safe.
        """
        await asyncio.sleep(0)
        return await asyncio.to_thread(self.layout, model, options)

    def _run(
        self, kind: str, model: GraphModel, options: LayoutOptions
    ) -> Result[Positions, LayoutFailure]:
        algorithm = self._registry.get(kind)
        if algorithm is None:
            return Err(LayoutFailure(kind, f"no algorithm registered for '{kind}'"))

        deadline = Deadline(algorithm.name, options.time_budget)
        try:
            positions = algorithm.compute(model.nodes, model.edges, options, deadline)
        except LayoutError as e:
            return Err(LayoutFailure(algorithm.name, str(e), cause=e))
        except Exception as e:
            self._logger.debug(f"Unexpected error in '{algorithm.name}'", exc_info=True)
            return Err(LayoutFailure(algorithm.name, f"{type(e).__name__}: {e}", cause=e))

        return self._validate(algorithm.name, model, positions)

    @staticmethod
    def _validate(
        name: str, model: GraphModel, positions: Positions
    ) -> Result[Positions, LayoutFailure]:
        missing = [node.id for node in model.nodes if node.id not in positions]
        if missing:
            return Err(LayoutFailure(name, f"{len(missing)} node(s) left unplaced"))

        for node in model.nodes:
            x, y = positions[node.id]
            if not (math.isfinite(x) and math.isfinite(y)):
                return Err(LayoutFailure(name, f"non-finite position for '{node.id}'"))

        return Ok(positions)


def compute_layout(
    model: GraphModel,
    direction: str | None = None,
    algorithm: str | LayoutAlgorithmKind | None = None,
    spacing: float | None = None,
) -> LayoutResult:
    """One-shot helper: lay out a model with the default engine."""
    options = LayoutOptions().with_changes(
        direction=direction, algorithm=algorithm, spacing=spacing
    )
    return LayoutEngine().layout(model, options)
