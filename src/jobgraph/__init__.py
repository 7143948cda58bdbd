"""
jobgraph - Job Dependency Graph Layout.

Turns a list of jobs and their dependencies into positioned nodes and edges
ready for rendering, and keeps an interactive search/highlight overlay on
top of the result.

Key Components:
- core: Records, nodes, edges and the model builder
- layout: Layered, force, tree and stress layouts with a grid fallback
- search: Id lookup over the current node set
- interaction: Highlight state machine
- scheduler: Generation-tagged layout runs and debounced search

Usage:
    from jobgraph import GraphModelBuilder, LayoutEngine, LayoutOptions

    model = GraphModelBuilder().build(records)
    result = LayoutEngine().layout(model, LayoutOptions(direction="LR"))
"""

__version__ = "0.1.0"

from .core.builder import GraphModelBuilder
from .core.errors import InvalidFormatError, JobGraphError
from .core.types import (
    GraphEdge, GraphModel, GraphNode, JobRecord,
    LayoutAlgorithmKind, LayoutDirection, LayoutOptions, LayoutResult,
)
from .interaction.highlight import HighlightOverride, HighlightStateManager
from .layout.engine import LayoutEngine
from .scheduler import LayoutScheduler
from .search.index import SearchIndex

__all__ = [
    "__version__",
    "GraphModelBuilder",
    "InvalidFormatError",
    "JobGraphError",
    "GraphEdge",
    "GraphModel",
    "GraphNode",
    "JobRecord",
    "LayoutAlgorithmKind",
    "LayoutDirection",
    "LayoutOptions",
    "LayoutResult",
    "HighlightOverride",
    "HighlightStateManager",
    "LayoutEngine",
    "LayoutScheduler",
    "SearchIndex",
]
