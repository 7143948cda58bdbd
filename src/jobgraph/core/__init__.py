"""
Core modules for jobgraph.

This package contains the fundamental building blocks:
- types: Data structures (JobRecord, GraphNode, GraphEdge, LayoutOptions)
- builder: Record batch to node/edge set
- graph: rustworkx-backed view used by the layout algorithms
- result: Ok/Err values returned at the engine boundary
"""

from .builder import GraphModelBuilder, build_graph_model
from .errors import InvalidFormatError, JobGraphError, LayoutError, LayoutTimeoutError
from .graph import JobGraph
from .types import (
    GraphEdge, GraphModel, GraphNode, JobRecord, LayoutAlgorithmKind,
    LayoutDirection, LayoutOptions, LayoutResult, NodeMetadata, Position,
)

__all__ = [
    # Types
    "GraphEdge", "GraphModel", "GraphNode", "JobRecord", "LayoutAlgorithmKind",
    "LayoutDirection", "LayoutOptions", "LayoutResult", "NodeMetadata", "Position",
    # Building
    "GraphModelBuilder", "build_graph_model", "JobGraph",
    # Errors
    "JobGraphError", "InvalidFormatError", "LayoutError", "LayoutTimeoutError",
]
