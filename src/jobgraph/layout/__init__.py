"""
Layout strategies and the engine that dispatches between them.
"""

from .base import Deadline, LayoutAlgorithm, Positions
from .engine import AlgorithmRegistry, LayoutEngine, LayoutFailure, compute_layout, create_default_registry
from .force import ForceLayout
from .grid import GridLayout
from .layered import LayeredLayout, assign_ranks
from .stress import StressLayout
from .tree import TreeLayout

__all__ = [
    "Deadline", "LayoutAlgorithm", "Positions",
    "AlgorithmRegistry", "LayoutEngine", "LayoutFailure",
    "compute_layout", "create_default_registry",
    "ForceLayout", "GridLayout", "LayeredLayout", "StressLayout", "TreeLayout",
    "assign_ranks",
]
