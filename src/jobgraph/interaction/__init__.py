"""
Interaction state: search and selection highlighting.
"""

from .highlight import (
    BackgroundActivated, ClearSearch, EdgeActivated, EdgeHighlighted,
    EmptySearchTerm, HighlightEvent, HighlightOverride, HighlightState,
    HighlightStateManager, Idle, NodeHighlighted, NodeSelected,
    SearchMatched, SearchNoMatch, compute_overrides, transition,
)

__all__ = [
    "BackgroundActivated", "ClearSearch", "EdgeActivated", "EdgeHighlighted",
    "EmptySearchTerm", "HighlightEvent", "HighlightOverride", "HighlightState",
    "HighlightStateManager", "Idle", "NodeHighlighted", "NodeSelected",
    "SearchMatched", "SearchNoMatch", "compute_overrides", "transition",
]
