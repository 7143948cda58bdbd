"""
Highlight State Machine.

Translates search and selection events into per-node visual overrides.
Layout is never touched: the renderer composes the override map with the
positions it already has.

States:
- Idle: no overrides, every node renders normally.
- NodeHighlighted: one node emphasized, all others dimmed.
- EdgeHighlighted: both endpoints of one edge emphasized, all others dimmed.

`transition` is a pure function; HighlightStateManager owns the current
state and the override map derived from it, and replaces that map as a
whole on every change.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from ..config import DIMMED_OPACITY, EMPHASIZED_OPACITY

logger = logging.getLogger(__name__)


class HighlightOverride(BaseModel):
    """Per-node visual override applied on top of the base style."""
    model_config = ConfigDict(frozen=True)

    opacity: float = Field(ge=0.0, le=1.0)
    emphasis: bool = False


EMPHASIZED = HighlightOverride(opacity=EMPHASIZED_OPACITY, emphasis=True)
DIMMED = HighlightOverride(opacity=DIMMED_OPACITY, emphasis=False)


# --- States ---

@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class NodeHighlighted:
    node_id: str


@dataclass(frozen=True)
class EdgeHighlighted:
    edge_id: str
    source: str
    target: str


HighlightState = Union[Idle, NodeHighlighted, EdgeHighlighted]


# --- Events ---

@dataclass(frozen=True)
class ClearSearch:
    pass


@dataclass(frozen=True)
class EmptySearchTerm:
    pass


@dataclass(frozen=True)
class SearchMatched:
    node_id: str


@dataclass(frozen=True)
class SearchNoMatch:
    term: str = ""


@dataclass(frozen=True)
class NodeSelected:
    node_id: str


@dataclass(frozen=True)
class EdgeActivated:
    edge_id: str
    source: str
    target: str


@dataclass(frozen=True)
class BackgroundActivated:
    pass


HighlightEvent = Union[
    ClearSearch, EmptySearchTerm, SearchMatched, SearchNoMatch,
    NodeSelected, EdgeActivated, BackgroundActivated,
]

OverrideMap = Mapping[str, HighlightOverride]


def transition(state: HighlightState, event: HighlightEvent) -> HighlightState:
    """Next state for an event. Unknown events leave the state unchanged."""
    if isinstance(event, (ClearSearch, EmptySearchTerm, BackgroundActivated)):
        return Idle()
    if isinstance(event, (SearchMatched, NodeSelected)):
        return NodeHighlighted(event.node_id)
    if isinstance(event, EdgeActivated):
        return EdgeHighlighted(event.edge_id, event.source, event.target)
    # SearchNoMatch keeps the current highlight
    return state


def emphasized_ids(state: HighlightState) -> Tuple[str, ...]:
    if isinstance(state, NodeHighlighted):
        return (state.node_id,)
    if isinstance(state, EdgeHighlighted):
        return (state.source, state.target)
    return ()


def compute_overrides(state: HighlightState, node_ids: Iterable[str]) -> Dict[str, HighlightOverride]:
    """Full override map for a state over a node set; empty when Idle."""
    if isinstance(state, Idle):
        return {}
    emphasized = set(emphasized_ids(state))
    return {
        nid: EMPHASIZED if nid in emphasized else DIMMED
        for nid in node_ids
    }


class HighlightStateManager:
    """
    Owner of the active highlight state and override map.

    Listeners receive the new read-only map after every change. The optional
    `on_center` callback receives the node id when a search match should
    bring that node into view.
    """

    def __init__(
        self,
        node_ids: Iterable[str] = (),
        on_center: Optional[Callable[[str], None]] = None,
    ):
        self._node_ids: Tuple[str, ...] = tuple(node_ids)
        self._state: HighlightState = Idle()
        self._overrides: OverrideMap = MappingProxyType({})
        self._listeners: List[Callable[[OverrideMap], None]] = []
        self.on_center = on_center

    @property
    def state(self) -> HighlightState:
        return self._state

    @property
    def overrides(self) -> OverrideMap:
        return self._overrides

    def override_for(self, node_id: str) -> Optional[HighlightOverride]:
        return self._overrides.get(node_id)

    def subscribe(self, listener: Callable[[OverrideMap], None]) -> None:
        self._listeners.append(listener)

    def dispatch(self, event: HighlightEvent) -> HighlightState:
        """Apply one event atomically and return the resulting state."""
        new_state = transition(self._state, event)
        if new_state != self._state:
            logger.debug(f"Highlight {self._state} -> {new_state} on {event}")
            self._replace(new_state)

        if isinstance(event, SearchMatched) and self.on_center:
            self.on_center(event.node_id)
        return self._state

    def set_nodes(self, node_ids: Iterable[str]) -> None:
        """
        Adopt a new node set after a layout.

        A highlight whose target is gone drops back to Idle; otherwise the
        map is recomputed for the new ids.
        """
        self._node_ids = tuple(node_ids)
        present = set(self._node_ids)
        state = self._state
        if any(nid not in present for nid in emphasized_ids(state)):
            state = Idle()
        self._replace(state)

    # --- Event shorthands ---

    def clear_search(self) -> HighlightState:
        return self.dispatch(ClearSearch())

    def empty_search_term(self) -> HighlightState:
        return self.dispatch(EmptySearchTerm())

    def search_matched(self, node_id: str) -> HighlightState:
        return self.dispatch(SearchMatched(node_id))

    def search_no_match(self, term: str = "") -> HighlightState:
        return self.dispatch(SearchNoMatch(term))

    def node_selected(self, node_id: str) -> HighlightState:
        return self.dispatch(NodeSelected(node_id))

    def edge_activated(self, edge_id: str, endpoints: Tuple[str, str]) -> HighlightState:
        source, target = endpoints
        return self.dispatch(EdgeActivated(edge_id, source, target))

    def background_activated(self) -> HighlightState:
        return self.dispatch(BackgroundActivated())

    def _replace(self, state: HighlightState) -> None:
        self._state = state
        self._overrides = MappingProxyType(compute_overrides(state, self._node_ids))
        for listener in self._listeners:
            listener(self._overrides)
