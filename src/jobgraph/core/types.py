"""
Core type definitions for jobgraph.

Records come in from ingestion, nodes and edges go out to the renderer.
Everything here is immutable: a new layout produces new objects instead of
mutating the previous ones.
"""

import math
from enum import StrEnum
from typing import Annotated, Any, Dict, Literal, Optional, Tuple, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)

from ..config import (
    CROSSING_SWEEPS,
    DEFAULT_NODE_COLOR,
    DEFAULT_SEED,
    DEFAULT_SPACING,
    FORCE_ITERATIONS,
    LAYER_SPACING_FACTOR,
    LAYOUT_TIME_BUDGET_SECONDS,
    NODE_HEIGHT,
    NODE_WIDTH,
    STRESS_ITERATIONS,
    STRESS_TOLERANCE,
)


class LayoutDirection(StrEnum):
    """Screen direction that increasing dependency depth flows toward."""
    DOWN = "down"
    UP = "up"
    LEFT = "left"
    RIGHT = "right"

    @classmethod
    def parse(cls, value: Any) -> "LayoutDirection":
        """Accept canonical names and the TB/BT/LR/RL shorthands."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        aliases = {"tb": cls.DOWN, "bt": cls.UP, "lr": cls.RIGHT, "rl": cls.LEFT}
        if key in aliases:
            return aliases[key]
        return cls(key)

    @property
    def is_rotated(self) -> bool:
        """Depth runs along the horizontal axis."""
        return self in (LayoutDirection.LEFT, LayoutDirection.RIGHT)

    @property
    def is_reversed(self) -> bool:
        """Depth runs toward decreasing screen coordinates."""
        return self in (LayoutDirection.UP, LayoutDirection.LEFT)


class LayoutAlgorithmKind(StrEnum):
    """Available layout strategies."""
    LAYERED = "layered"
    FORCE = "force"
    TREE = "tree"
    STRESS = "stress"

    @classmethod
    def parse(cls, value: Any) -> "LayoutAlgorithmKind":
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        aliases = {"mrtree": cls.TREE, "rank": cls.LAYERED, "spring": cls.FORCE}
        if key in aliases:
            return aliases[key]
        return cls(key)


# =============================================================================
# Algorithm settings (tagged by `kind`)
# =============================================================================


class LayeredSettings(BaseModel):
    """Rank-based layout settings."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["layered"] = "layered"
    sweeps: int = Field(default=CROSSING_SWEEPS, ge=0)


class ForceSettings(BaseModel):
    """Spring simulation settings."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["force"] = "force"
    iterations: int = Field(default=FORCE_ITERATIONS, ge=1)
    repulsive_exponent: int = Field(default=2, ge=1)
    seed: int = DEFAULT_SEED


class TreeSettings(BaseModel):
    """Spanning-forest layout settings."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["tree"] = "tree"
    search_order: Literal["dfs", "bfs"] = "dfs"


class StressSettings(BaseModel):
    """Stress majorization settings."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["stress"] = "stress"
    iterations: int = Field(default=STRESS_ITERATIONS, ge=1)
    tolerance: float = Field(default=STRESS_TOLERANCE, gt=0)
    seed: int = DEFAULT_SEED
    # None means twice the node spacing
    desired_edge_length: Optional[float] = Field(default=None, gt=0)


AlgorithmSettings = Annotated[
    Union[LayeredSettings, ForceSettings, TreeSettings, StressSettings],
    Field(discriminator="kind"),
]


class LayoutOptions(BaseModel):
    """
    Everything the engine needs besides the graph itself.

    `algorithm` accepts either a settings object, a mapping with a `kind`
    key, or a bare algorithm name.
    """
    model_config = ConfigDict(frozen=True)

    direction: LayoutDirection = LayoutDirection.DOWN
    algorithm: AlgorithmSettings = Field(default_factory=LayeredSettings)
    spacing: float = Field(default=DEFAULT_SPACING, ge=0)
    layer_spacing: Optional[float] = Field(default=None, ge=0)
    node_width: float = Field(default=NODE_WIDTH, gt=0)
    node_height: float = Field(default=NODE_HEIGHT, gt=0)
    time_budget: float = Field(default=LAYOUT_TIME_BUDGET_SECONDS, gt=0)

    @field_validator("direction", mode="before")
    @classmethod
    def _parse_direction(cls, value: Any) -> LayoutDirection:
        return LayoutDirection.parse(value)

    @field_validator("algorithm", mode="before")
    @classmethod
    def _parse_algorithm(cls, value: Any) -> Any:
        if isinstance(value, (str, LayoutAlgorithmKind)):
            return {"kind": LayoutAlgorithmKind.parse(value).value}
        if isinstance(value, dict) and "kind" in value:
            return {**value, "kind": LayoutAlgorithmKind.parse(value["kind"]).value}
        return value

    @property
    def kind(self) -> LayoutAlgorithmKind:
        return LayoutAlgorithmKind(self.algorithm.kind)

    @property
    def effective_layer_spacing(self) -> float:
        if self.layer_spacing is not None:
            return self.layer_spacing
        return self.spacing * LAYER_SPACING_FACTOR

    def with_changes(self, **changes: Any) -> "LayoutOptions":
        """Return a validated copy with some fields replaced."""
        data = self.model_dump()
        data.update({k: v for k, v in changes.items() if v is not None})
        return LayoutOptions.model_validate(data)


# =============================================================================
# Graph data
# =============================================================================


class JobRecord(BaseModel):
    """
    A single job as supplied by ingestion.

    The id is read from `job` (document format) or `id`.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(validation_alias=AliasChoices("job", "id"), min_length=1)
    dependencies: Tuple[str, ...] = ()
    sources: Tuple[str, ...] = ()
    targets: Tuple[str, ...] = ()
    color: str = DEFAULT_NODE_COLOR

    @field_validator("color", mode="before")
    @classmethod
    def _default_color(cls, value: Any) -> Any:
        return value or DEFAULT_NODE_COLOR

    def comparison_key(self) -> Tuple[Any, ...]:
        """Minimal value key used to skip redundant layouts."""
        return (self.id, self.color, self.dependencies, self.sources, self.targets)


class Position(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)


class NodeMetadata(BaseModel):
    """Render payload carried alongside a position."""
    model_config = ConfigDict(frozen=True)

    label: str
    sources: Tuple[str, ...] = ()
    targets: Tuple[str, ...] = ()
    color: str = DEFAULT_NODE_COLOR


class GraphNode(BaseModel):
    """A positioned job."""
    model_config = ConfigDict(frozen=True)

    id: str
    position: Position = Field(default_factory=Position)
    metadata: NodeMetadata

    @classmethod
    def from_record(cls, record: JobRecord) -> "GraphNode":
        return cls(
            id=record.id,
            metadata=NodeMetadata(
                label=record.id,
                sources=record.sources,
                targets=record.targets,
                color=record.color,
            ),
        )

    def at(self, x: float, y: float) -> "GraphNode":
        """Copy of this node placed at (x, y)."""
        return self.model_copy(update={"position": Position(x=x, y=y)})

    def render_key(self) -> Tuple[Any, ...]:
        """Value-equality key for skipping redundant re-renders."""
        meta = self.metadata
        return (self.id, meta.color, meta.sources, meta.targets)


class GraphEdge(BaseModel):
    """Directed dependency edge: source must finish before target."""
    model_config = ConfigDict(frozen=True)

    id: str
    source: str
    target: str

    @staticmethod
    def make_id(source: str, target: str) -> str:
        return f"{source}->{target}"

    @classmethod
    def connect(cls, source: str, target: str) -> "GraphEdge":
        return cls(id=cls.make_id(source, target), source=source, target=target)


class GraphModel(BaseModel):
    """Nodes and edges as handed between pipeline stages."""
    model_config = ConfigDict(frozen=True)

    nodes: Tuple[GraphNode, ...] = ()
    edges: Tuple[GraphEdge, ...] = ()

    @property
    def node_ids(self) -> Tuple[str, ...]:
        return tuple(node.id for node in self.nodes)

    def get_node(self, node_id: str) -> Optional[GraphNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def get_edge(self, edge_id: str) -> Optional[GraphEdge]:
        for edge in self.edges:
            if edge.id == edge_id:
                return edge
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Renderer-facing shape: {nodes: [...], edges: [...]}."""
        return {
            "nodes": [node.model_dump(mode="json") for node in self.nodes],
            "edges": [edge.model_dump(mode="json") for edge in self.edges],
        }


class LayoutResult(GraphModel):
    """A positioned graph plus how it was produced."""

    algorithm: str = LayoutAlgorithmKind.LAYERED.value
    used_fallback: bool = False
