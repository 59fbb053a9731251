"""Graph models - nodes, edges, filter criteria and canvas geometry."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, NamedTuple

from evograph.config import Settings, settings


class NodeType(str, Enum):
    """Role of a node in the knowledge graph."""

    INPUT = "input"
    OUTPUT = "output"
    CONTEXT = "context"


class EdgeType(str, Enum):
    """Kind of connection between nodes."""

    DIRECT = "direct"
    HYPEREDGE = "hyperedge"  # Joins more than two endpoints
    TEMPORAL = "temporal"


class Point(NamedTuple):
    """2D position or vector in canvas units."""

    x: float
    y: float


def _check_confidence(value: float) -> float:
    value = float(value)
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"Confidence must be within [0, 1]: {value}")
    return value


@dataclass(frozen=True)
class Node:
    """
    A node of the evolving knowledge graph.

    Position and velocity are not stored here: they belong to the
    simulation state, keyed by ``id``.
    """

    id: str
    label: str
    type: NodeType
    confidence: float = 1.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", NodeType(self.type))
        object.__setattr__(self, "confidence", _check_confidence(self.confidence))

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "label": self.label,
            "type": self.type.value,
            "confidence": self.confidence,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Node":
        """Create from dictionary (graph data source record)."""
        return cls(
            id=str(data["id"]),
            label=data.get("label") or data.get("name") or str(data["id"]),
            type=NodeType(data["type"]),
            confidence=data.get("confidence", 1.0),
        )


@dataclass(frozen=True)
class Edge:
    """
    A typed, weighted connection between nodes.

    Hyperedges list their intermediate endpoints in ``via``; the full ordered
    endpoint sequence is ``(source_id, *via, target_id)``.
    """

    source_id: str
    target_id: str
    type: EdgeType = EdgeType.DIRECT
    confidence: float = 1.0
    via: tuple[str, ...] = ()
    edge_id: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", EdgeType(self.type))
        object.__setattr__(self, "confidence", _check_confidence(self.confidence))
        object.__setattr__(self, "via", tuple(self.via))

    @property
    def endpoints(self) -> tuple[str, ...]:
        """Ordered endpoint node ids."""
        return (self.source_id, *self.via, self.target_id)

    @property
    def key(self) -> str:
        """Stable identifier for this edge."""
        if self.edge_id:
            return self.edge_id
        return f"{'->'.join(self.endpoints)}:{self.type.value}"

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.key,
            "source_id": self.source_id,
            "target_id": self.target_id,
            "type": self.type.value,
            "confidence": self.confidence,
            "via": list(self.via),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Edge":
        """Create from dictionary (graph data source record)."""
        source = data.get("source_id", data.get("source"))
        target = data.get("target_id", data.get("target"))
        if source is None or target is None:
            raise ValueError(f"Edge record needs a source and a target: {data!r}")
        return cls(
            source_id=str(source),
            target_id=str(target),
            type=EdgeType(data.get("type", EdgeType.DIRECT.value)),
            confidence=data.get("confidence", 1.0),
            via=tuple(str(v) for v in data.get("via") or ()),
            edge_id=data.get("id"),
        )


@dataclass(frozen=True)
class FilterCriteria:
    """
    User-selected filters deciding which part of the graph is visible.

    Node and edge type sets are finite enum sets; strings are coerced on
    construction.
    """

    confidence_threshold: float = 0.0
    node_types: frozenset[NodeType] = field(default_factory=lambda: frozenset(NodeType))
    edge_types: frozenset[EdgeType] = field(default_factory=lambda: frozenset(EdgeType))
    search: str = ""
    max_confidence: float = 1.0  # Upper end of the confidence range control

    def __post_init__(self) -> None:
        object.__setattr__(self, "node_types", frozenset(NodeType(t) for t in self.node_types))
        object.__setattr__(self, "edge_types", frozenset(EdgeType(t) for t in self.edge_types))

    def accepts_node_type(self, node_type: NodeType) -> bool:
        """Membership test for the accepted node types."""
        return node_type in self.node_types

    def accepts_edge_type(self, edge_type: EdgeType) -> bool:
        """Membership test for the accepted edge types."""
        return edge_type in self.edge_types

    def updated(self, **changes: Any) -> "FilterCriteria":
        """Return new criteria with a partial update applied."""
        return replace(self, **changes)


@dataclass(frozen=True)
class Canvas:
    """Drawing area the engine keeps nodes inside."""

    width: float
    height: float
    margin: float = 50.0

    @property
    def center(self) -> Point:
        return Point(self.width / 2, self.height / 2)

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        """(min_x, max_x, min_y, max_y) allowed for node positions."""
        return (
            self.margin,
            max(self.margin, self.width - self.margin),
            self.margin,
            max(self.margin, self.height - self.margin),
        )

    def clamp(self, point: Point) -> Point:
        """Clamp a point into the margin-inset canvas area."""
        min_x, max_x, min_y, max_y = self.bounds
        return Point(
            min(max(point.x, min_x), max_x),
            min(max(point.y, min_y), max_y),
        )

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> "Canvas":
        """Build the canvas from application settings."""
        config = config or settings
        return cls(
            width=config.canvas_width,
            height=config.canvas_height,
            margin=config.boundary_margin,
        )
