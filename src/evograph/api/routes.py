"""API routes for Evograph.

Provides:
- /v1/graph/view: filter + layout of a submitted graph snapshot
- /v1/graph/stats: confidence statistics for filter panels
- /v1/view/zoom: clamped zoom
- /health
"""

import logging
import time
from typing import Literal

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from evograph.filtering import (
    detect_outliers,
    filter_graph,
    percentile,
    significant_changes,
    summarize,
)
from evograph.geometry import curve_points
from evograph.layout import LayoutModeError, compute_layout
from evograph.models import Edge, EdgeType, FilterCriteria, Node, NodeType
from evograph.view import ViewTransform

logger = logging.getLogger(__name__)

router = APIRouter()

API_VERSION = "0.1.0"


# ============================================================================
# Graph Models
# ============================================================================


class NodeModel(BaseModel):
    """Graph node as submitted by a data source."""

    id: str
    label: str
    type: Literal["input", "output", "context"]
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)

    def to_node(self) -> Node:
        return Node(id=self.id, label=self.label, type=NodeType(self.type), confidence=self.confidence)


class EdgeModel(BaseModel):
    """Graph edge; hyperedges list intermediate endpoints in ``via``."""

    id: str | None = None
    source: str
    target: str
    type: Literal["direct", "hyperedge", "temporal"] = "direct"
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    via: list[str] = Field(default_factory=list)

    def to_edge(self) -> Edge:
        return Edge(
            source_id=self.source,
            target_id=self.target,
            type=EdgeType(self.type),
            confidence=self.confidence,
            via=tuple(self.via),
            edge_id=self.id,
        )


class CriteriaModel(BaseModel):
    """Filter criteria."""

    confidence_threshold: float = 0.0
    max_confidence: float = 1.0
    node_types: list[Literal["input", "output", "context"]] = Field(
        default_factory=lambda: [t.value for t in NodeType]
    )
    edge_types: list[Literal["direct", "hyperedge", "temporal"]] = Field(
        default_factory=lambda: [t.value for t in EdgeType]
    )
    search: str = ""

    def to_criteria(self) -> FilterCriteria:
        return FilterCriteria(
            confidence_threshold=self.confidence_threshold,
            max_confidence=self.max_confidence,
            node_types=frozenset(NodeType(t) for t in self.node_types),
            edge_types=frozenset(EdgeType(t) for t in self.edge_types),
            search=self.search,
        )


class GraphViewRequest(BaseModel):
    """Graph snapshot plus view settings."""

    nodes: list[NodeModel]
    edges: list[EdgeModel] = Field(default_factory=list)
    criteria: CriteriaModel = Field(default_factory=CriteriaModel)
    mode: str = "multilevel"
    seed: int | None = None


class PositionModel(BaseModel):
    x: float
    y: float


class GraphViewResponse(BaseModel):
    """Visible subgraph with target positions."""

    mode: str
    visible_nodes: list[str]
    visible_edges: list[EdgeModel]
    positions: dict[str, PositionModel]
    hyperedge_curves: dict[str, list[PositionModel]]
    layout_ms: float


class StatsRequest(BaseModel):
    nodes: list[NodeModel]


class StatsResponse(BaseModel):
    """Confidence statistics; ``stats`` is None for an empty node list."""

    stats: dict | None
    percentiles: dict[str, float] = Field(default_factory=dict)  # node id -> percentile rank
    outliers: list[str] = Field(default_factory=list)  # Outside the 1.5 IQR fences
    significant: list[str] = Field(default_factory=list)  # More than 2 std devs from the mean


class ZoomRequest(BaseModel):
    scale: float = 1.0
    delta: float
    translate_x: float = 0.0
    translate_y: float = 0.0


class ZoomResponse(BaseModel):
    scale: float
    transform: str  # SVG transform attribute


class HealthResponse(BaseModel):
    status: str
    version: str


# ============================================================================
# Endpoints
# ============================================================================


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Health check."""
    return HealthResponse(status="healthy", version=API_VERSION)


@router.post("/v1/graph/view", response_model=GraphViewResponse)
async def graph_view(request: GraphViewRequest) -> GraphViewResponse:
    """Filter the submitted graph and compute target positions."""
    nodes = [n.to_node() for n in request.nodes]
    edges = [e.to_edge() for e in request.edges]

    visible_nodes, visible_edges = filter_graph(nodes, edges, request.criteria.to_criteria())

    start = time.perf_counter()
    try:
        positions = compute_layout(visible_nodes, visible_edges, request.mode, request.seed)
    except LayoutModeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    layout_ms = (time.perf_counter() - start) * 1000

    curves = {}
    for edge in visible_edges:
        if edge.type == EdgeType.HYPEREDGE:
            points = curve_points([positions[node_id] for node_id in edge.endpoints])
            curves[edge.key] = [PositionModel(x=p.x, y=p.y) for p in points]

    logger.info(
        f"Graph view: {len(visible_nodes)}/{len(nodes)} nodes, "
        f"{len(visible_edges)}/{len(edges)} edges visible"
    )

    return GraphViewResponse(
        mode=request.mode,
        visible_nodes=[n.id for n in visible_nodes],
        visible_edges=[
            EdgeModel(
                id=e.key,
                source=e.source_id,
                target=e.target_id,
                type=e.type.value,
                confidence=e.confidence,
                via=list(e.via),
            )
            for e in visible_edges
        ],
        positions={node_id: PositionModel(x=p.x, y=p.y) for node_id, p in positions.items()},
        hyperedge_curves=curves,
        layout_ms=layout_ms,
    )


@router.post("/v1/graph/stats", response_model=StatsResponse)
async def graph_stats(request: StatsRequest) -> StatsResponse:
    """Confidence statistics of the submitted nodes."""
    ids = [n.id for n in request.nodes]
    values = [n.confidence for n in request.nodes]
    stats = summarize(values)

    return StatsResponse(
        stats=stats.to_dict() if stats else None,
        percentiles={node_id: percentile(v, values) for node_id, v in zip(ids, values)},
        outliers=[node_id for node_id, f in zip(ids, detect_outliers(values)) if f.flagged],
        significant=[node_id for node_id, f in zip(ids, significant_changes(values)) if f.flagged],
    )


@router.post("/v1/view/zoom", response_model=ZoomResponse)
async def zoom(request: ZoomRequest) -> ZoomResponse:
    """Apply a zoom delta, clamped to the allowed range."""
    view = ViewTransform(
        scale=request.scale,
        translate_x=request.translate_x,
        translate_y=request.translate_y,
    ).zoomed(request.delta)
    return ZoomResponse(scale=view.scale, transform=view.to_svg())
