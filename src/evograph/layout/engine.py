"""Layout dispatch: visible subgraph + mode -> target positions."""

import logging
import time
from enum import Enum

import numpy as np

from evograph.config import settings
from evograph.layout.config import LayoutConfig
from evograph.layout.hierarchical import hierarchical_layout
from evograph.layout.multilevel import force_layout, multilevel_layout
from evograph.models import Canvas, Edge, Node, Point

logger = logging.getLogger(__name__)


class LayoutModeError(ValueError):
    """Raised when a layout mode is not one of the recognized modes."""


class LayoutMode(str, Enum):
    """How target positions are computed."""

    FORCE = "force"  # Single-level force refinement
    HIERARCHICAL = "hierarchical"  # Layered placement
    MULTILEVEL = "multilevel"  # Coarsen -> layout -> refine

    @classmethod
    def parse(cls, value: "LayoutMode | str") -> "LayoutMode":
        """Parse a mode, rejecting anything unrecognized."""
        try:
            return cls(value)
        except ValueError:
            expected = ", ".join(m.value for m in cls)
            raise LayoutModeError(f"Unknown layout mode: {value!r} (expected one of: {expected})") from None


def valid_edges(node_ids: set[str], edges: list[Edge]) -> list[Edge]:
    """Edges whose endpoints all exist; others are dropped."""
    kept = [edge for edge in edges if node_ids.issuperset(edge.endpoints)]
    if len(kept) != len(edges):
        logger.debug(f"Ignoring {len(edges) - len(kept)} edges with unknown endpoints")
    return kept


def compute_layout(
    nodes: list[Node],
    edges: list[Edge],
    mode: LayoutMode | str = LayoutMode.MULTILEVEL,
    seed: int | None = None,
    canvas: Canvas | None = None,
    config: LayoutConfig | None = None,
    initial_positions: dict[str, Point] | None = None,
) -> dict[str, Point]:
    """
    Compute target positions for the visible subgraph.

    Args:
        nodes: Visible nodes
        edges: Visible edges
        mode: Layout mode (unknown modes raise LayoutModeError)
        seed: Random seed; the same seed and input give identical output
        canvas: Canvas bounds (default from settings)
        config: Force parameters (default from settings)
        initial_positions: Optional current positions to start from

    Returns:
        node_id -> target position, inside the canvas bounds
    """
    mode = LayoutMode.parse(mode)
    canvas = canvas or Canvas.from_settings()
    config = config or LayoutConfig.from_settings()
    seed = seed if seed is not None else settings.layout_default_seed

    if not nodes:
        return {}
    if len(nodes) == 1:
        return {nodes[0].id: canvas.center}

    node_ids = [node.id for node in nodes]
    edges = valid_edges(set(node_ids), list(edges))
    rng = np.random.default_rng(seed)

    start = time.perf_counter()
    if mode == LayoutMode.MULTILEVEL:
        positions = multilevel_layout(node_ids, edges, canvas, config, rng, initial_positions)
    elif mode == LayoutMode.FORCE:
        positions = force_layout(node_ids, edges, canvas, config, rng, initial_positions)
    else:
        positions = hierarchical_layout(nodes, edges, canvas)

    elapsed = (time.perf_counter() - start) * 1000
    logger.info(f"Computed {mode.value} layout for {len(nodes)} nodes in {elapsed:.1f}ms")

    return {node_id: canvas.clamp(point) for node_id, point in positions.items()}
