"""Multilevel layout: coarsen, place, then refine back to the original graph.

Algorithm:
1. Build up to ceil(log2(n)) coarser levels by pairing nodes; each pair
   becomes a synthetic node at the centroid of its members
2. Seed positions at the coarsest level
3. From coarsest to finest: run force refinement, then expand every
   synthetic node into its children with a small random offset
4. Positions at the finest level are the layout targets

All randomness comes from the caller's generator, so a fixed seed gives
identical positions.
"""

import logging
import math
from collections import defaultdict
from dataclasses import dataclass, field

import numpy as np

from evograph.layout.config import LayoutConfig
from evograph.layout.forces import LinkArrays, clamp_to_canvas, refine
from evograph.models import Canvas, Edge, Point

logger = logging.getLogger(__name__)


@dataclass
class GraphLevel:
    """One level of the coarsening hierarchy."""

    depth: int  # 0 = original graph
    groups: list[tuple[str, ...]]  # Original node ids collapsed into each node
    weights: dict[tuple[int, int], float] = field(default_factory=dict)  # i < j
    children: list[tuple[int, ...]] = field(default_factory=list)  # Indices into the finer level
    positions: np.ndarray | None = None  # Centroids, when the finer level had positions

    @property
    def size(self) -> int:
        return len(self.groups)

    def links(self) -> LinkArrays:
        return LinkArrays.from_weights(self.weights)

    def neighbors(self) -> dict[int, dict[int, float]]:
        """Adjacency view of the connectivity weights."""
        adj: dict[int, dict[int, float]] = defaultdict(dict)
        for (i, j), w in self.weights.items():
            adj[i][j] = w
            adj[j][i] = w
        return adj


def level_count(node_count: int) -> int:
    """Number of coarsening passes: ceil(log2(n)), at least 1."""
    if node_count < 2:
        return 1
    return max(1, math.ceil(math.log2(node_count)))


def build_finest_level(node_ids: list[str], edges: list[Edge]) -> GraphLevel:
    """
    Level 0 from the original graph.

    Nodes are indexed in sorted id order. Consecutive hyperedge endpoints
    count as connected pairs; parallel connections add their confidences.
    """
    ids = sorted(node_ids)
    index = {node_id: i for i, node_id in enumerate(ids)}
    weights: dict[tuple[int, int], float] = defaultdict(float)

    for edge in edges:
        endpoints = edge.endpoints
        for a, b in zip(endpoints, endpoints[1:]):
            if a not in index or b not in index or a == b:
                continue
            i, j = sorted((index[a], index[b]))
            weights[(i, j)] += edge.confidence

    return GraphLevel(depth=0, groups=[(node_id,) for node_id in ids], weights=dict(weights))


def pair_score(level: GraphLevel, i: int, j: int, connectivity: float, semantic_weight: float) -> float:
    """
    Similarity of two nodes for pairing.

    Connectivity weight plus a group-size signal favoring merges of small
    groups, which keeps the hierarchy balanced.
    """
    return connectivity + semantic_weight / (len(level.groups[i]) + len(level.groups[j]))


def match_pairs(level: GraphLevel, semantic_weight: float) -> list[tuple[int, ...]]:
    """
    Greedy matching in stable group order.

    Each unmatched node pairs with its best-scoring unmatched neighbor.
    A node with no unmatched neighbor pairs with the next unmatched node
    in order, so every pass roughly halves the level.
    """
    order = sorted(range(level.size), key=lambda i: level.groups[i])
    adj = level.neighbors()
    matched = [False] * level.size
    pairs: list[tuple[int, ...]] = []
    cursor = 0

    for position, i in enumerate(order):
        if matched[i]:
            continue
        matched[i] = True

        best, best_score = None, -math.inf
        for j, w in sorted(adj.get(i, {}).items()):
            if matched[j]:
                continue
            score = pair_score(level, i, j, w, semantic_weight)
            if score > best_score:
                best, best_score = j, score

        if best is None:
            cursor = max(cursor, position + 1)
            while cursor < len(order) and matched[order[cursor]]:
                cursor += 1
            if cursor < len(order):
                best = order[cursor]

        if best is None:
            pairs.append((i,))
        else:
            matched[best] = True
            pairs.append((i, best))

    return pairs


def coarsen(level: GraphLevel, semantic_weight: float = 0.5) -> GraphLevel:
    """Collapse matched pairs into synthetic nodes, producing a strictly smaller level."""
    pairs = match_pairs(level, semantic_weight)

    parent = {}
    groups = []
    for new_index, members in enumerate(pairs):
        for child in members:
            parent[child] = new_index
        groups.append(tuple(sorted(m for child in members for m in level.groups[child])))

    weights: dict[tuple[int, int], float] = defaultdict(float)
    for (i, j), w in level.weights.items():
        a, b = parent[i], parent[j]
        if a != b:
            weights[(min(a, b), max(a, b))] += w

    positions = None
    if level.positions is not None:
        # Centroid of original members: children weighted by member count
        positions = np.empty((len(pairs), 2))
        for new_index, members in enumerate(pairs):
            counts = np.array([len(level.groups[c]) for c in members], dtype=float)
            positions[new_index] = (level.positions[list(members)] * counts[:, None]).sum(axis=0) / counts.sum()

    return GraphLevel(
        depth=level.depth + 1,
        groups=groups,
        weights=dict(weights),
        children=pairs,
        positions=positions,
    )


def build_hierarchy(finest: GraphLevel, semantic_weight: float = 0.5) -> list[GraphLevel]:
    """Coarsen repeatedly, stopping early once fewer than 2 nodes remain."""
    levels = [finest]
    for _ in range(level_count(finest.size)):
        if levels[-1].size < 2:
            break
        levels.append(coarsen(levels[-1], semantic_weight))
        logger.debug(f"Coarsened level {levels[-1].depth}: {levels[-1].size} nodes")
    return levels


def random_positions(count: int, canvas: Canvas, rng: np.random.Generator) -> np.ndarray:
    """Uniform positions inside the canvas bounds."""
    min_x, max_x, min_y, max_y = canvas.bounds
    xs = rng.uniform(min_x, max_x, count)
    ys = rng.uniform(min_y, max_y, count)
    return np.column_stack([xs, ys])


def expand(
    level: GraphLevel,
    positions: np.ndarray,
    finer_size: int,
    rng: np.random.Generator,
    offset: float,
) -> np.ndarray:
    """Place every child at its synthetic parent's position plus a small offset."""
    finer = np.empty((finer_size, 2))
    for parent_index, children in enumerate(level.children):
        for child in children:
            finer[child] = positions[parent_index] + rng.uniform(-offset, offset, 2)
    return finer


def multilevel_layout(
    node_ids: list[str],
    edges: list[Edge],
    canvas: Canvas,
    config: LayoutConfig,
    rng: np.random.Generator,
    initial_positions: dict[str, Point] | None = None,
) -> dict[str, Point]:
    """
    Compute target positions through coarsening and refinement.

    Args:
        node_ids: Visible node ids
        edges: Visible edges (endpoints outside ``node_ids`` are ignored)
        canvas: Canvas bounds
        config: Force and coarsening parameters
        rng: Seeded random generator
        initial_positions: Optional current positions; when every node has
            one, coarse levels start from member centroids instead of
            random seeds

    Returns:
        node_id -> target position
    """
    finest = build_finest_level(node_ids, edges)
    if initial_positions and all(group[0] in initial_positions for group in finest.groups):
        finest.positions = np.array([initial_positions[group[0]] for group in finest.groups], dtype=float)

    levels = build_hierarchy(finest, config.semantic_weight)
    coarsest = levels[-1]

    if coarsest.positions is not None:
        positions = clamp_to_canvas(np.array(coarsest.positions, dtype=float), canvas)
    else:
        positions = random_positions(coarsest.size, canvas, rng)

    logger.debug(
        f"Multilevel layout: {finest.size} nodes, {len(levels) - 1} coarsening levels, "
        f"coarsest has {coarsest.size} nodes"
    )

    for depth in range(len(levels) - 1, -1, -1):
        level = levels[depth]
        positions = refine(positions, level.links(), depth, canvas, config)
        if depth > 0:
            positions = expand(level, positions, levels[depth - 1].size, rng, config.expansion_offset)
            clamp_to_canvas(positions, canvas)

    return {
        group[0]: Point(float(x), float(y))
        for group, (x, y) in zip(finest.groups, positions)
    }


def force_layout(
    node_ids: list[str],
    edges: list[Edge],
    canvas: Canvas,
    config: LayoutConfig,
    rng: np.random.Generator,
    initial_positions: dict[str, Point] | None = None,
) -> dict[str, Point]:
    """Single-level force refinement on all nodes, no coarsening."""
    finest = build_finest_level(node_ids, edges)
    positions = random_positions(finest.size, canvas, rng)
    if initial_positions:
        for i, group in enumerate(finest.groups):
            if group[0] in initial_positions:
                positions[i] = initial_positions[group[0]]
        clamp_to_canvas(positions, canvas)

    positions = refine(positions, finest.links(), 0, canvas, config)
    return {
        group[0]: Point(float(x), float(y))
        for group, (x, y) in zip(finest.groups, positions)
    }
