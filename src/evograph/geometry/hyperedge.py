"""Curve geometry for hyperedges.

Every segment between consecutive endpoints gets one control point: the
segment midpoint pushed along the segment normal. The push direction
alternates per segment, giving an S-shaped path instead of every
segment bowing the same way.
"""

import logging
import math
from collections.abc import Iterable, Sequence

from evograph.config import settings
from evograph.models import Edge, EdgeType, Point, SimulationState

logger = logging.getLogger(__name__)


def segment_control_point(current: Point, following: Point, index: int, offset: float) -> Point:
    """Offset midpoint for one segment; zero-length segments get no offset."""
    mid_x = (current.x + following.x) / 2
    mid_y = (current.y + following.y) / 2

    dx = following.x - current.x
    dy = following.y - current.y
    length = math.hypot(dx, dy)
    if length == 0:
        return Point(mid_x, mid_y)

    sign = 1.0 if index % 2 == 0 else -1.0
    nx, ny = -dy / length, dx / length
    return Point(mid_x + nx * offset * sign, mid_y + ny * offset * sign)


def curve_points(endpoints: Sequence[Point], offset: float | None = None) -> list[Point]:
    """
    Build the curve path through a sequence of endpoints.

    Args:
        endpoints: Ordered endpoint positions (at least 2)
        offset: Distance of each control point from its segment

    Returns:
        [p0, c0, p1, c1, ..., pn]: endpoints interleaved with one control
        point per segment, ready for a quadratic path renderer
    """
    if len(endpoints) < 2:
        raise ValueError("A curve needs at least 2 endpoints")

    offset = offset if offset is not None else settings.hyperedge_curve_offset
    points = [Point(*endpoints[0])]
    for index, (current, following) in enumerate(zip(endpoints, endpoints[1:])):
        points.append(segment_control_point(Point(*current), Point(*following), index, offset))
        points.append(Point(*following))
    return points


def hyperedge_paths(
    state: SimulationState,
    edges: Iterable[Edge],
    offset: float | None = None,
    use_targets: bool = False,
) -> dict[str, list[Point]]:
    """
    Curve paths for every hyperedge whose endpoints are all in the snapshot.

    Args:
        state: Current simulation snapshot
        edges: Visible edges; non-hyperedges are skipped
        offset: Control point offset
        use_targets: Build from layout targets instead of current positions

    Returns:
        edge key -> curve points
    """
    lookup = state.targets() if use_targets else state.positions()
    paths = {}
    for edge in edges:
        if edge.type != EdgeType.HYPEREDGE:
            continue
        if not all(node_id in lookup for node_id in edge.endpoints):
            continue
        paths[edge.key] = curve_points([lookup[node_id] for node_id in edge.endpoints], offset)
    return paths
