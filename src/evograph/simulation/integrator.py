"""Per-frame damped spring integration toward layout targets.

velocity = (target - position) * damping
position = clamp(position + velocity)

There is no inertia term: each tick covers a fixed fraction of the
remaining distance, so nodes approach their targets monotonically
without oscillating.
"""

import logging

from evograph.config import settings
from evograph.models import Canvas, NodeState, Point, SimulationState

logger = logging.getLogger(__name__)


def step_node(node: NodeState, gain: float, canvas: Canvas) -> NodeState:
    """Advance one node by one tick."""
    if node.target is None:
        return NodeState(position=canvas.clamp(node.position), velocity=Point(0.0, 0.0))

    velocity = Point(
        (node.target.x - node.position.x) * gain,
        (node.target.y - node.position.y) * gain,
    )
    position = canvas.clamp(Point(node.position.x + velocity.x, node.position.y + velocity.y))
    return NodeState(position=position, velocity=velocity, target=node.target)


def step(
    state: SimulationState,
    dt: float = 1.0,
    damping: float | None = None,
    canvas: Canvas | None = None,
) -> SimulationState:
    """
    Advance every node one tick toward its target.

    Args:
        state: Current snapshot (not modified)
        dt: Elapsed time in frames; 1.0 is one display frame
        damping: Fraction of remaining distance covered per frame
        canvas: Bounds positions are clamped to

    Returns:
        New snapshot with tick incremented
    """
    damping = damping if damping is not None else settings.damping_factor
    canvas = canvas or Canvas.from_settings()

    # Never cover more than the full distance in one tick
    gain = min(max(damping * dt, 0.0), 1.0)

    nodes = {node_id: step_node(ns, gain, canvas) for node_id, ns in state.nodes.items()}
    return state.with_nodes(nodes, tick=state.tick + 1)
