"""Simulation state - per-node position, velocity and layout target."""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Iterator, Mapping

from evograph.models.graph import Point


@dataclass(frozen=True)
class NodeState:
    """Animated state of one visible node."""

    position: Point
    velocity: Point = Point(0.0, 0.0)
    target: Point | None = None  # None until a layout has run

    def retarget(self, target: Point) -> "NodeState":
        """Same position and velocity, new layout target."""
        return replace(self, target=target)

    def distance_to_target(self) -> float:
        if self.target is None:
            return 0.0
        dx = self.target.x - self.position.x
        dy = self.target.y - self.position.y
        return (dx * dx + dy * dy) ** 0.5


@dataclass(frozen=True)
class SimulationState:
    """
    Immutable snapshot of every visible node's animated state.

    Stages never mutate a snapshot: the integrator and controller build a
    new one, so renderers can hold on to the value they were given.
    """

    nodes: Mapping[str, NodeState] = field(default_factory=dict)
    tick: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "nodes", MappingProxyType(dict(self.nodes)))

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[str]:
        return iter(self.nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes

    def __getitem__(self, node_id: str) -> NodeState:
        return self.nodes[node_id]

    def positions(self) -> dict[str, Point]:
        """Current position of every node."""
        return {node_id: ns.position for node_id, ns in self.nodes.items()}

    def targets(self) -> dict[str, Point]:
        """Layout target of every node that has one."""
        return {
            node_id: ns.target for node_id, ns in self.nodes.items() if ns.target is not None
        }

    def max_displacement(self) -> float:
        """Largest remaining distance between a node and its target."""
        return max((ns.distance_to_target() for ns in self.nodes.values()), default=0.0)

    def with_nodes(self, nodes: Mapping[str, NodeState], tick: int | None = None) -> "SimulationState":
        """New snapshot with the given node states."""
        return SimulationState(nodes=nodes, tick=self.tick if tick is None else tick)

    def to_dict(self) -> dict:
        """Convert to a JSON-friendly dictionary for renderers."""
        return {
            "tick": self.tick,
            "nodes": {
                node_id: {
                    "x": ns.position.x,
                    "y": ns.position.y,
                    "vx": ns.velocity.x,
                    "vy": ns.velocity.y,
                    "target": list(ns.target) if ns.target is not None else None,
                }
                for node_id, ns in self.nodes.items()
            },
        }
