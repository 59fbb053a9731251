"""Evograph data models."""

from evograph.models.graph import (
    Canvas,
    Edge,
    EdgeType,
    FilterCriteria,
    Node,
    NodeType,
    Point,
)
from evograph.models.simulation import NodeState, SimulationState

__all__ = [
    "Node",
    "NodeType",
    "Edge",
    "EdgeType",
    "FilterCriteria",
    "Point",
    "Canvas",
    "NodeState",
    "SimulationState",
]
