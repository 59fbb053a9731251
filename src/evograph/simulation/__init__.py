"""Simulation - damped spring integration and the animation controller."""

from evograph.simulation.controller import SimulationController, SimulationStatus
from evograph.simulation.integrator import step

__all__ = [
    "SimulationController",
    "SimulationStatus",
    "step",
]
