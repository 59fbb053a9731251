"""Geometry derived from current positions."""

from evograph.geometry.hyperedge import curve_points, hyperedge_paths

__all__ = [
    "curve_points",
    "hyperedge_paths",
]
