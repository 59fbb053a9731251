"""Layout computation for the visible subgraph.

Provides:
- Multilevel layout (coarsening, seeded placement, refinement)
- Single-level force-directed layout
- Layered hierarchical placement
"""

from evograph.layout.config import LayoutConfig
from evograph.layout.engine import LayoutMode, LayoutModeError, compute_layout
from evograph.layout.multilevel import GraphLevel, build_hierarchy, coarsen, level_count

__all__ = [
    "LayoutConfig",
    "LayoutMode",
    "LayoutModeError",
    "compute_layout",
    # Coarsening internals
    "GraphLevel",
    "build_hierarchy",
    "coarsen",
    "level_count",
]
