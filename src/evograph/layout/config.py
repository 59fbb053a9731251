"""Configuration for layout computation."""

from dataclasses import dataclass

from evograph.config import Settings, settings


@dataclass
class LayoutConfig:
    """Force-directed refinement and coarsening parameters."""

    iterations: int = 50  # Force iterations per level

    # Forces
    repulsion: float = 100.0  # Scaled by 10*(level+1)
    gravity: float = 0.02  # Scaled by 1/(level+1)
    attraction: float = 0.05  # Edge springs, multiplied by edge confidence
    min_distance: float = 1.0  # Repulsion singularity guard
    max_displacement: float = 20.0  # Per node, per iteration

    # Multilevel
    expansion_offset: float = 5.0  # Jitter when a synthetic node expands
    semantic_weight: float = 0.5  # Group-size term of the pairing score

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> "LayoutConfig":
        """Build from application settings."""
        config = config or settings
        return cls(
            iterations=config.layout_iterations,
            repulsion=config.layout_repulsion,
            gravity=config.layout_gravity,
            attraction=config.layout_attraction,
            min_distance=config.layout_min_distance,
            max_displacement=config.layout_max_displacement,
            expansion_offset=config.layout_expansion_offset,
            semantic_weight=config.layout_semantic_weight,
        )
