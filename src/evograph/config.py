"""Configuration management using Pydantic Settings."""

from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Deployment environment presets."""

    DEV = "dev"
    PROD = "prod"
    TEST = "test"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    environment: Environment = Environment.DEV

    # Canvas geometry (layout and integrator clamp to these bounds)
    canvas_width: float = 800.0
    canvas_height: float = 600.0
    boundary_margin: float = Field(
        default=50.0,
        description="Distance from each canvas edge that node positions never cross"
    )

    # Force Integrator
    damping_factor: float = Field(
        default=0.05,
        description="Fraction of the remaining distance to target covered per tick"
    )
    frame_interval: float = Field(
        default=1 / 60,
        description="Seconds between animation ticks (0 = yield to the loop only)"
    )

    # Multilevel Layout Parameters
    layout_iterations: int = Field(
        default=50,
        description="Force-directed iterations run at each level"
    )
    layout_repulsion: float = Field(
        default=100.0,
        description="Base repulsion, scaled by 10*(level+1)"
    )
    layout_gravity: float = Field(
        default=0.02,
        description="Pull toward canvas center, scaled by 1/(level+1)"
    )
    layout_attraction: float = Field(
        default=0.05,
        description="Spring pull along edges, weighted by edge confidence"
    )
    layout_min_distance: float = 1.0
    layout_max_displacement: float = Field(
        default=20.0,
        description="Upper bound on how far a node moves in one iteration"
    )
    layout_expansion_offset: float = Field(
        default=5.0,
        description="Jitter applied when a synthetic node expands into its members"
    )
    layout_semantic_weight: float = Field(
        default=0.5,
        description="Weight of the group-size signal when pairing nodes during coarsening"
    )
    layout_default_seed: int = 42

    # Hyperedge curves
    hyperedge_curve_offset: float = 30.0

    # View transform
    zoom_min: float = 0.1
    zoom_max: float = 2.0

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False
    log_level: str = "INFO"


def get_test_settings() -> Settings:
    """Get test environment settings.

    Fewer layout iterations and no frame delay keep tests fast.
    """
    return Settings(
        environment=Environment.TEST,
        layout_iterations=10,
        frame_interval=0.0,
        log_level="DEBUG",
    )


# Global settings instance
settings = Settings()
