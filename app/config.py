"""
Application configuration using Pydantic settings.
"""
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Carbon Accounting Constants
    co2_absorbed_per_tree_per_year: float = Field(
        default=21.8,
        description="kg of CO2 absorbed by one planted tree per year"
    )
    co2_released_per_cut_tree: float = Field(
        default=150.0,
        description="kg of CO2 released once when a tree is cut"
    )

    # Forest Scene Defaults
    scene_total_slots: int = Field(
        default=60,
        description="Number of tree/stump markers drawn in the scene"
    )
    scene_width: float = Field(
        default=1000.0,
        description="Default scene width in pixels"
    )
    scene_height: float = Field(
        default=500.0,
        description="Default scene height in pixels"
    )
    scene_min_separation: float = Field(
        default=40.0,
        description="Default minimum distance between markers in pixels"
    )

    # Layout Algorithm Parameters
    layout_max_attempts: int = Field(
        default=100,
        description="Sampling attempts per marker before accepting a collision"
    )
    layout_separation_metric: str = Field(
        default="euclidean",
        description="Separation rule: 'euclidean' or 'chebyshev' (per-axis)"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    # CORS Configuration
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins (use specific origins in production)"
    )

    # Rate Limiting
    rate_limit_requests: int = Field(
        default=100,
        description="Maximum requests per minute per client"
    )

    # Application Settings
    app_name: str = Field(
        default="Forest Carbon Monitoring",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    debug: bool = Field(
        default=False,
        description="Debug mode"
    )

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
