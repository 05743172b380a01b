"""Mini README: Centralised configuration models and helpers for AnchorSync.

Structure:
    * FloorVisualization - how the winning floor plane is drawn.
    * AnchorSyncSettings - Pydantic model describing runtime configuration.
    * get_settings - cached accessor for environment-aware settings.

Usage:
    Import ``get_settings`` to read environment variables (prefix
    ``ANCHORSYNC_``), tune the floor recomputation interval, and choose the
    rendering collaborator. The configuration is cached so the cost of
    validation is incurred only once per process. Tests construct
    ``AnchorSyncSettings`` directly instead of going through the cache.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class FloorVisualization(str, Enum):
    """Supported placeholders for the winning floor plane."""

    MESH = "mesh"
    ASSET = "asset"


class AnchorSyncSettings(BaseSettings):
    """Runtime configuration for the AnchorSync engine and its host surfaces."""

    model_config = SettingsConfigDict(
        env_prefix="ANCHORSYNC_",
        env_file=".env",
        case_sensitive=False,
    )

    environment: str = Field(
        "development",
        description="Environment label controlling debug toggles and logging levels.",
    )
    strict_invariants: Optional[bool] = Field(
        None,
        description=(
            "Raise on registry contract violations. Unset means raise everywhere"
            " except in the production environment, where violations are logged."
        ),
    )
    recompute_interval_seconds: float = Field(
        0.5,
        description="Minimum delay between floor recomputation sweeps driven by plane refinements.",
        ge=0.0,
    )
    floor_classification: str = Field(
        "floor",
        description="Plane classification tag routed to the best-of-many floor tracker.",
    )
    reference_image_group: str = Field(
        "Posters",
        description="Reference image group the perception system recognises images from.",
    )
    image_highlight_color: str = Field(
        "red",
        description="Colour of the plane laid over a recognised reference image.",
    )
    floor_highlight_color: str = Field(
        "orange",
        description="Colour of the mesh drawn over the winning floor plane.",
    )
    floor_visualization: FloorVisualization = Field(
        FloorVisualization.MESH,
        description="Draw the floor as its detected mesh or as a named model asset.",
    )
    floor_asset_name: str = Field(
        "care_station",
        description="Model asset placed on the floor when floor_visualization is 'asset'.",
    )
    asset_directory: Path = Field(
        Path("assets"),
        description="Directory searched for named model assets.",
    )
    renderer: str = Field(
        "recording",
        description="Identifier of the rendering collaborator created for new sessions.",
    )
    interface_host: str = Field(
        "0.0.0.0",
        description="Network interface for the perception bridge to bind to.",
    )
    interface_port: int = Field(
        8000,
        description="Default port the perception bridge exposes.",
        ge=1,
        le=65535,
    )
    log_level: str = Field(
        "INFO",
        description="Root logging level applied by the command line entry point.",
    )

    @field_validator("asset_directory", mode="before")
    @classmethod
    def _expand_path(cls, value: Optional[str | Path]) -> Path:
        """Ensure configured paths expand user directories."""

        return Path(value).expanduser().resolve()

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_level(cls, value: str) -> str:
        """Accept lowercase level names from environment files."""

        return str(value).strip().upper()

    @property
    def fail_fast(self) -> bool:
        """Whether invariant violations raise instead of being logged."""

        if self.strict_invariants is not None:
            return self.strict_invariants
        return self.environment.lower() != "production"


@lru_cache()
def get_settings() -> AnchorSyncSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return AnchorSyncSettings()
