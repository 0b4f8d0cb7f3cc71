"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Literal

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="PNAV_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Parcel Access Navigator API"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO", description="Root logging level.")
    data_root: Path = Field(default=Path("data"), description="Root directory for static data files.")
    parcels_source: str = Field(
        default="parcels.geojson",
        description="Parcel dataset: a GeoJSON path (relative to data_root) or an http(s) URL serving GeoJSON.",
    )
    parcel_id_property: str = Field(
        default="parcel_num",
        description="Feature property holding the composed parcel identifier.",
    )
    parcel_id_prefix: str = Field(
        default="Muranga/",
        description="District prefix prepended to a searched parcel number.",
    )
    parcel_display_prefix: str = Field(
        default="Murang'a Block 1",
        description="Human readable block name shown in parcel labels.",
    )
    osrm_base_url: str = Field(
        default="https://router.project-osrm.org",
        description="Base URL for the OSRM routing service.",
    )
    osrm_profile: Literal["driving", "walking", "cycling"] = Field(
        default="driving",
        description="OSRM profile used for travel routes.",
    )
    osrm_timeout_seconds: float = Field(default=15.0, gt=0.0)
    osrm_max_retries: int = Field(default=2, ge=0)
    osrm_backoff_seconds: float = Field(default=0.5, ge=0.0)
    boundary_buffer_meters: float = Field(
        default=20.0,
        gt=0.0,
        description="Tolerance band extruded around a parcel boundary line.",
    )
    location_threshold_meters: float = Field(
        default=150.0,
        ge=0.0,
        description="Minimum movement before a new position triggers rerouting.",
    )
    tie_tolerance_meters: float = Field(default=1e-6, ge=0.0)
    access_point_policy: Literal["nearest_to_centroid", "first_along_route"] = Field(
        default="nearest_to_centroid",
        description="Rule used to pick one access point among several boundary crossings.",
    )
    event_log_size: int = Field(default=200, ge=1)
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("data_root", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
