"""Application configuration and settings management."""

from typing import Any, Literal, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="ITR_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Itinerary Router API"
    api_prefix: str = "/api"
    routing_backend: Literal["google", "osrm"] = Field(
        default="google",
        description="Routing API used for the travel matrix when credentials are available.",
    )
    google_maps_api_key: Optional[str] = Field(
        default=None,
        description="Server-side Distance Matrix API key. A key passed with a request takes precedence.",
    )
    google_distance_matrix_url: str = Field(
        default="https://maps.googleapis.com/maps/api/distancematrix/json",
        description="Distance Matrix endpoint.",
    )
    google_travel_mode: Literal["driving", "walking", "bicycling", "transit"] = Field(default="driving")
    osrm_base_url: Optional[str] = Field(
        default=None,
        description="Base URL for a self-hosted OSRM routing service (e.g., http://localhost:5000).",
    )
    osrm_profile: Literal["driving", "car"] = Field(
        default="driving",
        description="OSRM profile to use when computing travel times.",
    )
    routing_timeout_seconds: float = Field(default=10.0, gt=0.0)
    fallback_speed_kmh: float = Field(
        default=30.0,
        gt=0.0,
        description="Average urban speed used to turn straight-line distance into travel time.",
    )
    zero_coordinates_are_unset: bool = Field(
        default=True,
        description="Treat the (0, 0) coordinate pair as missing, as legacy clients store it for unset locations.",
    )
    two_opt_max_improvements: int = Field(
        default=10_000,
        ge=0,
        description="Upper bound on accepted 2-opt swaps per tour; 0 disables the cap.",
    )
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:8080",
            "http://127.0.0.1:8080",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("google_maps_api_key", "osrm_base_url", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator("osrm_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: Optional[str]) -> Optional[str]:
        return value.rstrip("/") if value else value

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
