"""Application configuration and settings management."""

from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="FM_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Freight Matching API"
    api_prefix: str = "/api"
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:8080",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Matching constants
    default_radius_km: float = Field(
        default=50.0,
        gt=0.0,
        description="Radius applied to coverage areas that do not declare one.",
    )
    score_normalization_m: float = Field(
        default=50_000.0,
        gt=0.0,
        description="Distance (meters) at which a spatial match score reaches zero before the floor.",
    )
    min_match_score: float = Field(default=0.1, gt=0.0, le=1.0)
    candidate_page_size: int = Field(
        default=200,
        ge=1,
        description="Maximum open candidates read per kind on each run.",
    )
    urban_service_types: tuple[str, ...] = Field(
        default=(
            "FRETE_MOTO",
            "GUINCHO",
            "MUDANCA",
            "PICAPE",
            "FRETE_URBANO",
            "MOTO",
            "GUINCHO_URBANO",
        ),
        description="Service request types eligible for driver matching.",
    )
    driver_roles: tuple[str, ...] = Field(
        default=("MOTORISTA", "MOTORISTA_AFILIADO", "TRANSPORTADORA"),
        description="Profile roles allowed to trigger matching for themselves.",
    )

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )

    @field_validator("frontend_allowed_origins", "urban_service_types", "driver_roles", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
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
