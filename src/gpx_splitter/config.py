"""Centralized settings for gpx-splitter."""
from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "GPX_SPLITTER_"}

    # "haversine" (sphere) or "geodesic" (WGS-84 ellipsoid, geopy)
    distance_method: Literal["haversine", "geodesic"] = "haversine"

    log_level: str = "INFO"

    # URL inputs only
    http_user_agent: str = "gpx-splitter/0.1"
    http_timeout_s: int = 25
    http_tries: int = 4
    http_backoff_s: float = 0.8


settings = Settings()
