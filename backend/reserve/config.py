from __future__ import annotations

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Reserve Land Engine"
    debug: bool = True
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]
    log_level: str = "INFO"
    scale_bar_width_px: int = 48
    min_zoom: float = 0.0
    max_zoom: float = 19.0
    max_scale_distance_m: float = 5_000_000.0  # 5000 km
    polygon_base_radius_deg: float = 0.008
    catalog_path: Optional[str] = None  # defaults to the bundled projects.json

    class Config:
        env_prefix = "RESERVE_"


settings = Settings()
