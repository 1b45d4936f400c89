"""Pydantic schemas for API request/response validation."""

from __future__ import annotations

import math
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from reserve.core.navigation.history import Screen
from reserve.core.selection.session import SelectionMode


class NewSessionRequest(BaseModel):
    project_id: str
    scale_units_per_pixel: Optional[float] = Field(default=None, gt=0)
    image_width_px: Optional[int] = Field(default=None, gt=0)
    image_height_px: Optional[int] = Field(default=None, gt=0)


class AreaRequest(BaseModel):
    area_m2: float = Field(gt=0)


class PriceRequest(BaseModel):
    price_eur: float = Field(gt=0)


class ModeRequest(BaseModel):
    mode: SelectionMode


class ShapeRequest(BaseModel):
    """A drawn polygon, either on the canvas (``points``) or on the map (``geo_points``)."""

    points: list[list[float]] = []
    geo_points: list[list[float]] = []  # [lat, lon]

    @field_validator("points", "geo_points")
    @classmethod
    def must_be_pairs(cls, v: list[list[float]]) -> list[list[float]]:
        for pair in v:
            if len(pair) != 2:
                raise ValueError("Coordinate must be a pair")
            if not all(math.isfinite(c) for c in pair):
                raise ValueError("Coordinate must be a finite number")
        return v


class NavigateRequest(BaseModel):
    screen: Screen
    payload: Any = None


class ProjectResponse(BaseModel):
    id: str
    name: str
    country: str
    lat: float
    lon: float
    area_hectares: float
    price_per_m2: float


class BoundaryResponse(BaseModel):
    project_id: str
    points: list[list[float]]  # [lat, lon]
    geojson: dict
    area_m2: float


class MapScaleResponse(BaseModel):
    distance_label: str
    bar_width_px: int
    distance_m: float


class SessionResponse(BaseModel):
    session_id: str
    project_id: str
    mode: SelectionMode
    area_m2: float
    price_eur: float
    shapes: list[dict]
    closed: bool


class NavEntryResponse(BaseModel):
    screen: Screen
    payload: Any = None


class NavigationResponse(BaseModel):
    current: NavEntryResponse
    depth: int
    can_go_back: bool
