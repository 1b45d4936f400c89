"""Point types shared by the geometry engine."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Union


@dataclass(frozen=True)
class GeoPoint:
    """A geographic coordinate in degrees."""

    lat: float
    lon: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.lat) and math.isfinite(self.lon)):
            raise ValueError(f"Coordinate must be finite, got ({self.lat}, {self.lon})")
        if not -90.0 <= self.lat <= 90.0:
            raise ValueError(f"Latitude {self.lat} outside [-90, 90]")
        if not -180.0 <= self.lon <= 180.0:
            raise ValueError(f"Longitude {self.lon} outside [-180, 180]")

    @property
    def xy(self) -> tuple[float, float]:
        """Planar (x, y) view of the point: x is longitude, y is latitude."""
        return (self.lon, self.lat)

    def to_list(self) -> list[float]:
        return [self.lat, self.lon]


@dataclass(frozen=True)
class ScreenPoint:
    """A point in canvas pixels."""

    x: float
    y: float

    @property
    def xy(self) -> tuple[float, float]:
        return (self.x, self.y)


PointLike = Union[GeoPoint, ScreenPoint, tuple[float, float], Sequence[float]]


def as_xy(point: PointLike) -> tuple[float, float]:
    """Normalise any supported point representation to an (x, y) tuple."""
    if isinstance(point, (GeoPoint, ScreenPoint)):
        return point.xy
    x, y = point
    return (float(x), float(y))
