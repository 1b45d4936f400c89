"""Selection grid: zoom-dependent square cells snapped to a global lattice."""

from __future__ import annotations

import math
from dataclasses import dataclass

from shapely.geometry import Polygon, box

from reserve.core.geometry.points import GeoPoint
from reserve.utils.units import METERS_PER_DEGREE_LAT, METERS_PER_DEGREE_LON_AT_EQUATOR

MIN_GRID_SIDE_M = 10.0
MAX_GRID_SIDE_M = 500.0


@dataclass(frozen=True)
class GridCell:
    id: str
    south: float
    west: float
    north: float
    east: float
    area_m2: float

    @property
    def polygon(self) -> Polygon:
        return box(self.west, self.south, self.east, self.north)

    @property
    def corners(self) -> list[GeoPoint]:
        """Counter-clockwise ring starting at the south-west corner."""
        return [
            GeoPoint(self.south, self.west),
            GeoPoint(self.south, self.east),
            GeoPoint(self.north, self.east),
            GeoPoint(self.north, self.west),
        ]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "bounds": [[self.south, self.west], [self.north, self.east]],
            "area_m2": self.area_m2,
        }


def round_to_nice_series(meters: float) -> float:
    """Smallest value of the 1-2-5 series that is >= ``meters``."""
    if meters <= 0:
        return 1.0
    exponent = math.floor(math.log10(meters))
    base = math.pow(10, exponent)
    normalized = meters / base
    for m in (1, 2, 5):
        if normalized <= m:
            return m * base
    return 10 * base


def grid_side_meters(zoom: float) -> float:
    """Cell side for a zoom level: ~10m at max zoom, ~100m at 13, ~500m at 10."""
    ideal = max(MIN_GRID_SIDE_M, min(MAX_GRID_SIDE_M, 1000 * math.pow(0.5, zoom - 10)))
    return round_to_nice_series(ideal)


def cell_at(point: GeoPoint, side_m: float, multiplier: float = 1.0) -> GridCell:
    """The grid cell containing ``point``.

    Cells are aligned to a lattice anchored at (0, 0) so the same click
    always lands in the same cell. Spacing in longitude is scaled by the
    point's latitude.
    """
    cell_side = side_m * math.sqrt(multiplier)
    m_per_deg_lon = METERS_PER_DEGREE_LON_AT_EQUATOR * math.cos(math.radians(point.lat))
    spacing_lat = cell_side / METERS_PER_DEGREE_LAT
    spacing_lon = cell_side / m_per_deg_lon

    lat_index = math.floor(point.lat / spacing_lat)
    lon_index = math.floor(point.lon / spacing_lon)
    return GridCell(
        id=f"{cell_side:g}-{lat_index}-{lon_index}",
        south=lat_index * spacing_lat,
        west=lon_index * spacing_lon,
        north=(lat_index + 1) * spacing_lat,
        east=(lon_index + 1) * spacing_lon,
        area_m2=round(cell_side * cell_side),
    )


def cell_in_boundary(cell: GridCell, boundary: Polygon) -> bool:
    """True when the whole cell lies inside the reserve boundary."""
    return boundary.covers(cell.polygon)
