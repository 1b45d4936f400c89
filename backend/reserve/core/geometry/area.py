"""Polygon area: shoelace formula, pixel-to-real-world conversion and geodesic area."""

from __future__ import annotations

import math
from typing import Sequence

from pyproj import Geod
from shapely.geometry import Polygon

from reserve.core.geometry.points import GeoPoint, PointLike, as_xy

_GEOD = Geod(ellps="WGS84")


def polygon_area(points: Sequence[PointLike]) -> float:
    """Enclosed area of an implicitly closed polygon.

    Works in whatever units the coordinates are in (pixels, degrees, metres).
    Fewer than 3 points is degenerate and yields 0.0. Winding order does not
    matter.
    """
    n = len(points)
    if n < 3:
        return 0.0

    coords = [as_xy(p) for p in points]
    total = 0.0
    for i in range(n):
        x1, y1 = coords[i]
        x2, y2 = coords[(i + 1) % n]
        total += x1 * y2 - x2 * y1
    return abs(total) / 2


def to_real_area(pixel_area: float, scale_units_per_pixel: float) -> float:
    """Convert a pixel-space area to real units (``scale`` is metres per pixel)."""
    return abs(pixel_area) * scale_units_per_pixel * scale_units_per_pixel


def image_scale(project_area_m2: float, image_width_px: int, image_height_px: int) -> float:
    """Metres per pixel for a reference image that covers the whole project.

    The image is calibrated so that its full pixel area corresponds to the
    project's catalog area.
    """
    if image_width_px <= 0 or image_height_px <= 0:
        raise ValueError(f"Image size must be positive, got {image_width_px}x{image_height_px}")
    return math.sqrt(project_area_m2 / (image_width_px * image_height_px))


def geo_polygon_area_m2(points: Sequence[GeoPoint]) -> float:
    """Geodesic area in m² of a geographic polygon on the WGS84 ellipsoid."""
    if len(points) < 3:
        return 0.0
    area, _ = _GEOD.geometry_area_perimeter(Polygon([p.xy for p in points]))
    return abs(area)
