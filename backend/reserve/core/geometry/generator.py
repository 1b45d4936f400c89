"""Deterministic reserve boundary generation.

Every project gets an organic-looking outline around its center, seeded only
by the project id so the same project is drawn identically on every screen,
every run, every machine. Geometry is equirectangular (degree offsets added
straight to lat/lon), which is fine at reserve scale and wrong near the
poles.
"""

from __future__ import annotations

import logging
import math

from shapely.geometry import Polygon

from reserve.config import settings
from reserve.core.catalog import Project
from reserve.core.geometry.points import GeoPoint

logger = logging.getLogger(__name__)

_MIN_VERTICES = 8

# Perturbations as fractions of the base radius; together they stay within ±10%.
_VARIATION_STEP = 0.025   # seed-derived, ±5%
_WAVE_AMPLITUDE = 0.03    # sin(3θ) lobes, ±3%
_JITTER = 0.01            # odd/even alternation, ±1%
_MIDPOINT_PUSH_STEP = 0.01  # midpoints pushed outward/inward by up to ±2%


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x1_0000_0000 if value & 0x8000_0000 else value


def seed_from_id(project_id: str) -> int:
    """Fold the id's UTF-16 code units into a signed 32-bit hash (×31 + code)."""
    data = project_id.encode("utf-16-le")
    seed = 0
    for i in range(0, len(data), 2):
        code = data[i] | (data[i + 1] << 8)
        seed = _to_int32((seed << 5) - seed + code)
    return seed


def next_seed(seed: int) -> int:
    """One linear congruential step."""
    return (seed * 9301 + 49297) % 233280


def _fit_longitude(center_lon: float, dlons: list[float]) -> float:
    """Shift a center so the whole ring fits in [-180, 180] without wrapping."""
    return min(180.0 - max(dlons), max(-180.0 - min(dlons), center_lon))


def generate_polygon(
    project_id: str,
    center: GeoPoint,
    base_radius: float | None = None,
) -> list[GeoPoint]:
    """Generate the boundary polygon for a project.

    Vertices are laid out at evenly spaced, strictly increasing angles with
    positive radii, and each smoothing midpoint lies between its neighbours'
    angles, so the outline is star-shaped around ``center`` and never crosses
    itself (away from the poles, where clamping can flatten it).

    Longitudes are never wrapped point by point. A center so close to the
    antimeridian that the ring would cross it is moved east or west by the
    overlap, keeping the ring continuous.

    Returns an implicitly closed ring of at least 16 points.
    """
    if not project_id:
        raise ValueError("project_id must be a non-empty string")
    base = settings.polygon_base_radius_deg if base_radius is None else base_radius

    seed = seed_from_id(project_id)
    num_vertices = _MIN_VERTICES + seed % 4

    vertices: list[tuple[float, float]] = []
    for i in range(num_vertices):
        angle = (i / num_vertices) * 2 * math.pi
        variation = ((seed % 5) - 2) * _VARIATION_STEP
        wave = math.sin(angle * 3) * _WAVE_AMPLITUDE
        jitter = _JITTER if i % 2 else -_JITTER
        radius = base * (1 + variation + wave + jitter)
        vertices.append((math.cos(angle) * radius, math.sin(angle) * radius))
        seed = next_seed(seed)

    ring: list[tuple[float, float]] = []
    for i, (dlat, dlon) in enumerate(vertices):
        nlat, nlon = vertices[(i + 1) % num_vertices]
        push = 1 + ((seed % 5) - 2) * _MIDPOINT_PUSH_STEP
        ring.append((dlat, dlon))
        ring.append(((dlat + nlat) / 2 * push, (dlon + nlon) / 2 * push))
        seed = next_seed(seed)

    center_lon = _fit_longitude(center.lon, [dlon for _, dlon in ring])
    if center_lon != center.lon:
        logger.info("Boundary for %s crosses the antimeridian; center moved from %s to %s",
                    project_id, center.lon, center_lon)

    points = [
        GeoPoint(
            lat=min(90.0, max(-90.0, center.lat + dlat)),
            lon=min(180.0, max(-180.0, center_lon + dlon)),
        )
        for dlat, dlon in ring
    ]
    logger.debug("Generated %d-point boundary for %s", len(points), project_id)
    return points


def project_boundary(project: Project) -> list[GeoPoint]:
    """Boundary polygon for a catalog project."""
    return generate_polygon(project.id, project.center)


def to_shapely(points: list[GeoPoint]) -> Polygon:
    """Shapely polygon in (lon, lat) axis order, for containment and GeoJSON."""
    return Polygon([p.xy for p in points])
