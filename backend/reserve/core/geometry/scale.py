"""Map scale bar: zoom level -> rounded distance label and bar width."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from reserve.config import settings
from reserve.utils.units import format_distance

logger = logging.getLogger(__name__)

# 256px web-mercator tiles: metres per pixel at the equator, zoom 0.
METERS_PER_PIXEL_Z0 = 156543.03392804097

_METER_LADDER = (500, 200, 100, 50, 25)
_NICE_MULTIPLIERS = (5, 2, 1)


@dataclass(frozen=True)
class MapScale:
    distance_label: str
    bar_width_px: int
    distance_m: float

    def to_dict(self) -> dict:
        return {
            "distance_label": self.distance_label,
            "bar_width_px": self.bar_width_px,
            "distance_m": self.distance_m,
        }


def clamp_zoom(zoom: float) -> float:
    """Clamp to the tile system's zoom range; out-of-range input is recoverable."""
    if not math.isfinite(zoom):
        raise ValueError(f"Zoom must be a finite number, got {zoom}")
    clamped = min(settings.max_zoom, max(settings.min_zoom, zoom))
    if clamped != zoom:
        logger.warning("Zoom %s outside [%s, %s], clamped to %s",
                       zoom, settings.min_zoom, settings.max_zoom, clamped)
    return clamped


def meters_per_pixel(zoom: float) -> float:
    return METERS_PER_PIXEL_Z0 / math.pow(2, zoom)


def _snap_down_nice(meters: float) -> float:
    """Largest 1-2-5 series value not above ``meters``."""
    exponent = math.floor(math.log10(meters))
    base = math.pow(10, exponent)
    for m in _NICE_MULTIPLIERS:
        if m * base <= meters:
            return m * base
    return base


def _choose_distance(target_m: float) -> float:
    if target_m < 1000:
        for step in _METER_LADDER:
            if target_m >= step:
                return float(step)
        return float(_METER_LADDER[-1])

    km = target_m / 1000
    if km < 2:
        chosen = 1000.0
    elif km < 10:
        chosen = math.floor(km + 0.5) * 1000.0
    else:
        chosen = _snap_down_nice(km) * 1000.0
    return min(chosen, settings.max_scale_distance_m)


def resolve_scale(zoom: float) -> MapScale:
    """Scale bar for the given zoom.

    The distance is picked from a ladder of clean values, then the bar width
    is recomputed from that chosen distance so label and length agree.
    """
    zoom = clamp_zoom(zoom)
    mpp = meters_per_pixel(zoom)
    target = mpp * settings.scale_bar_width_px
    distance = _choose_distance(target)
    width = max(1, round(distance / mpp))
    return MapScale(
        distance_label=format_distance(distance),
        bar_width_px=width,
        distance_m=distance,
    )
