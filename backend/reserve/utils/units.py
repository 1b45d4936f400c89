"""Unit conversion and display helpers. Internal area unit is always m²."""

M2_PER_HECTARE = 10_000.0

# Local equirectangular approximation used for small reserve-scale shapes.
METERS_PER_DEGREE_LAT = 110_540.0
METERS_PER_DEGREE_LON_AT_EQUATOR = 111_320.0


def hectares_to_m2(hectares: float) -> float:
    return hectares * M2_PER_HECTARE


def m2_to_hectares(area_m2: float) -> float:
    return area_m2 / M2_PER_HECTARE


def format_distance(meters: float) -> str:
    """Format a scale-bar distance as ``"500m"`` or ``"2km"``."""
    if meters >= 1000:
        km = meters / 1000
        return f"{int(km)}km" if km == int(km) else f"{km:g}km"
    return f"{int(round(meters))}m"


def format_number(num: float) -> str:
    """Abbreviate large figures for compact display (``1.5M``, ``12k``)."""
    if num >= 1_000_000:
        return f"{num / 1_000_000:.1f}".removesuffix(".0") + "M"
    if num >= 1000:
        return f"{num / 1000:.1f}".removesuffix(".0") + "k"
    return str(round(num))
