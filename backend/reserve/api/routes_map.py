"""Map endpoints — scale bar and selection grid cells."""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from reserve.models.schemas import MapScaleResponse
from reserve.core.catalog import get_catalog, ProjectNotFoundError
from reserve.core.geometry.generator import project_boundary, to_shapely
from reserve.core.geometry.grid import cell_at, cell_in_boundary, grid_side_meters
from reserve.core.geometry.points import GeoPoint
from reserve.core.geometry.scale import clamp_zoom, resolve_scale

router = APIRouter(tags=["map"])


@router.get("/map/scale", response_model=MapScaleResponse)
async def map_scale(zoom: float = Query(...)):
    """Scale bar for a zoom level. Out-of-range zoom is clamped, not rejected."""
    try:
        return resolve_scale(zoom).to_dict()
    except ValueError as exc:
        raise HTTPException(422, detail=str(exc))


@router.get("/map/grid-cell")
async def grid_cell(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    zoom: float = Query(...),
    multiplier: float = Query(1.0, gt=0),
    project_id: Optional[str] = None,
):
    """Grid cell under a map click, optionally checked against a reserve boundary."""
    try:
        side = grid_side_meters(clamp_zoom(zoom))
    except ValueError as exc:
        raise HTTPException(422, detail=str(exc))
    cell = cell_at(GeoPoint(lat=lat, lon=lon), side, multiplier)
    result = cell.to_dict()

    if project_id is not None:
        try:
            project = get_catalog().get(project_id)
        except ProjectNotFoundError as exc:
            raise HTTPException(404, detail=str(exc))
        result["inside_reserve"] = cell_in_boundary(cell, to_shapely(project_boundary(project)))
    return result
