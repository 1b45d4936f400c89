"""Project endpoints — catalog records, boundary polygons, funding progress."""

from fastapi import APIRouter, HTTPException
from shapely.geometry import mapping

from reserve.models.schemas import ProjectResponse, BoundaryResponse
from reserve.core.catalog import get_catalog, funding_progress, Project, ProjectNotFoundError
from reserve.core.geometry.area import geo_polygon_area_m2
from reserve.core.geometry.generator import project_boundary, to_shapely

router = APIRouter(tags=["projects"])


def _get_project(project_id: str) -> Project:
    try:
        return get_catalog().get(project_id)
    except ProjectNotFoundError as exc:
        raise HTTPException(404, detail=str(exc))


@router.get("/projects", response_model=list[ProjectResponse])
async def list_projects():
    """All catalog projects, in catalog order."""
    return [p.to_dict() for p in get_catalog().all()]


@router.get("/projects/{project_id}", response_model=ProjectResponse)
async def get_project(project_id: str):
    return _get_project(project_id).to_dict()


@router.get("/projects/{project_id}/boundary", response_model=BoundaryResponse)
async def get_boundary(project_id: str):
    """Deterministic reserve outline for map rendering."""
    project = _get_project(project_id)
    points = project_boundary(project)
    return {
        "project_id": project.id,
        "points": [p.to_list() for p in points],
        "geojson": {
            "type": "Feature",
            "properties": {"project_id": project.id},
            "geometry": mapping(to_shapely(points)),
        },
        "area_m2": round(geo_polygon_area_m2(points), 1),
    }


@router.get("/projects/{project_id}/progress")
async def get_progress(project_id: str):
    return funding_progress(_get_project(project_id)).to_dict()
