"""Selection session endpoints — area / price / manual selection up to checkout."""

from __future__ import annotations

import logging
import threading

from fastapi import APIRouter, HTTPException

from reserve.models.schemas import (
    NewSessionRequest,
    AreaRequest,
    PriceRequest,
    ModeRequest,
    ShapeRequest,
    SessionResponse,
)
from reserve.core.catalog import get_catalog, ProjectNotFoundError
from reserve.core.geometry.area import image_scale
from reserve.core.geometry.points import GeoPoint
from reserve.core.selection.session import (
    SelectionSession,
    SessionClosedError,
    ShapeNotFoundError,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["selection"])


class SessionNotFoundError(KeyError):
    """Raised when a session id is unknown or already discarded."""

    def __init__(self, session_id: str) -> None:
        super().__init__(session_id)
        self.session_id = session_id

    def __str__(self) -> str:
        return f"Unknown selection session: {self.session_id}"


class SessionRegistry:
    """Live sessions by id. Sessions are dropped on checkout or abandon."""

    def __init__(self) -> None:
        self._sessions: dict[str, SelectionSession] = {}
        self._lock = threading.Lock()

    def add(self, session: SelectionSession) -> None:
        with self._lock:
            self._sessions[session.id] = session

    def get(self, session_id: str) -> SelectionSession:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def discard(self, session_id: str) -> SelectionSession:
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


_registry = SessionRegistry()


def _session(session_id: str) -> SelectionSession:
    try:
        return _registry.get(session_id)
    except SessionNotFoundError as exc:
        raise HTTPException(404, detail=str(exc))


# ── Endpoints ─────────────────────────────────────────────────────────────────

@router.post("/selection", response_model=SessionResponse, status_code=201)
async def new_session(req: NewSessionRequest):
    """Start a selection session for a project."""
    try:
        project = get_catalog().get(req.project_id)
    except ProjectNotFoundError as exc:
        raise HTTPException(404, detail=str(exc))

    scale = req.scale_units_per_pixel or 1.0
    if req.image_width_px and req.image_height_px:
        scale = image_scale(project.area_m2, req.image_width_px, req.image_height_px)

    session = SelectionSession(project, scale_units_per_pixel=scale)
    _registry.add(session)
    logger.info("Opened selection session %s for %s", session.id, project.id)
    return session.to_dict()


@router.get("/selection/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str):
    return _session(session_id).to_dict()


@router.put("/selection/{session_id}/area", response_model=SessionResponse)
async def set_area(session_id: str, req: AreaRequest):
    session = _session(session_id)
    try:
        session.set_area_m2(req.area_m2)
    except SessionClosedError as exc:
        raise HTTPException(409, detail=str(exc))
    return session.to_dict()


@router.put("/selection/{session_id}/price", response_model=SessionResponse)
async def set_price(session_id: str, req: PriceRequest):
    session = _session(session_id)
    try:
        session.set_price_eur(req.price_eur)
    except SessionClosedError as exc:
        raise HTTPException(409, detail=str(exc))
    return session.to_dict()


@router.put("/selection/{session_id}/mode", response_model=SessionResponse)
async def set_mode(session_id: str, req: ModeRequest):
    session = _session(session_id)
    try:
        session.switch_mode(req.mode)
    except SessionClosedError as exc:
        raise HTTPException(409, detail=str(exc))
    return session.to_dict()


@router.post("/selection/{session_id}/shapes", status_code=201)
async def add_shape(session_id: str, req: ShapeRequest):
    """Add a drawn polygon. Canvas points use the session's pixel scale."""
    session = _session(session_id)
    if bool(req.points) == bool(req.geo_points):
        raise HTTPException(422, detail="Provide exactly one of 'points' or 'geo_points'")
    polygon = req.points or req.geo_points
    if len(polygon) < 3:
        raise HTTPException(422, detail=f"Need at least 3 points for a polygon, got {len(polygon)}")

    try:
        if req.points:
            shape = session.add_drawn_shape([tuple(p) for p in req.points])
        else:
            geo = [GeoPoint(lat=lat, lon=lon) for lat, lon in req.geo_points]
            shape = session.add_geo_shape(geo)
    except SessionClosedError as exc:
        raise HTTPException(409, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(422, detail=str(exc))
    return {"shape": shape.to_dict(), "session": session.to_dict()}


@router.delete("/selection/{session_id}/shapes/{shape_id}", response_model=SessionResponse)
async def remove_shape(session_id: str, shape_id: str):
    session = _session(session_id)
    try:
        session.remove_shape(shape_id)
    except ShapeNotFoundError as exc:
        raise HTTPException(404, detail=str(exc))
    except SessionClosedError as exc:
        raise HTTPException(409, detail=str(exc))
    return session.to_dict()


@router.post("/selection/{session_id}/clear", response_model=SessionResponse)
async def clear_selection(session_id: str):
    session = _session(session_id)
    try:
        session.clear()
    except SessionClosedError as exc:
        raise HTTPException(409, detail=str(exc))
    return session.to_dict()


@router.post("/selection/{session_id}/checkout")
async def checkout(session_id: str):
    """Hand the selection to checkout; the session is destroyed."""
    session = _session(session_id)
    if session.state.selected_area_m2 <= 0:
        raise HTTPException(422, detail="Nothing selected")
    try:
        summary = session.checkout()
    except SessionClosedError as exc:
        raise HTTPException(409, detail=str(exc))
    _registry.discard(session_id)
    return summary.to_dict()


@router.delete("/selection/{session_id}", status_code=204)
async def abandon_session(session_id: str):
    try:
        _registry.discard(session_id)
    except SessionNotFoundError as exc:
        raise HTTPException(404, detail=str(exc))
    logger.info("Abandoned selection session %s", session_id)
