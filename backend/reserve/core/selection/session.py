"""Selection session: how much area the user wants to protect, and at what price.

Three input modes share one ``price_per_m2`` relation:

    area    user types m²   -> price = area × price_per_m2
    price   user types €    -> area  = round(price / price_per_m2)
    manual  user draws      -> area  = Σ drawn shape areas, price derived

The session is the only owner of its state; every mutation goes through a
method here and runs under the session lock. Input validation (zero or
negative amounts) happens at the API boundary, not here.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence
from uuid import uuid4

from reserve.core.catalog import Project
from reserve.core.geometry.area import geo_polygon_area_m2, polygon_area, to_real_area
from reserve.core.geometry.points import GeoPoint, PointLike, as_xy

logger = logging.getLogger(__name__)


class SelectionMode(str, Enum):
    AREA = "area"
    PRICE = "price"
    MANUAL = "manual"


# ── Exceptions ────────────────────────────────────────────────────────────────

class SessionClosedError(RuntimeError):
    """Raised when a session is mutated after checkout."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Selection session {session_id} is closed")


class ShapeNotFoundError(KeyError):
    """Raised when removing a shape the session does not hold."""

    def __init__(self, shape_id: str) -> None:
        super().__init__(shape_id)
        self.shape_id = shape_id

    def __str__(self) -> str:
        return f"Unknown shape: {self.shape_id}"


# ── State ─────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class DrawnShape:
    id: str
    points: tuple[tuple[float, float], ...]
    area_m2: float

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "points": [list(p) for p in self.points],
            "area_m2": self.area_m2,
        }


@dataclass
class SelectionState:
    mode: SelectionMode = SelectionMode.AREA
    selected_area_m2: float = 0.0
    total_price_eur: float = 0.0
    drawn_shapes: list[DrawnShape] = field(default_factory=list)


@dataclass(frozen=True)
class SelectionSummary:
    """What checkout receives once the user confirms."""

    project_id: str
    mode: SelectionMode
    area_m2: float
    price_eur: float
    shape_count: int

    def to_dict(self) -> dict:
        return {
            "project_id": self.project_id,
            "mode": self.mode.value,
            "area_m2": self.area_m2,
            "price_eur": round(self.price_eur, 2),
            "shape_count": self.shape_count,
        }


# ── Session ───────────────────────────────────────────────────────────────────

class SelectionSession:
    """Accumulates one user's selection for one project until checkout.

    ``scale_units_per_pixel`` converts drawn canvas shapes to metres; see
    ``reserve.core.geometry.area.image_scale``.
    """

    def __init__(
        self,
        project: Project,
        scale_units_per_pixel: float = 1.0,
        session_id: str | None = None,
    ) -> None:
        self.id = session_id or uuid4().hex
        self.project = project
        self.scale_units_per_pixel = scale_units_per_pixel
        self._state = SelectionState()
        self._closed = False
        self._lock = threading.Lock()

    # ── Quick modes ──────────────────────────────────────────────────────────

    def set_area_m2(self, value: float) -> None:
        with self._lock:
            self._require_open()
            self._state.mode = SelectionMode.AREA
            self._state.selected_area_m2 = value
            self._state.total_price_eur = value * self.project.price_per_m2
            logger.debug("Session %s: area %s m² -> %s EUR", self.id, value, self._state.total_price_eur)

    def set_price_eur(self, value: float) -> None:
        with self._lock:
            self._require_open()
            self._state.mode = SelectionMode.PRICE
            self._state.total_price_eur = value
            self._state.selected_area_m2 = float(round(value / self.project.price_per_m2))
            logger.debug("Session %s: price %s EUR -> %s m²", self.id, value, self._state.selected_area_m2)

    def switch_mode(self, mode: SelectionMode | str) -> None:
        """Change input mode.

        Between area and price the totals carry over through price_per_m2.
        Entering manual starts from the drawn-shape sum; leaving it starts
        from zero (shapes are kept for a later return).
        """
        mode = SelectionMode(mode)
        with self._lock:
            self._require_open()
            previous = self._state.mode
            if mode == previous:
                return
            self._state.mode = mode
            if mode == SelectionMode.MANUAL:
                self._recompute_manual()
            elif previous == SelectionMode.MANUAL:
                self._state.selected_area_m2 = 0.0
                self._state.total_price_eur = 0.0
            elif mode == SelectionMode.PRICE:
                self._state.total_price_eur = self._state.selected_area_m2 * self.project.price_per_m2
            else:
                self._state.selected_area_m2 = float(
                    round(self._state.total_price_eur / self.project.price_per_m2)
                )
                self._state.total_price_eur = self._state.selected_area_m2 * self.project.price_per_m2
            logger.debug("Session %s: mode %s -> %s", self.id, previous.value, mode.value)

    # ── Manual mode ──────────────────────────────────────────────────────────

    def add_drawn_shape(self, points: Sequence[PointLike]) -> DrawnShape:
        """Record a canvas polygon (pixels) and switch to manual mode."""
        real_area = to_real_area(polygon_area(points), self.scale_units_per_pixel)
        return self._record(points, real_area)

    def add_geo_shape(self, points: Sequence[GeoPoint], area_m2: float | None = None) -> DrawnShape:
        """Record a geographic polygon, e.g. a selected grid cell."""
        if area_m2 is None:
            area_m2 = geo_polygon_area_m2(points)
        return self._record(points, area_m2)

    def remove_shape(self, shape_id: str) -> None:
        with self._lock:
            self._require_open()
            remaining = [s for s in self._state.drawn_shapes if s.id != shape_id]
            if len(remaining) == len(self._state.drawn_shapes):
                raise ShapeNotFoundError(shape_id)
            self._state.drawn_shapes = remaining
            self._state.mode = SelectionMode.MANUAL
            self._recompute_manual()

    def clear(self) -> None:
        with self._lock:
            self._require_open()
            self._state.drawn_shapes = []
            self._state.selected_area_m2 = 0.0
            self._state.total_price_eur = 0.0

    # ── Reads ────────────────────────────────────────────────────────────────

    def get_totals(self) -> dict[str, float]:
        with self._lock:
            return {
                "area_m2": self._state.selected_area_m2,
                "price_eur": self._state.total_price_eur,
            }

    @property
    def state(self) -> SelectionState:
        """A copy of the current state."""
        with self._lock:
            return SelectionState(
                mode=self._state.mode,
                selected_area_m2=self._state.selected_area_m2,
                total_price_eur=self._state.total_price_eur,
                drawn_shapes=list(self._state.drawn_shapes),
            )

    @property
    def closed(self) -> bool:
        return self._closed

    def to_dict(self) -> dict:
        state = self.state
        return {
            "session_id": self.id,
            "project_id": self.project.id,
            "mode": state.mode.value,
            "area_m2": state.selected_area_m2,
            "price_eur": round(state.total_price_eur, 2),
            "shapes": [s.to_dict() for s in state.drawn_shapes],
            "closed": self._closed,
        }

    # ── Checkout ─────────────────────────────────────────────────────────────

    def checkout(self) -> SelectionSummary:
        """Freeze the selection for checkout and close the session."""
        with self._lock:
            self._require_open()
            self._closed = True
            summary = SelectionSummary(
                project_id=self.project.id,
                mode=self._state.mode,
                area_m2=self._state.selected_area_m2,
                price_eur=self._state.total_price_eur,
                shape_count=len(self._state.drawn_shapes),
            )
        logger.info("Session %s checked out: %.2f m² for %.2f EUR",
                    self.id, summary.area_m2, summary.price_eur)
        return summary

    # ── Internal helpers ─────────────────────────────────────────────────────

    def _record(self, points: Sequence[PointLike], area_m2: float) -> DrawnShape:
        shape = DrawnShape(
            id=uuid4().hex,
            points=tuple(as_xy(p) for p in points),
            area_m2=area_m2,
        )
        with self._lock:
            self._require_open()
            self._state.drawn_shapes.append(shape)
            self._state.mode = SelectionMode.MANUAL
            self._recompute_manual()
        logger.debug("Session %s: shape %s adds %.2f m²", self.id, shape.id, area_m2)
        return shape

    def _recompute_manual(self) -> None:
        area = sum(s.area_m2 for s in self._state.drawn_shapes)
        self._state.selected_area_m2 = area
        self._state.total_price_eur = area * self.project.price_per_m2

    def _require_open(self) -> None:
        if self._closed:
            raise SessionClosedError(self.id)
