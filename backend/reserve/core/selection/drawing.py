"""Pointer gesture -> polygon vertex pipeline for manual area drawing.

Decoupled from any rendering surface: callers feed client (pointer)
coordinates and get canvas-space polygons back, ready for the area
calculator.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from reserve.core.geometry.points import ScreenPoint

MIN_CANVAS_ZOOM = 0.1
MAX_CANVAS_ZOOM = 5.0
ZOOM_STEP = 1.5


class DraftIncompleteError(ValueError):
    """Raised when completing a polygon with fewer than 3 vertices."""

    def __init__(self, vertex_count: int) -> None:
        super().__init__(f"Need at least 3 vertices to close a polygon, got {vertex_count}")


@dataclass
class CanvasView:
    """Pan/zoom transform between client coordinates and canvas coordinates."""

    zoom: float = 1.0
    pan: ScreenPoint = field(default_factory=lambda: ScreenPoint(0.0, 0.0))

    def to_canvas(self, client_x: float, client_y: float) -> ScreenPoint:
        return ScreenPoint(
            (client_x - self.pan.x) / self.zoom,
            (client_y - self.pan.y) / self.zoom,
        )

    def zoom_in(self) -> float:
        self.zoom = min(MAX_CANVAS_ZOOM, self.zoom * ZOOM_STEP)
        return self.zoom

    def zoom_out(self) -> float:
        self.zoom = max(MIN_CANVAS_ZOOM, self.zoom / ZOOM_STEP)
        return self.zoom

    def pan_to(self, x: float, y: float) -> None:
        self.pan = ScreenPoint(x, y)

    @property
    def grid_size(self) -> int:
        """Area units per background grid cell at the current zoom."""
        if self.zoom >= 2:
            return 1
        if self.zoom >= 1:
            return 10
        return 100


@dataclass
class PolygonDraft:
    """Vertices of the polygon currently being drawn."""

    view: CanvasView = field(default_factory=CanvasView)
    vertices: list[ScreenPoint] = field(default_factory=list)

    @property
    def drawing(self) -> bool:
        return bool(self.vertices)

    def press(self, client_x: float, client_y: float) -> ScreenPoint:
        """Pointer press while in draw mode: add a vertex."""
        point = self.view.to_canvas(client_x, client_y)
        self.vertices.append(point)
        return point

    def complete(self) -> list[ScreenPoint]:
        """Close the polygon (double click) and start a fresh draft."""
        if len(self.vertices) < 3:
            raise DraftIncompleteError(len(self.vertices))
        polygon, self.vertices = self.vertices, []
        return polygon

    def cancel(self) -> None:
        self.vertices = []
