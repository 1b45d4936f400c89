"""Project catalog: immutable conservation project records.

The catalog is read once from ``reserve/data/projects.json`` (or the file named
by ``RESERVE_CATALOG_PATH``). Projects are owned by the catalog; everything
else only reads them.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Iterator, Optional

from reserve.config import settings
from reserve.core.geometry.points import GeoPoint
from reserve.utils.units import hectares_to_m2

logger = logging.getLogger(__name__)

_DEFAULT_CATALOG = Path(__file__).resolve().parent.parent / "data" / "projects.json"


# ── Exceptions ────────────────────────────────────────────────────────────────

class ProjectNotFoundError(KeyError):
    """Raised when a project id is not in the catalog."""

    def __init__(self, project_id: str) -> None:
        super().__init__(project_id)
        self.project_id = project_id

    def __str__(self) -> str:
        return f"Unknown project: {self.project_id}"


# ── Records ───────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Project:
    id: str
    center: GeoPoint
    area_hectares: float
    price_per_m2: float
    name: str = ""
    country: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Project id must be a non-empty string")
        if self.area_hectares <= 0:
            raise ValueError(f"Project {self.id}: area_hectares must be positive")
        if self.price_per_m2 <= 0:
            raise ValueError(f"Project {self.id}: price_per_m2 must be positive")

    @property
    def area_m2(self) -> float:
        return hectares_to_m2(self.area_hectares)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "country": self.country,
            "lat": self.center.lat,
            "lon": self.center.lon,
            "area_hectares": self.area_hectares,
            "price_per_m2": self.price_per_m2,
        }


@dataclass(frozen=True)
class FundingProgress:
    total_area_m2: float
    purchased_area_m2: int
    total_funding_eur: float
    raised_funding_eur: int

    @property
    def percentage(self) -> int:
        if self.total_funding_eur <= 0:
            return 0
        return round(self.raised_funding_eur / self.total_funding_eur * 100)

    def to_dict(self) -> dict:
        return {
            "total_area_m2": self.total_area_m2,
            "purchased_area_m2": self.purchased_area_m2,
            "total_funding_eur": round(self.total_funding_eur, 2),
            "raised_funding_eur": self.raised_funding_eur,
            "percentage": self.percentage,
        }


# ── Id-derived figures ────────────────────────────────────────────────────────

def _leading_codes(project_id: str) -> tuple[int, int]:
    first = ord(project_id[0])
    second = ord(project_id[1]) if len(project_id) > 1 else first
    return first, second


def default_area_hectares(project_id: str) -> float:
    """Stable placeholder area for projects whose record has none."""
    first, second = _leading_codes(project_id)
    return float(1000 + (first * second) % 5000)


def funding_progress(project: Project) -> FundingProgress:
    """Mock purchased-area and raised-funding figures, stable per project id."""
    first, second = _leading_codes(project.id)
    total_area = project.area_m2
    total_funding = total_area * project.price_per_m2
    return FundingProgress(
        total_area_m2=total_area,
        purchased_area_m2=math.floor(total_area * (0.3 + (first % 20) / 100)),
        total_funding_eur=total_funding,
        raised_funding_eur=math.floor(total_funding * (0.4 + (second % 30) / 100)),
    )


# ── Catalog ───────────────────────────────────────────────────────────────────

def _project_from_record(record: dict) -> Project:
    project_id = record["id"]
    area = record.get("area_hectares") or default_area_hectares(project_id)
    return Project(
        id=project_id,
        center=GeoPoint(lat=float(record["lat"]), lon=float(record["lon"])),
        area_hectares=float(area),
        price_per_m2=float(record["price_per_m2"]),
        name=record.get("name", ""),
        country=record.get("country", ""),
    )


class ProjectCatalog:
    """Read-only lookup of projects by id, in catalog order."""

    def __init__(self, projects: list[Project]) -> None:
        self._projects: dict[str, Project] = {}
        for project in projects:
            if project.id in self._projects:
                raise ValueError(f"Duplicate project id in catalog: {project.id}")
            self._projects[project.id] = project

    def get(self, project_id: str) -> Project:
        try:
            return self._projects[project_id]
        except KeyError:
            raise ProjectNotFoundError(project_id) from None

    def all(self) -> list[Project]:
        return list(self._projects.values())

    def __contains__(self, project_id: object) -> bool:
        return project_id in self._projects

    def __iter__(self) -> Iterator[Project]:
        return iter(self._projects.values())

    def __len__(self) -> int:
        return len(self._projects)


def load_catalog(path: Optional[str] = None) -> ProjectCatalog:
    """Load a catalog from JSON (a list of project records)."""
    catalog_path = Path(path) if path else _DEFAULT_CATALOG
    records = json.loads(catalog_path.read_text(encoding="utf-8"))
    catalog = ProjectCatalog([_project_from_record(r) for r in records])
    logger.info("Loaded %d projects from %s", len(catalog), catalog_path)
    return catalog


@lru_cache()
def get_catalog() -> ProjectCatalog:
    """Process-wide catalog, loaded on first use."""
    return load_catalog(settings.catalog_path)
