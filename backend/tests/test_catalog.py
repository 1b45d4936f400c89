"""Tests for the project catalog."""

import json

import pytest

from reserve.core.catalog import (
    Project,
    ProjectCatalog,
    ProjectNotFoundError,
    default_area_hectares,
    funding_progress,
    load_catalog,
)
from reserve.core.geometry.points import GeoPoint


class TestProject:
    def test_area_m2(self):
        p = Project(id="x", center=GeoPoint(0, 0), area_hectares=2, price_per_m2=1)
        assert p.area_m2 == 20_000

    @pytest.mark.parametrize("kwargs", [
        {"id": ""},
        {"area_hectares": 0},
        {"price_per_m2": -1},
    ])
    def test_invalid(self, kwargs):
        base = {"id": "x", "center": GeoPoint(0, 0), "area_hectares": 1, "price_per_m2": 1}
        base.update(kwargs)
        with pytest.raises(ValueError):
            Project(**base)

    def test_geo_point_range(self):
        with pytest.raises(ValueError):
            GeoPoint(lat=91, lon=0)
        with pytest.raises(ValueError):
            GeoPoint(lat=0, lon=-181)


class TestCatalog:
    def test_bundled_catalog(self):
        catalog = load_catalog()
        assert "mx-mangroves" in catalog
        assert catalog.get("mx-mangroves").price_per_m2 == 0.6
        assert len(catalog.all()) == len(catalog)

    def test_missing_area_falls_back(self):
        project = load_catalog().get("ng-mangrove")
        assert project.area_hectares == default_area_hectares("ng-mangrove")

    def test_unknown_project(self):
        with pytest.raises(ProjectNotFoundError):
            load_catalog().get("atlantis")

    def test_duplicate_ids(self):
        p = Project(id="x", center=GeoPoint(0, 0), area_hectares=1, price_per_m2=1)
        with pytest.raises(ValueError):
            ProjectCatalog([p, p])

    def test_custom_path(self, tmp_path):
        path = tmp_path / "projects.json"
        path.write_text(json.dumps([
            {"id": "t1", "lat": 1.0, "lon": 2.0, "area_hectares": 10, "price_per_m2": 2.5},
        ]), encoding="utf-8")
        catalog = load_catalog(str(path))
        assert [p.id for p in catalog] == ["t1"]
        assert catalog.get("t1").center == GeoPoint(1.0, 2.0)


class TestIdDerivedFigures:
    def test_default_area(self):
        # 1000 + (97 * 98) % 5000
        assert default_area_hectares("ab") == 5506

    def test_single_char_id(self):
        assert default_area_hectares("a") == 1000 + (97 * 97) % 5000

    def test_funding_progress(self):
        p = Project(id="mx-mangroves", center=GeoPoint(0, 0), area_hectares=1800, price_per_m2=0.6)
        progress = funding_progress(p)
        # 'm' = 109 -> 30% + 9%; 'x' = 120 -> 40% + 0%
        assert progress.purchased_area_m2 == pytest.approx(18_000_000 * 0.39, abs=1)
        assert progress.raised_funding_eur == pytest.approx(10_800_000 * 0.4, abs=1)
        assert progress.percentage == 40
