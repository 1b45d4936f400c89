"""Tests for the FastAPI endpoints."""

import pytest
from fastapi.testclient import TestClient

from reserve.main import app

client = TestClient(app)


def _rect(w, h):
    return [[0, 0], [w, 0], [w, h], [0, h]]


def _new_session(project_id="mx-mangroves", **extra):
    r = client.post("/api/selection", json={"project_id": project_id, **extra})
    assert r.status_code == 201
    return r.json()["session_id"]


class TestHealthEndpoint:
    def test_health(self):
        r = client.get("/api/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"

    def test_only_api_routes_served(self):
        assert client.get("/").status_code == 404
        assert client.get("/index.html").status_code == 404
        paths = {route.path for route in app.routes}
        assert not any("{full_path" in p for p in paths)


class TestProjectEndpoints:
    def test_list(self):
        r = client.get("/api/projects")
        assert r.status_code == 200
        ids = [p["id"] for p in r.json()]
        assert "mx-mangroves" in ids

    def test_get(self):
        r = client.get("/api/projects/br-amazon")
        assert r.status_code == 200
        assert r.json()["country"] == "Brazil"

    def test_unknown(self):
        assert client.get("/api/projects/atlantis").status_code == 404

    def test_boundary(self):
        r = client.get("/api/projects/br-amazon/boundary")
        assert r.status_code == 200
        data = r.json()
        assert len(data["points"]) >= 16
        assert data["geojson"]["geometry"]["type"] == "Polygon"
        assert data["area_m2"] > 0

    def test_boundary_is_stable(self):
        a = client.get("/api/projects/ke-savanna/boundary").json()
        b = client.get("/api/projects/ke-savanna/boundary").json()
        assert a == b

    def test_progress(self):
        r = client.get("/api/projects/mx-mangroves/progress")
        assert r.status_code == 200
        assert r.json()["percentage"] == 40


class TestMapEndpoints:
    def test_scale(self):
        r = client.get("/api/map/scale", params={"zoom": 19})
        assert r.status_code == 200
        assert r.json()["distance_label"] == "25m"

    def test_scale_clamps_zoom(self):
        high = client.get("/api/map/scale", params={"zoom": 30}).json()
        assert high == client.get("/api/map/scale", params={"zoom": 19}).json()

    def test_scale_requires_zoom(self):
        assert client.get("/api/map/scale").status_code == 422

    def test_grid_cell(self):
        r = client.get("/api/map/grid-cell", params={"lat": -3.4653, "lon": -62.2159, "zoom": 19})
        assert r.status_code == 200
        assert r.json()["area_m2"] == 100
        assert "inside_reserve" not in r.json()

    def test_grid_cell_in_reserve(self):
        r = client.get("/api/map/grid-cell", params={
            "lat": -3.4653, "lon": -62.2159, "zoom": 19, "project_id": "br-amazon",
        })
        assert r.json()["inside_reserve"] is True

    def test_grid_cell_bad_latitude(self):
        r = client.get("/api/map/grid-cell", params={"lat": 95, "lon": 0, "zoom": 12})
        assert r.status_code == 422


class TestSelectionEndpoints:
    def test_area_then_manual(self):
        sid = _new_session()
        r = client.put(f"/api/selection/{sid}/area", json={"area_m2": 108})
        assert r.status_code == 200
        assert r.json()["price_eur"] == pytest.approx(64.8)

        r = client.post(f"/api/selection/{sid}/shapes", json={"points": [[0, 0], [10, 0], [10, 9.53], [0, 9.53]]})
        assert r.status_code == 201
        session = r.json()["session"]
        assert session["mode"] == "manual"
        assert session["area_m2"] == pytest.approx(95.3)
        assert session["price_eur"] == pytest.approx(57.18)

    def test_price_mode(self):
        sid = _new_session()
        r = client.put(f"/api/selection/{sid}/price", json={"price_eur": 60})
        assert r.json()["area_m2"] == 100

    @pytest.mark.parametrize("value", [0, -5])
    def test_non_positive_rejected(self, value):
        sid = _new_session()
        assert client.put(f"/api/selection/{sid}/area", json={"area_m2": value}).status_code == 422
        assert client.put(f"/api/selection/{sid}/price", json={"price_eur": value}).status_code == 422

    def test_switch_mode(self):
        sid = _new_session()
        client.put(f"/api/selection/{sid}/area", json={"area_m2": 100})
        r = client.put(f"/api/selection/{sid}/mode", json={"mode": "price"})
        assert r.json()["mode"] == "price"
        assert r.json()["price_eur"] == pytest.approx(60)

    def test_remove_shape_and_clear(self):
        sid = _new_session()
        first = client.post(f"/api/selection/{sid}/shapes", json={"points": _rect(5, 10)}).json()
        client.post(f"/api/selection/{sid}/shapes", json={"points": _rect(5, 15)})
        r = client.delete(f"/api/selection/{sid}/shapes/{first['shape']['id']}")
        assert r.json()["area_m2"] == pytest.approx(75)

        r = client.post(f"/api/selection/{sid}/clear")
        assert r.json()["area_m2"] == 0
        assert r.json()["shapes"] == []

    def test_geo_shape(self):
        sid = _new_session()
        r = client.post(f"/api/selection/{sid}/shapes", json={
            "geo_points": [[0, 0], [0, 0.001], [0.001, 0.001], [0.001, 0]],
        })
        assert r.status_code == 201
        assert r.json()["shape"]["area_m2"] == pytest.approx(12_309, rel=1e-3)

    def test_shape_needs_three_points(self):
        sid = _new_session()
        r = client.post(f"/api/selection/{sid}/shapes", json={"points": [[0, 0], [1, 1]]})
        assert r.status_code == 422

    def test_shape_needs_exactly_one_kind(self):
        sid = _new_session()
        assert client.post(f"/api/selection/{sid}/shapes", json={}).status_code == 422

    def test_image_calibrated_scale(self):
        # 1800 ha over a 1200x1500 px image: 10 m² per px
        sid = _new_session(image_width_px=1200, image_height_px=1500)
        r = client.post(f"/api/selection/{sid}/shapes", json={"points": _rect(2, 3)})
        assert r.json()["shape"]["area_m2"] == pytest.approx(60)

    def test_checkout_destroys_session(self):
        sid = _new_session()
        client.put(f"/api/selection/{sid}/area", json={"area_m2": 108})
        r = client.post(f"/api/selection/{sid}/checkout")
        assert r.status_code == 200
        assert r.json() == {
            "project_id": "mx-mangroves",
            "mode": "area",
            "area_m2": 108,
            "price_eur": 64.8,
            "shape_count": 0,
        }
        assert client.get(f"/api/selection/{sid}").status_code == 404

    def test_checkout_empty_selection(self):
        sid = _new_session()
        assert client.post(f"/api/selection/{sid}/checkout").status_code == 422

    def test_abandon(self):
        sid = _new_session()
        assert client.delete(f"/api/selection/{sid}").status_code == 204
        assert client.delete(f"/api/selection/{sid}").status_code == 404

    def test_unknown_project(self):
        r = client.post("/api/selection", json={"project_id": "atlantis"})
        assert r.status_code == 404


class TestNavigationEndpoints:
    @pytest.fixture(autouse=True)
    def _reset(self):
        client.post("/api/navigation/reset")

    def test_initial_state(self):
        r = client.get("/api/navigation")
        assert r.json()["current"]["screen"] == "globe"
        assert r.json()["can_go_back"] is False

    def test_back_at_root(self):
        r = client.post("/api/navigation/back")
        assert r.status_code == 200
        assert r.json()["current"]["screen"] == "globe"
        assert r.json()["depth"] == 1

    def test_push_and_back(self):
        client.post("/api/navigation/push", json={"screen": "project_list"})
        r = client.post("/api/navigation/push", json={
            "screen": "project_detail", "payload": {"projectId": "br-amazon"},
        })
        assert r.json()["current"]["payload"] == {"projectId": "br-amazon"}
        assert r.json()["depth"] == 3

        r = client.post("/api/navigation/back")
        assert r.json()["current"]["screen"] == "project_list"

    def test_unknown_screen(self):
        r = client.post("/api/navigation/push", json={"screen": "checkout"})
        assert r.status_code == 422
