from __future__ import annotations

from fastapi.testclient import TestClient

from main import app

CAMERA = {
    "center": {"lat": 55.955, "lon": -3.185},
    "zoom": 11.0,
    "pitch": 0.0,
    "bearing": 0.0,
    "width": 800,
    "height": 600,
    "padding": 20,
}


def test_bounds_endpoint_returns_aligned_and_screen_boxes():
    client = TestClient(app)
    resp = client.post(
        "/bounds",
        json={"points": [[-3.19, 55.95], [-3.18, 55.96]], "camera": CAMERA},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["aligned"] == {"minLon": -3.19, "minLat": 55.95, "maxLon": -3.18, "maxLat": 55.96}
    s = data["screen"]
    assert s["bottomRight"]["x"] >= s["bottomLeft"]["x"]
    assert s["bottomLeft"]["y"] >= s["topLeft"]["y"]
    assert set(data["geo"]["vertices"]) == {"topLeft", "topRight", "bottomLeft", "bottomRight"}


def test_fit_endpoint_runs_pitched_fit_to_completion():
    client = TestClient(app)
    resp = client.post(
        "/fit",
        json={
            "waypoints": [
                {"longitude": -3.30, "latitude": 55.95, "pinLabel": "Start", "showPin": True},
                {"longitude": -3.10, "latitude": 55.96},
            ],
            "camera": CAMERA,
            "options": {"padding": {"top": 20, "right": 20, "bottom": 20, "left": 20}, "pitch": 45},
        },
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["fit"]["mode"] == "screen"
    assert data["fit"]["outcome"] == "converged"
    assert data["fit"]["lastSpan"] <= data["fit"]["effectiveWidth"]
    assert data["view"]["pitch"] == 45.0
    plot = data["plot"]
    assert set(plot.keys()) == {"data", "layout"}
    assert plot["layout"]["mapbox"]["pitch"] == 45.0
    assert plot["layout"]["meta"]["fit"]["outcome"] == "converged"


def test_fit_endpoint_aligned_mode_with_debug_overlay():
    client = TestClient(app)
    resp = client.post(
        "/fit",
        json={
            "points": [[-3.19, 55.95], [-3.18, 55.96]],
            "camera": CAMERA,
            "mode": "aligned",
            "debug": True,
        },
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["fit"]["mode"] == "aligned"
    assert data["overlay"]["type"] == "geojson"
    assert data["view"]["zoom"] > 11.0


def test_relative_padding_is_used_when_no_pixel_padding_is_given():
    client = TestClient(app)
    camera = {k: v for k, v in CAMERA.items() if k != "padding"}
    camera["relativePadding"] = 10
    resp = client.post(
        "/fit",
        json={"points": [[-3.3, 55.95], [-3.1, 55.96]], "camera": camera},
    )
    assert resp.status_code == 200
    fit = resp.json()["fit"]
    assert fit["effectiveWidth"] == 640.0
    assert fit["effectiveHeight"] == 480.0


def test_fit_errors_map_to_422():
    client = TestClient(app)
    resp = client.post("/fit", json={"points": [[-3.19, 55.95]], "camera": CAMERA})
    assert resp.status_code == 422
    assert resp.json()["error"] == "ConstructionError"

    resp = client.post(
        "/fit",
        json={"points": [[-3.19, 55.95], [-3.19, 55.95]], "camera": CAMERA},
    )
    assert resp.status_code == 422
    assert resp.json()["error"] == "DegenerateGeometryError"

    resp = client.post(
        "/fit",
        json={"points": [[-3.19, 55.95], [-3.18, 55.96]], "camera": {**CAMERA, "width": -5}},
    )
    assert resp.status_code == 422
    assert resp.json()["error"] == "ContainerResolutionError"
