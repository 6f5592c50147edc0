from __future__ import annotations

import pytest

from camera.mercator import MercatorCamera
from camera.types import PaddingSpec
from fit.engine import FitBounds
from fit.errors import ConstructionError
from fit.fitter import FitOptions
from geo.bounds import GeoBounds
from geo.points import GeoPoint

EDINBURGH = [[-3.19, 55.95], [-3.18, 55.96]]


class RecordingCamera(MercatorCamera):
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.native_fits: list[tuple[GeoBounds, PaddingSpec]] = []
        self.stops = 0

    def stop(self):
        self.stops += 1
        return super().stop()

    def fit_bounds(self, bounds, *, padding):
        self.native_fits.append((bounds, padding))
        return super().fit_bounds(bounds, padding=padding)


def _camera(**kwargs) -> RecordingCamera:
    base = dict(center=GeoPoint(lon=-3.185, lat=55.955), zoom=12.0, width=800, height=600)
    base.update(kwargs)
    return RecordingCamera(**base)


def test_aligned_bounds_are_exact_extrema():
    points = [[-3.19, 55.95], [-3.05, 55.99], [-3.30, 55.97], [-3.2, 55.90]]
    engine = FitBounds(_camera(), points)
    b = engine.get_aligned_bounds()
    assert (b.min_lon, b.max_lon, b.min_lat, b.max_lat) == (-3.30, -3.05, 55.90, 55.99)


def test_edinburgh_example_uses_native_fit_with_per_edge_padding():
    cam = _camera()
    engine = FitBounds(cam, EDINBURGH)
    b = engine.get_aligned_bounds()
    assert b == GeoBounds(min_lon=-3.19, min_lat=55.95, max_lon=-3.18, max_lat=55.96)

    engine.fit_aligned_bounds(options=FitOptions(padding=20))
    assert cam.stops >= 1
    assert cam.native_fits == [(b, PaddingSpec(top=20, right=20, bottom=20, left=20))]


def test_native_fit_falls_back_to_camera_padding():
    cam = _camera(padding=PaddingSpec(top=5, right=6, bottom=7, left=8))
    FitBounds(cam, EDINBURGH).fit_aligned_bounds()
    assert cam.native_fits[0][1] == PaddingSpec(top=5, right=6, bottom=7, left=8)


def test_fit_points_replace_stored_points_but_get_does_not():
    engine = FitBounds(_camera(), EDINBURGH)
    other = [[0.0, 0.0], [1.0, 1.0]]
    engine.get_aligned_bounds(other)
    assert engine.points == [(-3.19, 55.95), (-3.18, 55.96)]
    engine.fit_aligned_bounds(other)
    assert engine.points == [(0.0, 0.0), (1.0, 1.0)]


@pytest.mark.parametrize("points", [[], [[1.0, 2.0]]])
def test_construction_needs_two_points(points):
    cam = _camera()
    with pytest.raises(ConstructionError):
        FitBounds(cam, points)
    assert not cam.is_moving()


def test_two_collinear_points_give_zero_area_box():
    engine = FitBounds(_camera(), [[-3.19, 55.95], [-3.18, 55.95]])
    b = engine.get_aligned_bounds()
    assert b.is_empty_area()
    box = engine.get_screen_bounds()
    assert box.screen.height == pytest.approx(0.0, abs=1e-9)
    assert box.screen.width > 0.0


@pytest.mark.parametrize("pitch,bearing", [(0.0, 0.0), (30.0, 0.0), (20.0, 35.0), (50.0, -120.0)])
def test_screen_box_is_ordered_rectangle(pitch, bearing):
    cam = _camera(pitch=pitch, bearing=bearing)
    points = [[-3.19, 55.95], [-3.17, 55.96], [-3.2, 55.955], [-3.18, 55.945]]
    box = FitBounds(cam, points).get_screen_bounds()
    s = box.screen
    assert s.bottom_right.x >= s.bottom_left.x
    assert s.bottom_left.y >= s.top_left.y
    assert s.width >= 0.0 and s.height >= 0.0
    assert s.top_left.y == s.top_right.y and s.bottom_left.y == s.bottom_right.y
    assert s.top_left.x == s.bottom_left.x and s.top_right.x == s.bottom_right.x
    assert s.center.x == pytest.approx((s.top_left.x + s.top_right.x) / 2.0)

    projected = [cam.project(GeoPoint(lon=lon, lat=lat)) for lon, lat in points]
    assert min(p.x for p in projected) == s.top_left.x
    assert max(p.y for p in projected) == s.bottom_left.y


def test_geo_bounds_come_from_bottom_left_top_right_diagonal():
    cam = _camera(pitch=30.0, bearing=40.0)
    box = FitBounds(cam, EDINBURGH).get_screen_bounds()
    g = box.geo
    assert g.bounds.min_lon == g.bottom_left.lon
    assert g.bounds.min_lat == g.bottom_left.lat
    assert g.bounds.max_lon == g.top_right.lon
    assert g.bounds.max_lat == g.top_right.lat
    # Corners map back onto the screen rectangle.
    tl = cam.project(g.top_left)
    assert tl.x == pytest.approx(box.screen.top_left.x, abs=1e-6)
    assert tl.y == pytest.approx(box.screen.top_left.y, abs=1e-6)


def test_untilted_screen_corners_match_aligned_box():
    cam = _camera()
    engine = FitBounds(cam, EDINBURGH)
    g = engine.get_screen_bounds().geo
    a = engine.get_aligned_bounds()
    assert g.bottom_left.lon == pytest.approx(a.min_lon, abs=1e-9)
    assert g.bottom_left.lat == pytest.approx(a.min_lat, abs=1e-9)
    assert g.top_right.lon == pytest.approx(a.max_lon, abs=1e-9)
    assert g.top_right.lat == pytest.approx(a.max_lat, abs=1e-9)


def test_rejected_padding_keeps_stored_points():
    cam = _camera()
    engine = FitBounds(cam, EDINBURGH)
    before = list(engine.points)
    with pytest.raises(TypeError):
        engine.fit_aligned_bounds([[0.0, 0.0], [1.0, 1.0]], FitOptions(padding="wide"))
    assert engine.points == before
    assert cam.native_fits == []
