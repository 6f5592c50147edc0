from __future__ import annotations

import pytest

from fit.errors import ConstructionError
from geo.points import GeoPoint, Waypoint, normalize_points, resolve_point_kind


def test_pairs_are_kept_in_order_as_float_tuples():
    out = normalize_points([[-3.19, 55.95], (-3, 56), [-3.18, 55.96]])
    assert out == [(-3.19, 55.95), (-3.0, 56.0), (-3.18, 55.96)]
    assert all(isinstance(v, float) for p in out for v in p)


def test_geopoints_and_waypoints_are_normalized():
    geo = [GeoPoint(lon=14.4, lat=50.0), GeoPoint(lon=14.5, lat=50.1)]
    assert normalize_points(geo) == [(14.4, 50.0), (14.5, 50.1)]

    wps = [
        Waypoint(longitude=1.0, latitude=2.0, pin_label="Start", show_pin=True),
        {"longitude": 3.0, "latitude": 4.0, "pinLabel": None},
    ]
    assert resolve_point_kind(wps) == "waypoints"
    assert normalize_points(wps) == [(1.0, 2.0), (3.0, 4.0)]


@pytest.mark.parametrize("points", [None, [], [[1.0, 2.0]]])
def test_fewer_than_two_points_is_rejected(points):
    with pytest.raises(ConstructionError):
        normalize_points(points)


def test_mixed_shapes_fail_instead_of_being_misread():
    with pytest.raises(ConstructionError):
        normalize_points([[1.0, 2.0], GeoPoint(lon=3.0, lat=4.0)])
    with pytest.raises(ConstructionError):
        normalize_points(
            [Waypoint(longitude=1.0, latitude=2.0), [3.0, 4.0]], kind="waypoints"
        )


def test_explicit_kind_is_enforced():
    with pytest.raises(ConstructionError):
        normalize_points([[1.0, 2.0], [3.0, 4.0]], kind="geopoints")


def test_bad_pairs_are_rejected():
    with pytest.raises(ConstructionError):
        normalize_points([[1.0, 2.0, 3.0], [1.0, 2.0]])
    with pytest.raises(ConstructionError):
        normalize_points([["a", "b"], [1.0, 2.0]])
    with pytest.raises(ConstructionError):
        normalize_points([[float("nan"), 2.0], [1.0, 2.0]])
