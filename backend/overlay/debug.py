from __future__ import annotations

from typing import Any

from shapely.geometry import LineString, mapping

from camera.types import Camera
from geo.points import GeoPoint

BOUNDS_SOURCE_ID = "bounds-box"
BOUNDS_LAYER_ID = "bounds-box-layer"


def _pair(p: GeoPoint | tuple[float, float]) -> tuple[float, float]:
    if isinstance(p, GeoPoint):
        return p.to_tuple()
    return (float(p[0]), float(p[1]))


def bounds_feature_collection(
    corners: list[GeoPoint | tuple[float, float]],
) -> dict[str, Any]:
    """
    GeoJSON FeatureCollection with one closed LineString through `corners`.
    """
    ring = [_pair(c) for c in corners]
    if ring and ring[0] != ring[-1]:
        ring.append(ring[0])
    geom = mapping(LineString(ring))
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "geometry": {
                    "type": geom["type"],
                    "coordinates": [list(c) for c in geom["coordinates"]],
                },
                "properties": None,
            }
        ],
    }


def bounds_layer() -> dict[str, Any]:
    return {
        "id": BOUNDS_LAYER_ID,
        "type": "line",
        "source": BOUNDS_SOURCE_ID,
        "layout": {"line-join": "round", "line-cap": "round"},
        "paint": {"line-color": "#ff0000", "line-width": 4},
    }


class DebugOverlay:
    """
    Draws a computed bounding polygon onto the camera's map, for diagnostics only.

    Drawing is deferred to the camera's next scheduling point. Ids are fixed, so a second
    draw on the same map fails inside the camera.
    """

    def __init__(self, camera: Camera) -> None:
        self.camera = camera

    def draw_bounds(
        self,
        top_left: GeoPoint | tuple[float, float],
        top_right: GeoPoint | tuple[float, float],
        bottom_right: GeoPoint | tuple[float, float],
        bottom_left: GeoPoint | tuple[float, float],
    ) -> None:
        data = bounds_feature_collection([top_left, top_right, bottom_right, bottom_left])
        self.camera.call_soon(lambda: self._add(data))

    def _add(self, data: dict[str, Any]) -> None:
        self.camera.add_source(BOUNDS_SOURCE_ID, {"type": "geojson", "data": data})
        self.camera.add_layer(bounds_layer())
