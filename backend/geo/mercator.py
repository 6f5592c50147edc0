from __future__ import annotations

import math
from functools import lru_cache

from pyproj import Transformer

from geo.points import GeoPoint

MAX_MERCATOR_LAT = 85.05112878

# Half of the EPSG:3857 world width in meters.
MERCATOR_HALF_WORLD_M = 20037508.342789244

# Mapbox GL renders 512px tiles; zoom z spans TILE_SIZE * 2**z world pixels.
TILE_SIZE = 512.0


@lru_cache(maxsize=1)
def transformer_4326_to_3857() -> Transformer:
    return Transformer.from_crs("EPSG:4326", "EPSG:3857", always_xy=True)


@lru_cache(maxsize=1)
def transformer_3857_to_4326() -> Transformer:
    return Transformer.from_crs("EPSG:3857", "EPSG:4326", always_xy=True)


def clamp_lat(lat: float) -> float:
    return max(-MAX_MERCATOR_LAT, min(MAX_MERCATOR_LAT, float(lat)))


def to_mercator(point: GeoPoint) -> tuple[float, float]:
    x, y = transformer_4326_to_3857().transform(float(point.lon), clamp_lat(point.lat))
    return float(x), float(y)


def from_mercator(x: float, y: float) -> GeoPoint:
    lon, lat = transformer_3857_to_4326().transform(float(x), float(y))
    return GeoPoint(lon=float(lon), lat=float(lat))


def pixels_per_meter(zoom: float) -> float:
    """
    World pixels per EPSG:3857 meter at a (fractional) zoom level.
    """
    world_px = TILE_SIZE * math.pow(2.0, float(zoom))
    return world_px / (2.0 * MERCATOR_HALF_WORLD_M)
