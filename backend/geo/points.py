from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Literal, Mapping, Sequence

from fit.errors import ConstructionError

PointKind = Literal["pairs", "geopoints", "waypoints"]

MIN_POINTS = 2


@dataclass(frozen=True)
class GeoPoint:
    """
    A single WGS84 coordinate as handed to / returned by a camera.
    """

    lon: float
    lat: float

    def to_tuple(self) -> tuple[float, float]:
        return (self.lon, self.lat)


@dataclass(frozen=True)
class Waypoint:
    """
    A named route stop. Only longitude/latitude matter for framing.
    """

    longitude: float
    latitude: float
    pin_label: str | None = None
    show_pin: bool = False


def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def _is_waypoint_like(p: Any) -> bool:
    if isinstance(p, Waypoint):
        return True
    if isinstance(p, Mapping):
        return _is_number(p.get("longitude")) and _is_number(p.get("latitude"))
    return _is_number(getattr(p, "longitude", None)) and _is_number(
        getattr(p, "latitude", None)
    )


def resolve_point_kind(points: Sequence[Any]) -> PointKind:
    """
    Decide the input shape from the first element.

    Called once at the API boundary; every element is then validated against the result,
    so mixed inputs fail loudly instead of being silently mis-read.
    """
    first = points[0]
    if _is_waypoint_like(first):
        return "waypoints"
    if isinstance(first, GeoPoint):
        return "geopoints"
    return "pairs"


def _pair_from(p: Any, kind: PointKind, i: int) -> tuple[float, float]:
    if kind == "waypoints":
        if not _is_waypoint_like(p):
            raise ConstructionError(f"Point #{i} is not a waypoint record: {p!r}")
        if isinstance(p, Mapping):
            lon, lat = p["longitude"], p["latitude"]
        else:
            lon, lat = p.longitude, p.latitude
    elif kind == "geopoints":
        if not isinstance(p, GeoPoint):
            raise ConstructionError(f"Point #{i} is not a GeoPoint: {p!r}")
        lon, lat = p.lon, p.lat
    elif kind == "pairs":
        if isinstance(p, (str, bytes, Mapping)) or not isinstance(p, Sequence):
            raise ConstructionError(f"Point #{i} is not a [lon, lat] pair: {p!r}")
        if len(p) != 2 or not (_is_number(p[0]) and _is_number(p[1])):
            raise ConstructionError(f"Point #{i} is not a [lon, lat] pair: {p!r}")
        lon, lat = p[0], p[1]
    else:
        raise ConstructionError(f"Unknown point kind: {kind!r}")

    lon, lat = float(lon), float(lat)
    if not (math.isfinite(lon) and math.isfinite(lat)):
        raise ConstructionError(f"Point #{i} has non-finite coordinates: {p!r}")
    return (lon, lat)


def normalize_points(
    points: Sequence[Any] | None, *, kind: PointKind | None = None
) -> list[tuple[float, float]]:
    """
    Coerce pairs, GeoPoints or waypoints into an ordered list of (lon, lat) tuples.
    """
    if points is None or len(points) < MIN_POINTS:
        raise ConstructionError(
            f"At least {MIN_POINTS} points are required to create a bounding box. "
            f"Received points: {points!r}"
        )
    resolved = kind or resolve_point_kind(points)
    return [_pair_from(p, resolved, i) for i, p in enumerate(points)]
