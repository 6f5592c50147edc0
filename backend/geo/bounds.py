from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from geo.points import GeoPoint


@dataclass(frozen=True)
class GeoBounds:
    """
    WGS84 bounding box in lon/lat degrees.

    Convention used throughout this repo:
    - min_lon, min_lat, max_lon, max_lat

    `from_corners` stores the given south-west / north-east pair as-is, the same way a
    map library's bounds constructor does. Under a rotated camera the "south-west" corner
    may not actually be the south-west one; call `normalized()` when extrema are needed.
    """

    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float

    @classmethod
    def from_points(cls, points: Iterable[tuple[float, float]]) -> "GeoBounds":
        min_lon = min_lat = float("inf")
        max_lon = max_lat = float("-inf")
        for lon, lat in points:
            min_lon = min(min_lon, lon)
            max_lon = max(max_lon, lon)
            min_lat = min(min_lat, lat)
            max_lat = max(max_lat, lat)
        return cls(min_lon=min_lon, min_lat=min_lat, max_lon=max_lon, max_lat=max_lat)

    @classmethod
    def from_corners(cls, sw: GeoPoint, ne: GeoPoint) -> "GeoBounds":
        return cls(min_lon=sw.lon, min_lat=sw.lat, max_lon=ne.lon, max_lat=ne.lat)

    def normalized(self) -> "GeoBounds":
        min_lon = min(self.min_lon, self.max_lon)
        max_lon = max(self.min_lon, self.max_lon)
        min_lat = min(self.min_lat, self.max_lat)
        max_lat = max(self.min_lat, self.max_lat)
        return GeoBounds(
            min_lon=min_lon, min_lat=min_lat, max_lon=max_lon, max_lat=max_lat
        )

    @property
    def south_west(self) -> GeoPoint:
        return GeoPoint(lon=self.min_lon, lat=self.min_lat)

    @property
    def north_east(self) -> GeoPoint:
        return GeoPoint(lon=self.max_lon, lat=self.max_lat)

    @property
    def north_west(self) -> GeoPoint:
        return GeoPoint(lon=self.min_lon, lat=self.max_lat)

    @property
    def south_east(self) -> GeoPoint:
        return GeoPoint(lon=self.max_lon, lat=self.min_lat)

    def center(self) -> GeoPoint:
        return GeoPoint(
            lon=(self.min_lon + self.max_lon) / 2.0,
            lat=(self.min_lat + self.max_lat) / 2.0,
        )

    def is_empty_area(self) -> bool:
        b = self.normalized()
        return b.max_lon == b.min_lon or b.max_lat == b.min_lat

    def to_dict(self) -> dict[str, float]:
        return {
            "minLon": self.min_lon,
            "minLat": self.min_lat,
            "maxLon": self.max_lon,
            "maxLat": self.max_lat,
        }
