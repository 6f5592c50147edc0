from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from camera.types import Camera, ScreenPoint
from geo.bounds import GeoBounds
from geo.points import GeoPoint


@dataclass(frozen=True)
class ScreenBox:
    """
    Axis-aligned screen rectangle around the projected points.

    Built from min/max x/y, so it is always a rectangle even when the projected point
    cloud is rotated; it is not a minimum-area bounding box.
    """

    top_left: ScreenPoint
    top_right: ScreenPoint
    bottom_left: ScreenPoint
    bottom_right: ScreenPoint
    center: ScreenPoint

    @property
    def width(self) -> float:
        return self.bottom_right.x - self.bottom_left.x

    @property
    def height(self) -> float:
        return self.bottom_left.y - self.top_left.y


@dataclass(frozen=True)
class GeoBox:
    top_left: GeoPoint
    top_right: GeoPoint
    bottom_left: GeoPoint
    bottom_right: GeoPoint
    # From the bottom-left/top-right diagonal only; approximate under nonzero bearing.
    bounds: GeoBounds


@dataclass(frozen=True)
class BoundingBox:
    screen: ScreenBox
    geo: GeoBox


def screen_bounds(camera: Camera, points: Sequence[tuple[float, float]]) -> BoundingBox:
    """
    Measure the points' footprint in the camera's current screen space.

    Under pitch/bearing the native geographic fit foreshortens the footprint wrongly;
    measuring in screen space and going back to geography only for the center avoids it.
    """
    min_x = min_y = float("inf")
    max_x = max_y = float("-inf")
    for lon, lat in points:
        sp = camera.project(GeoPoint(lon=lon, lat=lat))
        min_x = min(min_x, sp.x)
        max_x = max(max_x, sp.x)
        min_y = min(min_y, sp.y)
        max_y = max(max_y, sp.y)

    screen = ScreenBox(
        top_left=ScreenPoint(min_x, min_y),
        top_right=ScreenPoint(max_x, min_y),
        bottom_left=ScreenPoint(min_x, max_y),
        bottom_right=ScreenPoint(max_x, max_y),
        center=ScreenPoint((min_x + max_x) / 2.0, (min_y + max_y) / 2.0),
    )

    top_left = camera.unproject(screen.top_left)
    top_right = camera.unproject(screen.top_right)
    bottom_right = camera.unproject(screen.bottom_right)
    bottom_left = camera.unproject(screen.bottom_left)

    return BoundingBox(
        screen=screen,
        geo=GeoBox(
            top_left=top_left,
            top_right=top_right,
            bottom_left=bottom_left,
            bottom_right=bottom_right,
            bounds=GeoBounds.from_corners(bottom_left, top_right),
        ),
    )
