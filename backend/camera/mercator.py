from __future__ import annotations

import logging
import math
from collections import deque
from dataclasses import dataclass, field
from typing import Any

from camera.types import MOVE_END, EaseParams, Listener, PaddingSpec, ScreenPoint
from fit.errors import ContainerResolutionError, DegenerateGeometryError
from geo.bounds import GeoBounds
from geo.mercator import from_mercator, pixels_per_meter, to_mercator
from geo.points import GeoPoint

logger = logging.getLogger(__name__)

# Mapbox GL defaults.
DEFAULT_FOV_RAD = 0.6435011087932844
MIN_ZOOM = 0.0
MAX_ZOOM = 22.0
MAX_PITCH = 85.0


@dataclass
class Animation:
    """
    One eased transition. Fires `moveend` exactly once: on completion or when stopped.
    """

    center_m: tuple[float, float]
    zoom: float
    pitch: float
    bearing: float
    done: bool = False
    _listeners: dict[str, list[Listener]] = field(default_factory=dict, repr=False)

    def once(self, event: str, listener: Listener) -> "Animation":
        self._listeners.setdefault(event, []).append(listener)
        return self

    def fire(self, event: str) -> None:
        for listener in self._listeners.pop(event, []):
            listener()


class MercatorCamera:
    """
    In-process Web-Mercator map camera with bearing and perspective pitch.

    Geospatial note:
    - Positions are EPSG:3857 meters; screen scale is 512px tiles * 2**zoom.
    - Bearing rotates the ground plane clockwise from north.
    - Pitch tilts the camera about the padded focal point; the camera sits
      0.5 * height / tan(fov / 2) pixels from it, as in Mapbox GL.

    Transitions don't interpolate: `ease_to` schedules completion on the internal task
    queue and `run_until_idle()` plays the role of the browser event loop.
    """

    def __init__(
        self,
        *,
        center: GeoPoint,
        zoom: float,
        width: float,
        height: float,
        pitch: float = 0.0,
        bearing: float = 0.0,
        padding: PaddingSpec | None = None,
        fov_rad: float = DEFAULT_FOV_RAD,
    ) -> None:
        self._check_container(width, height)
        self.width = float(width)
        self.height = float(height)
        self.padding = padding
        self.fov_rad = float(fov_rad)
        self._center_m = to_mercator(center)
        self.zoom = _clamp(float(zoom), MIN_ZOOM, MAX_ZOOM)
        self.pitch = _clamp(float(pitch), 0.0, MAX_PITCH)
        self.bearing = float(bearing)
        self.sources: dict[str, dict[str, Any]] = {}
        self.layers: list[dict[str, Any]] = []
        self._animation: Animation | None = None
        self._tasks: deque[Listener] = deque()

    @staticmethod
    def _check_container(width: float, height: float) -> None:
        for name, v in (("width", width), ("height", height)):
            if not isinstance(v, (int, float)) or not math.isfinite(v) or v < 0:
                raise ContainerResolutionError(f"Invalid map container {name}: {v!r}")

    # --- state accessors -------------------------------------------------

    def get_center(self) -> GeoPoint:
        return from_mercator(*self._center_m)

    def get_zoom(self) -> float:
        return self.zoom

    def get_pitch(self) -> float:
        return self.pitch

    def get_bearing(self) -> float:
        return self.bearing

    def get_padding(self) -> PaddingSpec | None:
        return self.padding

    def get_container_size(self) -> tuple[float, float]:
        return (self.width, self.height)

    def is_moving(self) -> bool:
        return self._animation is not None

    def view(self) -> dict[str, Any]:
        c = self.get_center()
        return {
            "center": {"lat": c.lat, "lon": c.lon},
            "zoom": self.zoom,
            "pitch": self.pitch,
            "bearing": self.bearing,
        }

    # --- projection ------------------------------------------------------

    def _focal_point(self) -> tuple[float, float]:
        p = self.padding or PaddingSpec()
        return (
            (p.left + self.width - p.right) / 2.0,
            (p.top + self.height - p.bottom) / 2.0,
        )

    def _camera_distance(self) -> float:
        return 0.5 * self.height / math.tan(self.fov_rad / 2.0)

    def _to_screen(
        self, dx: float, dy: float, pitch: float, bearing: float
    ) -> tuple[float, float]:
        # (dx, dy): unrotated world-pixel delta from the center, y pointing south.
        b = math.radians(bearing)
        rx = dx * math.cos(b) + dy * math.sin(b)
        ry = -dx * math.sin(b) + dy * math.cos(b)
        phi = math.radians(pitch)
        d = self._camera_distance()
        depth = d - ry * math.sin(phi)
        if depth <= 0:
            raise DegenerateGeometryError("Point lies beyond the horizon")
        cx, cy = self._focal_point()
        return (cx + d * rx / depth, cy + d * ry * math.cos(phi) / depth)

    def _from_screen(
        self, x: float, y: float, pitch: float, bearing: float
    ) -> tuple[float, float]:
        cx, cy = self._focal_point()
        a = x - cx
        b_px = y - cy
        phi = math.radians(pitch)
        d = self._camera_distance()
        denom = d * math.cos(phi) + b_px * math.sin(phi)
        if denom <= 0:
            raise DegenerateGeometryError("Screen point lies above the horizon")
        ry = b_px * d / denom
        rx = a * (d - ry * math.sin(phi)) / d
        b = math.radians(bearing)
        dx = rx * math.cos(b) - ry * math.sin(b)
        dy = rx * math.sin(b) + ry * math.cos(b)
        return dx, dy

    def project(self, point: GeoPoint) -> ScreenPoint:
        mx, my = to_mercator(point)
        k = pixels_per_meter(self.zoom)
        dx = (mx - self._center_m[0]) * k
        dy = -(my - self._center_m[1]) * k
        x, y = self._to_screen(dx, dy, self.pitch, self.bearing)
        return ScreenPoint(x=x, y=y)

    def unproject(self, point: ScreenPoint) -> GeoPoint:
        dx, dy = self._from_screen(point.x, point.y, self.pitch, self.bearing)
        k = pixels_per_meter(self.zoom)
        return from_mercator(self._center_m[0] + dx / k, self._center_m[1] - dy / k)

    # --- transitions -----------------------------------------------------

    def stop(self) -> "MercatorCamera":
        anim = self._animation
        if anim is not None and not anim.done:
            anim.done = True
            self._animation = None
            anim.fire(MOVE_END)
        return self

    def jump_to(
        self,
        *,
        center: GeoPoint | None = None,
        zoom: float | None = None,
        pitch: float | None = None,
        bearing: float | None = None,
    ) -> "MercatorCamera":
        self.stop()
        if zoom is not None:
            self.zoom = _clamp(float(zoom), MIN_ZOOM, MAX_ZOOM)
        if pitch is not None:
            self.pitch = _clamp(float(pitch), 0.0, MAX_PITCH)
        if bearing is not None:
            self.bearing = float(bearing)
        if center is not None:
            self._center_m = to_mercator(center)
        return self

    def ease_to(self, params: EaseParams) -> Animation:
        self.stop()
        zoom = self.zoom if params.zoom is None else float(params.zoom)
        if not math.isfinite(zoom):
            raise ValueError(f"Non-finite zoom requested: {zoom!r}")
        zoom = _clamp(zoom, MIN_ZOOM, MAX_ZOOM)
        pitch = self.pitch if params.pitch is None else _clamp(float(params.pitch), 0.0, MAX_PITCH)
        bearing = self.bearing if params.bearing is None else float(params.bearing)

        center_m = self._center_m
        if params.center is not None:
            # Put `center` under focal point + offset at the target zoom/pitch/bearing.
            cx, cy = self._focal_point()
            ox, oy = params.offset
            dx, dy = self._from_screen(cx + ox, cy + oy, pitch, bearing)
            k = pixels_per_meter(zoom)
            tx, ty = to_mercator(params.center)
            center_m = (tx - dx / k, ty + dy / k)

        anim = Animation(center_m=center_m, zoom=zoom, pitch=pitch, bearing=bearing)
        self._animation = anim
        self.call_soon(lambda: self._complete(anim))
        logger.debug(
            "ease_to zoom=%.3f pitch=%.1f bearing=%.1f", zoom, pitch, bearing
        )
        return anim

    def _complete(self, anim: Animation) -> None:
        if anim.done:
            return
        self._center_m = anim.center_m
        self.zoom = anim.zoom
        self.pitch = anim.pitch
        self.bearing = anim.bearing
        anim.done = True
        if self._animation is anim:
            self._animation = None
        anim.fire(MOVE_END)

    def fit_bounds(self, bounds: GeoBounds, *, padding: PaddingSpec) -> Animation:
        """
        Native geographic fit. Measures the box untilted, so it is only exact when
        pitch and bearing are zero.
        """
        b = bounds.normalized()
        x0, y0 = to_mercator(b.south_west)
        x1, y1 = to_mercator(b.north_east)
        eff_w = self.width - padding.left - padding.right
        eff_h = self.height - padding.top - padding.bottom
        k0 = pixels_per_meter(0.0)
        w0 = abs(x1 - x0) * k0
        h0 = abs(y1 - y0) * k0
        scales = []
        if w0 > 0:
            scales.append(eff_w / w0)
        if h0 > 0:
            scales.append(eff_h / h0)
        # A point-sized box zooms all the way in.
        zoom = math.log2(min(scales)) if scales and min(scales) > 0 else MAX_ZOOM

        # Offset from the camera's focal point to the center of the requested padded area.
        fx, fy = self._focal_point()
        ox = (padding.left + self.width - padding.right) / 2.0 - fx
        oy = (padding.top + self.height - padding.bottom) / 2.0 - fy
        center = from_mercator((x0 + x1) / 2.0, (y0 + y1) / 2.0)
        return self.ease_to(EaseParams(center=center, zoom=zoom, offset=(ox, oy)))

    # --- style / scheduling ----------------------------------------------

    def add_source(self, source_id: str, source: dict[str, Any]) -> None:
        if source_id in self.sources:
            raise ValueError(f"There is already a source with ID {source_id!r}")
        self.sources[source_id] = source

    def add_layer(self, layer: dict[str, Any]) -> None:
        layer_id = layer.get("id")
        if any(existing.get("id") == layer_id for existing in self.layers):
            raise ValueError(f"Layer with id {layer_id!r} already exists on this map")
        if layer.get("source") not in self.sources:
            raise ValueError(f"Source {layer.get('source')!r} not found for layer {layer_id!r}")
        self.layers.append(layer)

    def call_soon(self, callback: Listener) -> None:
        self._tasks.append(callback)

    def run_until_idle(self, *, max_tasks: int = 10_000) -> int:
        """
        Drain scheduled callbacks (transition completions included). Returns how many ran.
        """
        ran = 0
        while self._tasks:
            if ran >= max_tasks:
                raise RuntimeError(f"Camera task queue still busy after {max_tasks} tasks")
            self._tasks.popleft()()
            ran += 1
        return ran


def _clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))
