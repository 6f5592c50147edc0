from __future__ import annotations

import logging
from typing import Any, Sequence

from camera.types import AnimationHandle, Camera
from fit import config
from fit.aligned import aligned_bounds
from fit.fitter import FitOptions, FitTask, ViewportFitter
from fit.padding import to_padding
from fit.screen import BoundingBox, screen_bounds
from geo.bounds import GeoBounds
from geo.points import GeoPoint, PointKind, normalize_points
from overlay.debug import DebugOverlay

logger = logging.getLogger(__name__)


class FitBounds:
    """
    Frames a borrowed camera so a fixed set of points is fully visible.

    Two paths:
    - aligned: lon/lat extrema + the camera's native fit (exact only untilted)
    - screen: measure in screen space, center, zoom, then refine zoom on pitched maps

    Points passed to `fit_*` replace the stored points; `get_*` only use them.
    """

    def __init__(
        self,
        camera: Camera,
        points: Sequence[Any],
        debug: bool | None = None,
        *,
        kind: PointKind | None = None,
        refine_step: float | None = None,
        max_refine_steps: int | None = None,
    ) -> None:
        # Validate before holding on to anything.
        self.points = normalize_points(points, kind=kind)
        self.camera = camera
        self.debug = config.debug_enabled() if debug is None else bool(debug)
        self.overlay = DebugOverlay(camera)
        self.fitter = ViewportFitter(
            camera, refine_step=refine_step, max_refine_steps=max_refine_steps
        )

    def _resolve(self, points: Sequence[Any] | None) -> list[tuple[float, float]]:
        if points is None:
            return self.points
        return normalize_points(points)

    def get_aligned_bounds(self, points: Sequence[Any] | None = None) -> GeoBounds:
        return aligned_bounds(self._resolve(points))

    def fit_aligned_bounds(
        self, points: Sequence[Any] | None = None, options: FitOptions | None = None
    ) -> AnimationHandle:
        pts = self._resolve(points)
        bbox = aligned_bounds(pts)
        opts = options or FitOptions()
        padding = to_padding(
            opts.padding if opts.padding is not None else self.camera.get_padding()
        )
        self.points = pts
        if self.debug:
            self.draw_bounds(bbox.north_east, bbox.north_west, bbox.south_west, bbox.south_east)

        self.fitter.supersede()
        self.camera.stop()
        logger.debug("Native fit to %s with padding %s", bbox, padding)
        return self.camera.fit_bounds(bbox, padding=padding)

    def get_screen_bounds(self, points: Sequence[Any] | None = None) -> BoundingBox:
        return screen_bounds(self.camera, self._resolve(points))

    def fit_screen_bounds(
        self, points: Sequence[Any] | None = None, options: FitOptions | None = None
    ) -> FitTask:
        pts = self._resolve(points)
        task = self.fitter.start(screen_bounds(self.camera, pts), options)
        self.points = pts
        return task

    def draw_bounds(
        self,
        top_left: GeoPoint | tuple[float, float],
        top_right: GeoPoint | tuple[float, float],
        bottom_right: GeoPoint | tuple[float, float],
        bottom_left: GeoPoint | tuple[float, float],
    ) -> None:
        self.overlay.draw_bounds(top_left, top_right, bottom_right, bottom_left)
