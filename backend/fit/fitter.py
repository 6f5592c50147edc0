from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from camera.types import MOVE_END, Camera, EaseParams, PaddingSpec
from fit import config
from fit.errors import DegenerateGeometryError
from fit.padding import PaddingLike, offset_for_padding, to_padding
from fit.screen import BoundingBox

logger = logging.getLogger(__name__)


class FitPhase(str, Enum):
    idle = "idle"
    centering = "centering"
    scaling = "scaling"
    refining = "refining"
    done = "done"
    superseded = "superseded"
    failed = "failed"


class FitOutcome(str, Enum):
    pending = "pending"
    converged = "converged"
    not_converged = "not_converged"
    superseded = "superseded"
    degenerate = "degenerate"


@dataclass(frozen=True)
class FitOptions:
    # Scalar, per-edge mapping or PaddingSpec. None -> the camera's own padding.
    padding: PaddingLike | None = None
    # Target pitch. None -> keep the camera's current pitch.
    pitch: float | None = None


@dataclass(frozen=True)
class FitState:
    """
    Everything one fit decided up front. Screen measurements are from the camera state
    at request time and are not re-taken while the fit runs.
    """

    generation: int
    box: BoundingBox
    padding: PaddingSpec
    pitch: float
    effective_width: float
    effective_height: float
    bounds_width: float
    bounds_height: float
    viewport_aspect: float
    bounds_aspect: float
    offset: tuple[float, float]
    scale: float

    @property
    def zoom_delta(self) -> float:
        return math.log2(self.scale)


@dataclass
class FitTask:
    """
    Caller-facing handle of one screen-space fit.
    """

    state: FitState
    phase: FitPhase = FitPhase.idle
    outcome: FitOutcome = FitOutcome.pending
    refine_steps: int = 0
    last_span: float | None = None
    error: Exception | None = None
    _callbacks: list[Callable[["FitTask"], None]] = field(default_factory=list, repr=False)

    @property
    def done(self) -> bool:
        return self.outcome is not FitOutcome.pending

    def on_done(self, callback: Callable[["FitTask"], None]) -> None:
        if self.done:
            callback(self)
        else:
            self._callbacks.append(callback)

    def finish(
        self, outcome: FitOutcome, phase: FitPhase, error: Exception | None = None
    ) -> None:
        if self.done:
            return
        self.outcome = outcome
        self.phase = phase
        self.error = error
        callbacks, self._callbacks = self._callbacks, []
        for cb in callbacks:
            cb(self)


def plan_fit(
    camera: Camera, box: BoundingBox, options: FitOptions, *, generation: int
) -> FitState:
    """
    Pure planning step: padding, effective viewport, aspect ratios, offset and scale.

    Raises DegenerateGeometryError before anything touches the camera.
    """
    raw_padding = options.padding if options.padding is not None else camera.get_padding()
    padding = to_padding(raw_padding)
    pitch = float(options.pitch) if options.pitch is not None else float(camera.get_pitch())

    width, height = camera.get_container_size()
    effective_width = width - padding.left - padding.right
    effective_height = height - padding.top - padding.bottom
    if not (effective_width > 0 and effective_height > 0):
        raise DegenerateGeometryError(
            f"Padded viewport has no area: {effective_width}x{effective_height}px"
        )

    bounds_width = box.screen.width
    bounds_height = box.screen.height
    if not (math.isfinite(bounds_width) and math.isfinite(bounds_height)):
        raise DegenerateGeometryError("Screen bounds are not finite")
    if bounds_width <= 0 and bounds_height <= 0:
        raise DegenerateGeometryError("All points project to the same screen position")

    viewport_aspect = effective_width / effective_height
    bounds_aspect = bounds_width / bounds_height if bounds_height > 0 else math.inf

    # Fit to whichever axis is more constrained.
    if viewport_aspect > bounds_aspect:
        scale = effective_height / bounds_height
    else:
        scale = effective_width / bounds_width
    if not (math.isfinite(scale) and scale > 0):
        raise DegenerateGeometryError(f"Non-finite fit scale: {scale!r}")

    return FitState(
        generation=generation,
        box=box,
        padding=padding,
        pitch=pitch,
        effective_width=effective_width,
        effective_height=effective_height,
        bounds_width=bounds_width,
        bounds_height=bounds_height,
        viewport_aspect=viewport_aspect,
        bounds_aspect=bounds_aspect,
        offset=offset_for_padding(padding),
        scale=scale,
    )


class ViewportFitter:
    """
    Drives a borrowed camera through center -> zoom -> (pitched) zoom refinement.

    Each step resumes from the camera's `moveend`. Every continuation carries the
    generation of the fit that scheduled it; once a newer fit starts, old continuations
    only mark their task superseded.
    """

    def __init__(
        self,
        camera: Camera,
        *,
        refine_step: float | None = None,
        max_refine_steps: int | None = None,
    ) -> None:
        self.camera = camera
        self.refine_step = config.refine_step() if refine_step is None else float(refine_step)
        self.max_refine_steps = (
            config.max_refine_steps() if max_refine_steps is None else int(max_refine_steps)
        )
        self.generation = 0
        self.current: FitTask | None = None

    def supersede(self) -> None:
        self.generation += 1
        prev = self.current
        self.current = None
        if prev is not None and not prev.done:
            logger.debug("Fit #%d superseded", prev.state.generation)
            prev.finish(FitOutcome.superseded, FitPhase.superseded)

    def start(self, box: BoundingBox, options: FitOptions | None = None) -> FitTask:
        state = plan_fit(
            self.camera, box, options or FitOptions(), generation=self.generation + 1
        )
        self.supersede()
        task = FitTask(state=state)
        self.current = task
        logger.debug(
            "Fit #%d: effective=%.1fx%.1f bounds=%.1fx%.1f scale=%.4f pitch=%.1f",
            state.generation,
            state.effective_width,
            state.effective_height,
            state.bounds_width,
            state.bounds_height,
            state.scale,
            state.pitch,
        )

        self.camera.stop()
        task.phase = FitPhase.centering
        try:
            handle = self.camera.ease_to(
                EaseParams(
                    center=state.box.geo.bounds.center(),
                    pitch=state.pitch,
                    offset=state.offset,
                )
            )
        except DegenerateGeometryError as exc:
            # The camera can't place the center at focal point + offset (e.g. above the
            # horizon of a steep pitch); report it on the task as well as to the caller.
            logger.warning("Fit #%d aborted while centering: %s", state.generation, exc)
            task.finish(FitOutcome.degenerate, FitPhase.failed, exc)
            raise
        handle.once(MOVE_END, lambda: self._after_centering(task))
        return task

    def _is_current(self, task: FitTask) -> bool:
        if task.done:
            return False
        if task.state.generation != self.generation:
            logger.debug("Ignoring stale continuation of fit #%d", task.state.generation)
            task.finish(FitOutcome.superseded, FitPhase.superseded)
            return False
        return True

    def _after_centering(self, task: FitTask) -> None:
        if not self._is_current(task):
            return
        task.phase = FitPhase.scaling
        zoom = self.camera.get_zoom() + task.state.zoom_delta
        self.camera.ease_to(EaseParams(zoom=zoom)).once(
            MOVE_END, lambda: self._after_scaling(task)
        )

    def _after_scaling(self, task: FitTask) -> None:
        if not self._is_current(task):
            return
        # Pitch is the only source of residual error in the scaling step.
        if not task.state.pitch:
            task.finish(FitOutcome.converged, FitPhase.done)
            return
        task.phase = FitPhase.refining
        self._refine(task)

    def _refine(self, task: FitTask) -> None:
        if not self._is_current(task):
            return
        geo = task.state.box.geo
        try:
            left = self.camera.project(geo.bottom_left)
            right = self.camera.project(geo.bottom_right)
            span = right.x - left.x
            if not math.isfinite(span):
                raise DegenerateGeometryError(f"Projected bottom edge span is {span!r}")
        except DegenerateGeometryError as exc:
            logger.warning("Fit #%d aborted during refinement: %s", task.state.generation, exc)
            task.finish(FitOutcome.degenerate, FitPhase.failed, exc)
            return

        task.last_span = span
        if span <= task.state.effective_width:
            task.finish(FitOutcome.converged, FitPhase.done)
            return
        if task.refine_steps >= self.max_refine_steps:
            logger.warning(
                "Fit #%d did not converge after %d steps (span %.1fpx > %.1fpx)",
                task.state.generation,
                task.refine_steps,
                span,
                task.state.effective_width,
            )
            task.finish(FitOutcome.not_converged, FitPhase.done)
            return

        task.refine_steps += 1
        self.camera.ease_to(
            EaseParams(zoom=self.camera.get_zoom() - self.refine_step)
        ).once(MOVE_END, lambda: self._refine(task))
