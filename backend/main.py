from __future__ import annotations

from typing import Any, Literal

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from camera.mercator import MercatorCamera
from fit import config
from fit.engine import FitBounds
from fit.errors import ConstructionError, FitBoundsError
from fit.fitter import FitOptions
from fit.padding import padding_from_relative, to_padding
from geo.points import GeoPoint, Waypoint
from logging_utils import configure_logging
from overlay.debug import BOUNDS_SOURCE_ID
from plot.build_fit import build_fit_plot

configure_logging()

app = FastAPI()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class ApiCenter(BaseModel):
    lat: float
    lon: float


class ApiPadding(BaseModel):
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    left: float = 0.0


class ApiWaypoint(BaseModel):
    longitude: float
    latitude: float
    pinLabel: str | None = None
    showPin: bool = False


class ApiCamera(BaseModel):
    center: ApiCenter
    zoom: float = Field(ge=0.0, le=22.0)
    # None -> FITBOUNDS_DEFAULT_PITCH
    pitch: float | None = Field(default=None, ge=0.0, le=85.0)
    bearing: float = 0.0
    width: float
    height: float
    # Absolute pixels; wins over relativePadding (percent of the container).
    padding: float | ApiPadding | None = None
    relativePadding: float | ApiPadding | None = None


class ApiFitOptions(BaseModel):
    padding: float | ApiPadding | None = None
    pitch: float | None = Field(default=None, ge=0.0, le=85.0)


class ApiFitRequest(BaseModel):
    points: list[tuple[float, float]] | None = None
    waypoints: list[ApiWaypoint] | None = None
    camera: ApiCamera
    options: ApiFitOptions = Field(default_factory=ApiFitOptions)
    mode: Literal["screen", "aligned"] = "screen"
    debug: bool = False


@app.exception_handler(FitBoundsError)
async def fit_error_handler(request: Request, exc: FitBoundsError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"detail": str(exc), "error": type(exc).__name__},
    )


def _padding_value(v: float | ApiPadding | None) -> Any:
    if isinstance(v, ApiPadding):
        return v.model_dump()
    return v


def _build_camera(api: ApiCamera) -> MercatorCamera:
    if api.padding is not None:
        padding = to_padding(_padding_value(api.padding))
    else:
        relative = (
            _padding_value(api.relativePadding)
            if api.relativePadding is not None
            else config.default_relative_padding()
        )
        padding = padding_from_relative(relative, width=api.width, height=api.height)
    return MercatorCamera(
        center=GeoPoint(lon=api.center.lon, lat=api.center.lat),
        zoom=api.zoom,
        pitch=config.default_pitch() if api.pitch is None else api.pitch,
        bearing=api.bearing,
        width=api.width,
        height=api.height,
        padding=padding,
    )


def _build_engine(body: ApiFitRequest, camera: MercatorCamera) -> FitBounds:
    if body.waypoints:
        waypoints = [
            Waypoint(
                longitude=w.longitude,
                latitude=w.latitude,
                pin_label=w.pinLabel,
                show_pin=w.showPin,
            )
            for w in body.waypoints
        ]
        return FitBounds(camera, waypoints, debug=body.debug, kind="waypoints")
    if body.points is None:
        raise ConstructionError("Either `points` or `waypoints` is required")
    return FitBounds(camera, body.points, debug=body.debug, kind="pairs")


def _fit_options(api: ApiFitOptions) -> FitOptions:
    return FitOptions(padding=_padding_value(api.padding), pitch=api.pitch)


@app.post("/bounds")
def bounds(body: ApiFitRequest):
    camera = _build_camera(body.camera)
    engine = _build_engine(body, camera)
    aligned = engine.get_aligned_bounds()
    box = engine.get_screen_bounds()
    s = box.screen
    g = box.geo
    return {
        "aligned": aligned.to_dict(),
        "screen": {
            name: {"x": p.x, "y": p.y}
            for name, p in (
                ("topLeft", s.top_left),
                ("topRight", s.top_right),
                ("bottomLeft", s.bottom_left),
                ("bottomRight", s.bottom_right),
                ("center", s.center),
            )
        },
        "geo": {
            "vertices": {
                name: {"lat": p.lat, "lon": p.lon}
                for name, p in (
                    ("topLeft", g.top_left),
                    ("topRight", g.top_right),
                    ("bottomLeft", g.bottom_left),
                    ("bottomRight", g.bottom_right),
                )
            },
            "bounds": g.bounds.to_dict(),
        },
    }


@app.post("/fit")
def fit(body: ApiFitRequest):
    camera = _build_camera(body.camera)
    engine = _build_engine(body, camera)
    options = _fit_options(body.options)

    if body.mode == "aligned":
        bbox = engine.get_aligned_bounds()
        engine.fit_aligned_bounds(options=options)
        camera.run_until_idle()
        fit_meta: dict[str, Any] = {"mode": "aligned", "outcome": "converged"}
        plot = build_fit_plot(engine.points, view=camera.view(), bounds=bbox, fit=fit_meta)
    else:
        task = engine.fit_screen_bounds(options=options)
        camera.run_until_idle()
        if task.error is not None:
            raise task.error
        fit_meta = {
            "mode": "screen",
            "outcome": task.outcome.value,
            "phase": task.phase.value,
            "refineSteps": task.refine_steps,
            "lastSpan": task.last_span,
            "effectiveWidth": task.state.effective_width,
            "effectiveHeight": task.state.effective_height,
        }
        g = task.state.box.geo
        plot = build_fit_plot(
            engine.points,
            view=camera.view(),
            corners=[g.top_left, g.top_right, g.bottom_right, g.bottom_left],
            fit=fit_meta,
        )

    out: dict[str, Any] = {"view": camera.view(), "fit": fit_meta, "plot": plot}
    if body.debug:
        out["overlay"] = camera.sources.get(BOUNDS_SOURCE_ID)
    return out
