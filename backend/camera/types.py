from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Protocol

from geo.bounds import GeoBounds
from geo.points import GeoPoint

MOVE_END = "moveend"

Listener = Callable[[], None]


@dataclass(frozen=True)
class ScreenPoint:
    """
    Pixel position in the rendered viewport (origin top-left, y down).

    Only meaningful for the camera state it was projected with.
    """

    x: float
    y: float


@dataclass(frozen=True)
class PaddingSpec:
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    left: float = 0.0


@dataclass(frozen=True)
class EaseParams:
    """
    Target of an animated camera transition. `None` fields keep their current value.

    `offset` places `center` that many pixels away from the padded focal point.
    """

    center: GeoPoint | None = None
    zoom: float | None = None
    pitch: float | None = None
    bearing: float | None = None
    offset: tuple[float, float] = (0.0, 0.0)


class AnimationHandle(Protocol):
    def once(self, event: str, listener: Listener) -> "AnimationHandle": ...


class Camera(Protocol):
    """
    Capability a fit borrows for its duration. The fitting engine never owns a camera.

    - MercatorCamera: in-process Web-Mercator camera (tests, HTTP surface)
    - anything else exposing the same surface (e.g. a bridge to a browser map)
    """

    def project(self, point: GeoPoint) -> ScreenPoint: ...

    def unproject(self, point: ScreenPoint) -> GeoPoint: ...

    def get_zoom(self) -> float: ...

    def get_pitch(self) -> float: ...

    def get_bearing(self) -> float: ...

    def get_padding(self) -> PaddingSpec | None: ...

    def get_container_size(self) -> tuple[float, float]: ...

    def stop(self) -> Any: ...

    def ease_to(self, params: EaseParams) -> AnimationHandle: ...

    def fit_bounds(self, bounds: GeoBounds, *, padding: PaddingSpec) -> AnimationHandle: ...

    def add_source(self, source_id: str, source: dict[str, Any]) -> None: ...

    def add_layer(self, layer: dict[str, Any]) -> None: ...

    def call_soon(self, callback: Listener) -> None: ...
