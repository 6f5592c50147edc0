from __future__ import annotations

from typing import Any, Sequence

from geo.bounds import GeoBounds
from geo.points import GeoPoint


def trace_points(points: Sequence[tuple[float, float]]) -> dict[str, Any]:
    return {
        "type": "scattermapbox",
        "name": "Points",
        "lon": [lon for lon, _ in points],
        "lat": [lat for _, lat in points],
        "mode": "markers",
        "marker": {"size": 9, "color": "rgba(229, 57, 53, 0.9)"},
    }


def trace_corners(corners: Sequence[GeoPoint], *, name: str) -> dict[str, Any]:
    ring = [*corners, corners[0]] if corners else []
    return {
        "type": "scattermapbox",
        "name": name,
        "lon": [c.lon for c in ring],
        "lat": [c.lat for c in ring],
        "mode": "lines",
        "line": {"color": "rgba(255, 0, 0, 0.8)", "width": 2},
        "hoverinfo": "skip",
        "showlegend": False,
    }


def trace_bounds(bounds: GeoBounds) -> dict[str, Any]:
    b = bounds.normalized()
    return trace_corners(
        [b.south_west, b.south_east, b.north_east, b.north_west], name="Fit bounds"
    )


def build_fit_plot(
    points: Sequence[tuple[float, float]],
    *,
    view: dict[str, Any],
    bounds: GeoBounds | None = None,
    corners: Sequence[GeoPoint] | None = None,
    fit: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Plotly map payload showing the points as framed by `view`.

    `view` is a camera view dict: {"center": {"lat", "lon"}, "zoom", "pitch", "bearing"}.
    """
    traces: list[dict[str, Any]] = []
    if corners:
        traces.append(trace_corners(list(corners), name="Screen bounds"))
    elif bounds is not None:
        traces.append(trace_bounds(bounds))
    traces.append(trace_points(points))

    meta: dict[str, Any] = {"stats": {"renderedPoints": len(points)}}
    if fit is not None:
        meta["fit"] = fit

    return {
        "data": traces,
        "layout": {
            "mapbox": {
                "center": view["center"],
                "zoom": view["zoom"],
                "pitch": view.get("pitch", 0.0),
                "bearing": view.get("bearing", 0.0),
                "style": "carto-positron",
            },
            "showlegend": False,
            "meta": meta,
        },
    }
