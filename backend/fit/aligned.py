from __future__ import annotations

from typing import Sequence

from fit.errors import ConstructionError
from geo.bounds import GeoBounds
from geo.points import MIN_POINTS


def aligned_bounds(points: Sequence[tuple[float, float]]) -> GeoBounds:
    """
    Component-wise lon/lat extrema.

    Only a correct fit footprint while bearing and pitch are both zero; never looks at
    the camera.
    """
    if len(points) < MIN_POINTS:
        raise ConstructionError(f"At least {MIN_POINTS} points are required.")
    return GeoBounds.from_points(points)
