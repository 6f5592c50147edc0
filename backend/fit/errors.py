from __future__ import annotations


class FitBoundsError(Exception):
    """
    Base class for viewport-fitting failures.
    """


class ConstructionError(FitBoundsError, ValueError):
    """
    Point input is unusable: fewer than two points, or a shape we can't read.

    Raised synchronously, before the camera is touched.
    """


class ContainerResolutionError(FitBoundsError, RuntimeError):
    """
    The camera could not resolve a usable viewport container.
    """


class DegenerateGeometryError(FitBoundsError, ArithmeticError):
    """
    Zero-area viewport/bounds or a non-finite scale; the fit can't produce a sane zoom.
    """
