from __future__ import annotations

from typing import Any, Mapping, Union

from camera.types import PaddingSpec

PaddingLike = Union[float, int, PaddingSpec, Mapping[str, Any]]

_EDGES = ("top", "right", "bottom", "left")


def to_padding(value: PaddingLike | None) -> PaddingSpec:
    """
    Scalar -> same inset on every edge; mapping/PaddingSpec -> per edge, missing edges 0.
    """
    if value is None:
        return PaddingSpec()
    if isinstance(value, PaddingSpec):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        v = float(value)
        return PaddingSpec(top=v, right=v, bottom=v, left=v)
    if isinstance(value, Mapping):
        return PaddingSpec(**{e: float(value.get(e) or 0.0) for e in _EDGES})
    raise TypeError(f"Unsupported padding value: {value!r}")


def padding_from_relative(
    relative: PaddingLike, *, width: float, height: float
) -> PaddingSpec:
    """
    Percent-of-container padding -> pixels.

    top/bottom are relative to the container height, left/right to its width.
    """
    pct = to_padding(relative)
    return PaddingSpec(
        top=height * pct.top / 100.0,
        right=width * pct.right / 100.0,
        bottom=height * pct.bottom / 100.0,
        left=width * pct.left / 100.0,
    )


def offset_for_padding(padding: PaddingSpec) -> tuple[float, float]:
    return (padding.right - padding.left, padding.bottom - padding.top)
