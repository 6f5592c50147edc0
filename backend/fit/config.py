from __future__ import annotations

import math
import os


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def refine_step() -> float:
    # Zoom decrement applied per refinement nudge on pitched maps.
    v = _env_float("FITBOUNDS_REFINE_STEP", 0.1)
    return v if v > 0 else 0.1


def max_refine_steps() -> int:
    v = _env_float("FITBOUNDS_MAX_REFINE_STEPS", 50)
    if not math.isfinite(v):
        return 50
    return max(0, int(v))


def debug_enabled() -> bool:
    v = (os.getenv("FITBOUNDS_DEBUG") or "0").strip().lower()
    return v not in {"0", "false", "no", "off", ""}


def log_level() -> str:
    return (os.getenv("FITBOUNDS_LOG_LEVEL") or "INFO").strip().upper()


def default_pitch() -> float:
    return _env_float("FITBOUNDS_DEFAULT_PITCH", 5.0)


def default_relative_padding() -> float:
    # Percent of the container; see fit.padding.padding_from_relative.
    return _env_float("FITBOUNDS_DEFAULT_RELATIVE_PADDING", 5.0)
