"""
Palette
=======
Colours of the chart: the per-month colour of the scatter points and the
cyclical rainbow of the legend gradient.

The rainbow is the "less-angry" cubehelix rainbow (Matteo Niccoli), sampled
the same way d3's `interpolateRainbow` does, so the legend strip reads as a
continuous year.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from weatherscatter import config

if TYPE_CHECKING:
    import numpy.typing as npt

# Cubehelix -> RGB basis (Green, 2011)
_A, _B, _C, _D, _E = -0.14861, 1.78277, -0.29227, -0.90649, 1.97294


def month_color(month: str) -> str:
    """Palette colour for a month key "01".."12"."""
    try:
        return config.MONTH_COLORS[config.MONTH_KEYS.index(month)]
    except ValueError:
        raise ValueError(f"Unknown month key {month!r}.") from None


def rainbow_rgb(t: float | npt.NDArray[np.float64]) -> npt.NDArray[np.int64]:
    """
    RGB triples (0..255) of the cyclical rainbow at position(s) t.

    Only the fractional part of t is used, so t=0 and t=1 give the same colour.

    Returns:
        Array of shape (..., 3).
    """
    t = np.asarray(t, dtype=np.float64)
    t = t - np.floor(t)
    ts = np.abs(t - 0.5)

    hue = np.radians(360.0 * t - 100.0 + 120.0)
    saturation = 1.5 - 1.5 * ts
    lightness = 0.8 - 0.9 * ts
    amp = saturation * lightness * (1.0 - lightness)
    cos_h, sin_h = np.cos(hue), np.sin(hue)

    rgb = np.stack([
        lightness + amp * (_A * cos_h + _B * sin_h),
        lightness + amp * (_C * cos_h + _D * sin_h),
        lightness + amp * (_E * cos_h),
    ], axis=-1)
    return np.clip(np.rint(255.0 * rgb), 0, 255).astype(np.int64)


def rainbow(t: float) -> str:
    """Hex colour of the cyclical rainbow at position t."""
    r, g, b = rainbow_rgb(t).tolist()
    return f"#{r:02x}{g:02x}{b:02x}"


def gradient_stops(n: int = config.LEGEND_GRADIENT_STOPS) -> list[tuple[float, str]]:
    """n evenly spaced (offset, colour) stops of the rainbow over [0, 1]."""
    if n < 2:
        raise ValueError(f"A gradient needs at least 2 stops, got {n}.")
    offsets = np.linspace(0.0, 1.0, n)
    return [(float(o), rainbow(o)) for o in offsets]
