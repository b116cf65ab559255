"""
Perceptual mapping: projected coordinates to color and sound.

The audio constants are a fixed contract; downstream tone code relies on the
exact ranges (220-880 Hz, gain 0.1-0.5 inside the canvas).
"""

from typing import NamedTuple, Sequence

import numpy as np

from vector_muse.core.vector_math import normalize01
import config

Extents = list[tuple[float, float]]

COLOR_AXES = 3


class RGB(NamedTuple):
    r: int
    g: int
    b: int

    def css(self) -> str:
        return f"rgb({self.r}, {self.g}, {self.b})"

    def hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"


class AudioParams(NamedTuple):
    frequency_hz: float
    gain: float


def batch_extents(points: np.ndarray) -> Extents:
    """
    Per-axis (min, max) over the first three axes of a projection.

    Axes the projection does not have come back as (0.0, 0.0), which
    normalizes to the constant 0.5.
    """
    coords = np.asarray(points, dtype=np.float64)
    if coords.ndim == 1:
        coords = coords.reshape(1, -1)

    extents = []
    for axis in range(COLOR_AXES):
        if axis < coords.shape[1] and coords.shape[0] > 0:
            column = coords[:, axis]
            extents.append((float(column.min()), float(column.max())))
        else:
            extents.append((0.0, 0.0))
    return extents


def to_color(point: Sequence[float], extents: Extents) -> RGB:
    """
    Map a projected point to an RGB color, batch-relative.

    Each of the first three axes is normalized against its extent, scaled to
    [0, 255] and truncated. Missing or degenerate axes give 127.
    """
    channels = []
    for axis in range(COLOR_AXES):
        lo, hi = extents[axis] if axis < len(extents) else (0.0, 0.0)
        value = float(point[axis]) if axis < len(point) else lo
        ratio = normalize01(value, lo, hi)
        channels.append(int(min(max(ratio, 0.0), 1.0) * 255))
    return RGB(*channels)


def map_colors(points: np.ndarray) -> list[RGB]:
    """Colors for every point of a projection."""
    coords = np.asarray(points, dtype=np.float64)
    extents = batch_extents(coords)
    return [to_color(point, extents) for point in coords]


def to_audio_params(x_ratio: float, y_ratio: float) -> AudioParams:
    """
    Horizontal position sets pitch, vertical position sets loudness.

    frequency_hz = 220 + x_ratio * 660
    gain = clamp(0.5 - y_ratio * 0.4, 0, 1)
    """
    frequency = config.FREQ_BASE_HZ + x_ratio * config.FREQ_SPAN_HZ
    gain = config.GAIN_BASE - y_ratio * config.GAIN_SLOPE
    return AudioParams(frequency_hz=frequency, gain=min(max(gain, 0.0), 1.0))


def seed_frequency(color: RGB) -> float:
    """Starting tone for a drag, from the node's red channel (220-660 Hz)."""
    return config.FREQ_BASE_HZ + (color.r / 255) * config.SEED_FREQ_SPAN_HZ
