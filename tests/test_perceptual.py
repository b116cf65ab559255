import numpy as np
import pytest

import config
from vector_muse.core.perceptual import (
    RGB,
    AudioParams,
    batch_extents,
    map_colors,
    seed_frequency,
    to_audio_params,
    to_color,
)


def test_audio_params_reference_point():
    params = to_audio_params(100 / 400, 50 / 400)
    assert params.frequency_hz == pytest.approx(385.0)
    assert params.gain == pytest.approx(0.45)


def test_audio_params_canvas_corners():
    assert to_audio_params(0.0, 0.0) == AudioParams(220.0, 0.5)
    top_right = to_audio_params(1.0, 1.0)
    assert top_right.frequency_hz == pytest.approx(880.0)
    assert top_right.gain == pytest.approx(0.1)


def test_gain_is_clamped():
    assert to_audio_params(0.5, -2.0).gain == 1.0
    assert to_audio_params(0.5, 5.0).gain == 0.0


def test_colors_span_full_range():
    points = np.array([[0.0, 10.0, -1.0], [1.0, 20.0, 1.0], [0.5, 15.0, 0.0]])
    colors = map_colors(points)
    assert colors[0] == RGB(0, 0, 0)
    assert colors[1] == RGB(255, 255, 255)
    assert colors[2] == RGB(127, 127, 127)


def test_degenerate_axis_is_mid_channel():
    points = np.array([[0.0, 3.0, 1.0], [1.0, 3.0, 2.0]])
    colors = map_colors(points)
    assert [c.g for c in colors] == [127, 127]


def test_missing_axes_are_mid_channels():
    colors = map_colors(np.array([[0.0, 0.0], [2.0, 4.0]]))
    assert colors == [RGB(0, 0, 127), RGB(255, 255, 127)]


def test_to_color_clamps_points_outside_extents():
    extents = batch_extents(np.array([[0.0, 0.0, 0.0], [1.0, 1.0, 1.0]]))
    assert to_color([2.0, -1.0, 0.5], extents) == RGB(255, 0, 127)


def test_rgb_formatting():
    color = RGB(255, 16, 0)
    assert color.css() == "rgb(255, 16, 0)"
    assert color.hex() == "#ff1000"


def test_seed_frequency_from_red_channel():
    assert seed_frequency(RGB(0, 200, 200)) == config.FREQ_BASE_HZ
    assert seed_frequency(RGB(255, 0, 0)) == pytest.approx(660.0)
