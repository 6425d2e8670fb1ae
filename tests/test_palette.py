import numpy as np
import pytest

from weatherscatter import config
from weatherscatter.model.palette import gradient_stops, month_color, rainbow, rainbow_rgb


def test_month_colors():
    assert month_color("01") == config.MONTH_COLORS[0]
    assert month_color("12") == config.MONTH_COLORS[11]
    with pytest.raises(ValueError):
        month_color("13")


@pytest.mark.parametrize("t, expected", [
    (0.0, "#6e40aa"),
    (0.5, "#aff05b"),
    (1.0, "#6e40aa"),
])
def test_rainbow_reference_colors(t, expected):
    assert rainbow(t) == expected


def test_rainbow_is_vectorised_and_in_gamut():
    rgb = rainbow_rgb(np.linspace(0.0, 1.0, 101))
    assert rgb.shape == (101, 3)
    assert rgb.min() >= 0 and rgb.max() <= 255


def test_gradient_stops():
    stops = gradient_stops(10)
    assert len(stops) == 10
    assert stops[0] == (0.0, rainbow(0.0))
    assert stops[-1][0] == 1.0
    offsets = [offset for offset, _ in stops]
    assert offsets == sorted(offsets)
    with pytest.raises(ValueError):
        gradient_stops(1)
