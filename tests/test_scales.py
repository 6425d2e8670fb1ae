import logging

import numpy as np
import pytest

from weatherscatter.model.errors import DomainError
from weatherscatter.model.layout import ChartDimensions
from weatherscatter.model.records import Dataset
from weatherscatter.model.scales import ScaleRegistry, create_linear, rounded_domain


@pytest.mark.parametrize("domain, rng", [
    ((0.0, 100.0), (0.0, 460.0)),
    ((0.0, 100.0), (460.0, 0.0)),
    ((-40.0, 12.5), (3.0, 97.0)),
])
def test_round_trip(domain, rng):
    scale = create_linear(*domain, *rng)
    values = np.linspace(*domain, 37)
    np.testing.assert_allclose(scale.inverse(scale.forward(values)), values, rtol=0, atol=1e-9)
    for v in values[::6]:
        assert scale.inverse(scale.forward(float(v))) == pytest.approx(v)


def test_forward_is_not_clamped():
    scale = create_linear(0.0, 100.0, 0.0, 200.0)
    assert scale.forward(150.0) == pytest.approx(300.0)
    assert scale.forward(-10.0) == pytest.approx(-20.0)
    assert scale.inverse(-20.0) == pytest.approx(-10.0)


def test_degenerate_domain_raises():
    with pytest.raises(DomainError):
        create_linear(5.0, 5.0, 0.0, 100.0)


def test_rounded_domain():
    assert rounded_domain([20.0, 60.0]) == (0.0, 100.0)
    assert rounded_domain([20.0, 100.0]) == (0.0, 100.0)
    assert rounded_domain([100.5]) == (0.0, 200.0)
    with pytest.raises(DomainError):
        rounded_domain([])


def test_registry_domains(two_point_dataset, dims):
    scales = ScaleRegistry.from_dataset(two_point_dataset, dims)
    assert scales.x.domain == (0.0, 100.0)
    assert scales.y.domain == (0.0, 100.0)
    assert scales.x.range == (0.0, dims.bounded_width)
    # y grows upward
    assert scales.y.range == (dims.bounded_height, 0.0)
    assert scales.density_min.forward(0.0) == pytest.approx(dims.margin_top)
    assert scales.density_max.forward(0.0) == pytest.approx(0.0)


def test_registry_widens_degenerate_domain(caplog):
    dataset = Dataset.from_records([
        {"date": "2010-01-01", "temperatureMin": 0.0, "temperatureMax": 0.0},
        {"date": "2010-01-02", "temperatureMin": -3.0, "temperatureMax": 0.0},
    ])
    with caplog.at_level(logging.WARNING, logger="weatherscatter"):
        scales = ScaleRegistry.from_dataset(dataset, ChartDimensions(600.0, 600.0))

    assert scales.x.domain == (0.0, 1.0)
    assert scales.y.domain == (0.0, 1.0)
    assert "Degenerate domain" in caplog.text


@pytest.mark.parametrize("domain, count, expected", [
    ((0.0, 100.0), 4, [0.0, 20.0, 40.0, 60.0, 80.0, 100.0]),
    ((0.0, 200.0), 4, [0.0, 50.0, 100.0, 150.0, 200.0]),
    ((0.0, 1.0), 4, [0.0, 0.2, 0.4, 0.6, 0.8, 1.0]),
    ((-35.0, 12.0), 4, [-30.0, -20.0, -10.0, 0.0, 10.0]),
])
def test_ticks_use_round_steps(domain, count, expected):
    scale = create_linear(*domain, 0.0, 460.0)
    assert scale.ticks(count).tolist() == expected


def test_ticks_ignore_inverted_range():
    scale = create_linear(0.0, 100.0, 460.0, 0.0)
    assert scale.ticks(4).tolist() == [0.0, 20.0, 40.0, 60.0, 80.0, 100.0]
