import numpy as np
import pytest

from cemethod import ConfigurationError
from cemethod.smoothing import (constant_smoothing, dispersion_coefficient,
                                location_dispersion_smoothing)


def test_constant_smoothing_is_convex_combination():
    previous = np.array([[0.2, 0.8]])
    current = np.array([[1.0, 0.0]])
    smoothed = constant_smoothing([previous, current], 0.7)
    np.testing.assert_allclose(smoothed, [[0.76, 0.24]])
    assert np.all(smoothed <= np.maximum(previous, current))
    assert np.all(smoothed >= np.minimum(previous, current))


def test_single_parameter_is_returned_unchanged():
    parameter = np.array([[3.0], [2.0]])
    assert constant_smoothing([parameter], 0.5) is parameter
    assert location_dispersion_smoothing([parameter], 0.5, 0.5, 2) is parameter


def test_dispersion_coefficient():
    assert dispersion_coefficient(2, 0.9, 6) == pytest.approx(0.8859375)
    assert dispersion_coefficient(1, 0.9, 6) == pytest.approx(0.9)
    # Decreasing in t
    values = [dispersion_coefficient(t, 0.7, 6) for t in range(1, 20)]
    assert all(a > b for a, b in zip(values, values[1:]))


def test_location_dispersion_smoothing_rows():
    previous = np.array([[0.0, 10.0], [100.0, 100.0]])
    current = np.array([[1.0, 20.0], [1.0, 4.0]])
    smoothed = location_dispersion_smoothing([previous, current], 0.8, 0.9, 6)
    gamma = 0.8859375
    np.testing.assert_allclose(smoothed[0], [0.8, 18.0])
    np.testing.assert_allclose(
        smoothed[1], [gamma * 1.0 + (1 - gamma) * 100.0, gamma * 4.0 + (1 - gamma) * 100.0])


@pytest.mark.parametrize("alpha", [0.0, 1.0, 1.2])
def test_coefficients_are_validated(alpha):
    history = [np.ones((2, 1)), np.ones((2, 1))]
    with pytest.raises(ConfigurationError):
        constant_smoothing(history, alpha)
    with pytest.raises(ConfigurationError):
        location_dispersion_smoothing(history, 0.5, alpha, 6)
    with pytest.raises(ConfigurationError):
        location_dispersion_smoothing(history, 0.5, 0.5, 0)
