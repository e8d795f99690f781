# Exponential smoothing of consecutive parameters

import numpy as np

from .exceptions import ConfigurationError


def _check_open_unit(name, value):
    if not 0.0 < value < 1.0:
        raise ConfigurationError(name, "must be in the open interval (0, 1)")


def dispersion_coefficient(t, beta, q):
    """
    Time-varying dispersion smoothing coefficient beta * (1 - (1 - 1/t)^q).

    Args:
        t (int): Number of parameters in the history (initial one included)
        beta (float): Base coefficient in (0, 1)
        q (int): Positive exponent

    Returns:
        float: Coefficient applied to the newest dispersion estimate
    """
    return beta * (1.0 - (1.0 - 1.0 / t) ** q)


def constant_smoothing(parameters, alpha):
    """
    Blend the newest parameter with its predecessor using a constant weight.

    Args:
        parameters (list): Parameter history, newest last
        alpha (float): Weight of the newest parameter, in (0, 1)

    Returns:
        ndarray: alpha * newest + (1 - alpha) * previous, or the newest
        parameter itself when there is no predecessor
    """
    _check_open_unit("alpha", alpha)
    if len(parameters) < 2:
        return parameters[-1]
    return alpha * parameters[-1] + (1.0 - alpha) * parameters[-2]


def location_dispersion_smoothing(parameters, alpha, beta, q):
    """
    Smooth a 2 x D location/dispersion parameter.

    Row 0 (locations) uses the constant weight alpha; row 1 (dispersions)
    uses dispersion_coefficient(t, beta, q) with t = len(parameters).

    Args:
        parameters (list): Parameter history, newest last
        alpha (float): Location weight in (0, 1)
        beta (float): Dispersion base coefficient in (0, 1)
        q (int): Dispersion exponent, positive

    Returns:
        ndarray: Smoothed parameter
    """
    _check_open_unit("alpha", alpha)
    _check_open_unit("beta", beta)
    if q < 1:
        raise ConfigurationError("q", "must be positive")

    t = len(parameters)
    if t < 2:
        return parameters[-1]
    current, previous = parameters[-1], parameters[-2]
    gamma = dispersion_coefficient(t, beta, q)
    return np.vstack([
        alpha * current[0] + (1.0 - alpha) * previous[0],
        gamma * current[1] + (1.0 - gamma) * previous[1]])
