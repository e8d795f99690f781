# Sampling adapters and density ratios for the supported families
#
# Every sampler fills rows [start, stop) of a destination (N, D) array and
# touches nothing else, so disjoint row ranges can be filled concurrently.

import numpy as np
from scipy.stats import norm


def sample_exponential(dest, row_range, rng, means):
    """
    Fill a row range with independent exponential coordinates.

    Args:
        dest (ndarray): Destination sample of shape (N, D)
        row_range (tuple): Half-open (start, stop) row range
        rng (numpy.random.Generator): Worker stream
        means (array-like): Per-coordinate means (scale parameters), length D
    """
    start, stop = row_range
    means = np.ravel(means)
    dest[start:stop, :] = rng.exponential(scale=means, size=(stop - start, means.size))


def sample_gaussian(dest, row_range, rng, parameter):
    """
    Fill a row range with independent Gaussian coordinates.

    Args:
        dest (ndarray): Destination sample of shape (N, D)
        row_range (tuple): Half-open (start, stop) row range
        rng (numpy.random.Generator): Worker stream
        parameter (ndarray): 2 x D array, means on row 0 and std-devs on row 1
    """
    start, stop = row_range
    mu, sigma = parameter[0], parameter[1]
    dest[start:stop, :] = rng.normal(loc=mu, scale=sigma, size=(stop - start, mu.size))


def sample_categorical(dest, row_range, rng, parameter):
    """
    Fill a row range with part identifiers drawn column by column.

    Args:
        dest (ndarray): Destination sample of shape (N, D)
        row_range (tuple): Half-open (start, stop) row range
        rng (numpy.random.Generator): Worker stream
        parameter (ndarray): k x D array, column j holds the masses of parts 0..k-1
    """
    start, stop = row_range
    k, d = parameter.shape
    for j in range(d):
        masses = parameter[:, j] / parameter[:, j].sum()
        dest[start:stop, j] = rng.choice(k, size=stop - start, p=masses)


def _suffix_symmetric_sums(weights, k):
    """
    Elementary symmetric sums of every weight suffix.

    Args:
        weights (ndarray): Positive weights, length n
        k (int): Highest order needed

    Returns:
        ndarray: table[i, r] = e_r(weights[i:]) for r = 0..k
    """
    n = weights.size
    table = np.zeros((n + 1, k + 1))
    table[:, 0] = 1.0
    for i in range(n - 1, -1, -1):
        table[i, 1:] = table[i + 1, 1:] + weights[i] * table[i + 1, :-1]
    return table


def sample_conditional_bernoulli(dest, row_range, rng, probabilities, k):
    """
    Fill a row range with 0/1 vectors having exactly k ones.

    Rows follow independent Bernoulli coordinates conditioned on their sum
    being k (conditional Poisson sampling); a k-subset S is drawn with
    probability proportional to the product of p_i / (1 - p_i) over S.

    Args:
        dest (ndarray): Destination sample of shape (N, D)
        row_range (tuple): Half-open (start, stop) row range
        rng (numpy.random.Generator): Worker stream
        probabilities (array-like): Bernoulli probabilities in (0, 1), length D
        k (int): Number of ones per row
    """
    start, stop = row_range
    p = np.ravel(probabilities)
    n = p.size
    weights = p / (1.0 - p)
    # Rescaling leaves the selection probabilities unchanged
    weights = weights / weights.max()
    table = _suffix_symmetric_sums(weights, k)

    dest[start:stop, :] = 0.0
    uniforms = rng.random((stop - start, n))
    for row in range(start, stop):
        remaining = k
        u = uniforms[row - start]
        for i in range(n):
            if remaining == 0:
                break
            denominator = table[i, remaining]
            if denominator > 0.0:
                inclusion = weights[i] * table[i + 1, remaining - 1] / denominator
            else:
                inclusion = 1.0 if n - i <= remaining else 0.0
            if u[i] < inclusion:
                dest[row, i] = 1.0
                remaining -= 1


def exponential_likelihood_ratio(x, nominal, reference):
    """
    Density ratio f_nominal(x) / f_reference(x) for exponential coordinates.

    Args:
        x (ndarray): One state (length D) or a sample (n, D)
        nominal (array-like): Nominal means, length D
        reference (array-like): Reference means, length D

    Returns:
        ndarray: One ratio per row of x
    """
    x = np.atleast_2d(x)
    u = np.ravel(nominal)
    v = np.ravel(reference)
    log_ratio = np.sum(np.log(v / u)) - x @ (1.0 / u - 1.0 / v)
    return np.exp(log_ratio)


def gaussian_likelihood_ratio(x, nominal, reference):
    """
    Density ratio f_nominal(x) / f_reference(x) for Gaussian coordinates.

    Args:
        x (ndarray): One state (length D) or a sample (n, D)
        nominal (ndarray): 2 x D nominal means and std-devs
        reference (ndarray): 2 x D reference means and std-devs

    Returns:
        ndarray: One ratio per row of x
    """
    x = np.atleast_2d(x)
    log_nominal = norm.logpdf(x, loc=nominal[0], scale=nominal[1])
    log_reference = norm.logpdf(x, loc=reference[0], scale=reference[1])
    return np.exp(np.sum(log_nominal - log_reference, axis=1))
