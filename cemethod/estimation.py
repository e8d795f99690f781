# Parameter re-estimation from elite samples

import numpy as np

from .exceptions import ConfigurationError, DegenerateStatisticsError

# Bernoulli probabilities are kept strictly inside (0, 1)
PROBABILITY_FLOOR = 1e-9


def _require_rows(data, minimum, what):
    if data.shape[0] < minimum:
        raise DegenerateStatisticsError(
            f"{what} needs at least {minimum} observation(s), got {data.shape[0]}")


def column_means(data):
    """
    Column means of a 2-D array.

    Args:
        data (ndarray): Observations on rows, shape (n, D)

    Returns:
        ndarray: Means of length D
    """
    _require_rows(data, 1, "mean")
    return data.mean(axis=0)


def column_standard_deviations(data, adjust_for_bias=False):
    """
    Column standard deviations of a 2-D array.

    Args:
        data (ndarray): Observations on rows, shape (n, D)
        adjust_for_bias (bool): Divide by n - 1 instead of n

    Returns:
        ndarray: Standard deviations of length D
    """
    if adjust_for_bias:
        _require_rows(data, 2, "bias-adjusted standard deviation")
        return data.std(axis=0, ddof=1)
    _require_rows(data, 1, "standard deviation")
    return data.std(axis=0)


def gaussian_update(elite_sample):
    """
    Gaussian sufficient statistics of the elite sample.

    Returns:
        ndarray: 2 x D array of column means and (biased) column std-devs
    """
    return np.vstack([
        column_means(elite_sample),
        column_standard_deviations(elite_sample, adjust_for_bias=False)])


def bernoulli_update(elite_sample):
    """
    Bernoulli probabilities of a 0/1 elite sample.

    Entries equal to 0 or 1 are pulled inside the open unit interval so
    that conditional Bernoulli sampling remains defined.

    Returns:
        ndarray: 1 x D array of probabilities
    """
    probabilities = column_means(elite_sample)
    probabilities[probabilities == 0.0] = PROBABILITY_FLOOR
    probabilities[probabilities == 1.0] = 1.0 - PROBABILITY_FLOOR
    return probabilities[np.newaxis, :]


def categorical_update(elite_sample, k):
    """
    Relative frequencies of part identifiers 0..k-1 in each column.

    Args:
        elite_sample (ndarray): Elite rows of part identifiers, shape (m, D)
        k (int): Number of parts

    Returns:
        ndarray: k x D array whose columns sum to one
    """
    _require_rows(elite_sample, 1, "categorical frequency")
    identifiers = elite_sample.astype(int)
    counts = np.zeros((k, elite_sample.shape[1]))
    for j in range(elite_sample.shape[1]):
        counts[:, j] = np.bincount(identifiers[:, j], minlength=k)[:k]
    return counts / elite_sample.shape[0]


def likelihood_ratio_update(parameters, elite_sample, likelihood_ratio, statistics="mean"):
    """
    Likelihood-ratio weighted re-estimation for rare-event adaptation.

    Each elite row x gets the weight f_nominal(x) / f_reference(x), where the
    nominal parameter is parameters[0] and the reference one parameters[-1].

    Args:
        parameters (list): Parameter history, nominal parameter first
        elite_sample (ndarray): Elite rows, shape (m, D)
        likelihood_ratio (callable): (rows, nominal, reference) -> ratios
        statistics (str): "mean" for a 1 x D weighted mean, "mean_std" for
            a 2 x D weighted mean and weighted standard deviation

    Returns:
        ndarray: New parameter
    """
    if statistics not in ("mean", "mean_std"):
        raise ConfigurationError("statistics", f"unknown statistics {statistics!r}")
    if elite_sample.shape[0] == 0:
        raise DegenerateStatisticsError("empty elite sample: weighted update undefined")

    nominal, reference = parameters[0], parameters[-1]
    weights = np.ravel(likelihood_ratio(elite_sample, nominal, reference))
    total = weights.sum()
    if not np.isfinite(total) or total <= np.finfo(float).tiny:
        raise DegenerateStatisticsError(
            f"sum of likelihood ratios is {total!r}: weighted update undefined")

    means = weights @ elite_sample / total
    if statistics == "mean":
        return means[np.newaxis, :]
    variances = weights @ (elite_sample - means) ** 2 / total
    return np.vstack([means, np.sqrt(variances)])
