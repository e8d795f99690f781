# Rare-event contexts for systems with exponential or Gaussian components

import numpy as np

from ..distributions import (exponential_likelihood_ratio, gaussian_likelihood_ratio,
                             sample_exponential, sample_gaussian)
from ..estimation import likelihood_ratio_update
from ..exceptions import ConfigurationError, DegenerateStatisticsError
from ..rare_event import MAX_ITERATIONS, RareEventProbabilityEstimationContext

# Smallest re-estimated std-dev, relative to the nominal one
DISPERSION_FLOOR = 1e-8


class ExponentialRareEventContext(RareEventProbabilityEstimationContext):
    """
    Rare event of a system whose state has independent exponential components.

    The parameter is a 1 x D array of component means (scale parameters).
    Adaptation replaces it with the likelihood-ratio weighted mean of the
    elite rows.

    Args:
        performance (callable): Function of a state returning a float
        nominal_means (array-like): Means of the components under study
        threshold (float): Level defining the rare event
        boundedness (RareEventPerformanceBoundedness): Side of the event
        max_iterations (int): Hard ceiling of adaptation iterations
    """

    def __init__(self, performance, nominal_means, threshold, boundedness,
                 max_iterations=MAX_ITERATIONS):
        means = np.array(nominal_means, dtype=float, ndmin=2)
        if means.shape[0] != 1 or means.size == 0:
            raise ConfigurationError("nominal_means", "must be a non-empty row vector")
        if np.any(means <= 0.0):
            raise ConfigurationError("nominal_means", "entries must be positive")
        super().__init__(means.shape[1], means, threshold, boundedness, max_iterations)
        if performance is None:
            raise ConfigurationError("performance", "is required")
        self.performance_function = performance

    def performance(self, state):
        return float(self.performance_function(state))

    def partial_sample(self, dest, row_range, rng, parameter, sample_size):
        sample_exponential(dest, row_range, rng, parameter[0])

    def likelihood_ratio(self, x, nominal, reference):
        return exponential_likelihood_ratio(x, nominal[0], reference[0])

    def update_parameter(self, parameters, elite_sample):
        return likelihood_ratio_update(
            parameters, elite_sample, self.likelihood_ratio, statistics="mean")


class GaussianRareEventContext(RareEventProbabilityEstimationContext):
    """
    Rare event of a system whose state has independent Gaussian components.

    The parameter is a 2 x D array: means on row 0, standard deviations on
    row 1. Adaptation moves the means to their likelihood-ratio weighted
    elite estimates and keeps the nominal standard deviations. With
    update_dispersion the standard deviations are re-estimated too; an
    estimate shrinking below DISPERSION_FLOOR times its nominal value
    raises DegenerateStatisticsError.

    Args:
        performance (callable): Function of a state returning a float
        nominal_parameter (array-like): 2 x D nominal means and std-devs
        threshold (float): Level defining the rare event
        boundedness (RareEventPerformanceBoundedness): Side of the event
        update_dispersion (bool): Re-estimate the standard deviations
        max_iterations (int): Hard ceiling of adaptation iterations
    """

    def __init__(self, performance, nominal_parameter, threshold, boundedness,
                 update_dispersion=False, max_iterations=MAX_ITERATIONS):
        parameter = np.array(nominal_parameter, dtype=float, ndmin=2)
        if parameter.shape[0] != 2 or parameter.shape[1] == 0:
            raise ConfigurationError("nominal_parameter", "must have shape (2, D)")
        if np.any(parameter[1] <= 0.0):
            raise ConfigurationError("nominal_parameter", "standard deviations must be positive")
        super().__init__(parameter.shape[1], parameter, threshold, boundedness, max_iterations)
        if performance is None:
            raise ConfigurationError("performance", "is required")
        self.performance_function = performance
        self.update_dispersion = bool(update_dispersion)

    def performance(self, state):
        return float(self.performance_function(state))

    def partial_sample(self, dest, row_range, rng, parameter, sample_size):
        sample_gaussian(dest, row_range, rng, parameter)

    def likelihood_ratio(self, x, nominal, reference):
        return gaussian_likelihood_ratio(x, nominal, reference)

    def update_parameter(self, parameters, elite_sample):
        nominal_std = parameters[0][1]
        if not self.update_dispersion:
            means = likelihood_ratio_update(
                parameters, elite_sample, self.likelihood_ratio, statistics="mean")
            return np.vstack([means[0], nominal_std])

        parameter = likelihood_ratio_update(
            parameters, elite_sample, self.likelihood_ratio, statistics="mean_std")
        if np.any(parameter[1] <= DISPERSION_FLOOR * nominal_std):
            raise DegenerateStatisticsError(
                f"standard deviations collapsed to {parameter[1]} before the threshold "
                f"was reached; use update_dispersion=False")
        return parameter
