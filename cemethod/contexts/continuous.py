# Gaussian Cross-Entropy context for continuous optimization

import numpy as np

from ..distributions import sample_gaussian
from ..estimation import gaussian_update
from ..exceptions import ConfigurationError
from ..optimization import SystemPerformanceOptimizationContext
from ..smoothing import location_dispersion_smoothing


def _initial_parameter(initial_argument, initial_standard_deviation):
    argument = np.asarray(initial_argument, dtype=float)
    if argument.ndim == 2 and argument.shape[0] == 1:
        argument = argument[0]
    if argument.ndim != 1 or argument.size == 0:
        raise ConfigurationError("initial_argument", "must be a non-empty row vector")
    if not initial_standard_deviation > 0.0:
        raise ConfigurationError("initial_standard_deviation", "must be positive")
    return np.vstack([argument, np.full(argument.size, float(initial_standard_deviation))])


class ContinuousOptimizationContext(SystemPerformanceOptimizationContext):
    """
    Optimizes a real function of D variables with independent Gaussian draws.

    The parameter is a 2 x D array: means on row 0, standard deviations on
    row 1. The optimal state is the vector of means. The run converges once
    every standard deviation falls below termination_tolerance.

    Args:
        objective (callable): Function of a state (length D) returning a float
        initial_argument (array-like): Initial means
        mean_smoothing_coefficient (float): Mean smoothing weight in (0, 1)
        std_smoothing_coefficient (float): Base of the std-dev weight, in (0, 1)
        std_smoothing_exponent (int): Exponent of the std-dev weight, positive
        initial_standard_deviation (float): Initial std-dev of every coordinate
        termination_tolerance (float): Std-dev level signalling convergence
        optimization_goal (OptimizationGoal): Direction of the optimization
        min_iterations (int): Iterations always executed
        max_iterations (int): Hard iteration ceiling
        smoothing (bool): Smooth each new parameter against its predecessor;
            False records the raw elite estimates
    """

    def __init__(self, objective, initial_argument, mean_smoothing_coefficient,
                 std_smoothing_coefficient, std_smoothing_exponent,
                 initial_standard_deviation, termination_tolerance,
                 optimization_goal, min_iterations, max_iterations, smoothing=True):
        initial_parameter = _initial_parameter(initial_argument, initial_standard_deviation)
        super().__init__(
            state_dimension=initial_parameter.shape[1],
            initial_parameter=initial_parameter,
            optimization_goal=optimization_goal,
            min_iterations=min_iterations,
            max_iterations=max_iterations)

        if objective is None:
            raise ConfigurationError("objective", "is required")
        if not termination_tolerance > 0.0:
            raise ConfigurationError("termination_tolerance", "must be positive")
        if not 0.0 < mean_smoothing_coefficient < 1.0:
            raise ConfigurationError(
                "mean_smoothing_coefficient", "must be in the open interval (0, 1)")
        if not 0.0 < std_smoothing_coefficient < 1.0:
            raise ConfigurationError(
                "std_smoothing_coefficient", "must be in the open interval (0, 1)")
        if std_smoothing_exponent < 1:
            raise ConfigurationError("std_smoothing_exponent", "must be positive")

        self.objective = objective
        self.initial_argument = initial_parameter[0].copy()
        self.initial_standard_deviation = float(initial_standard_deviation)
        self.mean_smoothing_coefficient = float(mean_smoothing_coefficient)
        self.std_smoothing_coefficient = float(std_smoothing_coefficient)
        self.std_smoothing_exponent = int(std_smoothing_exponent)
        self.termination_tolerance = float(termination_tolerance)
        self.smoothing = bool(smoothing)

    def performance(self, state):
        return float(self.objective(state))

    def partial_sample(self, dest, row_range, rng, parameter, sample_size):
        sample_gaussian(dest, row_range, rng, parameter)

    def update_parameter(self, parameters, elite_sample):
        return gaussian_update(elite_sample)

    def smooth_parameter(self, parameters):
        if not self.smoothing:
            return super().smooth_parameter(parameters)
        return location_dispersion_smoothing(
            parameters,
            alpha=self.mean_smoothing_coefficient,
            beta=self.std_smoothing_coefficient,
            q=self.std_smoothing_exponent)

    def stop_at_intermediate_iteration(self, iteration, levels, parameters):
        return bool(np.all(parameters[-1][1] < self.termination_tolerance))

    def get_optimal_state(self, parameter):
        return np.array(parameter[0], dtype=float)
