# Cross-Entropy context for selecting the best k-subset of D items

import numpy as np

from ..distributions import sample_conditional_bernoulli
from ..estimation import bernoulli_update
from ..exceptions import ConfigurationError
from ..optimization import SystemPerformanceOptimizationContext
from ..smoothing import constant_smoothing


def largest_positions(probabilities, k):
    """
    Indexes of the k largest probabilities.

    Returns:
        frozenset: Positions of the k largest entries (stable on ties)
    """
    order = np.argsort(np.ravel(probabilities), kind="stable")
    return frozenset(int(j) for j in order[-k:])


class CombinationOptimizationContext(SystemPerformanceOptimizationContext):
    """
    Optimizes a function of 0/1 vectors of length D having exactly k ones.

    States are drawn as independent Bernoulli coordinates conditioned on
    their sum being k. The parameter is a 1 x D array of probabilities,
    initially 0.5. The optimal state flags the k largest probabilities.
    The run converges once those k positions have not changed over
    min_iterations + 1 consecutive iterations.

    Args:
        objective (callable): Function of a 0/1 state returning a float
        state_dimension (int): Number of items D
        combination_dimension (int): Number of selected items k, 0 < k < D
        probability_smoothing_coefficient (float): Smoothing weight in (0, 1)
        optimization_goal (OptimizationGoal): Direction of the optimization
        min_iterations (int): Iterations always executed
        max_iterations (int): Hard iteration ceiling
        smoothing (bool): Smooth each new parameter against its predecessor;
            False records the raw elite estimates
    """

    def __init__(self, objective, state_dimension, combination_dimension,
                 probability_smoothing_coefficient, optimization_goal,
                 min_iterations, max_iterations, smoothing=True):
        if state_dimension is None or state_dimension < 1:
            raise ConfigurationError("state_dimension", "must be positive")
        super().__init__(
            state_dimension=state_dimension,
            initial_parameter=np.full((1, state_dimension), 0.5),
            optimization_goal=optimization_goal,
            min_iterations=min_iterations,
            max_iterations=max_iterations)

        if objective is None:
            raise ConfigurationError("objective", "is required")
        if not 0.0 < probability_smoothing_coefficient < 1.0:
            raise ConfigurationError(
                "probability_smoothing_coefficient", "must be in the open interval (0, 1)")
        if combination_dimension < 1:
            raise ConfigurationError("combination_dimension", "must be positive")
        if state_dimension <= combination_dimension:
            raise ConfigurationError(
                "combination_dimension", "must be less than state_dimension")

        self.objective = objective
        self.combination_dimension = int(combination_dimension)
        self.probability_smoothing_coefficient = float(probability_smoothing_coefficient)
        self.smoothing = bool(smoothing)

    def performance(self, state):
        return float(self.objective(state))

    def partial_sample(self, dest, row_range, rng, parameter, sample_size):
        sample_conditional_bernoulli(
            dest, row_range, rng, parameter[0], self.combination_dimension)

    def update_parameter(self, parameters, elite_sample):
        return bernoulli_update(elite_sample)

    def smooth_parameter(self, parameters):
        if not self.smoothing:
            return super().smooth_parameter(parameters)
        return constant_smoothing(parameters, self.probability_smoothing_coefficient)

    def stop_at_intermediate_iteration(self, iteration, levels, parameters):
        window = self.min_iterations + 1
        # parameters[0] is the uniform initial guess
        if len(parameters) - 1 < window:
            return False
        k = self.combination_dimension
        recent = [largest_positions(p, k) for p in parameters[-window:]]
        return all(positions == recent[-1] for positions in recent)

    def get_optimal_state(self, parameter):
        state = np.zeros(self.state_dimension)
        state[sorted(largest_positions(parameter, self.combination_dimension))] = 1.0
        return state
