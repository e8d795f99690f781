# Cross-Entropy context for finding the best partition of D items

import numpy as np

from ..distributions import sample_categorical
from ..estimation import categorical_update
from ..exceptions import ConfigurationError
from ..optimization import SystemPerformanceOptimizationContext
from ..smoothing import constant_smoothing


class PartitionOptimizationContext(SystemPerformanceOptimizationContext):
    """
    Optimizes a function of partitions of D items into at most k parts.

    A state assigns each item a part identifier in 0..k-1. The parameter
    is a k x D array whose column j holds the probabilities of item j
    joining each part; all start at 1/k. The optimal state assigns each
    item to its most probable part. The run converges once those
    assignments have not changed over min_iterations + 1 consecutive
    iterations.

    Args:
        objective (callable): Function of a state of part identifiers
        state_dimension (int): Number of items D
        partition_dimension (int): Number of parts k, 1 < k < D
        probability_smoothing_coefficient (float): Smoothing weight in (0, 1)
        optimization_goal (OptimizationGoal): Direction of the optimization
        min_iterations (int): Iterations always executed
        max_iterations (int): Hard iteration ceiling
        smoothing (bool): Smooth each new parameter against its predecessor;
            False records the raw elite estimates
    """

    def __init__(self, objective, state_dimension, partition_dimension,
                 probability_smoothing_coefficient, optimization_goal,
                 min_iterations, max_iterations, smoothing=True):
        if state_dimension is None or state_dimension < 1:
            raise ConfigurationError("state_dimension", "must be positive")
        if partition_dimension < 2:
            raise ConfigurationError("partition_dimension", "must be greater than 1")
        if state_dimension <= partition_dimension:
            raise ConfigurationError(
                "partition_dimension", "must be less than state_dimension")
        super().__init__(
            state_dimension=state_dimension,
            initial_parameter=np.full(
                (partition_dimension, state_dimension), 1.0 / partition_dimension),
            optimization_goal=optimization_goal,
            min_iterations=min_iterations,
            max_iterations=max_iterations)

        if objective is None:
            raise ConfigurationError("objective", "is required")
        if not 0.0 < probability_smoothing_coefficient < 1.0:
            raise ConfigurationError(
                "probability_smoothing_coefficient", "must be in the open interval (0, 1)")

        self.objective = objective
        self.partition_dimension = int(partition_dimension)
        self.probability_smoothing_coefficient = float(probability_smoothing_coefficient)
        self.smoothing = bool(smoothing)

    def performance(self, state):
        return float(self.objective(state))

    def partial_sample(self, dest, row_range, rng, parameter, sample_size):
        sample_categorical(dest, row_range, rng, parameter)

    def update_parameter(self, parameters, elite_sample):
        return categorical_update(elite_sample, self.partition_dimension)

    def smooth_parameter(self, parameters):
        if not self.smoothing:
            return super().smooth_parameter(parameters)
        return constant_smoothing(parameters, self.probability_smoothing_coefficient)

    def stop_at_intermediate_iteration(self, iteration, levels, parameters):
        window = self.min_iterations + 1
        if len(parameters) - 1 < window:
            return False
        recent = [np.argmax(p, axis=0) for p in parameters[-window:]]
        return all(np.array_equal(parts, recent[-1]) for parts in recent)

    def get_optimal_state(self, parameter):
        return np.argmax(parameter, axis=0).astype(float)
