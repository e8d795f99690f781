import numpy as np
import pytest

from cemethod import OptimizationGoal, SystemPerformanceOptimizationContext
from cemethod.distributions import sample_gaussian
from cemethod.estimation import gaussian_update


def rosenbrock(x):
    return 100.0 * (x[1] - x[0] ** 2) ** 2 + (1.0 - x[0]) ** 2


def two_bumps(x):
    return np.exp(-(x[0] - 2.0) ** 2) + 0.8 * np.exp(-(x[0] + 2.0) ** 2)


def shortest_path(x):
    return min(x[0] + x[3], x[0] + x[2] + x[4], x[1] + x[4], x[1] + x[2] + x[3])


class FlatContext(SystemPerformanceOptimizationContext):
    """Gaussian context over a constant objective: every level is equal."""

    def __init__(self, min_iterations=2, max_iterations=50):
        super().__init__(
            state_dimension=2,
            initial_parameter=[[0.0, 0.0], [1.0, 1.0]],
            optimization_goal=OptimizationGoal.MAXIMIZATION,
            min_iterations=min_iterations,
            max_iterations=max_iterations)

    def performance(self, state):
        return 1.0

    def partial_sample(self, dest, row_range, rng, parameter, sample_size):
        sample_gaussian(dest, row_range, rng, parameter)

    def update_parameter(self, parameters, elite_sample):
        return gaussian_update(elite_sample)

    def get_optimal_state(self, parameter):
        return parameter[0]


@pytest.fixture
def rng():
    return np.random.default_rng(12345)


@pytest.fixture
def flat_context():
    return FlatContext()
