# Continuous optimization of two classical test functions

import numpy as np

from cemethod import (ContinuousOptimizationContext, OptimizationGoal,
                      SystemPerformanceOptimizer, configure_logging)


def rosenbrock(x):
    """Rosenbrock function, minimum 0 at (1, 1)."""
    return 100.0 * (x[1] - x[0] ** 2) ** 2 + (1.0 - x[0]) ** 2


def two_bumps(x):
    """Bimodal function, global maximum near 2 and local maximum near -2."""
    return np.exp(-(x[0] - 2.0) ** 2) + 0.8 * np.exp(-(x[0] + 2.0) ** 2)


if __name__ == "__main__":
    configure_logging()
    optimizer = SystemPerformanceOptimizer(progress=True)

    # Minimization
    context = ContinuousOptimizationContext(
        objective=rosenbrock,
        initial_argument=[-1.0, -1.0],
        mean_smoothing_coefficient=0.7,
        std_smoothing_coefficient=0.9,
        std_smoothing_exponent=6,
        initial_standard_deviation=100.0,
        termination_tolerance=0.05,
        optimization_goal=OptimizationGoal.MINIMIZATION,
        min_iterations=3,
        max_iterations=10000)
    results = optimizer.optimize(context, rarity=0.1, sample_size=1000)
    print(f"Rosenbrock: state={results.optimal_state}, "
          f"performance={results.optimal_performance:.3e}, "
          f"iterations={results.iterations}, converged={results.has_converged}")

    # Maximization
    context = ContinuousOptimizationContext(
        objective=two_bumps,
        initial_argument=[-6.0],
        mean_smoothing_coefficient=0.7,
        std_smoothing_coefficient=0.9,
        std_smoothing_exponent=6,
        initial_standard_deviation=100.0,
        termination_tolerance=1e-3,
        optimization_goal=OptimizationGoal.MAXIMIZATION,
        min_iterations=3,
        max_iterations=1000)
    results = optimizer.optimize(context, rarity=0.1, sample_size=1000)
    print(f"Two bumps: state={results.optimal_state}, "
          f"performance={results.optimal_performance:.6f}, "
          f"iterations={results.iterations}, converged={results.has_converged}")
