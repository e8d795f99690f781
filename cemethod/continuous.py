# One-call minimization and maximization of real functions

from .context import OptimizationGoal
from .contexts.continuous import ContinuousOptimizationContext
from .optimization import SystemPerformanceOptimizer

# Defaults of the one-call optimizers
MEAN_SMOOTHING = 0.8
STD_SMOOTHING = 0.7
STD_SMOOTHING_EXPONENT = 6
INITIAL_STD = 100.0
TERMINATION_TOLERANCE = 1.0e-3
MIN_ITERATIONS = 3
MAX_ITERATIONS = 1000
SAMPLES_PER_ARGUMENT = 100
RARITY = 0.01


def _optimize(objective, initial_argument, goal, rarity, sample_size,
              workers, seed, **settings):
    context = ContinuousOptimizationContext(
        objective=objective,
        initial_argument=initial_argument,
        mean_smoothing_coefficient=settings.get("mean_smoothing_coefficient", MEAN_SMOOTHING),
        std_smoothing_coefficient=settings.get("std_smoothing_coefficient", STD_SMOOTHING),
        std_smoothing_exponent=settings.get("std_smoothing_exponent", STD_SMOOTHING_EXPONENT),
        initial_standard_deviation=settings.get("initial_standard_deviation", INITIAL_STD),
        termination_tolerance=settings.get("termination_tolerance", TERMINATION_TOLERANCE),
        optimization_goal=goal,
        min_iterations=settings.get("min_iterations", MIN_ITERATIONS),
        max_iterations=settings.get("max_iterations", MAX_ITERATIONS),
        smoothing=settings.get("smoothing", True))
    if sample_size is None:
        sample_size = SAMPLES_PER_ARGUMENT * context.state_dimension

    optimizer_options = {"workers": workers}
    if seed is not None:
        optimizer_options["seed"] = seed
    optimizer = SystemPerformanceOptimizer(**optimizer_options)
    results = optimizer.optimize(context, rarity=rarity, sample_size=sample_size)
    return results.optimal_state


def minimize(objective, initial_argument, rarity=RARITY, sample_size=None,
             workers=None, seed=None, **settings):
    """
    Minimize a real function of several variables by the Cross-Entropy method.

    Args:
        objective (callable): Function of a 1-D array returning a float
        initial_argument (array-like): Starting point (initial Gaussian means)
        rarity (float): Elite fraction
        sample_size (int or None): Rows per iteration, 100 per variable by default
        workers (int or None): Sampling workers, config.DEFAULT_WORKERS when None
        seed (int or None): Root seed of the sampling streams; the sample
            depends on the seed and on the worker count, so pass both to
            reproduce a result on another machine
        **settings: Overrides of the ContinuousOptimizationContext arguments

    Returns:
        ndarray: Estimated minimizer
    """
    return _optimize(objective, initial_argument, OptimizationGoal.MINIMIZATION,
                     rarity, sample_size, workers, seed, **settings)


def maximize(objective, initial_argument, rarity=RARITY, sample_size=None,
             workers=None, seed=None, **settings):
    """
    Maximize a real function of several variables by the Cross-Entropy method.

    Takes the same arguments as minimize().

    Returns:
        ndarray: Estimated maximizer
    """
    return _optimize(objective, initial_argument, OptimizationGoal.MAXIMIZATION,
                     rarity, sample_size, workers, seed, **settings)
