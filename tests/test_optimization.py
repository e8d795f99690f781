import numpy as np
import pytest

from cemethod import (CombinationOptimizationContext, ConfigurationError,
                      ContinuousOptimizationContext, OptimizationGoal, PartitionOptimizationContext,
                      ProgramState, SystemPerformanceOptimizer, TieBreak)
from cemethod.contexts.combination import largest_positions
from conftest import FlatContext, rosenbrock, two_bumps


def test_rosenbrock_minimum():
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
    results = SystemPerformanceOptimizer(workers=2, seed=7777777).optimize(
        context, rarity=0.1, sample_size=1000)
    assert results.has_converged
    np.testing.assert_allclose(results.optimal_state, [1.0, 1.0], atol=0.1)
    assert results.optimal_performance < 0.05


def test_two_bumps_global_maximum():
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
        max_iterations=10000)
    results = SystemPerformanceOptimizer(workers=2).optimize(
        context, rarity=0.1, sample_size=1000)
    assert results.optimal_state[0] == pytest.approx(2.0, abs=1e-2)
    assert results.optimal_performance == pytest.approx(1.0 + 0.8 * np.exp(-16.0), abs=1e-3)


def test_minimization_levels_do_not_explode():
    context = ContinuousOptimizationContext(
        objective=lambda x: float(np.sum(np.asarray(x) ** 2)),
        initial_argument=[5.0, -5.0],
        mean_smoothing_coefficient=0.8,
        std_smoothing_coefficient=0.7,
        std_smoothing_exponent=6,
        initial_standard_deviation=10.0,
        termination_tolerance=1e-3,
        optimization_goal=OptimizationGoal.MINIMIZATION,
        min_iterations=3,
        max_iterations=500)
    results = SystemPerformanceOptimizer(workers=1, seed=3).optimize(context, 0.1, 300)
    assert results.levels[-1] < results.levels[0]
    assert results.levels[-1] < 1e-3


def test_combination_picks_heaviest_items():
    weights = np.arange(1.0, 8.0)
    context = CombinationOptimizationContext(
        objective=lambda x: float(weights @ x),
        state_dimension=7,
        combination_dimension=2,
        probability_smoothing_coefficient=0.7,
        optimization_goal=OptimizationGoal.MAXIMIZATION,
        min_iterations=3,
        max_iterations=200)
    results = SystemPerformanceOptimizer(workers=2, seed=11).optimize(context, 0.1, 200)
    np.testing.assert_array_equal(results.optimal_state, [0, 0, 0, 0, 0, 1, 1])
    assert results.optimal_performance == 13.0
    assert results.state is ProgramState.CONVERGED


def test_partition_recovers_target():
    target = np.array([0, 0, 0, 1, 1, 1])
    context = PartitionOptimizationContext(
        objective=lambda x: float(np.sum(np.asarray(x) == target)),
        state_dimension=6,
        partition_dimension=2,
        probability_smoothing_coefficient=0.7,
        optimization_goal=OptimizationGoal.MAXIMIZATION,
        min_iterations=3,
        max_iterations=200)
    context.tie_break = TieBreak.INCLUSIVE
    results = SystemPerformanceOptimizer(workers=2, seed=5).optimize(context, 0.1, 300)
    np.testing.assert_array_equal(results.optimal_state, target)
    assert results.optimal_performance == 6.0


def test_largest_positions_is_stable():
    assert largest_positions([0.1, 0.9, 0.5, 0.9], 2) == frozenset({1, 3})
    assert largest_positions(np.array([[0.3, 0.2, 0.1]]), 1) == frozenset({0})


def test_default_stop_needs_min_plus_one_equal_levels():
    context = FlatContext(min_iterations=2, max_iterations=10)
    assert not context.stop_at_intermediate_iteration(2, [1.0, 1.0], [])
    assert context.stop_at_intermediate_iteration(3, [1.0, 1.0, 1.0], [])
    assert not context.stop_at_intermediate_iteration(3, [2.0, 1.0, 1.0], [])
    assert context.termination(10, [0.0, 1.0], []) is ProgramState.MAX_ITERATIONS_REACHED
    assert context.termination(1, [1.0], []) is None


def test_iteration_bounds_are_validated():
    with pytest.raises(ConfigurationError) as info:
        FlatContext(min_iterations=5, max_iterations=4)
    assert info.value.parameter == "max_iterations"
    with pytest.raises(ConfigurationError):
        FlatContext(min_iterations=0)


@pytest.mark.parametrize("name, value", [
    ("mean_smoothing_coefficient", 1.0),
    ("std_smoothing_coefficient", 0.0),
    ("std_smoothing_exponent", 0),
    ("initial_standard_deviation", -1.0),
    ("termination_tolerance", 0.0),
])
def test_continuous_context_validation(name, value):
    arguments = dict(
        objective=rosenbrock, initial_argument=[0.0, 0.0], mean_smoothing_coefficient=0.8,
        std_smoothing_coefficient=0.7, std_smoothing_exponent=6,
        initial_standard_deviation=100.0, termination_tolerance=1e-3,
        optimization_goal=OptimizationGoal.MINIMIZATION, min_iterations=3, max_iterations=10)
    arguments[name] = value
    with pytest.raises(ConfigurationError) as info:
        ContinuousOptimizationContext(**arguments)
    assert info.value.parameter == name


def test_discrete_context_validation():
    with pytest.raises(ConfigurationError):
        CombinationOptimizationContext(
            sum, 4, 4, 0.5, OptimizationGoal.MAXIMIZATION, 3, 10)
    with pytest.raises(ConfigurationError):
        PartitionOptimizationContext(
            sum, 4, 1, 0.5, OptimizationGoal.MAXIMIZATION, 3, 10)
    with pytest.raises(ConfigurationError):
        PartitionOptimizationContext(
            sum, 4, 2, 1.5, OptimizationGoal.MAXIMIZATION, 3, 10)


class RecordingContinuousContext(ContinuousOptimizationContext):
    # Keeps every raw elite estimate before smoothing
    def __init__(self, **arguments):
        super().__init__(**arguments)
        self.estimates = []

    def update_parameter(self, parameters, elite_sample):
        estimate = super().update_parameter(parameters, elite_sample)
        self.estimates.append(estimate)
        return estimate


def _recording_context(smoothing):
    return RecordingContinuousContext(
        objective=rosenbrock, initial_argument=[-1.0, -1.0], mean_smoothing_coefficient=0.7,
        std_smoothing_coefficient=0.9, std_smoothing_exponent=6,
        initial_standard_deviation=100.0, termination_tolerance=1e-12,
        optimization_goal=OptimizationGoal.MINIMIZATION, min_iterations=3, max_iterations=5,
        smoothing=smoothing)


def test_unsmoothed_run_records_raw_estimates():
    context = _recording_context(smoothing=False)
    results = SystemPerformanceOptimizer(workers=2, seed=4).optimize(context, 0.1, 200)
    assert len(context.estimates) == results.iterations == 5
    for recorded, estimate in zip(results.parameters[1:], context.estimates):
        np.testing.assert_array_equal(recorded, estimate)


def test_smoothed_run_blends_estimates():
    context = _recording_context(smoothing=True)
    results = SystemPerformanceOptimizer(workers=2, seed=4).optimize(context, 0.1, 200)
    expected = 0.7 * context.estimates[0][0] + 0.3 * context.initial_parameter[0]
    np.testing.assert_allclose(results.parameters[1][0], expected)


@pytest.mark.parametrize("context_type, arguments", [
    (CombinationOptimizationContext, dict(combination_dimension=2)),
    (PartitionOptimizationContext, dict(partition_dimension=2)),
])
def test_discrete_contexts_can_disable_smoothing(context_type, arguments):
    context = context_type(
        objective=sum, state_dimension=5, probability_smoothing_coefficient=0.7,
        optimization_goal=OptimizationGoal.MAXIMIZATION, min_iterations=3, max_iterations=10,
        smoothing=False, **arguments)
    raw = np.full_like(context.initial_parameter, 0.2)
    assert context.smooth_parameter([context.initial_parameter, raw]) is raw
