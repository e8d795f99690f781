# Cross-Entropy optimization of system performance

import logging
from abc import abstractmethod
from dataclasses import dataclass

import numpy as np

from .context import (CrossEntropyContext, EliteSampleDefinition,
                      OptimizationGoal, ProgramState)
from .elite import select_elite
from .exceptions import ConfigurationError
from .program import CrossEntropyProgram, CrossEntropyResults

logger = logging.getLogger(__name__)


class SystemPerformanceOptimizationContext(CrossEntropyContext):
    """
    Context of a Cross-Entropy optimization problem.

    Minimization selects the lower tail of the performances, maximization
    the upper one. The run stops at max_iterations, or as soon as
    iteration >= min_iterations and stop_at_intermediate_iteration holds.

    Args:
        state_dimension (int): Length D of a state
        initial_parameter (array-like): First sampling parameter
        optimization_goal (OptimizationGoal): Direction of the optimization
        min_iterations (int): Iterations always executed
        max_iterations (int): Hard iteration ceiling
    """

    def __init__(self, state_dimension, initial_parameter, optimization_goal,
                 min_iterations, max_iterations):
        super().__init__(state_dimension, initial_parameter)
        if not isinstance(optimization_goal, OptimizationGoal):
            raise ConfigurationError(
                "optimization_goal", f"{optimization_goal!r} is not an OptimizationGoal")
        if min_iterations < 1:
            raise ConfigurationError("min_iterations", "must be positive")
        if max_iterations < 1:
            raise ConfigurationError("max_iterations", "must be positive")
        if max_iterations < min_iterations:
            raise ConfigurationError(
                "max_iterations", "must be greater than or equal to min_iterations")

        self.optimization_goal = optimization_goal
        self.min_iterations = int(min_iterations)
        self.max_iterations = int(max_iterations)

    @property
    def elite_sample_definition(self):
        if self.optimization_goal is OptimizationGoal.MINIMIZATION:
            return EliteSampleDefinition.LOWER_THAN_LEVEL
        return EliteSampleDefinition.HIGHER_THAN_LEVEL

    def update_level(self, performances, sample, rarity):
        return select_elite(
            performances, sample, self.elite_sample_definition, rarity,
            tie_break=self.tie_break, trace=self.trace_execution)

    def termination(self, iteration, levels, parameters):
        if iteration >= self.max_iterations:
            return ProgramState.MAX_ITERATIONS_REACHED
        if iteration >= self.min_iterations and self.stop_at_intermediate_iteration(
                iteration, levels, parameters):
            return ProgramState.CONVERGED
        return None

    def stop_at_intermediate_iteration(self, iteration, levels, parameters):
        """
        Stop once the level has not moved for min_iterations iterations.

        Args:
            iteration (int): Current iteration, starting at 1
            levels (list): Level history
            parameters (list): Parameter history

        Returns:
            bool: True to stop
        """
        window = self.min_iterations + 1
        if len(levels) < window:
            return False
        last = levels[-1]
        return all(level == last for level in levels[-window:-1])

    @abstractmethod
    def get_optimal_state(self, parameter):
        """
        Project a parameter on the state it points to.

        Returns:
            ndarray: State of length D
        """


@dataclass
class SystemPerformanceOptimizationResults(CrossEntropyResults):
    """
    Outcome of a Cross-Entropy optimization.

    Attributes:
        optimal_state (ndarray): State projected from the final parameter
        optimal_performance (float): Performance of optimal_state
    """
    optimal_state: np.ndarray = None
    optimal_performance: float = float("nan")


class SystemPerformanceOptimizer(CrossEntropyProgram):
    """Finds the optimal state of a SystemPerformanceOptimizationContext."""

    def optimize(self, context, rarity, sample_size, cancel=None):
        """
        Run the Cross-Entropy optimization.

        Args:
            context (SystemPerformanceOptimizationContext): Problem context
            rarity (float): Elite fraction in (0, 1)
            sample_size (int): Rows drawn per iteration
            cancel (threading.Event or None): Checked between iterations

        Returns:
            SystemPerformanceOptimizationResults: Histories and optimum
        """
        base = self.run(context, sample_size, rarity, cancel=cancel)
        optimal_state = np.asarray(context.get_optimal_state(base.parameters[-1]), dtype=float)
        optimal_performance = float(context.performance(optimal_state))
        logger.info("Optimal performance %r at %s", optimal_performance, optimal_state)

        self.state = ProgramState.DONE
        return SystemPerformanceOptimizationResults(
            levels=base.levels,
            parameters=base.parameters,
            state=base.state,
            optimal_state=optimal_state,
            optimal_performance=optimal_performance)
