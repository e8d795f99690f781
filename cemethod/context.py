# Problem contexts: the pluggable strategy driven by CrossEntropyProgram

import enum
import logging
from abc import ABC, abstractmethod

import numpy as np

from .exceptions import ConfigurationError, EvaluationError

logger = logging.getLogger(__name__)


class EliteSampleDefinition(enum.Enum):
    """Which tail of the performance distribution forms the elite sample."""
    HIGHER_THAN_LEVEL = "higher"
    LOWER_THAN_LEVEL = "lower"


class OptimizationGoal(enum.Enum):
    MINIMIZATION = "minimization"
    MAXIMIZATION = "maximization"


class RareEventPerformanceBoundedness(enum.Enum):
    """
    Side of the threshold the rare event lives on.

    LOWER: the event {threshold <= performance}, i.e. performances bounded below.
    UPPER: the event {performance <= threshold}, i.e. performances bounded above.
    """
    LOWER = "lower"
    UPPER = "upper"


class TieBreak(enum.Enum):
    """
    Treatment of sample rows tied with the level.

    POSITIONAL: the elite is the fixed block of sorted positions.
    INCLUSIVE: every row whose performance equals the level is also elite.
    """
    POSITIONAL = "positional"
    INCLUSIVE = "inclusive"


class ProgramState(enum.Enum):
    INITIALIZING = "initializing"
    ITERATING = "iterating"
    CONVERGED = "converged"
    MAX_ITERATIONS_REACHED = "max_iterations_reached"
    CANCELLED = "cancelled"
    DONE = "done"


class CrossEntropyContext(ABC):
    """
    Strategy object defining one Cross-Entropy problem.

    A context knows the state dimension, how to score a state, how to
    sample states given a parameter, how to select the elite and
    re-estimate the parameter, and when to stop. Parameter histories are
    plain lists: index 0 holds the initial parameter, index -1 the most
    recent one.

    Args:
        state_dimension (int): Length D of a state
        initial_parameter (array-like): First sampling parameter
    """

    def __init__(self, state_dimension, initial_parameter):
        if state_dimension is None or int(state_dimension) < 1:
            raise ConfigurationError("state_dimension", "must be positive")
        if initial_parameter is None:
            raise ConfigurationError("initial_parameter", "is required")
        parameter = np.array(initial_parameter, dtype=float, ndmin=2)
        parameter.flags.writeable = False

        self.state_dimension = int(state_dimension)
        self.initial_parameter = parameter
        self.trace_execution = False
        self.tie_break = TieBreak.POSITIONAL

    @property
    @abstractmethod
    def elite_sample_definition(self):
        """EliteSampleDefinition used by this context."""

    @abstractmethod
    def performance(self, state):
        """
        Score one state.

        Args:
            state (ndarray): State of length D, must not be modified

        Returns:
            float: Performance of the state
        """

    def evaluate_performances(self, sample):
        """
        Score every row of a sample, sequentially and in row order.

        Args:
            sample (ndarray): Sample of shape (N, D)

        Returns:
            ndarray: Performances of length N
        """
        if sample.shape[1] != self.state_dimension:
            raise ConfigurationError(
                "sample", f"has {sample.shape[1]} columns, expected {self.state_dimension}")
        performances = np.empty(sample.shape[0])
        for i in range(sample.shape[0]):
            state = sample[i].copy()
            state.flags.writeable = False
            try:
                performances[i] = self.performance(state)
            except Exception as error:
                raise EvaluationError(i, repr(error)) from error
        return performances

    @abstractmethod
    def partial_sample(self, dest, row_range, rng, parameter, sample_size):
        """
        Fill rows [start, stop) of dest with draws under parameter.

        Must only write inside row_range: several workers fill disjoint
        ranges of the same destination concurrently.

        Args:
            dest (ndarray): Destination sample of shape (sample_size, D)
            row_range (tuple): Half-open (start, stop) row range
            rng (numpy.random.Generator): Stream owned by this call
            parameter (ndarray): Current sampling parameter
            sample_size (int): Total number of rows of dest
        """

    @abstractmethod
    def update_level(self, performances, sample, rarity):
        """
        Compute the iteration level and its elite sample.

        Returns:
            EliteSelection: Level, elite rows and their performances
        """

    @abstractmethod
    def update_parameter(self, parameters, elite_sample):
        """
        Re-estimate the sampling parameter from the elite sample.

        Args:
            parameters (list): Parameter history, initial parameter first
            elite_sample (ndarray): Elite rows, shape (m, D)

        Returns:
            ndarray: New parameter, same shape as the initial one
        """

    def smooth_parameter(self, parameters):
        """
        Blend the newest parameter with its predecessor.

        Args:
            parameters (list): Parameter history, newest last

        Returns:
            ndarray: Parameter replacing parameters[-1] (unchanged by default)
        """
        return parameters[-1]

    def on_executed_iteration(self, iteration, sample, levels, parameters):
        """Hook invoked after each smoothed parameter has been recorded."""

    @abstractmethod
    def termination(self, iteration, levels, parameters):
        """
        Decide whether the run ends after this iteration.

        Returns:
            ProgramState or None: CONVERGED or MAX_ITERATIONS_REACHED to
            stop, None to keep iterating
        """

    def check_parameter(self, parameter):
        """Reject parameters whose shape differs from the initial one."""
        if np.shape(parameter) != self.initial_parameter.shape:
            raise ConfigurationError(
                "parameter",
                f"has shape {np.shape(parameter)}, expected {self.initial_parameter.shape}")
