# Cross-Entropy estimation of rare-event probabilities

import logging
from abc import abstractmethod
from dataclasses import dataclass

import numpy as np

from .context import (CrossEntropyContext, EliteSampleDefinition,
                      ProgramState, RareEventPerformanceBoundedness)
from .elite import select_rare_event_elite
from .exceptions import ConfigurationError
from .program import CrossEntropyProgram, CrossEntropyResults

logger = logging.getLogger(__name__)

# Hard ceiling of adaptation iterations
MAX_ITERATIONS = 1000


class RareEventProbabilityEstimationContext(CrossEntropyContext):
    """
    Context of a rare-event probability estimation problem.

    The rare event is {threshold <= performance} for LOWER boundedness and
    {performance <= threshold} for UPPER boundedness. The initial parameter
    is the nominal one, under which the probability is estimated.

    Args:
        state_dimension (int): Length D of a state
        initial_parameter (array-like): Nominal sampling parameter
        threshold (float): Level defining the rare event
        boundedness (RareEventPerformanceBoundedness): Side of the event
        max_iterations (int): Hard ceiling of adaptation iterations
    """

    def __init__(self, state_dimension, initial_parameter, threshold, boundedness,
                 max_iterations=MAX_ITERATIONS):
        super().__init__(state_dimension, initial_parameter)
        if not isinstance(boundedness, RareEventPerformanceBoundedness):
            raise ConfigurationError(
                "boundedness", f"{boundedness!r} is not a RareEventPerformanceBoundedness")
        if max_iterations < 1:
            raise ConfigurationError("max_iterations", "must be positive")

        self.threshold = float(threshold)
        self.boundedness = boundedness
        self.max_iterations = int(max_iterations)

    @property
    def elite_sample_definition(self):
        if self.boundedness is RareEventPerformanceBoundedness.UPPER:
            return EliteSampleDefinition.LOWER_THAN_LEVEL
        return EliteSampleDefinition.HIGHER_THAN_LEVEL

    def in_rare_event(self, performances):
        """
        Membership of performances in the rare event.

        Returns:
            ndarray: Boolean mask
        """
        if self.elite_sample_definition is EliteSampleDefinition.LOWER_THAN_LEVEL:
            return performances <= self.threshold
        return performances >= self.threshold

    def update_level(self, performances, sample, rarity):
        return select_rare_event_elite(
            performances, sample, self.elite_sample_definition, rarity, self.threshold,
            tie_break=self.tie_break, trace=self.trace_execution)

    def termination(self, iteration, levels, parameters):
        last = levels[-1]
        if self.elite_sample_definition is EliteSampleDefinition.HIGHER_THAN_LEVEL:
            reached = last >= self.threshold
        else:
            reached = last <= self.threshold
        if reached:
            return ProgramState.CONVERGED
        if iteration >= self.max_iterations:
            return ProgramState.MAX_ITERATIONS_REACHED
        return None

    @abstractmethod
    def likelihood_ratio(self, x, nominal, reference):
        """
        Ratio of the nominal to the reference density.

        Args:
            x (ndarray): One state or a sample (n, D)
            nominal (ndarray): Nominal parameter
            reference (ndarray): Reference parameter

        Returns:
            ndarray: One ratio per row of x
        """


@dataclass
class RareEventProbabilityEstimationResults(CrossEntropyResults):
    """
    Outcome of a rare-event probability estimation.

    Attributes:
        rare_event_probability (float): Likelihood-ratio weighted estimate
        standard_error (float): Sample standard error of the estimate
        estimation_sample_size (int): Rows of the final estimation sample
    """
    rare_event_probability: float = float("nan")
    standard_error: float = float("nan")
    estimation_sample_size: int = 0


class RareEventProbabilityEstimator(CrossEntropyProgram):
    """Estimates the probability of the rare event of a context."""

    def estimate(self, context, rarity, sample_size, estimation_sample_size, cancel=None):
        """
        Adapt the sampling parameter, then estimate the probability.

        The final parameter is used to draw estimation_sample_size states;
        the estimate is the average over them of the rare-event indicator
        times the likelihood ratio of the nominal to the final parameter.

        Args:
            context (RareEventProbabilityEstimationContext): Problem context
            rarity (float): Elite fraction in (0, 1)
            sample_size (int): Rows drawn per adaptation iteration
            estimation_sample_size (int): Rows of the final estimation sample
            cancel (threading.Event or None): Checked between iterations

        Returns:
            RareEventProbabilityEstimationResults: Histories and estimate
        """
        if estimation_sample_size is None or int(estimation_sample_size) < 1:
            raise ConfigurationError("estimation_sample_size", "must be positive")
        estimation_sample_size = int(estimation_sample_size)

        # Adaptation and the final pass share one sampling pool
        self._start_sampler()
        try:
            base = self._iterate(context, sample_size, rarity, cancel)
            reference = base.parameters[-1]
            final_sample = self.sample(context, estimation_sample_size, reference)
        finally:
            self._stop_sampler()
        nominal = context.initial_parameter

        performances = self.evaluate_performances(context, final_sample)
        indicators = context.in_rare_event(performances)

        weighted = np.zeros(estimation_sample_size)
        if indicators.any():
            weighted[indicators] = np.ravel(
                context.likelihood_ratio(final_sample[indicators], nominal, reference))
        probability = float(weighted.sum() / estimation_sample_size)
        if estimation_sample_size > 1:
            standard_error = float(weighted.std(ddof=1) / np.sqrt(estimation_sample_size))
        else:
            standard_error = float("nan")

        logger.info("Rare event probability %.6e (standard error %.2e, %d rows in event)",
                    probability, standard_error, int(indicators.sum()))
        self.state = ProgramState.DONE
        return RareEventProbabilityEstimationResults(
            levels=base.levels,
            parameters=base.parameters,
            state=base.state,
            rare_event_probability=probability,
            standard_error=standard_error,
            estimation_sample_size=estimation_sample_size)
