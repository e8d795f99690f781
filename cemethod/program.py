# The Cross-Entropy iteration loop shared by optimization and estimation

import logging
from dataclasses import dataclass, field

import numpy as np
from tqdm import tqdm

from .config import DEFAULT_SEED, resolve_workers
from .context import ProgramState
from .elite import validate_rarity
from .exceptions import ConfigurationError
from .random_streams import RandomStreamProvider
from .sampler import Sampler

logger = logging.getLogger(__name__)


@dataclass
class CrossEntropyResults:
    """
    Level and parameter histories of a finished run.

    Attributes:
        levels (list): One level per executed iteration
        parameters (list): Initial parameter followed by one parameter per iteration
        state (ProgramState): Terminal state of the run
    """
    levels: list = field(default_factory=list)
    parameters: list = field(default_factory=list)
    state: ProgramState = ProgramState.DONE

    @property
    def iterations(self):
        return len(self.levels)

    @property
    def has_converged(self):
        return self.state is ProgramState.CONVERGED


class CrossEntropyProgram:
    """
    Template of the Cross-Entropy method.

    Iterations are sequential; inside an iteration only sampling runs on
    several workers. Performance evaluation, elite selection, parameter
    estimation and smoothing run on the calling thread.

    Args:
        workers (int or None): Sampling workers, None for config.DEFAULT_WORKERS
        seed (int): Root seed of the sampling streams
        progress (bool): Show a tqdm progress bar over iterations
    """

    def __init__(self, workers=None, seed=DEFAULT_SEED, progress=False):
        self.workers = resolve_workers(workers)
        self.seed = seed
        self.progress = progress
        self.state = ProgramState.DONE
        self._streams = RandomStreamProvider(seed)
        self._sampler = Sampler(self.workers, self._streams)

    def _start_sampler(self):
        # Every run replays the streams of the root seed from the first pass
        self._streams.reset()
        self._sampler.open()

    def _stop_sampler(self):
        self._sampler.close()

    def sample(self, context, sample_size, parameter):
        """
        Draw a sample under parameter with the streams of the current run.

        Returns:
            ndarray: Sample of shape (sample_size, D)
        """
        return self._sampler.sample(context, sample_size, parameter)

    def evaluate_performances(self, context, sample):
        """Score every sample row with the context performance function."""
        return context.evaluate_performances(sample)

    def run(self, context, sample_size, rarity, cancel=None):
        """
        Iterate until the context stops the run.

        The sampling worker pool lives for the whole run and is released
        when the run ends, whatever the outcome.

        Args:
            context (CrossEntropyContext): Problem context
            sample_size (int): Rows drawn per iteration
            rarity (float): Elite fraction in (0, 1)
            cancel (threading.Event or None): Checked between iterations

        Returns:
            CrossEntropyResults: Level and parameter histories
        """
        self._start_sampler()
        try:
            return self._iterate(context, sample_size, rarity, cancel)
        finally:
            self._stop_sampler()

    def _iterate(self, context, sample_size, rarity, cancel):
        # Iteration loop; the caller owns the sampler lifetime
        self.state = ProgramState.INITIALIZING
        if context is None:
            raise ConfigurationError("context", "is required")
        validate_rarity(rarity, sample_size, context.elite_sample_definition)

        parameters = [context.initial_parameter]
        levels = []
        iteration = 1
        trace = logger.info if context.trace_execution else logger.debug

        self.state = ProgramState.ITERATING
        with tqdm(desc="Cross-entropy", unit="iter", disable=not self.progress) as bar:
            while self.state is ProgramState.ITERATING:
                if cancel is not None and cancel.is_set():
                    self.state = ProgramState.CANCELLED
                    break

                # Draw and score the sample of this iteration
                sample = self.sample(context, sample_size, parameters[-1])
                performances = self.evaluate_performances(context, sample)

                # Level and elite sample
                selection = context.update_level(performances, sample, rarity)
                levels.append(selection.level)

                # New parameter, smoothed against its predecessor
                parameter = np.asarray(
                    context.update_parameter(parameters, selection.elite_sample), dtype=float)
                context.check_parameter(parameter)
                parameters.append(parameter)
                smoothed = np.array(context.smooth_parameter(parameters), dtype=float)
                smoothed.flags.writeable = False
                parameters[-1] = smoothed

                context.on_executed_iteration(iteration, sample, levels, parameters)
                outcome = context.termination(iteration, levels, parameters)

                trace("Iteration %d: level %r, elite rows %d", iteration,
                      selection.level, selection.elite_sample.shape[0])
                trace("Parameter:\n%s", smoothed)
                bar.update(1)
                bar.set_postfix(level=f"{selection.level:.6g}")

                if outcome is not None:
                    self.state = outcome
                iteration += 1

        logger.info("Run ended after %d iteration(s): %s", len(levels), self.state.value)
        return CrossEntropyResults(levels=levels, parameters=parameters, state=self.state)
