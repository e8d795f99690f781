# Parallel partial sampling into one shared sample matrix

import logging
from multiprocessing.pool import ThreadPool

import numpy as np

from .config import resolve_workers
from .exceptions import ConfigurationError
from .random_streams import RandomStreamProvider

logger = logging.getLogger(__name__)


def partition_rows(n, chunks):
    """
    Split [0, n) into contiguous half-open ranges of near-equal size.

    Args:
        n (int): Number of rows
        chunks (int): Maximum number of ranges

    Returns:
        list: (start, stop) tuples in row order, sizes differing by at most one
    """
    chunks = max(1, min(int(chunks), int(n)))
    bounds = np.linspace(0, n, chunks + 1).round().astype(int)
    return [(int(bounds[j]), int(bounds[j + 1])) for j in range(chunks)]


def _fill_chunk(args):
    """
    Worker body: one partial_sample call on its own row range and stream.

    Args:
        args (tuple): (context, dest, row_range, rng, parameter, sample_size)
    """
    context, dest, row_range, rng, parameter, sample_size = args
    context.partial_sample(dest, row_range, rng, parameter, sample_size)
    return row_range


class Sampler:
    """
    Draws the sample of one iteration across a fixed pool of workers.

    Chunk boundaries and chunk streams depend only on the chunk index, so
    the sample is reproducible for a given seed and worker count. Between
    open() and close() every pass reuses the same thread pool; outside
    that window a pass builds a temporary one.

    Args:
        workers (int or None): Number of concurrent chunks, None for the default
        streams (RandomStreamProvider or None): Source of chunk streams
    """

    def __init__(self, workers=None, streams=None):
        self.workers = resolve_workers(workers)
        self.streams = streams if streams is not None else RandomStreamProvider()
        self._pool = None

    def open(self):
        """Start the worker pool shared by the following sampling passes."""
        if self._pool is None and self.workers > 1:
            self._pool = ThreadPool(self.workers)
        return self

    def close(self):
        """Wait for the worker pool to finish and release it."""
        if self._pool is not None:
            self._pool.close()
            self._pool.join()
            self._pool = None

    def __enter__(self):
        return self.open()

    def __exit__(self, *exc_info):
        self.close()

    def sample(self, context, sample_size, parameter):
        """
        Draw sample_size states under parameter.

        Args:
            context (CrossEntropyContext): Problem context
            sample_size (int): Number of rows N
            parameter (ndarray): Current sampling parameter

        Returns:
            ndarray: Sample of shape (N, D), column-major
        """
        if sample_size is None or int(sample_size) < 1:
            raise ConfigurationError("sample_size", "must be positive")
        context.check_parameter(parameter)

        sample_size = int(sample_size)
        dest = np.zeros((sample_size, context.state_dimension), order="F")
        ranges = partition_rows(sample_size, self.workers)
        call_index = self.streams.next_call()
        generators = self.streams.streams(call_index, len(ranges))
        tasks = [(context, dest, row_range, rng, parameter, sample_size)
                 for row_range, rng in zip(ranges, generators)]

        # Fan out, then wait for every chunk before scoring
        if len(tasks) == 1:
            _fill_chunk(tasks[0])
        elif self._pool is not None:
            self._pool.map(_fill_chunk, tasks)
        else:
            with ThreadPool(len(tasks)) as pool:
                pool.map(_fill_chunk, tasks)
        logger.debug("Sampling pass %d: %d rows in %d chunk(s)",
                     call_index, sample_size, len(tasks))
        return dest
