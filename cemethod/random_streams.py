# Independent pseudo-random streams for the sampling workers

import numpy as np

from .config import DEFAULT_SEED


class RandomStreamProvider:
    """
    Deterministic source of independent generator substreams.

    Each sampling pass draws a fresh call index; the stream for a chunk is
    keyed by (call index, chunk index), never by the thread that runs it.

    Args:
        seed (int): Root entropy shared by all streams
    """

    def __init__(self, seed=DEFAULT_SEED):
        self.seed = int(seed)
        self.calls = 0

    def next_call(self):
        """
        Reserve the index of the next sampling pass.

        Returns:
            int: Call index to pass to streams()
        """
        call_index = self.calls
        self.calls += 1
        return call_index

    def stream(self, call_index, chunk_index):
        """
        Build the generator owned by one chunk of one sampling pass.

        Args:
            call_index (int): Sampling pass index
            chunk_index (int): Position of the chunk inside the pass

        Returns:
            numpy.random.Generator: Private PCG64 generator
        """
        sequence = np.random.SeedSequence(
            self.seed, spawn_key=(call_index, chunk_index))
        return np.random.Generator(np.random.PCG64(sequence))

    def streams(self, call_index, count):
        """
        Build one generator per chunk, in chunk order.

        Args:
            call_index (int): Sampling pass index
            count (int): Number of chunks

        Returns:
            list: Generators indexed by chunk
        """
        return [self.stream(call_index, j) for j in range(count)]

    def reset(self):
        """Restart the call counter so that a new run replays the same streams."""
        self.calls = 0
