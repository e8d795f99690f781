import threading
from multiprocessing.pool import ThreadPool

import numpy as np
import pytest

from cemethod import ConfigurationError, CrossEntropyProgram
from cemethod.random_streams import RandomStreamProvider
from cemethod.sampler import Sampler, partition_rows


def test_partition_rows_covers_range():
    assert partition_rows(10, 3) == [(0, 3), (3, 7), (7, 10)]
    assert partition_rows(2, 8) == [(0, 1), (1, 2)]
    assert partition_rows(5, 1) == [(0, 5)]


def test_partition_rows_balanced():
    ranges = partition_rows(1001, 7)
    sizes = [stop - start for start, stop in ranges]
    assert sum(sizes) == 1001
    assert max(sizes) - min(sizes) <= 1
    assert all(ranges[j][1] == ranges[j + 1][0] for j in range(len(ranges) - 1))


class RecordingContext:
    # Minimal stand-in recording every partial_sample call
    state_dimension = 2
    initial_parameter = np.zeros((1, 2))

    def __init__(self):
        self.ranges = []
        self.lock = threading.Lock()

    def check_parameter(self, parameter):
        pass

    def partial_sample(self, dest, row_range, rng, parameter, sample_size):
        with self.lock:
            self.ranges.append(row_range)
        start, stop = row_range
        dest[start:stop, :] = rng.random((stop - start, 2))


def test_every_chunk_sampled_once():
    context = RecordingContext()
    sampler = Sampler(workers=4, streams=RandomStreamProvider(3))
    sample = sampler.sample(context, 103, context.initial_parameter)
    assert sorted(context.ranges) == partition_rows(103, 4)
    assert sample.shape == (103, 2)
    assert np.all(sample > 0.0)


def test_sample_reproducible_for_seed_and_workers():
    first = Sampler(workers=4, streams=RandomStreamProvider(11))
    second = Sampler(workers=4, streams=RandomStreamProvider(11))
    context = RecordingContext()
    a = first.sample(context, 50, context.initial_parameter)
    b = second.sample(context, 50, context.initial_parameter)
    np.testing.assert_array_equal(a, b)


def test_successive_passes_use_fresh_streams():
    sampler = Sampler(workers=2, streams=RandomStreamProvider(11))
    context = RecordingContext()
    a = sampler.sample(context, 20, context.initial_parameter)
    b = sampler.sample(context, 20, context.initial_parameter)
    assert not np.array_equal(a, b)


def test_sample_size_must_be_positive():
    sampler = Sampler(workers=1)
    context = RecordingContext()
    with pytest.raises(ConfigurationError):
        sampler.sample(context, 0, context.initial_parameter)


class CountingPool(ThreadPool):
    created = []

    def __init__(self, processes=None):
        super().__init__(processes)
        CountingPool.created.append(processes)


@pytest.fixture
def counting_pool(monkeypatch):
    CountingPool.created = []
    monkeypatch.setattr("cemethod.sampler.ThreadPool", CountingPool)
    return CountingPool


def test_open_sampler_reuses_one_pool(counting_pool):
    context = RecordingContext()
    with Sampler(workers=3, streams=RandomStreamProvider(1)) as sampler:
        for _ in range(4):
            sampler.sample(context, 30, context.initial_parameter)
    assert counting_pool.created == [3]
    assert sampler._pool is None


def test_program_run_builds_one_pool(counting_pool, flat_context):
    results = CrossEntropyProgram(workers=2).run(flat_context, 50, 0.1)
    assert results.iterations == 3
    assert counting_pool.created == [2]
