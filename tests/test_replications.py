import pytest

from cemethod import rrmse, run_replications


def test_rrmse():
    assert rrmse([0.9, 1.1], 1.0) == pytest.approx(0.1)
    assert rrmse([2.0, 2.0], 2.0) == 0.0


def _square(seed):
    return seed * seed


def test_run_replications_in_process_keeps_order():
    assert run_replications(_square, [3, 1, 2], processes=1) == [9, 1, 4]


def test_run_replications_pool_keeps_order():
    assert run_replications(_square, [4, 2, 5], processes=2) == [16, 4, 25]
