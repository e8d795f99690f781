import numpy as np
import pytest

from cemethod import ConfigurationError, DegenerateStatisticsError
from cemethod.distributions import exponential_likelihood_ratio
from cemethod.estimation import (PROBABILITY_FLOOR, bernoulli_update, categorical_update,
                                 column_means, column_standard_deviations, gaussian_update,
                                 likelihood_ratio_update)


def test_gaussian_update_uses_biased_std():
    elite = np.array([[1.0, 10.0], [3.0, 10.0]])
    np.testing.assert_allclose(gaussian_update(elite), [[2.0, 10.0], [1.0, 0.0]])


def test_bias_adjusted_std_needs_two_rows():
    single = np.array([[1.0, 2.0]])
    np.testing.assert_array_equal(column_standard_deviations(single), [0.0, 0.0])
    with pytest.raises(DegenerateStatisticsError):
        column_standard_deviations(single, adjust_for_bias=True)
    np.testing.assert_allclose(
        column_standard_deviations(np.array([[0.0], [2.0]]), adjust_for_bias=True),
        [np.sqrt(2.0)])


def test_empty_data_is_degenerate():
    with pytest.raises(DegenerateStatisticsError):
        column_means(np.empty((0, 3)))


def test_bernoulli_update_stays_inside_unit_interval():
    elite = np.array([[1.0, 0.0, 1.0], [1.0, 0.0, 0.0]])
    updated = bernoulli_update(elite)
    assert updated.shape == (1, 3)
    np.testing.assert_allclose(updated[0], [1.0 - PROBABILITY_FLOOR, PROBABILITY_FLOOR, 0.5])


def test_categorical_update_columns_sum_to_one():
    elite = np.array([[0.0, 2.0], [1.0, 2.0], [1.0, 0.0], [1.0, 2.0]])
    updated = categorical_update(elite, 3)
    np.testing.assert_allclose(updated[:, 0], [0.25, 0.75, 0.0])
    np.testing.assert_allclose(updated[:, 1], [0.25, 0.0, 0.75])
    np.testing.assert_allclose(updated.sum(axis=0), [1.0, 1.0])


def test_likelihood_ratio_update_with_unit_weights_is_the_mean():
    elite = np.array([[1.0, 2.0], [3.0, 6.0]])
    nominal = np.array([[1.0, 1.0]])
    updated = likelihood_ratio_update(
        [nominal], elite, lambda x, u, v: exponential_likelihood_ratio(x, u[0], v[0]))
    np.testing.assert_allclose(updated, [[2.0, 4.0]])


def test_likelihood_ratio_update_weights_rows():
    elite = np.array([[0.0], [3.0]])
    weights = {0.0: 3.0, 3.0: 1.0}

    def ratio(x, nominal, reference):
        return np.array([weights[row[0]] for row in x])

    updated = likelihood_ratio_update([None, None], elite, ratio, statistics="mean_std")
    np.testing.assert_allclose(updated[0], [0.75])
    np.testing.assert_allclose(updated[1], [np.sqrt(0.75 * 0.75 ** 2 + 0.25 * 2.25 ** 2)])


def test_likelihood_ratio_update_rejects_vanishing_weights():
    elite = np.array([[1.0], [2.0]])
    with pytest.raises(DegenerateStatisticsError):
        likelihood_ratio_update([None], elite, lambda x, u, v: np.zeros(len(x)))
    with pytest.raises(DegenerateStatisticsError):
        likelihood_ratio_update([None], np.empty((0, 1)), lambda x, u, v: np.ones(len(x)))
    with pytest.raises(ConfigurationError):
        likelihood_ratio_update([None], elite, lambda x, u, v: np.ones(len(x)), statistics="max")
