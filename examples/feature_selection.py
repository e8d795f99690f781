# Select the features that best separate three known groups of items

import numpy as np

from cemethod import (CombinationOptimizationContext, OptimizationGoal,
                      PartitionOptimizationContext, SystemPerformanceOptimizer,
                      configure_logging)

NUMBER_OF_ITEMS = 12
NUMBER_OF_FEATURES = 7
GROUPS = np.repeat([0, 1, 2], 4)


def make_data(rng):
    """
    Artificial data set: features 0-4 are noise, features 5-6 separate the groups.

    Returns:
        ndarray: Data of shape (12, 7)
    """
    data = rng.normal(0.0, 0.01, size=(NUMBER_OF_ITEMS, NUMBER_OF_FEATURES))
    mu = 1.0
    for group in range(3):
        rows = GROUPS == group
        data[rows, 5] = rng.normal(mu, 0.01, rows.sum())
        data[rows, 6] = rng.normal(mu + 2.0, 0.01, rows.sum())
        mu += 4.0
    return data


def separation(data, labels):
    """
    Between-group over within-group sum of squares.

    Args:
        data (ndarray): Items on rows
        labels (array): Group identifier of each item

    Returns:
        float: Separation ratio, larger is better
    """
    center = data.mean(axis=0)
    between = 0.0
    within = 1e-12
    for group in np.unique(labels):
        rows = data[labels == group]
        between += rows.shape[0] * np.sum((rows.mean(axis=0) - center) ** 2)
        within += np.sum((rows - rows.mean(axis=0)) ** 2)
    return between / within


if __name__ == "__main__":
    configure_logging()
    data = make_data(np.random.default_rng(0))
    optimizer = SystemPerformanceOptimizer()

    # Which 2 features explain the groups best
    combination = CombinationOptimizationContext(
        objective=lambda x: separation(data[:, x.astype(bool)], GROUPS),
        state_dimension=NUMBER_OF_FEATURES,
        combination_dimension=2,
        probability_smoothing_coefficient=0.8,
        optimization_goal=OptimizationGoal.MAXIMIZATION,
        min_iterations=3,
        max_iterations=1000)
    results = optimizer.optimize(combination, rarity=0.01, sample_size=1000)
    print(f"Selected features: {np.flatnonzero(results.optimal_state)}")

    # Which grouping of the items the selected features support best
    selected = data[:, results.optimal_state.astype(bool)]
    partition = PartitionOptimizationContext(
        objective=lambda x: separation(selected, x),
        state_dimension=NUMBER_OF_ITEMS,
        partition_dimension=3,
        probability_smoothing_coefficient=0.8,
        optimization_goal=OptimizationGoal.MAXIMIZATION,
        min_iterations=3,
        max_iterations=1000)
    results = optimizer.optimize(partition, rarity=0.01, sample_size=2000)
    print(f"Recovered groups: {results.optimal_state.astype(int)}")
