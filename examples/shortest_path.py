# Probability that the shortest path of a small network exceeds a length

import numpy as np

from cemethod import (ExponentialRareEventContext, RareEventPerformanceBoundedness,
                      RareEventProbabilityEstimator, configure_logging)

# Means of the exponential edge lengths
NOMINAL_MEANS = [0.25, 0.4, 0.1, 0.3, 0.2]
THRESHOLD = 2.0


def shortest_path(x):
    """
    Length of the shortest of the four paths of the bridge network.

    Args:
        x (array): Lengths of the 5 edges

    Returns:
        float: Shortest path length
    """
    paths = [x[0] + x[3], x[0] + x[2] + x[4], x[1] + x[4], x[1] + x[2] + x[3]]
    return min(paths)


def build_context():
    return ExponentialRareEventContext(
        performance=shortest_path,
        nominal_means=NOMINAL_MEANS,
        threshold=THRESHOLD,
        boundedness=RareEventPerformanceBoundedness.LOWER)


if __name__ == "__main__":
    configure_logging()

    estimator = RareEventProbabilityEstimator(workers=4)
    results = estimator.estimate(
        build_context(), rarity=0.1, sample_size=1000, estimation_sample_size=10000)

    print("Under the nominal parameter:")
    print(np.asarray(NOMINAL_MEANS))
    print(f"the estimated probability of a shortest path greater than {THRESHOLD} is:")
    print(f"{results.rare_event_probability:.4e} (standard error "
          f"{results.standard_error:.1e})\n")

    # Details on iterations
    print("Level      Parameter")
    for level, parameter in zip(results.levels, results.parameters[1:]):
        print(f"{level:<10.4f} {np.array2string(parameter[0], precision=4)}")
