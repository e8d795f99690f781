# Accuracy study of the Cross-Entropy estimator on a Gaussian tail probability

import os

import numpy as np
from scipy.stats import norm

from cemethod import (GaussianRareEventContext, RareEventPerformanceBoundedness,
                      RareEventProbabilityEstimator, configure_logging, rrmse,
                      run_replications)

# Keep worker processes single threaded
os.environ["OMP_NUM_THREADS"] = "1"
os.environ["MKL_NUM_THREADS"] = "1"

THRESHOLD = -4.0
REFERENCE = norm.cdf(THRESHOLD)  # Pr{X <= -4} = 3.1671e-05
RARITY = 0.1
SAMPLE_SIZE = 1000


def build_context():
    """
    Rare event {X <= -4} for a standard Gaussian X.

    Returns:
        GaussianRareEventContext: Context with nominal parameter (0, 1)
    """
    return GaussianRareEventContext(
        performance=lambda x: x[0],
        nominal_parameter=[[0.0], [1.0]],
        threshold=THRESHOLD,
        boundedness=RareEventPerformanceBoundedness.UPPER)


def run_estimation(args):
    """
    Wrapper function for parallel execution.

    Args:
        args (tuple): (estimation sample size, random seed)

    Returns:
        float: Probability estimate
    """
    estimation_sample_size, seed = args
    estimator = RareEventProbabilityEstimator(workers=1, seed=seed)
    results = estimator.estimate(
        build_context(), rarity=RARITY, sample_size=SAMPLE_SIZE,
        estimation_sample_size=estimation_sample_size)
    return results.rare_event_probability


class _Replication:
    # Picklable binding of the estimation sample size
    def __init__(self, estimation_sample_size):
        self.estimation_sample_size = estimation_sample_size

    def __call__(self, seed):
        return run_estimation((self.estimation_sample_size, seed))


if __name__ == "__main__":
    configure_logging("WARNING")
    np.random.seed(99)  # Master seed for the replication seeds
    error_list = []

    # Final sample sizes to analyze
    estimation_sizes = [1000, 3000, 10000, 30000]

    for size in estimation_sizes:
        seeds = np.random.randint(10, 10000, 100)
        estimates = run_replications(
            _Replication(size), seeds, processes=8, desc=f"Processing M={size}")

        err = rrmse(estimates, REFERENCE)
        error_list.append(err)
        print(f"M={size}: mean={np.mean(estimates):.4e} | "
              f"reference={REFERENCE:.4e} | rRMSE={err:.2e}\n")
