# Repeated independent runs and their accuracy

import multiprocessing

import numpy as np
from tqdm import tqdm


def rrmse(estimates, reference):
    """
    Relative root mean squared error of repeated estimates.

    Args:
        estimates (array-like): Estimated values
        reference (float): Known true value

    Returns:
        float: sqrt(mean((estimates - reference)^2)) / reference
    """
    squared_errors = (np.asarray(estimates, dtype=float) - reference) ** 2
    return np.sqrt(np.mean(squared_errors)) / reference


def run_replications(estimate, seeds, processes=None, desc=None):
    """
    Run one estimation per seed, in parallel when possible.

    Args:
        estimate (callable): Picklable function of a seed
        seeds (iterable): One seed per replication
        processes (int or None): Worker processes, 1 runs in this process
        desc (str or None): Progress bar label

    Returns:
        list: Results in seed order
    """
    seeds = [int(seed) for seed in seeds]
    if processes == 1:
        return [estimate(seed) for seed in tqdm(seeds, desc=desc)]

    with multiprocessing.Pool(processes) as pool:
        results = pool.imap(estimate, seeds)
        return list(tqdm(results, total=len(seeds), desc=desc))
