# Run-wide defaults, environment overrides and logging setup

import logging
import os

from .exceptions import ConfigurationError

# Root seed of every sampling stream
DEFAULT_SEED = int(os.environ.get("CEMETHOD_SEED", 7777777))

# Number of sampling workers (threads) per iteration
DEFAULT_WORKERS = int(os.environ.get("CEMETHOD_WORKERS", os.cpu_count() or 1))

# Level used by configure_logging when none is given
LOG_LEVEL = os.environ.get("CEMETHOD_LOG_LEVEL", "INFO")

LOG_FORMAT = '%(levelname)s: %(message)s'


def resolve_workers(workers=None):
    """
    Resolve the number of sampling workers.

    Args:
        workers (int or None): Requested worker count, None for the default

    Returns:
        int: Validated worker count
    """
    if workers is None:
        return max(DEFAULT_WORKERS, 1)
    if int(workers) < 1:
        raise ConfigurationError("workers", "must be positive")
    return int(workers)


def configure_logging(level=None):
    """
    Configure root logging for scripts and studies.

    Args:
        level (str or int or None): Logging level, defaults to CEMETHOD_LOG_LEVEL
    """
    logging.basicConfig(level=level or LOG_LEVEL, format=LOG_FORMAT)
