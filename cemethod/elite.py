# Level computation and elite sample selection

import logging
import math
from dataclasses import dataclass

import numpy as np

from .context import EliteSampleDefinition, TieBreak
from .exceptions import ConfigurationError, DegenerateStatisticsError

logger = logging.getLogger(__name__)


@dataclass
class EliteSelection:
    """
    Outcome of one elite selection.

    Attributes:
        level (float): Performance quantile (or clamped threshold) of the iteration
        elite_sample (ndarray): Elite rows, shape (m, D)
        elite_performances (ndarray): Performances of the elite rows
        indexes (ndarray): Sample row indexes of the elite rows
    """
    level: float
    elite_sample: np.ndarray
    elite_performances: np.ndarray
    indexes: np.ndarray


def validate_rarity(rarity, sample_size, definition):
    """
    Check that a rarity leaves at least one elite position.

    Args:
        rarity (float): Elite fraction in (0, 1)
        sample_size (int): Rows drawn per iteration
        definition (EliteSampleDefinition): Tail holding the elite
    """
    if sample_size is None or int(sample_size) < 1:
        raise ConfigurationError("sample_size", "must be positive")
    if not 0.0 < rarity < 1.0:
        raise ConfigurationError("rarity", "must be in the open interval (0, 1)")
    if definition is EliteSampleDefinition.HIGHER_THAN_LEVEL:
        if math.ceil(sample_size * (1.0 - rarity)) >= sample_size:
            raise ConfigurationError(
                "rarity", f"too low for sample_size {sample_size}: no elite position left")
    else:
        if math.ceil(sample_size * rarity) >= sample_size:
            raise ConfigurationError(
                "rarity", f"too high for sample_size {sample_size}: no elite position left")


def _positions(sample_size, definition, rarity, lower_index=math.floor):
    # Sorted positions [first, last] of the elite block and the level position
    if definition is EliteSampleDefinition.HIGHER_THAN_LEVEL:
        first = math.ceil(sample_size * (1.0 - rarity))
        return first, sample_size - 1, first
    last = lower_index(sample_size * rarity)
    return 0, last, last


def _gather(performances, sample, indexes, level):
    if indexes.size == 0:
        raise DegenerateStatisticsError(
            f"empty elite sample at level {level!r}: level too extreme for the sample size")
    return EliteSelection(
        level=level,
        elite_sample=sample[indexes],
        elite_performances=performances[indexes],
        indexes=indexes)


def _tied(performances, order, indexes, level, definition):
    # Append rows tied with the level that fell outside the positional block
    if definition is EliteSampleDefinition.HIGHER_THAN_LEVEL:
        mask = performances >= level
    else:
        mask = performances <= level
    extra = np.setdiff1d(np.flatnonzero(mask), indexes, assume_unique=True)
    # Keep the ascending performance order of the sorted sample
    return order[np.isin(order, np.concatenate([indexes, extra]))]


def select_elite(performances, sample, definition, rarity,
                 tie_break=TieBreak.POSITIONAL, trace=False):
    """
    Select the elite sample of an optimization iteration.

    The level is an order statistic of the performances: position
    ceil(N(1 - rarity)) of the ascending sort for HIGHER_THAN_LEVEL,
    position floor(N * rarity) for LOWER_THAN_LEVEL.

    Args:
        performances (ndarray): Performances of length N
        sample (ndarray): Sample of shape (N, D)
        definition (EliteSampleDefinition): Tail holding the elite
        rarity (float): Elite fraction in (0, 1)
        tie_break (TieBreak): Treatment of rows tied with the level
        trace (bool): Log sorted positions at DEBUG level

    Returns:
        EliteSelection: Level and elite rows
    """
    sample_size = performances.size
    order = np.argsort(performances, kind="stable")
    first, last, level_position = _positions(sample_size, definition, rarity)
    if level_position >= sample_size or first > last:
        raise DegenerateStatisticsError(
            f"empty elite sample: rarity {rarity} selects no row out of {sample_size}")

    level = float(performances[order[level_position]])
    indexes = order[first:last + 1]
    if tie_break is TieBreak.INCLUSIVE:
        indexes = _tied(performances, order, indexes, level, definition)

    if trace:
        logger.debug("Elite positions: %d - %d (%d rows), level %r",
                     first, last, indexes.size, level)
    return _gather(performances, sample, indexes, level)


def select_rare_event_elite(performances, sample, definition, rarity, threshold,
                            tie_break=TieBreak.POSITIONAL, trace=False):
    """
    Select the elite sample of a rare-event adaptation iteration.

    The empirical level is computed as in optimization (ceil(N * rarity) is
    the level position for LOWER_THAN_LEVEL) and then clamped at the
    threshold. Once clamped, the elite is every row inside the rare event.

    Args:
        performances (ndarray): Performances of length N
        sample (ndarray): Sample of shape (N, D)
        definition (EliteSampleDefinition): Tail holding the elite
        rarity (float): Elite fraction in (0, 1)
        threshold (float): Level defining the rare event
        tie_break (TieBreak): Treatment of rows tied with an unclamped level
        trace (bool): Log sorted positions at DEBUG level

    Returns:
        EliteSelection: Level and elite rows
    """
    sample_size = performances.size
    order = np.argsort(performances, kind="stable")
    first, last, level_position = _positions(
        sample_size, definition, rarity, lower_index=math.ceil)
    if level_position >= sample_size or first > last:
        raise DegenerateStatisticsError(
            f"empty elite sample: rarity {rarity} selects no row out of {sample_size}")

    level = float(performances[order[level_position]])
    if definition is EliteSampleDefinition.HIGHER_THAN_LEVEL:
        clamped = level > threshold
    else:
        clamped = level < threshold

    if clamped:
        level = float(threshold)
        if definition is EliteSampleDefinition.HIGHER_THAN_LEVEL:
            members = performances >= threshold
        else:
            members = performances <= threshold
        indexes = order[members[order]]
    else:
        indexes = order[first:last + 1]
        if tie_break is TieBreak.INCLUSIVE:
            indexes = _tied(performances, order, indexes, level, definition)

    if trace:
        logger.debug("Elite rows: %d, level %r%s", indexes.size, level,
                     " (threshold reached)" if clamped else "")
    return _gather(performances, sample, indexes, level)
