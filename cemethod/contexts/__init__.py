"""Ready-made Cross-Entropy contexts."""

from .combination import CombinationOptimizationContext
from .continuous import ContinuousOptimizationContext
from .partition import PartitionOptimizationContext
from .rare_events import ExponentialRareEventContext, GaussianRareEventContext

__all__ = [
    "CombinationOptimizationContext",
    "ContinuousOptimizationContext",
    "PartitionOptimizationContext",
    "ExponentialRareEventContext",
    "GaussianRareEventContext",
]
