"""Cross-Entropy method for optimization and rare-event probability estimation.

Modules
-------
context
    CrossEntropyContext strategy interface and its enumerations
program
    CrossEntropyProgram iteration loop
optimization
    SystemPerformanceOptimizer and its context base class
rare_event
    RareEventProbabilityEstimator and its context base class
contexts
    Ready-made continuous, combination, partition and rare-event contexts
sampler, random_streams, distributions
    Parallel sampling with per-chunk random streams
elite, estimation, smoothing
    Level computation, parameter re-estimation and smoothing
continuous
    One-call minimize / maximize
replications
    Repeated runs and their relative error
"""

from .config import DEFAULT_SEED, DEFAULT_WORKERS, configure_logging
from .context import (
    CrossEntropyContext,
    EliteSampleDefinition,
    OptimizationGoal,
    ProgramState,
    RareEventPerformanceBoundedness,
    TieBreak,
)
from .contexts import (
    CombinationOptimizationContext,
    ContinuousOptimizationContext,
    ExponentialRareEventContext,
    GaussianRareEventContext,
    PartitionOptimizationContext,
)
from .continuous import maximize, minimize
from .exceptions import (
    ConfigurationError,
    CrossEntropyError,
    DegenerateStatisticsError,
    EvaluationError,
)
from .optimization import (
    SystemPerformanceOptimizationContext,
    SystemPerformanceOptimizationResults,
    SystemPerformanceOptimizer,
)
from .program import CrossEntropyProgram, CrossEntropyResults
from .rare_event import (
    RareEventProbabilityEstimationContext,
    RareEventProbabilityEstimationResults,
    RareEventProbabilityEstimator,
)
from .replications import rrmse, run_replications

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_SEED",
    "DEFAULT_WORKERS",
    "configure_logging",
    "CrossEntropyContext",
    "EliteSampleDefinition",
    "OptimizationGoal",
    "ProgramState",
    "RareEventPerformanceBoundedness",
    "TieBreak",
    "CombinationOptimizationContext",
    "ContinuousOptimizationContext",
    "ExponentialRareEventContext",
    "GaussianRareEventContext",
    "PartitionOptimizationContext",
    "maximize",
    "minimize",
    "ConfigurationError",
    "CrossEntropyError",
    "DegenerateStatisticsError",
    "EvaluationError",
    "SystemPerformanceOptimizationContext",
    "SystemPerformanceOptimizationResults",
    "SystemPerformanceOptimizer",
    "CrossEntropyProgram",
    "CrossEntropyResults",
    "RareEventProbabilityEstimationContext",
    "RareEventProbabilityEstimationResults",
    "RareEventProbabilityEstimator",
    "rrmse",
    "run_replications",
]
