# Error taxonomy for the Cross-Entropy engine


class CrossEntropyError(Exception):
    """Base class of every error raised by the Cross-Entropy engine."""


class ConfigurationError(CrossEntropyError, ValueError):
    """
    Invalid construction or run argument.

    Args:
        parameter (str): Name of the offending argument
        message (str): Human readable description of the violation
    """

    def __init__(self, parameter, message):
        self.parameter = parameter
        super().__init__(f"{parameter}: {message}")


class DegenerateStatisticsError(CrossEntropyError, ArithmeticError):
    """Statistic undefined on the data reached during a run."""


class EvaluationError(CrossEntropyError, RuntimeError):
    """
    Performance function failure on a sampled state.

    Args:
        row (int): Sample row whose evaluation failed
    """

    def __init__(self, row, message):
        self.row = row
        super().__init__(f"performance evaluation failed at sample row {row}: {message}")
