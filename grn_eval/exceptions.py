"""
Evaluation Exceptions

Custom exceptions raised by the evaluation engine.
"""

from typing import Optional


class EvaluationError(Exception):
    """Base class for evaluation errors"""
    pass


class PredictionFormatError(EvaluationError, ValueError):
    """
    A prediction list that cannot be turned into a rank matrix
    (unknown label, duplicate edge, disallowed self-loop, bad row).
    """

    def __init__(self, message: str, source: str = "", line: Optional[int] = None):
        self.source = source
        self.line = line

        context = []
        if source:
            context.append(f"file {source}")
        if line is not None:
            context.append(f"line {line}")
        if context:
            message = f"{message} ({', '.join(context)})"

        super().__init__(message)


class MissingPredictionError(EvaluationError):
    """A rank-dependent analysis was requested before a prediction was loaded"""
    pass


class EvaluationCancelled(EvaluationError):
    """The batch evaluation was cancelled between two networks"""
    pass
