"""
grn-eval

Evaluation of gene regulatory network predictions against gold standard
networks: rank matrices, PR/ROC curves, network motif and feedback loop
analyses.
"""

__version__ = "1.0.0"

from pathlib import Path

# Configuration shipped with the package
CONFIG_DIR = Path(__file__).parent / "config"

from .network import GoldStandard, GraphFacts, RankMatrix
from .motifs import MotifCatalog, MotifProfiler, default_catalog
from .statistics import correct_ranks, median
from .analysis import (
    BackgroundAnalysis,
    EdgeTypePrediction,
    LoopAnalysis,
    MotifAnalysis,
    ScoreCurve,
)
from .evaluator import BatchPerformanceEvaluator, PerformanceEvaluator, evaluate
from .exceptions import (
    EvaluationCancelled,
    EvaluationError,
    MissingPredictionError,
    PredictionFormatError,
)
from .utils.config import EvaluationSettings

__all__ = [
    "GoldStandard",
    "GraphFacts",
    "RankMatrix",
    "MotifCatalog",
    "MotifProfiler",
    "default_catalog",
    "correct_ranks",
    "median",
    "BackgroundAnalysis",
    "EdgeTypePrediction",
    "LoopAnalysis",
    "MotifAnalysis",
    "ScoreCurve",
    "BatchPerformanceEvaluator",
    "PerformanceEvaluator",
    "evaluate",
    "EvaluationCancelled",
    "EvaluationError",
    "MissingPredictionError",
    "PredictionFormatError",
    "EvaluationSettings",
    "CONFIG_DIR",
]
