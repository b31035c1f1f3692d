"""
Analyses of network predictions: background confidence, network motifs,
feedback loops, edge degrees and PR/ROC curves.
"""

from .background import BackgroundAnalysis, BackgroundPrediction, EDGE_CATEGORIES
from .edge_types import EdgeTypePrediction
from .loops import LoopAnalysis, LoopPrediction
from .motif_analysis import MotifAnalysis
from .score import ScoreCurve

__all__ = [
    "BackgroundAnalysis",
    "BackgroundPrediction",
    "EDGE_CATEGORIES",
    "EdgeTypePrediction",
    "LoopAnalysis",
    "LoopPrediction",
    "MotifAnalysis",
    "ScoreCurve",
]
