"""
Network Module

Gold standard networks, their structural facts, and the rank matrices of
network predictions evaluated against them.
"""

from .gold_standard import GoldStandard, GraphFacts
from .prediction import RankMatrix, NOT_SCORED, max_predictions, position_to_rank

__all__ = [
    "GoldStandard",
    "GraphFacts",
    "RankMatrix",
    "NOT_SCORED",
    "max_predictions",
    "position_to_rank",
]
