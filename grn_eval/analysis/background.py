"""
Background Prediction Confidence

Ranks assigned to true, back and absent edges of the gold standards of a
batch. These are the reference samples of the motif analysis.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

import numpy as np

from ..network.gold_standard import GraphFacts
from ..network.prediction import RankMatrix
from ..statistics.ranks import correct_ranks, median
from ..statistics.significance import NOT_COMPUTED
from ..utils.logging import get_logger


logger = get_logger("background")


EDGE_CATEGORIES = ("true", "back", "absent")


@dataclass
class BackgroundPrediction:
    """
    Ranks of one network, split by edge category.

    Attributes
    ----------
    true_edges : list of float
        Ranks of the gold standard edges.
    back_edges : list of float
        Ranks of edges i->j that are not in the gold standard while j->i is.
    absent_edges : list of float
        Ranks of the remaining absent edges.
    """

    true_edges: List[float] = field(default_factory=list)
    back_edges: List[float] = field(default_factory=list)
    absent_edges: List[float] = field(default_factory=list)

    @classmethod
    def from_prediction(cls, facts: GraphFacts, rank_matrix: RankMatrix) -> "BackgroundPrediction":
        A = facts.adjacency
        R = rank_matrix.ranks
        scored = rank_matrix.scored_mask()

        true_mask = A & scored
        back_mask = ~A & A.T & scored
        absent_mask = ~A & ~A.T & scored

        return cls(
            true_edges=R[true_mask].tolist(),
            back_edges=R[back_mask].tolist(),
            absent_edges=R[absent_mask].tolist(),
        )

    def by_category(self) -> Dict[str, List[float]]:
        return {
            "true": self.true_edges,
            "back": self.back_edges,
            "absent": self.absent_edges,
        }

    def size(self) -> int:
        return len(self.true_edges) + len(self.back_edges) + len(self.absent_edges)


class BackgroundAnalysis:
    """
    Corrected background ranks and medians of a batch.

    The per-network rank lists are concatenated per category, then
    corrected for omitted edges. A category without any edge keeps the
    median NOT_COMPUTED.
    """

    def __init__(self, predictions: Sequence[BackgroundPrediction]):
        self.ranks: Dict[str, np.ndarray] = {}
        self.medians: Dict[str, float] = {}

        for category in EDGE_CATEGORIES:
            pooled: List[float] = []
            for prediction in predictions:
                pooled.extend(prediction.by_category()[category])

            correct_ranks(pooled)
            self.ranks[category] = np.array(pooled, dtype=float)

            if pooled:
                self.medians[category] = median(pooled)
            else:
                logger.warning(f"No {category} edges in the batch, background median not computed")
                self.medians[category] = NOT_COMPUTED

        logger.info(
            "Background medians: "
            + ", ".join(f"{c}={self.medians[c]:.4f}" for c in EDGE_CATEGORIES)
        )

    @property
    def median_true_edges(self) -> float:
        return self.medians["true"]

    @property
    def median_back_edges(self) -> float:
        return self.medians["back"]

    @property
    def median_absent_edges(self) -> float:
        return self.medians["absent"]
