"""
Feedback Loop Analysis

Prediction confidence of gold standard edges inside strongly connected
components and in two-node feedback loops, compared to the edges outside
of any loop.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from ..network.gold_standard import GraphFacts
from ..network.prediction import RankMatrix
from ..statistics.ranks import correct_ranks, median
from ..statistics.significance import (
    DEFAULT_PVALUE_FLOOR,
    NOT_COMPUTED,
    RankSumTest,
    compare_to_background,
    rank_sum_pvalue,
)
from ..utils.io import result_path, write_table
from ..utils.logging import get_logger


logger = get_logger("loops")


@dataclass
class LoopPrediction:
    """
    Loop membership of the gold standard edges of one network.

    Attributes
    ----------
    inside_loops : list of float
        Ranks of the edges whose source and target are in the same
        strongly connected component.
    outside_loops : list of float
        Ranks of the other edges.
    two_node_loops : list of float
        Ranks of both edges of every two-node feedback loop.
    """

    inside_loops: List[float] = field(default_factory=list)
    outside_loops: List[float] = field(default_factory=list)
    two_node_loops: List[float] = field(default_factory=list)

    @classmethod
    def from_prediction(cls, facts: GraphFacts, rank_matrix: RankMatrix) -> "LoopPrediction":
        R = rank_matrix.ranks
        skip_self_loops = not rank_matrix.predict_self_loops

        component_of = {}
        for k, component in enumerate(facts.gold_standard.strongly_connected_components()):
            for node in component:
                component_of[node] = k

        loops = cls()
        for source, target in facts.gold_standard.edges:
            if source == target and skip_self_loops:
                continue
            if component_of[source] == component_of[target]:
                loops.inside_loops.append(float(R[target, source]))
            else:
                loops.outside_loops.append(float(R[target, source]))

        A = facts.adjacency
        for i in range(facts.num_nodes):
            for j in range(i):
                if A[i, j] and A[j, i]:
                    loops.two_node_loops.append(float(R[i, j]))
                    loops.two_node_loops.append(float(R[j, i]))

        logger.debug(
            f"{facts.name}: {len(loops.inside_loops)} edges inside loops, "
            f"{len(loops.outside_loops)} outside, {len(loops.two_node_loops) // 2} two-node loops"
        )
        return loops


class LoopAnalysis:
    """
    Batch loop analysis: concatenated and corrected ranks, medians and
    rank-sum p-values (inside vs outside loops, two-node loops vs outside).
    """

    def __init__(
        self,
        predictions: Sequence[LoopPrediction],
        test: RankSumTest = rank_sum_pvalue,
        pvalue_floor: float = DEFAULT_PVALUE_FLOOR,
    ):
        self.inside_loops: List[float] = []
        self.outside_loops: List[float] = []
        self.two_node_loops: List[float] = []

        for prediction in predictions:
            self.inside_loops.extend(prediction.inside_loops)
            self.outside_loops.extend(prediction.outside_loops)
            self.two_node_loops.extend(prediction.two_node_loops)

        for sample in (self.inside_loops, self.outside_loops, self.two_node_loops):
            correct_ranks(sample)

        self.median_inside_loops = self._median(self.inside_loops)
        self.median_outside_loops = self._median(self.outside_loops)
        self.median_two_node_loops = self._median(self.two_node_loops)

        self.pval_inside_vs_outside = compare_to_background(
            self.inside_loops, self.outside_loops, test=test, pvalue_floor=pvalue_floor
        )
        self.pval_two_node_vs_outside = compare_to_background(
            self.two_node_loops, self.outside_loops, test=test, pvalue_floor=pvalue_floor
        )

        logger.info(
            f"Loop analysis: median inside {self.median_inside_loops:.4f} "
            f"(p={self.pval_inside_vs_outside:.3g}), outside {self.median_outside_loops:.4f}"
        )

    @staticmethod
    def _median(sample: List[float]) -> float:
        return median(sample) if sample else NOT_COMPUTED

    def statistics(self) -> pd.DataFrame:
        """Number of edges, median rank and p-value per edge class."""
        return pd.DataFrame(
            {
                "numEdges": [len(self.outside_loops), len(self.inside_loops), len(self.two_node_loops)],
                "median": [self.median_outside_loops, self.median_inside_loops, self.median_two_node_loops],
                "pval": [None, self.pval_inside_vs_outside, self.pval_two_node_vs_outside],
            },
            index=pd.Index(["outsideLoops", "insideLoops", "twoNodeLoops"], name="---"),
        )

    def save(self, name: str, output_dir: Optional[str | Path] = ".") -> List[Path]:
        """Write the statistics table and the corrected rank samples; errors are logged."""
        written = []
        table = self.statistics()
        table["pval"] = table["pval"].astype(object)
        table.loc["outsideLoops", "pval"] = "---"

        try:
            written.append(write_table(
                table,
                result_path(output_dir, name, "loop_statistics.tsv"),
                header=True,
                index=True,
            ))
            written.append(write_table(
                np.array(self.inside_loops).reshape(-1, 1),
                result_path(output_dir, name, "inside_loops.tsv"),
            ))
            written.append(write_table(
                np.array(self.outside_loops).reshape(-1, 1),
                result_path(output_dir, name, "outside_loops.tsv"),
            ))
        except OSError as e:
            logger.warning(f"Error saving loop analysis {name}: {e}")

        return written
