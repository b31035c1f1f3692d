"""
Prediction confidence of gold standard edges versus the degree of their nodes.
"""

from pathlib import Path
from typing import Optional

import pandas as pd

from ..network.gold_standard import GraphFacts
from ..network.prediction import RankMatrix
from ..utils.io import result_path, write_table
from ..utils.logging import get_logger


logger = get_logger("edge_types")


class EdgeTypePrediction:
    """
    For every scored gold standard edge: its rank, the indegree of the target,
    the outdegree of the source and whether the edge is among the top P
    predictions (P = number of gold standard edges).
    """

    COLUMNS = ["rank", "target_indegree", "source_outdegree", "true_positive"]

    def __init__(self, facts: GraphFacts, rank_matrix: RankMatrix):
        self.facts = facts
        self.rank_matrix = rank_matrix
        self.rank_vs_degree: Optional[pd.DataFrame] = None

    def run(self) -> pd.DataFrame:
        edges = self.facts.gold_standard.edges
        R = self.rank_matrix.ranks
        skip_self_loops = not self.rank_matrix.predict_self_loops

        num_positives = self.facts.num_scored_edges()
        # Rank of the last edge of the top P
        threshold = self.rank_matrix.position_to_rank(max(num_positives - 1, 0))

        rows = []
        for source, target in edges:
            if source == target and skip_self_loops:
                continue
            rank = float(R[target, source])
            rows.append((
                rank,
                int(self.facts.indegree[target]),
                int(self.facts.outdegree[source]),
                int(rank >= threshold),
            ))

        self.rank_vs_degree = pd.DataFrame(rows, columns=self.COLUMNS)
        return self.rank_vs_degree

    def save(self, output_dir: Optional[str | Path] = ".") -> Optional[Path]:
        """Write ``<prediction>_<network>_rankVsDegree.tsv``; errors are logged."""
        if self.rank_vs_degree is None:
            self.run()

        filepath = result_path(output_dir, self.rank_matrix.name, self.facts.name, "rankVsDegree.tsv")
        try:
            return write_table(self.rank_vs_degree.to_numpy(dtype=float), filepath)
        except OSError as e:
            logger.warning(f"Error saving edge type predictions: {e}")
            return None

    def summary(self) -> pd.Series:
        """Fraction of true positives by target indegree."""
        if self.rank_vs_degree is None:
            self.run()
        if self.rank_vs_degree.empty:
            return pd.Series(dtype=float)
        return self.rank_vs_degree.groupby("target_indegree")["true_positive"].mean()
