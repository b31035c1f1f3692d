"""
Network Predictions

Converts a ranked list of predicted edges into a normalized rank matrix
aligned with a gold standard.
"""

from pathlib import Path
from typing import Iterable, Optional, Sequence

import numpy as np

from ..exceptions import PredictionFormatError
from ..utils.io import read_prediction_file
from ..utils.logging import get_logger
from .gold_standard import GoldStandard


logger = get_logger("prediction")


# Value of the diagonal when self-loops are not scored
NOT_SCORED = -1.0


def max_predictions(num_nodes: int, predict_self_loops: bool) -> int:
    """Number of directed pairs a complete prediction must rank."""
    total = num_nodes * num_nodes
    if not predict_self_loops:
        total -= num_nodes
    return total


def position_to_rank(position: int, max_num_predictions: int) -> float:
    """
    Convert the position of an edge in the prediction list into a rank.

    The first edge of the list (position 0) has rank 1, the last possible
    edge has rank 0.
    """
    if max_num_predictions <= 1:
        raise ValueError("max_num_predictions must be larger than one")

    return (max_num_predictions - position - 1) / (max_num_predictions - 1.0)


class RankMatrix:
    """
    Normalized ranks of a network prediction.

    ``ranks[j, i]`` is the rank of the predicted edge from node i to node j
    (same target-row convention as the gold standard adjacency matrix).
    The first edge of the list has rank 1. When the list is incomplete,
    the omitted edges are assigned ``-rank(n_predictions)``: the negative
    of the rank the next edge of the list would have received. The sign
    marks them for rank correction.

    Attributes
    ----------
    gold_standard : GoldStandard
        Network the prediction refers to.
    ranks : np.ndarray
        N x N read-only rank matrix.
    name : str
        Name of the prediction (file name without extension).
    n_predictions : int
        Number of edges in the submitted list.
    max_predictions : int
        Number of edges a complete list has.
    predict_self_loops : bool
        Whether self-loops are scored.
    """

    def __init__(
        self,
        gold_standard: GoldStandard,
        ranks: np.ndarray,
        n_predictions: int,
        predict_self_loops: bool = False,
        name: str = "",
    ):
        n = gold_standard.num_nodes
        ranks = np.array(ranks, dtype=float)
        if ranks.shape != (n, n):
            raise ValueError(f"Rank matrix must be {n}x{n}, got {ranks.shape}")

        ranks.setflags(write=False)

        self.gold_standard = gold_standard
        self.ranks = ranks
        self.name = name
        self.n_predictions = n_predictions
        self.predict_self_loops = predict_self_loops
        self.max_predictions = max_predictions(n, predict_self_loops)

    @classmethod
    def from_rows(
        cls,
        gold_standard: GoldStandard,
        rows: Iterable[Sequence[str]],
        predict_self_loops: bool = False,
        name: str = "",
    ) -> "RankMatrix":
        """
        Build the rank matrix of a ranked edge list.

        Parameters
        ----------
        gold_standard : GoldStandard
            The gold standard (defines labels and size).
        rows : iterable of sequences
            One row per line of the prediction: ``(source, target,
            confidence)``, most confident first. Empty rows are skipped.
            The confidence value is not used, only the order of the rows.
        predict_self_loops : bool
            If False, a self-loop in the list is an error.
        name : str
            Name of the prediction, used in error messages and file names.

        Returns
        -------
        RankMatrix

        Raises
        ------
        PredictionFormatError
            A row has not three fields, references an unknown label,
            is a disallowed self-loop, or repeats an edge.
        """
        n = gold_standard.num_nodes
        max_num = max_predictions(n, predict_self_loops)

        ranks = np.full((n, n), NOT_SCORED)
        assigned = np.zeros((n, n), dtype=bool)
        num_predictions = 0

        for line, row in enumerate(rows, start=1):
            if len(row) == 0 or (len(row) == 1 and row[0] == ""):
                continue

            if len(row) != 3:
                raise PredictionFormatError(
                    f"Line doesn't have three elements (found {len(row)})", source=name, line=line
                )

            source = gold_standard.index_of(row[0])
            target = gold_standard.index_of(row[1])

            if source is None or target is None:
                missing = row[0] if source is None else row[1]
                raise PredictionFormatError(
                    f"The following label was not found in the gold standard: {missing}",
                    source=name, line=line,
                )
            if source == target and not predict_self_loops:
                raise PredictionFormatError(
                    "The list contains self-loops but predict_self_loops is False",
                    source=name, line=line,
                )
            if assigned[target, source]:
                raise PredictionFormatError(
                    f"The edge {row[0]} -> {row[1]} has been included twice",
                    source=name, line=line,
                )

            ranks[target, source] = position_to_rank(num_predictions, max_num)
            assigned[target, source] = True
            num_predictions += 1

        if num_predictions != max_num:
            logger.warning(
                f"Not all edges included in prediction {name or gold_standard.name} "
                f"({num_predictions}/{max_num})"
            )
            min_rank = position_to_rank(num_predictions, max_num)

            omitted = ~assigned
            if not predict_self_loops:
                np.fill_diagonal(omitted, False)
            ranks[omitted] = -min_rank

        return cls(gold_standard, ranks, num_predictions, predict_self_loops, name)

    @classmethod
    def from_file(
        cls,
        gold_standard: GoldStandard,
        filepath: str | Path,
        predict_self_loops: bool = False,
    ) -> "RankMatrix":
        """Read a prediction TSV and build its rank matrix."""
        filepath = Path(filepath)
        rows = read_prediction_file(filepath)
        return cls.from_rows(gold_standard, rows, predict_self_loops, name=filepath.stem)

    @property
    def num_nodes(self) -> int:
        return self.gold_standard.num_nodes

    @property
    def is_complete(self) -> bool:
        return self.n_predictions == self.max_predictions

    def position_to_rank(self, position: int) -> float:
        return position_to_rank(position, self.max_predictions)

    def rank(self, source: int, target: int) -> float:
        """Rank of the edge source -> target."""
        return float(self.ranks[target, source])

    def scored_mask(self) -> np.ndarray:
        """Boolean matrix of the pairs that belong to the prediction task."""
        mask = np.ones((self.num_nodes, self.num_nodes), dtype=bool)
        if not self.predict_self_loops:
            np.fill_diagonal(mask, False)
        return mask
