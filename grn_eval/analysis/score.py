"""
PR and ROC Curves

Exact precision-recall and ROC curves of a network prediction, with the
areas under both curves (AUPR, AUROC).

The precision-recall area between two consecutive true positives is
integrated exactly (precision is hyperbolic in recall between them, see
Stolovitzky et al., 2009). When the prediction list is incomplete, the
omitted edges are assumed to be ranked randomly after the last submitted
edge: the curve is extended analytically with a constant density ``rh`` of
true positives among the remaining pairs and the remaining area has a
closed form.

Self-loops are not part of the task: the diagonal is excluded from the
positives, the total and the walk over the prediction.
"""

import math
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, Sequence

import numpy as np
import pandas as pd

from ..network.gold_standard import GraphFacts
from ..network.prediction import RankMatrix
from ..utils.io import result_path, write_table, write_text
from ..utils.logging import get_logger

if TYPE_CHECKING:
    from matplotlib.figure import Figure


logger = get_logger("score")


def round_two_decimals(value: float) -> float:
    return float(f"{value:.2f}")


class ScoreCurve:
    """
    PR / ROC curves and areas of one prediction.

    Parameters
    ----------
    facts : GraphFacts
        The gold standard.
    rank_matrix : RankMatrix
        The prediction.

    Attributes
    ----------
    aupr, auroc : float
        Areas under the curves, None before ``run()``.
    recall, precision, tpr, fpr : np.ndarray
        Curve coordinates, one point per submitted edge plus one point per
        true positive of the extension.
    pr_points, roc_points : str
        Space-separated ``x,y`` points rounded to two decimals, consecutive
        duplicates removed, for plotting.
    """

    def __init__(self, facts: GraphFacts, rank_matrix: RankMatrix):
        self.facts = facts
        self.rank_matrix = rank_matrix

        n = facts.num_nodes
        self.num_positives = facts.num_scored_edges()
        self.total = n * (n - 1)

        self.aupr: Optional[float] = None
        self.auroc: Optional[float] = None
        self.recall = np.empty(0)
        self.precision = np.empty(0)
        self.tpr = np.empty(0)
        self.fpr = np.empty(0)
        self.pr_points = ""
        self.roc_points = ""

    def _ranked_pairs(self) -> List[tuple]:
        """Off-diagonal pairs with a non-negative rank, most confident first."""
        R = self.rank_matrix.ranks
        mask = R >= 0
        np.fill_diagonal(mask, False)

        targets, sources = np.nonzero(mask)
        order = np.argsort(-R[targets, sources], kind="stable")
        return list(zip(targets[order], sources[order]))

    def run(self) -> "ScoreCurve":
        """
        Compute the curves and the areas.

        Raises
        ------
        ValueError
            The gold standard has no edges (precision is undefined).
        """
        P = self.num_positives
        T = self.total
        N = T - P

        if P == 0:
            raise ValueError(f"Gold standard {self.facts.name} has no edges, AUPR and AUROC are undefined")

        A = self.facts.adjacency
        pairs = self._ranked_pairs()

        size = len(pairs) + P
        recall = np.zeros(size)
        precision = np.zeros(size)
        tpr = np.zeros(size)
        fpr = np.zeros(size)

        pr_points: List[str] = []
        roc_points: List[str] = []
        last_pr = (None, None)
        last_roc = (None, None)

        TPk = 0
        FPk = 0.0
        Ak = 0.0
        k = 0

        for target, source in pairs:
            k += 1
            if A[target, source]:
                TPk += 1
                if k == 1:
                    delta = 1.0 / P
                else:
                    delta = (1.0 - FPk * math.log(k / (k - 1.0))) / P
                Ak += delta
            else:
                FPk += 1

            recall[k - 1] = TPk / P
            precision[k - 1] = TPk / k
            tpr[k - 1] = recall[k - 1]
            fpr[k - 1] = FPk / N if N > 0 else 0.0

            point = (round_two_decimals(recall[k - 1]), round_two_decimals(precision[k - 1]))
            if point != last_pr:
                last_pr = point
                pr_points.append(f"{point[0]},{point[1]}")

            point = (round_two_decimals(fpr[k - 1]), round_two_decimals(tpr[k - 1]))
            if point != last_roc:
                last_roc = point
                roc_points.append(f"{point[0]},{point[1]}")

        TPL = TPk
        L = k
        rh = (P - TPL) / (T - L) if L < T else 0.0
        recL = recall[L - 1] if L > 0 else 0.0

        # Remaining true positives spread uniformly over the omitted pairs
        while TPk < P:
            k += 1
            TPk += 1
            recall[k - 1] = TPk / P

            denominator = (recall[k - 1] - recL) * P + L * rh
            if denominator != 0:
                precision[k - 1] = rh * P * recall[k - 1] / denominator
            else:
                precision[k - 1] = 0.0

            tpr[k - 1] = recall[k - 1]
            if precision[k - 1] > 0:
                FPk = TPk * (1.0 - precision[k - 1]) / precision[k - 1]
            fpr[k - 1] = FPk / N if N > 0 else 0.0

            pr_points.append(f"{round_two_decimals(recall[k - 1])},{round_two_decimals(precision[k - 1])}")
            roc_points.append(f"{round_two_decimals(fpr[k - 1])},{round_two_decimals(tpr[k - 1])}")

        if rh != 0 and L != 0:
            aupr = (
                Ak
                + rh * (1.0 - recL)
                + rh * (recL - L * rh / P) * math.log((L * rh + P * (1.0 - recL)) / (L * rh))
            )
        elif L == 0:
            aupr = P / T
        else:
            aupr = Ak

        # Area left of the ROC curve
        length = L + P - TPL
        lc = fpr[0] * tpr[0] / 2.0
        for n in range(1, length):
            lc += (fpr[n] + fpr[n - 1]) * (tpr[n] - tpr[n - 1]) / 2.0

        self.aupr = float(aupr)
        self.auroc = float(1.0 - lc)
        self.recall = recall[:length]
        self.precision = precision[:length]
        self.tpr = tpr[:length]
        self.fpr = fpr[:length]

        self.pr_points = f"0,0 0,{precision[0]} " + "".join(p + " " for p in pr_points) + " 1,0"
        self.roc_points = "0,0 " + "".join(p + " " for p in roc_points) + f"1,{tpr[length - 1]} 1,0"

        logger.info(f"{self.facts.name:<35} AUPR = {self.aupr:1.4f} AUROC = {self.auroc:1.4f}")
        return self

    def to_frame(self) -> pd.DataFrame:
        """Curve coordinates as a table (one row per point)."""
        return pd.DataFrame({
            "recall": self.recall,
            "precision": self.precision,
            "tpr": self.tpr,
            "fpr": self.fpr,
        })

    def save(self, output_dir: Optional[str | Path] = ".") -> List[Path]:
        """
        Write ``<prediction>_<network>_curves.tsv`` (with header) and the
        plotting points ``<prediction>_<network>_points.txt``. Errors are
        logged.
        """
        if self.aupr is None:
            self.run()

        prefix = (self.rank_matrix.name, self.facts.name)
        written = []
        try:
            written.append(write_table(
                self.to_frame(), result_path(output_dir, *prefix, "curves.tsv"), header=True
            ))
            written.append(write_text(
                f"PR\t{self.pr_points}\nROC\t{self.roc_points}\n",
                result_path(output_dir, *prefix, "points.txt"),
            ))
        except OSError as e:
            logger.warning(f"Error saving curves of {self.facts.name}: {e}")

        return written

    def plot(
        self,
        curves: Sequence[str] = ("pr", "roc"),
        save_path: Optional[str | Path] = None,
    ) -> "Figure":
        """
        Plot the PR and/or ROC curve, one panel per curve.

        Parameters
        ----------
        curves : sequence of str
            Any of "pr" and "roc".
        save_path : str or Path, optional
            Also save the figure there.

        Returns
        -------
        matplotlib.figure.Figure
        """
        try:
            import matplotlib.pyplot as plt
        except ImportError:
            logger.error("matplotlib required for plotting")
            raise

        if not curves or set(curves) - {"pr", "roc"}:
            raise ValueError(f"Invalid curves: {list(curves)}. Must be among ['pr', 'roc']")

        if self.aupr is None:
            self.run()

        fig, axes = plt.subplots(1, len(curves), figsize=(4 * len(curves), 3.5), squeeze=False)

        for ax, curve in zip(axes[0], curves):
            if curve == "pr":
                ax.plot(self.recall, self.precision, color="steelblue", linewidth=1)
                ax.set_xlabel("Recall")
                ax.set_ylabel("Precision")
                ax.set_title(f"PR (AUPR = {self.aupr:.3f})", fontsize=10)
            else:
                ax.plot(self.fpr, self.tpr, color="steelblue", linewidth=1)
                ax.plot([0, 1], [0, 1], color="gray", linestyle="--", linewidth=0.8)
                ax.set_xlabel("False positive rate")
                ax.set_ylabel("True positive rate")
                ax.set_title(f"ROC (AUROC = {self.auroc:.3f})", fontsize=10)
            ax.set_xlim(0, 1)
            ax.set_ylim(0, 1.02)

        fig.suptitle(f"{self.rank_matrix.name} {self.facts.name}".strip(), fontsize=11)
        fig.tight_layout()

        if save_path:
            fig.savefig(save_path, dpi=150, bbox_inches="tight")
            logger.info(f"Curves of {self.facts.name} saved to {save_path}")

        return fig

    def save_plot(
        self,
        curves: Sequence[str] = ("pr", "roc"),
        output_dir: Optional[str | Path] = ".",
    ) -> Optional[Path]:
        """Write ``<prediction>_<network>_curves.png``; errors are logged."""
        import matplotlib.pyplot as plt

        filepath = result_path(output_dir, self.rank_matrix.name, self.facts.name, "curves.png")
        try:
            filepath.parent.mkdir(parents=True, exist_ok=True)
            fig = self.plot(curves, save_path=filepath)
        except OSError as e:
            plt.close()
            logger.warning(f"Error saving curve plot of {self.facts.name}: {e}")
            return None

        plt.close(fig)
        return filepath
