"""
Network Motif Analysis

Aggregates the motif profiles of a batch of networks and tests whether the
prediction confidence of each motif edge diverges from the background.
"""

from pathlib import Path
from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from ..motifs.catalog import NUM_EDGE_TYPES, MotifCatalog, default_catalog
from ..motifs.profile import MotifProfile
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
from .background import BackgroundAnalysis


logger = get_logger("motif_analysis")


class MotifAnalysis:
    """
    Batch network motif analysis.

    Parameters
    ----------
    profiles : sequence of MotifProfile
        Motif profiles (with ranks) of the networks of the batch.
    background : BackgroundAnalysis
        Background confidence of the same batch.
    catalog : MotifCatalog, optional
        Motif definitions, defaults to the shared catalog.
    test : callable, optional
        Two-sample rank-sum test returning a p-value.
    pvalue_floor : float
        P-values below this value are reported as 0.

    Attributes
    ----------
    median_ranks, divergences, pvalues : np.ndarray
        ``(13, 6)`` tables per motif and edge slot, -1 where not computed.
    num_instances, num_non_overlapping : np.ndarray
        Instance counts per motif, summed over the batch.
    avg_degrees : np.ndarray
        ``(13, 6)`` mean in/outdegree of the motif nodes, NaN for motifs
        without instances.
    """

    def __init__(
        self,
        profiles: Sequence[MotifProfile],
        background: BackgroundAnalysis,
        catalog: Optional[MotifCatalog] = None,
        test: RankSumTest = rank_sum_pvalue,
        pvalue_floor: float = DEFAULT_PVALUE_FLOOR,
    ):
        self.profiles = list(profiles)
        self.background = background
        self.catalog = catalog or default_catalog()
        self.test = test
        self.pvalue_floor = pvalue_floor

        n_types = self.catalog.num_motif_types
        self.median_ranks = np.full((n_types, NUM_EDGE_TYPES), NOT_COMPUTED)
        self.divergences = np.full((n_types, NUM_EDGE_TYPES), NOT_COMPUTED)
        self.pvalues = np.full((n_types, NUM_EDGE_TYPES), NOT_COMPUTED)
        self.num_instances = np.zeros(n_types, dtype=int)
        self.num_non_overlapping = np.zeros(n_types, dtype=int)
        self.avg_degrees = np.full((n_types, NUM_EDGE_TYPES), np.nan)

    def run(self) -> "MotifAnalysis":
        """Compute medians, divergences and p-values of every motif."""
        missing = [p.network for p in self.profiles if not p.has_ranks]
        if missing:
            logger.warning(f"Motif profiles without ranks are ignored: {', '.join(missing)}")

        self._count_instances()
        self._average_degrees()

        for motif in self.catalog.motifs:
            self._analyze_motif(motif.id)

        logger.info(f"Motif analysis done ({int(self.num_instances.sum())} instances)")
        return self

    def _count_instances(self):
        for profile in self.profiles:
            self.num_instances += profile.num_instances
            self.num_non_overlapping += profile.num_non_overlapping

    def _average_degrees(self):
        """Quick and dirty: the symmetry of the motifs is not taken into account."""
        sums = np.zeros((self.catalog.num_motif_types, NUM_EDGE_TYPES))
        for profile in self.profiles:
            sums += profile.degree_sums[:, 1:]

        counts = self.num_instances[:, np.newaxis]
        with np.errstate(divide="ignore", invalid="ignore"):
            self.avg_degrees = np.where(counts > 0, sums / counts, np.nan)

    def _pooled_ranks(self, motif_id: int) -> List[List[float]]:
        """Corrected rank sample of each edge slot, equivalent slots pooled."""
        slot_ranks: List[List[float]] = [[] for _ in range(NUM_EDGE_TYPES)]
        for profile in self.profiles:
            rows = profile.ranks_of(motif_id)
            for slot in range(NUM_EDGE_TYPES):
                slot_ranks[slot].extend(rows[:, slot].tolist())

        pooled: List[List[float]] = [[] for _ in range(NUM_EDGE_TYPES)]
        for group in self.catalog.motifs[motif_id].equivalent_slots:
            sample: List[float] = []
            for slot in group:
                sample.extend(slot_ranks[slot])
            correct_ranks(sample)
            for slot in group:
                pooled[slot] = sample

        return pooled

    def _analyze_motif(self, motif_id: int):
        if self.num_instances[motif_id] == 0:
            return

        ranks = self._pooled_ranks(motif_id)
        if not any(ranks):
            return

        for slot in range(NUM_EDGE_TYPES):
            self.median_ranks[motif_id, slot] = median(ranks[slot])

        motif = self.catalog.motifs[motif_id]
        for slot in range(NUM_EDGE_TYPES):
            category = motif.category(slot)
            self.divergences[motif_id, slot] = (
                self.median_ranks[motif_id, slot] - self.background.medians[category]
            )
            self.pvalues[motif_id, slot] = compare_to_background(
                ranks[slot],
                self.background.ranks[category],
                test=self.test,
                pvalue_floor=self.pvalue_floor,
            )

    def tables(self) -> Dict[str, pd.DataFrame]:
        """Result tables indexed by motif label."""
        index = [motif.label for motif in self.catalog.motifs]
        columns = ["0->1", "0->2", "1->0", "1->2", "2->0", "2->1"]

        return {
            "motif_confidence": pd.DataFrame(self.median_ranks, index=index, columns=columns),
            "motif_confidence_divergence": pd.DataFrame(self.divergences, index=index, columns=columns),
            "motif_pvalues": pd.DataFrame(self.pvalues, index=index, columns=columns),
            "motif_instances": pd.DataFrame(
                {"instances": self.num_instances, "non_overlapping": self.num_non_overlapping},
                index=index,
            ),
            "motif_avg_degrees": pd.DataFrame(
                self.avg_degrees,
                index=index,
                columns=["indegree_0", "indegree_1", "indegree_2", "outdegree_0", "outdegree_1", "outdegree_2"],
            ),
        }

    def save(self, name: str, output_dir: str | Path = ".") -> List[Path]:
        """
        Write the five result tables (no header, one row per motif; the
        instance table has one row of total and one of non-overlapping
        counts). Errors are logged.
        """
        written = []
        instances = np.vstack([self.num_instances, self.num_non_overlapping])

        try:
            written.append(write_table(self.median_ranks, result_path(output_dir, name, "motif_confidence.tsv")))
            written.append(write_table(self.divergences, result_path(output_dir, name, "motif_confidence_divergence.tsv")))
            written.append(write_table(self.pvalues, result_path(output_dir, name, "motif_pvalues.tsv")))
            written.append(write_table(instances, result_path(output_dir, name, "motif_instances.tsv")))
            written.append(write_table(self.avg_degrees, result_path(output_dir, name, "motif_avg_degrees.tsv")))
        except OSError as e:
            logger.warning(f"Error saving motif analysis {name}: {e}")

        return written
