"""
Motif Profiles

Enumerates the connected triads of a gold standard, classifies them with
the motif catalog and collects the prediction ranks of their six possible
edges.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

import numpy as np
import pandas as pd

from ..network.gold_standard import GraphFacts
from ..network.prediction import RankMatrix
from ..utils.io import result_path, write_table
from ..utils.logging import get_logger
from .catalog import NUM_EDGE_TYPES, MotifCatalog, default_catalog


logger = get_logger("motif_profile")


Triad = Tuple[int, int, int]


@dataclass
class MotifProfile:
    """
    Motif instances of one gold standard (and one prediction).

    Attributes
    ----------
    network : str
        Gold standard name.
    prediction : str
        Prediction name, empty in counting-only mode.
    motif_ids : np.ndarray
        Motif id of every instance, in enumeration order.
    ranks : np.ndarray or None
        ``(n_instances, 6)`` ranks of the six edge slots of every instance
        in standard slot order. None when no prediction was given.
    num_instances : np.ndarray
        Number of instances per motif type.
    num_non_overlapping : np.ndarray
        Number of non-overlapping instances per motif type. Approximate:
        an instance is counted if none of its nodes is part of a previously
        counted instance of the same type, so the count depends on the
        enumeration order.
    degree_sums : np.ndarray
        ``(13, 7)`` per motif: instance count, summed indegree of nodes
        0, 1, 2 and summed outdegree of nodes 0, 1, 2.
    """

    network: str
    prediction: str
    motif_ids: np.ndarray
    ranks: Optional[np.ndarray]
    num_instances: np.ndarray
    num_non_overlapping: np.ndarray
    degree_sums: np.ndarray

    @property
    def has_ranks(self) -> bool:
        return self.ranks is not None

    @property
    def total_instances(self) -> int:
        return int(self.num_instances.sum())

    def ranks_of(self, motif_id: int) -> np.ndarray:
        """Rank rows of the instances of one motif type."""
        if self.ranks is None:
            return np.empty((0, NUM_EDGE_TYPES))
        return self.ranks[self.motif_ids == motif_id]

    def average_degrees(self) -> np.ndarray:
        """``(13, 6)`` mean in/outdegree of the motif nodes, NaN for absent motifs."""
        counts = self.degree_sums[:, :1]
        with np.errstate(divide="ignore", invalid="ignore"):
            return np.where(counts > 0, self.degree_sums[:, 1:] / counts, np.nan)

    def rank_table(self) -> pd.DataFrame:
        """One row per instance: motif id followed by the six slot ranks."""
        columns = ["motif", "r01", "r02", "r10", "r12", "r20", "r21"]
        if self.ranks is None:
            return pd.DataFrame(columns=columns)

        table = pd.DataFrame(self.ranks, columns=columns[1:])
        table.insert(0, "motif", self.motif_ids.astype(float))
        return table

    def save(self, output_dir: str | Path = ".") -> List[Path]:
        """
        Write the motif profile, average degrees and instance counts.

        Errors are logged; the profile stays available in memory.
        """
        written = []
        prefix = f"{self.prediction}_{self.network}" if self.prediction else self.network

        try:
            if self.ranks is not None:
                written.append(write_table(self.rank_table(), result_path(output_dir, prefix, "motifProfile.tsv")))
            written.append(write_table(self.degree_sums, result_path(output_dir, self.network, "motifAvgDegree.tsv")))
            written.append(write_table(
                self.num_non_overlapping.reshape(-1, 1),
                result_path(output_dir, prefix, "numNonOverlappingMotifs.tsv"),
            ))
            written.append(write_table(
                self.num_instances.reshape(-1, 1),
                result_path(output_dir, prefix, "numMotifs.tsv"),
            ))
        except OSError as e:
            logger.warning(f"Error saving motif profile of {self.network}: {e}")

        return written


class MotifProfiler:
    """
    Count and identify all triads (three-node motifs) of a gold standard.

    Parameters
    ----------
    facts : GraphFacts
        Structure of the gold standard.
    catalog : MotifCatalog, optional
        Motif definitions, defaults to the shared catalog.
    rank_matrix : RankMatrix, optional
        Prediction to collect edge ranks from. Without it the profiler only
        counts motifs.
    """

    def __init__(
        self,
        facts: GraphFacts,
        catalog: Optional[MotifCatalog] = None,
        rank_matrix: Optional[RankMatrix] = None,
    ):
        self.facts = facts
        self.catalog = catalog or default_catalog()
        self.rank_matrix = rank_matrix

    def triads(self) -> Iterator[Triad]:
        """
        Yield every connected triad exactly once.

        Each triad is associated with its node of smallest index g. For
        every neighbor n of g with a larger index, the third node m is a
        neighbor of g with index larger than n, or a neighbor of n with
        index larger than g that is not a neighbor of g.
        """
        linked = self.facts.undirected_neighbors()
        n_nodes = self.facts.num_nodes

        for g in range(n_nodes):
            neighbors = [int(i) for i in np.flatnonzero(linked[g]) if i > g]
            neighbor_set = set(neighbors)

            for position, n in enumerate(neighbors):
                candidates = neighbors[position + 1:]
                candidates += [
                    int(i) for i in np.flatnonzero(linked[n])
                    if i > g and i != n and i not in neighbor_set
                ]

                for m in candidates:
                    yield (g, n, m)

    def triad_code(self, triad: Triad) -> int:
        """
        6-bit code of a triad (a, b, c): the bits are the edges
        a->b, a->c, b->a, b->c, c->a, c->b, most significant first.
        """
        A = self.facts.adjacency
        a, b, c = triad

        code = 0
        if A[b, c]:  # c->b
            code += 1
        if A[a, c]:  # c->a
            code += 2
        if A[c, b]:  # b->c
            code += 4
        if A[a, b]:  # b->a
            code += 8
        if A[c, a]:  # a->c
            code += 16
        if A[b, a]:  # a->b
            code += 32
        return code

    def canonical_order(self, triad: Triad) -> Tuple[int, Triad]:
        """Motif id of a triad and its nodes relabeled to the standard representation."""
        motif_id, permutation = self.catalog.classify(self.triad_code(triad))

        ordered = [0, 0, 0]
        for node, position in zip(triad, permutation):
            ordered[position] = node

        return motif_id, (ordered[0], ordered[1], ordered[2])

    def profile(self) -> MotifProfile:
        """Enumerate the triads and build the motif profile."""
        n_types = self.catalog.num_motif_types
        R = self.rank_matrix.ranks if self.rank_matrix is not None else None
        indegree = self.facts.indegree
        outdegree = self.facts.outdegree

        motif_ids: List[int] = []
        rank_rows: List[Tuple[float, ...]] = []
        num_instances = np.zeros(n_types, dtype=int)
        num_non_overlapping = np.zeros(n_types, dtype=int)
        degree_sums = np.zeros((n_types, NUM_EDGE_TYPES + 1))
        used_nodes = [set() for _ in range(n_types)]

        for triad in self.triads():
            motif_id, (a, b, c) = self.canonical_order(triad)

            if not used_nodes[motif_id].intersection(triad):
                num_non_overlapping[motif_id] += 1
                used_nodes[motif_id].update(triad)
            num_instances[motif_id] += 1
            motif_ids.append(motif_id)

            degree_sums[motif_id] += (
                1,
                indegree[a], indegree[b], indegree[c],
                outdegree[a], outdegree[b], outdegree[c],
            )

            if R is not None:
                rank_rows.append((R[b, a], R[c, a], R[a, b], R[c, b], R[a, c], R[b, c]))

        ranks = None
        if R is not None:
            ranks = np.array(rank_rows, dtype=float).reshape(-1, NUM_EDGE_TYPES)
        else:
            logger.debug(f"No prediction for {self.facts.name}, counting motifs only")

        logger.info(f"Found {len(motif_ids)} motif instances in {self.facts.name}")

        return MotifProfile(
            network=self.facts.name,
            prediction=self.rank_matrix.name if self.rank_matrix is not None else "",
            motif_ids=np.array(motif_ids, dtype=int),
            ranks=ranks,
            num_instances=num_instances,
            num_non_overlapping=num_non_overlapping,
            degree_sums=degree_sums,
        )
