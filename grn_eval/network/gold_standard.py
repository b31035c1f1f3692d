"""
Gold Standard Networks

The ground-truth regulatory network and the structural facts derived from
it (adjacency matrix, indegrees, outdegrees, strongly connected components).
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

import networkx as nx
import numpy as np

from ..utils.io import read_gold_standard_table
from ..utils.logging import get_logger


logger = get_logger("gold_standard")


@dataclass(frozen=True)
class GoldStandard:
    """
    A directed gold standard network with labeled nodes.

    Attributes
    ----------
    name : str
        Identifier of the network, used in result file names.
    labels : tuple of str
        Node labels; the position of a label is the node index.
    edges : tuple of (int, int)
        Directed edges as (source, target) node indexes, no duplicates.
    """

    name: str
    labels: Tuple[str, ...]
    edges: Tuple[Tuple[int, int], ...]
    _index: Dict[str, int] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self):
        index = {label: i for i, label in enumerate(self.labels)}
        if len(index) != len(self.labels):
            raise ValueError(f"Gold standard {self.name} has duplicate node labels")

        n = len(self.labels)
        for source, target in self.edges:
            if not (0 <= source < n and 0 <= target < n):
                raise ValueError(f"Edge ({source}, {target}) references a node outside the network {self.name}")
        if len(set(self.edges)) != len(self.edges):
            raise ValueError(f"Gold standard {self.name} contains parallel edges")

        object.__setattr__(self, "_index", index)

    @classmethod
    def from_edges(
        cls,
        name: str,
        edges: Iterable[Tuple[str, str]],
        labels: Optional[Sequence[str]] = None,
        allow_self_loops: bool = True,
    ) -> "GoldStandard":
        """
        Build a gold standard from labeled edges.

        Parameters
        ----------
        name : str
            Network identifier.
        edges : iterable of (str, str)
            (source label, target label) pairs. Repeated edges are kept once.
        labels : sequence of str, optional
            All node labels in index order. Defaults to the labels in
            order of first appearance in ``edges``.
        allow_self_loops : bool
            If False, self-loops (autoregulation) are dropped.

        Returns
        -------
        GoldStandard
        """
        edges = list(edges)

        if labels is None:
            labels = []
            seen: Set[str] = set()
            for source, target in edges:
                for label in (source, target):
                    if label not in seen:
                        seen.add(label)
                        labels.append(label)

        index = {label: i for i, label in enumerate(labels)}

        indexed: List[Tuple[int, int]] = []
        seen_edges: Set[Tuple[int, int]] = set()
        num_self_loops = 0

        for source, target in edges:
            if source not in index or target not in index:
                missing = source if source not in index else target
                raise ValueError(f"Unknown node label in gold standard {name}: {missing}")

            edge = (index[source], index[target])
            if edge[0] == edge[1] and not allow_self_loops:
                num_self_loops += 1
                continue
            if edge in seen_edges:
                continue

            seen_edges.add(edge)
            indexed.append(edge)

        if num_self_loops:
            logger.warning(f"Dropped {num_self_loops} self-loops from gold standard {name}")

        return cls(name=name, labels=tuple(labels), edges=tuple(indexed))

    @classmethod
    def from_file(
        cls,
        filepath: str | Path,
        name: Optional[str] = None,
        allow_self_loops: bool = True,
    ) -> "GoldStandard":
        """
        Load a DREAM-style gold standard TSV.

        Node order follows the first appearance of a label in the file,
        including lines flagged 0 (non-edges).
        """
        filepath = Path(filepath)
        table = read_gold_standard_table(filepath)

        labels: List[str] = []
        seen: Set[str] = set()
        for label in table[["source", "target"]].to_numpy().ravel():
            if label not in seen:
                seen.add(label)
                labels.append(label)

        edge_rows = table[table["is_edge"]]
        gold_standard = cls.from_edges(
            name=name or filepath.stem,
            edges=zip(edge_rows["source"], edge_rows["target"]),
            labels=labels,
            allow_self_loops=allow_self_loops,
        )

        logger.info(
            f"Loaded gold standard {gold_standard.name}: "
            f"{gold_standard.num_nodes} nodes, {gold_standard.num_edges} edges"
        )
        return gold_standard

    @property
    def num_nodes(self) -> int:
        return len(self.labels)

    @property
    def num_edges(self) -> int:
        return len(self.edges)

    def index_of(self, label: str) -> Optional[int]:
        """Index of a node label, None if the label is unknown."""
        return self._index.get(label)

    def to_networkx(self) -> nx.DiGraph:
        """Directed networkx graph on the node indexes."""
        graph = nx.DiGraph()
        graph.add_nodes_from(range(self.num_nodes))
        graph.add_edges_from(self.edges)
        return graph

    def strongly_connected_components(self) -> List[Set[int]]:
        """Strongly connected components as sets of node indexes."""
        return [set(c) for c in nx.strongly_connected_components(self.to_networkx())]


@dataclass(frozen=True, eq=False)
class GraphFacts:
    """
    Read-only structural facts of a gold standard.

    Watch out: ``adjacency[i, j]`` is True if there is an edge from node
    *j* to node i (target row, source column).

    Computed once per gold standard and shared by reference with all the
    analyzers of that network; the arrays are not writeable.
    """

    gold_standard: GoldStandard
    adjacency: np.ndarray
    indegree: np.ndarray
    outdegree: np.ndarray

    @classmethod
    def from_gold_standard(cls, gold_standard: GoldStandard) -> "GraphFacts":
        n = gold_standard.num_nodes
        adjacency = np.zeros((n, n), dtype=bool)

        for source, target in gold_standard.edges:
            adjacency[target, source] = True

        indegree = adjacency.sum(axis=1).astype(int)
        outdegree = adjacency.sum(axis=0).astype(int)

        for array in (adjacency, indegree, outdegree):
            array.setflags(write=False)

        return cls(gold_standard, adjacency, indegree, outdegree)

    @property
    def num_nodes(self) -> int:
        return self.gold_standard.num_nodes

    @property
    def num_edges(self) -> int:
        return self.gold_standard.num_edges

    @property
    def name(self) -> str:
        return self.gold_standard.name

    def has_edge(self, source: int, target: int) -> bool:
        return bool(self.adjacency[target, source])

    def undirected_neighbors(self) -> np.ndarray:
        """Boolean matrix, True where two distinct nodes share an edge in either direction."""
        linked = self.adjacency | self.adjacency.T
        np.fill_diagonal(linked, False)
        return linked

    def num_scored_edges(self) -> int:
        """Number of gold edges between distinct nodes (self-loops excluded)."""
        return int(self.adjacency.sum() - np.trace(self.adjacency))
