"""
Tests for gold standards and their structural facts.
"""

import pytest

from grn_eval.network.gold_standard import GoldStandard, GraphFacts


class TestGoldStandard:
    """Tests for building gold standards."""

    def test_from_edges(self, cascade):
        assert cascade.labels == ("G1", "G2", "G3")
        assert cascade.edges == ((0, 1), (1, 2))
        assert cascade.num_nodes == 3
        assert cascade.num_edges == 2

    def test_duplicate_edges_kept_once(self):
        gold = GoldStandard.from_edges("dup", [("A", "B"), ("A", "B")])
        assert gold.num_edges == 1

    def test_self_loops_dropped(self):
        gold = GoldStandard.from_edges("auto", [("A", "A"), ("A", "B")], allow_self_loops=False)
        assert gold.edges == ((0, 1),)
        assert gold.num_nodes == 2

    def test_self_loops_kept(self):
        gold = GoldStandard.from_edges("auto", [("A", "A"), ("A", "B")])
        assert (0, 0) in gold.edges

    def test_explicit_labels(self):
        gold = GoldStandard.from_edges("iso", [("B", "A")], labels=["A", "B", "C"])
        assert gold.num_nodes == 3
        assert gold.edges == ((1, 0),)

    def test_unknown_label(self):
        with pytest.raises(ValueError):
            GoldStandard.from_edges("bad", [("A", "Z")], labels=["A", "B"])

    def test_parallel_edges_rejected(self):
        with pytest.raises(ValueError):
            GoldStandard("bad", ("A", "B"), ((0, 1), (0, 1)))

    def test_index_of(self, cascade):
        assert cascade.index_of("G2") == 1
        assert cascade.index_of("G9") is None

    def test_strongly_connected_components(self, loopy):
        components = sorted(loopy.strongly_connected_components(), key=len)
        assert components == [{4}, {0, 1, 2, 3}]


class TestGoldStandardFile:
    """Tests for reading DREAM-style gold standard files."""

    def test_from_file(self, tmp_path):
        path = tmp_path / "net1_goldstandard.tsv"
        path.write_text("G1\tG2\t1\nG2\tG3\t1\nG1\tG3\t0\nG3\tG4\t0\n")
        gold = GoldStandard.from_file(path)

        assert gold.name == "net1_goldstandard"
        assert gold.labels == ("G1", "G2", "G3", "G4")
        assert gold.edges == ((0, 1), (1, 2))

    def test_two_columns(self, tmp_path):
        path = tmp_path / "net.tsv"
        path.write_text("A\tB\nB\tC\n")
        gold = GoldStandard.from_file(path, name="custom")

        assert gold.name == "custom"
        assert gold.num_edges == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            GoldStandard.from_file(tmp_path / "missing.tsv")


class TestGraphFacts:
    """Tests for adjacency and degrees."""

    def test_adjacency_convention(self, cascade_facts):
        """Test adjacency[target, source] is set for source -> target."""
        assert cascade_facts.adjacency[1, 0]
        assert not cascade_facts.adjacency[0, 1]
        assert cascade_facts.has_edge(0, 1)
        assert not cascade_facts.has_edge(1, 0)

    def test_degrees(self, cascade_facts):
        assert list(cascade_facts.indegree) == [0, 1, 1]
        assert list(cascade_facts.outdegree) == [1, 1, 0]

    def test_read_only(self, cascade_facts):
        with pytest.raises(ValueError):
            cascade_facts.adjacency[0, 0] = True

    def test_undirected_neighbors(self, cascade_facts):
        linked = cascade_facts.undirected_neighbors()
        assert linked[0, 1] and linked[1, 0]
        assert not linked[0, 2]

    def test_num_scored_edges_excludes_self_loops(self):
        gold = GoldStandard.from_edges("auto", [("A", "A"), ("A", "B")])
        facts = GraphFacts.from_gold_standard(gold)
        assert facts.num_edges == 2
        assert facts.num_scored_edges() == 1
