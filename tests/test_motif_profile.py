"""
Tests for the enumeration of triads and motif profiles.
"""

import itertools

import numpy as np
import pytest

from grn_eval.motifs.catalog import MOTIF_DEFINITIONS, code_to_bits
from grn_eval.motifs.profile import MotifProfiler
from grn_eval.network.gold_standard import GoldStandard, GraphFacts


@pytest.fixture
def random_facts():
    """Random directed network on 9 nodes."""
    rng = np.random.default_rng(7)
    labels = [f"G{i}" for i in range(9)]
    edges = [
        (labels[s], labels[t])
        for s in range(9) for t in range(9)
        if s != t and rng.random() < 0.25
    ]
    return GraphFacts.from_gold_standard(GoldStandard.from_edges("random", edges, labels=labels))


def brute_force_triads(facts):
    linked = facts.undirected_neighbors()
    triads = []
    for triad in itertools.combinations(range(facts.num_nodes), 3):
        pairs = sum(linked[i, j] for i, j in itertools.combinations(triad, 2))
        if pairs >= 2:
            triads.append(triad)
    return triads


# ============================================================================
# Enumeration
# ============================================================================

class TestTriadEnumeration:
    """Tests for the enumeration of connected triads."""

    def test_cascade_has_one_triad(self, cascade_facts):
        assert list(MotifProfiler(cascade_facts).triads()) == [(0, 1, 2)]

    def test_every_connected_triad_once(self, random_facts):
        """Test the enumeration against all node triples."""
        found = [tuple(sorted(t)) for t in MotifProfiler(random_facts).triads()]

        assert len(found) == len(set(found))
        assert sorted(found) == brute_force_triads(random_facts)

    def test_smallest_node_first(self, random_facts):
        for g, n, m in MotifProfiler(random_facts).triads():
            assert g < n and g < m

    def test_empty_network(self):
        gold = GoldStandard.from_edges("empty", [], labels=["A", "B", "C"])
        facts = GraphFacts.from_gold_standard(gold)
        assert list(MotifProfiler(facts).triads()) == []


class TestCanonicalOrder:
    """Tests for the classification of triads."""

    def test_cascade_code(self, cascade_facts):
        assert MotifProfiler(cascade_facts).triad_code((0, 1, 2)) == 0b100100

    def test_reversed_cascade(self, cascade_facts):
        """Test a relabeled cascade is ordered start, middle, end."""
        motif_id, ordered = MotifProfiler(cascade_facts).canonical_order((2, 1, 0))
        assert motif_id == 2
        assert ordered == (0, 1, 2)

    def test_canonical_order_gives_standard_pattern(self, random_facts):
        """Test the relabeled triad has the standard pattern of its motif."""
        profiler = MotifProfiler(random_facts)
        for triad in profiler.triads():
            motif_id, ordered = profiler.canonical_order(triad)
            assert code_to_bits(profiler.triad_code(ordered)) == MOTIF_DEFINITIONS[motif_id][0]

    def test_self_loops_ignored(self):
        gold = GoldStandard.from_edges("auto", [("A", "A"), ("A", "B"), ("B", "C")])
        profiler = MotifProfiler(GraphFacts.from_gold_standard(gold))
        assert profiler.canonical_order((0, 1, 2))[0] == 2


# ============================================================================
# Profiles
# ============================================================================

class TestMotifProfile:
    """Tests for profiles with and without prediction."""

    def test_rank_rows(self, cascade_facts, cascade_ranks):
        """Test the ranks follow the standard slot order."""
        profile = MotifProfiler(cascade_facts, rank_matrix=cascade_ranks).profile()

        assert profile.has_ranks
        assert list(profile.motif_ids) == [2]
        assert profile.ranks[0] == pytest.approx([1.0, 0.6, 0.4, 0.8, 0.2, 0.0])

    def test_counts(self, cascade_facts):
        profile = MotifProfiler(cascade_facts).profile()

        assert profile.num_instances[2] == 1
        assert profile.total_instances == 1
        assert profile.num_non_overlapping[2] == 1

    def test_counting_only_mode(self, cascade_facts):
        """Test a profile without prediction has no ranks."""
        profile = MotifProfiler(cascade_facts).profile()

        assert not profile.has_ranks
        assert profile.prediction == ""
        assert profile.ranks_of(2).shape == (0, 6)
        assert profile.rank_table().empty

    def test_degree_sums(self, cascade_facts):
        profile = MotifProfiler(cascade_facts).profile()

        assert list(profile.degree_sums[2]) == [1, 0, 1, 1, 1, 1, 0]
        averages = profile.average_degrees()
        assert list(averages[2]) == [0, 1, 1, 1, 1, 0]
        assert np.isnan(averages[0]).all()

    def test_instances_match_enumeration(self, random_facts):
        profile = MotifProfiler(random_facts).profile()
        assert profile.total_instances == len(brute_force_triads(random_facts))
        assert (profile.num_non_overlapping <= profile.num_instances).all()

    def test_non_overlapping_fan_out(self):
        """Test two fan-outs sharing their hub count once as non-overlapping."""
        gold = GoldStandard.from_edges("hub", [("H", "A"), ("H", "B"), ("H", "C")])
        profile = MotifProfiler(GraphFacts.from_gold_standard(gold)).profile()

        assert profile.num_instances[0] == 3
        assert profile.num_non_overlapping[0] == 1

    def test_save(self, cascade_facts, cascade_ranks, tmp_path):
        profile = MotifProfiler(cascade_facts, rank_matrix=cascade_ranks).profile()
        written = profile.save(tmp_path)

        names = {path.name for path in written}
        assert names == {
            "pred_cascade_motifProfile.tsv",
            "cascade_motifAvgDegree.tsv",
            "pred_cascade_numNonOverlappingMotifs.tsv",
            "pred_cascade_numMotifs.tsv",
        }
        first = (tmp_path / "pred_cascade_motifProfile.tsv").read_text().split("\n")[0]
        assert first.split("\t")[0] == "2.0"
