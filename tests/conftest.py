"""
Shared fixtures: small gold standards and predictions.
"""

import matplotlib
import pytest

from grn_eval.network.gold_standard import GoldStandard, GraphFacts
from grn_eval.network.prediction import RankMatrix
from grn_eval.utils.config import EvaluationSettings

matplotlib.use("Agg")


# Complete prediction of the cascade G1 -> G2 -> G3, both true edges first
CASCADE_PREDICTION = [
    ("G1", "G2", "1.0"),
    ("G2", "G3", "0.9"),
    ("G1", "G3", "0.8"),
    ("G2", "G1", "0.7"),
    ("G3", "G1", "0.6"),
    ("G3", "G2", "0.5"),
]


def write_tsv(path, rows):
    path.write_text("".join("\t".join(row) + "\n" for row in rows))
    return path


@pytest.fixture
def cascade():
    """G1 -> G2 -> G3"""
    return GoldStandard.from_edges("cascade", [("G1", "G2"), ("G2", "G3")])


@pytest.fixture
def cascade_facts(cascade):
    return GraphFacts.from_gold_standard(cascade)


@pytest.fixture
def cascade_ranks(cascade):
    return RankMatrix.from_rows(cascade, CASCADE_PREDICTION, name="pred")


@pytest.fixture
def loopy():
    """A <-> B, B -> C -> D -> B, D -> E"""
    return GoldStandard.from_edges(
        "loopy",
        [("A", "B"), ("B", "A"), ("B", "C"), ("C", "D"), ("D", "B"), ("D", "E")],
    )


@pytest.fixture
def all_flags():
    return EvaluationSettings(
        plot_roc=True,
        auroc=True,
        plot_pr=True,
        aupr=True,
        network_motif_analysis=True,
        edge_type_analysis=True,
        loop_analysis=True,
    )
