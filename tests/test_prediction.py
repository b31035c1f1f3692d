"""
Tests for rank matrices of network predictions.
"""

import numpy as np
import pytest

from grn_eval.exceptions import PredictionFormatError
from grn_eval.network.prediction import (
    NOT_SCORED,
    RankMatrix,
    max_predictions,
    position_to_rank,
)

from conftest import CASCADE_PREDICTION, write_tsv


class TestPositionToRank:
    """Tests for the rank normalization."""

    def test_first_and_last(self):
        assert position_to_rank(0, 6) == 1.0
        assert position_to_rank(5, 6) == 0.0

    def test_intermediate(self):
        assert position_to_rank(1, 6) == pytest.approx(0.8)

    def test_too_small(self):
        with pytest.raises(ValueError):
            position_to_rank(0, 1)

    def test_max_predictions(self):
        assert max_predictions(3, False) == 6
        assert max_predictions(3, True) == 9


class TestRankMatrix:
    """Tests for building rank matrices from ranked lists."""

    def test_complete_list(self, cascade_ranks):
        """Test ranks are stored at [target, source]."""
        assert cascade_ranks.is_complete
        assert cascade_ranks.n_predictions == 6
        assert cascade_ranks.ranks[1, 0] == 1.0
        assert cascade_ranks.rank(1, 2) == pytest.approx(0.8)
        assert cascade_ranks.rank(2, 1) == pytest.approx(0.0)

    def test_diagonal_not_scored(self, cascade_ranks):
        assert (np.diag(cascade_ranks.ranks) == NOT_SCORED).all()

    def test_incomplete_list(self, cascade):
        """Test omitted edges hold the negative of the next rank."""
        rm = RankMatrix.from_rows(cascade, CASCADE_PREDICTION[:2])

        assert not rm.is_complete
        assert rm.rank(0, 1) == 1.0
        assert rm.rank(1, 2) == pytest.approx(0.8)
        assert rm.rank(0, 2) == pytest.approx(-0.6)
        assert rm.rank(2, 1) == pytest.approx(-0.6)
        assert rm.rank(0, 0) == NOT_SCORED

    def test_empty_list(self, cascade):
        rm = RankMatrix.from_rows(cascade, [])
        assert rm.n_predictions == 0
        assert rm.rank(0, 1) == pytest.approx(-1.0)

    def test_blank_rows_skipped(self, cascade):
        rows = [CASCADE_PREDICTION[0], (), ("",), CASCADE_PREDICTION[1]]
        rm = RankMatrix.from_rows(cascade, rows)
        assert rm.n_predictions == 2
        assert rm.rank(1, 2) == pytest.approx(0.8)

    def test_self_loops_predicted(self, cascade):
        """Test the diagonal is scored when self-loops are predicted."""
        rm = RankMatrix.from_rows(cascade, [("G1", "G1", "1")], predict_self_loops=True)

        assert rm.max_predictions == 9
        assert rm.rank(0, 0) == 1.0
        assert rm.rank(1, 1) == pytest.approx(-0.875)
        assert rm.scored_mask().all()

    def test_read_only(self, cascade_ranks):
        with pytest.raises(ValueError):
            cascade_ranks.ranks[0, 1] = 0.5

    def test_wrong_shape(self, cascade):
        with pytest.raises(ValueError):
            RankMatrix(cascade, np.zeros((2, 2)), 0)


class TestPredictionErrors:
    """Tests for fatal input errors."""

    def test_wrong_number_of_fields(self, cascade):
        with pytest.raises(PredictionFormatError) as excinfo:
            RankMatrix.from_rows(cascade, [("G1", "G2")], name="bad")
        assert excinfo.value.line == 1
        assert excinfo.value.source == "bad"

    def test_unknown_label(self, cascade):
        with pytest.raises(PredictionFormatError, match="G9"):
            RankMatrix.from_rows(cascade, [("G1", "G2", "1"), ("G9", "G2", "1")])

    def test_self_loop_not_allowed(self, cascade):
        with pytest.raises(PredictionFormatError, match="self-loops"):
            RankMatrix.from_rows(cascade, [("G1", "G1", "1")])

    def test_duplicate_edge(self, cascade):
        rows = [("G1", "G2", "1"), (), ("G1", "G2", "0.5")]
        with pytest.raises(PredictionFormatError) as excinfo:
            RankMatrix.from_rows(cascade, rows)
        assert excinfo.value.line == 3

    def test_is_value_error(self, cascade):
        with pytest.raises(ValueError):
            RankMatrix.from_rows(cascade, [("G1",)])


class TestPredictionFile:
    """Tests for reading prediction files."""

    def test_from_file(self, cascade, tmp_path):
        path = write_tsv(tmp_path / "my_prediction.txt", CASCADE_PREDICTION[:3])
        rm = RankMatrix.from_file(cascade, path)

        assert rm.name == "my_prediction"
        assert rm.n_predictions == 3
        assert rm.rank(0, 2) == pytest.approx(0.6)

    def test_blank_lines(self, cascade, tmp_path):
        path = tmp_path / "blank.txt"
        path.write_text("G1\tG2\t1\n\nG2\tG3\t0.5\n")
        rm = RankMatrix.from_file(cascade, path)

        assert rm.n_predictions == 2

    def test_missing_file(self, cascade, tmp_path):
        with pytest.raises(FileNotFoundError):
            RankMatrix.from_file(cascade, tmp_path / "missing.txt")

    def test_error_line_number(self, cascade, tmp_path):
        path = tmp_path / "bad.txt"
        path.write_text("G1\tG2\t1\n\nG2\tG3\n")
        with pytest.raises(PredictionFormatError) as excinfo:
            RankMatrix.from_file(cascade, path)
        assert excinfo.value.line == 3

    def test_wide_line_reports_field_count(self, cascade, tmp_path):
        path = tmp_path / "wide.txt"
        path.write_text("G1\tG2\t1\nG2\tG3\t0.5\t7\t8\n")

        with pytest.raises(PredictionFormatError, match="found 5") as excinfo:
            RankMatrix.from_file(cascade, path)
        assert excinfo.value.line == 2
