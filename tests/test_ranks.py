"""
Tests for rank correction and medians.
"""

import numpy as np
import pytest

from grn_eval.statistics.ranks import correct_ranks, corrected_median, median


class TestCorrectRanks:
    """Tests for the correction of omitted edges."""

    def test_single_sentinel(self):
        """Test the tied sentinels are spread evenly below their value."""
        ranks = [-0.6] * 7 + [0.7, 0.8, 0.9, 1.0]
        correct_ranks(ranks)

        expected = [0.075 * i for i in range(1, 8)] + [0.7, 0.8, 0.9, 1.0]
        assert ranks == pytest.approx(expected)

    def test_median_after_correction(self):
        """Test the corrected median is no longer biased low."""
        ranks = [-0.6] * 7 + [0.7, 0.8, 0.9, 1.0]
        assert median(ranks) == pytest.approx(-0.6)
        assert corrected_median(ranks) == pytest.approx(0.45)

    def test_several_sentinels(self):
        """Test pooled samples with one sentinel per network."""
        ranks = [-0.5, 0.9, -0.2, -0.5]
        correct_ranks(ranks)

        assert ranks == pytest.approx([0.5 / 3, 0.9, 0.1, 1.0 / 3])
        assert min(ranks) >= 0

    def test_ndarray_in_place(self):
        """Test arrays are corrected in place."""
        ranks = np.array([1.0, -0.5, 0.75])
        result = correct_ranks(ranks)

        assert result is ranks
        assert ranks[1] == pytest.approx(0.25)

    def test_complete_sample_unchanged(self):
        ranks = [1.0, 0.5, 0.0]
        correct_ranks(ranks)
        assert ranks == [1.0, 0.5, 0.0]

    def test_tolerance(self):
        """Test values just below zero are treated as corrected."""
        ranks = [-1e-13, 0.5]
        correct_ranks(ranks)
        assert ranks == [-1e-13, 0.5]

    def test_empty(self):
        assert correct_ranks([]) == []


class TestMedian:
    """Tests for the median."""

    def test_odd(self):
        assert median([3.0, 1.0, 2.0]) == 2.0

    def test_even(self):
        assert median([4.0, 1.0, 3.0, 2.0]) == pytest.approx(2.5)

    def test_single(self):
        assert median([0.3]) == pytest.approx(0.3)

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            median([])
