"""
Tests for the rank-sum comparison against background.
"""

import math

import pytest

from grn_eval.statistics.significance import (
    NOT_COMPUTED,
    compare_to_background,
    rank_sum_pvalue,
)


HIGH = [0.9, 0.95, 0.85, 0.92, 0.88, 0.91]
LOW = [0.1, 0.2, 0.15, 0.05, 0.12, 0.3]


class TestRankSumPvalue:
    """Tests for the Mann-Whitney collaborator."""

    def test_separated_samples(self):
        """Test fully separated samples are significant."""
        pvalue = rank_sum_pvalue(HIGH, LOW)
        assert 0 < pvalue < 0.01

    def test_symmetric(self):
        assert rank_sum_pvalue(HIGH, LOW) == pytest.approx(rank_sum_pvalue(LOW, HIGH))

    def test_same_distribution(self):
        pvalue = rank_sum_pvalue([0.1, 0.4, 0.6, 0.9], [0.2, 0.3, 0.7, 0.8])
        assert pvalue > 0.5


class TestCompareToBackground:
    """Tests for size limits and p-value clamping."""

    def test_identical_samples(self):
        """Test identical samples show no divergence."""
        sample = [0.1, 0.3, 0.5, 0.7, 0.9]
        assert compare_to_background(sample, list(sample)) == pytest.approx(1.0)

    def test_smaller_foreground_significant(self):
        assert compare_to_background(LOW, HIGH) < 0.01

    def test_small_sample_not_computed(self):
        assert compare_to_background([0.5], LOW) == NOT_COMPUTED

    def test_small_background_not_computed(self):
        assert compare_to_background(HIGH, [0.5]) == NOT_COMPUTED

    def test_empty_not_computed(self):
        assert compare_to_background([], []) == NOT_COMPUTED

    def test_underflow_clamped(self):
        """Test p-values below the floor are reported as 0."""
        assert compare_to_background(HIGH, LOW, test=lambda a, b: 1e-250) == 0.0

    def test_overflow_clamped(self):
        """Test the overflow value 2.0 is reported as 0."""
        assert compare_to_background(HIGH, LOW, test=lambda a, b: 2.0) == 0.0

    def test_nan_not_computed(self):
        assert compare_to_background(HIGH, LOW, test=lambda a, b: math.nan) == NOT_COMPUTED

    def test_custom_floor(self):
        assert compare_to_background(HIGH, LOW, test=lambda a, b: 0.001, pvalue_floor=0.01) == 0.0

    def test_regular_pvalue(self):
        assert compare_to_background(HIGH, LOW) == pytest.approx(rank_sum_pvalue(HIGH, LOW))
