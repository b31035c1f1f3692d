"""
Statistics Module

Rank correction for incomplete prediction lists, medians, and rank-sum
significance tests against background.
"""

from .ranks import correct_ranks, median, corrected_median
from .significance import (
    NOT_COMPUTED,
    RankSumTest,
    rank_sum_pvalue,
    compare_to_background,
)

__all__ = [
    "correct_ranks",
    "median",
    "corrected_median",
    "NOT_COMPUTED",
    "RankSumTest",
    "rank_sum_pvalue",
    "compare_to_background",
]
