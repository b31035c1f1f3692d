"""
Significance Testing

Two-sided Mann-Whitney rank-sum tests comparing the prediction confidence
of a structural class of edges against a background sample.
"""

from typing import Callable, Sequence

import numpy as np
from scipy import stats

from ..utils.logging import get_logger


logger = get_logger("significance")


# P-value / median of a comparison that was not computed
NOT_COMPUTED = -1.0

DEFAULT_PVALUE_FLOOR = 1e-200

RankSumTest = Callable[[Sequence[float], Sequence[float]], float]


def rank_sum_pvalue(sample: Sequence[float], background: Sequence[float]) -> float:
    """
    Two-sided p-value of the Mann-Whitney U test.

    Parameters
    ----------
    sample : sequence of float
        Ranks of the structural class.
    background : sequence of float
        Reference ranks.

    Returns
    -------
    float
        P-value, NaN if the test is undefined (e.g. all values tied).
    """
    sample = np.asarray(sample, dtype=float)
    background = np.asarray(background, dtype=float)

    with np.errstate(divide="ignore", invalid="ignore"):
        result = stats.mannwhitneyu(sample, background, alternative="two-sided")

    return float(result.pvalue)


def compare_to_background(
    sample: Sequence[float],
    background: Sequence[float],
    test: RankSumTest = rank_sum_pvalue,
    pvalue_floor: float = DEFAULT_PVALUE_FLOOR,
) -> float:
    """
    P-value of the divergence between a sample and the background.

    Both samples need more than one value, otherwise the test is skipped
    and NOT_COMPUTED is returned. P-values below ``pvalue_floor`` or equal
    to 2.0 (overflow of some rank-sum implementations) are reported as 0.0.
    """
    if len(sample) <= 1 or len(background) <= 1:
        return NOT_COMPUTED

    pvalue = test(sample, background)

    if np.isnan(pvalue):
        logger.warning(
            f"Rank-sum test undefined for samples of size {len(sample)} and {len(background)}"
        )
        return NOT_COMPUTED

    if pvalue < pvalue_floor or pvalue == 2.0:
        return 0.0

    return pvalue
