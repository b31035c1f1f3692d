"""
Rank Correction

Medians of rank samples that contain edges omitted from incomplete
prediction lists.
"""

from typing import List, MutableSequence, Sequence

import numpy as np


# Values above -TOLERANCE are treated as corrected
TOLERANCE = 1e-12


def correct_ranks(ranks: MutableSequence[float]) -> MutableSequence[float]:
    """
    Correct the ranks of omitted edges in place.

    Some predictions do not include all possible edges. The omitted edges
    were all assigned the negative of the next rank::

        y1 = -.6 -.6 -.6 -.6 -.6 -.6 -.6 0.7 0.8 0.9 1.0
             |------ not predicted ----|

    Ranking them in random order instead would give::

        y2 = 0.0 0.1 0.2 0.3 0.4 0.5 0.6 0.7 0.8 0.9 1.0
             |------ not predicted ----|

    median(y1) = 0.3 while any random ordering has median 0.5. The ``k``
    values tied at the current (negative) minimum ``v`` are replaced by
    ``i * (-v) / (k + 1)`` for ``i = 1..k`` in their order of appearance,
    until no negative value is left. A pooled sample can contain several
    sentinel values (one per network), each is spread over its own range.

    Parameters
    ----------
    ranks : list or np.ndarray
        Rank sample, modified in place.

    Returns
    -------
    list or np.ndarray
        The same object, for chaining.
    """
    if len(ranks) == 0:
        return ranks

    values = np.asarray(ranks, dtype=float)
    current = values.min()

    while current < -TOLERANCE:
        tied = np.flatnonzero(values == current)
        delta = -current / (len(tied) + 1)
        values[tied] = delta * np.arange(1, len(tied) + 1)
        current = values.min()

    if isinstance(ranks, np.ndarray):
        if values is not ranks:
            ranks[...] = values
    else:
        ranks[:] = values.tolist()

    return ranks


def median(values: Sequence[float]) -> float:
    """
    Median of a sample: the middle element of the sorted sample, or the
    mean of the two middle elements.
    """
    if len(values) == 0:
        raise ValueError("The sample does not contain any elements")

    ordered = np.sort(np.asarray(values, dtype=float))
    n = len(ordered)

    if n % 2 == 1:
        return float(ordered[n // 2])
    return float((ordered[n // 2 - 1] + ordered[n // 2]) / 2.0)


def corrected_median(ranks: List[float]) -> float:
    """Correct ``ranks`` in place and return the median."""
    correct_ranks(ranks)
    return median(ranks)
