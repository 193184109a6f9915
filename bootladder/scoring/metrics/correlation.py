"""Correlation metrics: Pearson (linear) and Spearman (rank).

Both take gold and predicted arrays of equal length and return a value in
[-1, 1]. Higher is better.

A bootstrap resample can repeat a single pair, leaving a series with zero
variance where correlation is undefined. Such a resample scores 1.0 when
gold and predicted agree element-wise and 0.0 otherwise, so perfect
predictions keep a perfect score on every draw.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray
from scipy import stats


def _degenerate_correlation(
    gold: NDArray[np.float64],
    predicted: NDArray[np.float64],
) -> float | None:
    """Score for identical or zero-variance inputs, else None."""
    if np.array_equal(gold, predicted):
        return 1.0
    if len(gold) >= 2 and gold.std() > 0 and predicted.std() > 0:
        return None
    return 0.0


def pearson_correlation(
    gold: NDArray[np.float64],
    predicted: NDArray[np.float64],
) -> float:
    """Compute the Pearson correlation between gold and predicted values.

    Args:
        gold: True values
        predicted: Predicted values aligned with ``gold``

    Returns:
        Correlation coefficient in [-1, 1]
    """
    gold = np.asarray(gold, dtype=np.float64)
    predicted = np.asarray(predicted, dtype=np.float64)

    degenerate = _degenerate_correlation(gold, predicted)
    if degenerate is not None:
        return degenerate

    corr = np.corrcoef(gold, predicted)[0, 1]
    return float(np.clip(corr, -1.0, 1.0))


def spearman_correlation(
    gold: NDArray[np.float64],
    predicted: NDArray[np.float64],
) -> float:
    """Compute the Spearman rank correlation between gold and predicted values.

    Pearson correlation of average-tie ranks (``scipy.stats.rankdata``).
    """
    gold = np.asarray(gold, dtype=np.float64)
    predicted = np.asarray(predicted, dtype=np.float64)

    degenerate = _degenerate_correlation(gold, predicted)
    if degenerate is not None:
        return degenerate

    return pearson_correlation(
        stats.rankdata(gold, method="average"),
        stats.rankdata(predicted, method="average"),
    )


__all__ = [
    "pearson_correlation",
    "spearman_correlation",
]
