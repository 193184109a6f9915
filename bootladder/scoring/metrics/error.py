"""Error metrics: RMSE and range-normalized RMSE. Lower is better."""

from __future__ import annotations

from typing import Callable

import numpy as np
from numpy.typing import NDArray

from ..types import InvalidSubmission


def rmse(
    gold: NDArray[np.float64],
    predicted: NDArray[np.float64],
) -> float:
    """Root-mean-squared error between gold and predicted values."""
    gold = np.asarray(gold, dtype=np.float64)
    predicted = np.asarray(predicted, dtype=np.float64)
    return float(np.sqrt(np.mean((gold - predicted) ** 2)))


def normalized_rmse(
    gold: NDArray[np.float64],
    predicted: NDArray[np.float64],
) -> float:
    """RMSE divided by the range of the gold values.

    NRMSE = RMSE / (max(gold) - min(gold))

    Returns:
        NRMSE, or NaN when the gold values have zero range
    """
    gold = np.asarray(gold, dtype=np.float64)
    value_range = float(gold.max() - gold.min())
    if value_range == 0:
        return float("nan")
    return rmse(gold, predicted) / value_range


def normalized_rmse_for_sample(
    gold: NDArray[np.float64],
    predicted: NDArray[np.float64],
) -> Callable[[NDArray[np.float64], NDArray[np.float64]], float]:
    """Bind NRMSE to the gold range of a full paired sample.

    Every resample of the sample is normalized by the same range, so a draw
    that repeats a single gold value still has a finite score.

    Raises:
        InvalidSubmission: If the sample's gold values have zero range
    """
    gold = np.asarray(gold, dtype=np.float64)
    value_range = float(gold.max() - gold.min())
    if value_range == 0:
        raise InvalidSubmission(
            f"normalized RMSE is undefined: all {len(gold)} gold values are equal"
        )

    def _nrmse(resampled_gold: NDArray[np.float64], resampled_predicted: NDArray[np.float64]) -> float:
        return rmse(resampled_gold, resampled_predicted) / value_range

    return _nrmse


__all__ = [
    "rmse",
    "normalized_rmse",
    "normalized_rmse_for_sample",
]
