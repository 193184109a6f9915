"""Bayes-factor estimate from two bootstrap distributions.

The current and previous-best distributions are paired by draw index.
Draw i is a win when current's score is strictly preferred over previous's
under the orientation flag. With win rate p:

    p_clamped = clamp(p, eps, 1 - eps),  eps = 1 / (n + 1)
    BF = p_clamped / (1 - p_clamped)

BF is the estimated odds that the current submission is truly better. The
clamp keeps BF finite and positive when every draw wins or none does.
The draws are independent bootstrap replicates, not matched resamples, so
BF is an odds estimate rather than a paired test statistic.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from .determinism import clamp
from .types import InvalidParameters


@dataclass(frozen=True)
class BayesFactorResult:
    """Result of the Bayes-factor gate."""

    bayes_factor: float
    win_rate: float  # unclamped fraction of draws won by current
    met_cutoff: bool
    n_draws: int


def win_indicators(
    current_dist: NDArray[np.float64],
    prev_dist: NDArray[np.float64],
    larger_is_better: bool = True,
) -> NDArray[np.bool_]:
    """Per-draw indicator that current beats previous. Ties are not wins."""
    current = np.asarray(current_dist, dtype=np.float64)
    prev = np.asarray(prev_dist, dtype=np.float64)

    if current.ndim != 1 or prev.ndim != 1:
        raise InvalidParameters("score distributions must be 1-d")
    if len(current) == 0:
        raise InvalidParameters("score distributions are empty")
    if len(current) != len(prev):
        raise InvalidParameters(
            f"score distributions differ in length: {len(current)} vs {len(prev)}"
        )

    if larger_is_better:
        return current > prev
    return current < prev


def odds_from_win_rate(win_rate: float, n_draws: int) -> float:
    """Convert a win rate over ``n_draws`` to clamped odds p / (1 - p)."""
    if n_draws < 1:
        raise InvalidParameters(f"n_draws must be >= 1, got {n_draws}")
    eps = 1.0 / (n_draws + 1)
    p = clamp(float(win_rate), eps, 1.0 - eps)
    return p / (1.0 - p)


def estimate_bayes_factor(
    current_dist: NDArray[np.float64],
    prev_dist: NDArray[np.float64],
    larger_is_better: bool = True,
    threshold: float = 3.0,
) -> BayesFactorResult:
    """Estimate the Bayes factor that current beats previous.

    Args:
        current_dist: Bootstrap scores of the submission under evaluation
        prev_dist: Bootstrap scores of the reference submission
        larger_is_better: Score orientation
        threshold: Cutoff the Bayes factor must reach (> 0)

    Returns:
        BayesFactorResult with ``met_cutoff = bayes_factor >= threshold``

    Raises:
        InvalidParameters: On empty or mismatched distributions, or a
            non-positive threshold
    """
    if not threshold > 0:
        raise InvalidParameters(f"bayes threshold must be > 0, got {threshold}")

    wins = win_indicators(current_dist, prev_dist, larger_is_better)
    n = len(wins)
    win_rate = float(wins.mean())
    bayes_factor = odds_from_win_rate(win_rate, n)

    return BayesFactorResult(
        bayes_factor=bayes_factor,
        win_rate=win_rate,
        met_cutoff=bayes_factor >= threshold,
        n_draws=n,
    )


__all__ = [
    "BayesFactorResult",
    "win_indicators",
    "odds_from_win_rate",
    "estimate_bayes_factor",
]
