"""Survival concordance (Harrell's C-statistic).

Measures how well predicted risk orders observed time-to-event outcomes.

A pair (i, j) is comparable when subject i had an observed event before
subject j's time (time_i < time_j and event_i == 1). The pair is concordant
when i also got the higher risk score. Tied risk scores count one half.

C = (concordant + 0.5 * tied) / comparable

C = 1 is a perfect ordering, 0.5 is chance. Higher is better. A sample with
no comparable pair (e.g. a resample of one subject) scores 0.5.

Pairs are counted in O(n log n) time and O(n) memory: subjects are visited
from the latest time to the earliest while a Fenwick tree over risk ranks
holds the subjects already seen.
"""

from __future__ import annotations

from typing import List

import numpy as np
from numpy.typing import NDArray

NO_COMPARABLE_PAIRS_SCORE = 0.5


def _fenwick_add(tree: List[int], index: int) -> None:
    while index < len(tree):
        tree[index] += 1
        index += index & -index


def _fenwick_count(tree: List[int], index: int) -> int:
    """Number of inserted ranks <= index (1-based)."""
    total = 0
    while index > 0:
        total += tree[index]
        index -= index & -index
    return total


def concordance_counts(
    time: NDArray[np.float64],
    event: NDArray[np.float64],
    risk: NDArray[np.float64],
) -> tuple[float, float, int]:
    """Count concordant, tied and comparable pairs.

    Args:
        time: Observed or censoring times
        event: 1 if the event was observed, 0 if censored
        risk: Predicted risk scores (higher = earlier event)

    Returns:
        (concordant, tied, comparable)
    """
    time = np.asarray(time, dtype=np.float64)
    event = np.asarray(event, dtype=np.float64)
    risk = np.asarray(risk, dtype=np.float64)

    n = len(time)
    if n == 0:
        return 0.0, 0.0, 0

    _, inverse = np.unique(risk, return_inverse=True)
    ranks = (inverse.reshape(-1) + 1).tolist()
    order = np.argsort(-time, kind="stable").tolist()
    times = time.tolist()
    observed = (event == 1).tolist()

    tree = [0] * (max(ranks) + 1)
    seen = 0
    concordant = 0
    tied = 0
    comparable = 0

    start = 0
    while start < n:
        stop = start + 1
        while stop < n and times[order[stop]] == times[order[start]]:
            stop += 1
        group = order[start:stop]

        # Subjects sharing a time are not comparable with each other, so the
        # whole group is queried before any of it is inserted.
        for i in group:
            if observed[i]:
                below = _fenwick_count(tree, ranks[i] - 1)
                concordant += below
                tied += _fenwick_count(tree, ranks[i]) - below
                comparable += seen
        for i in group:
            _fenwick_add(tree, ranks[i])
        seen += len(group)
        start = stop

    return float(concordant), float(tied), comparable


def concordance_index(
    gold: NDArray[np.float64],
    predicted: NDArray[np.float64],
) -> float:
    """Harrell's C for a survival paired sample.

    Args:
        gold: (n, 2) array of (time, event) rows
        predicted: Risk score per subject

    Returns:
        C-statistic in [0, 1]; 0.5 when no pair is comparable
    """
    gold = np.asarray(gold, dtype=np.float64)
    if gold.ndim != 2 or gold.shape[1] != 2:
        raise ValueError(f"concordance needs (time, event) gold rows, got shape {gold.shape}")

    concordant, tied, comparable = concordance_counts(gold[:, 0], gold[:, 1], predicted)
    if comparable == 0:
        return NO_COMPARABLE_PAIRS_SCORE
    return (concordant + 0.5 * tied) / comparable


__all__ = [
    "NO_COMPARABLE_PAIRS_SCORE",
    "concordance_counts",
    "concordance_index",
]
