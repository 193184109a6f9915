"""Bootstrap sampler.

Each draw resamples a paired sample of length L with replacement (L indices
uniform on [0, L)) and applies a score function to the resampled gold and
predicted values. n draws give a score distribution of length n.

Draws run in seeded chunks (see ``worker.pool``), so a seeded run returns
the same distribution for any worker count. Every draw must produce a
finite score: a failing draw aborts the run, because dropping it would bias
the distribution.
"""

from __future__ import annotations

import logging
import math
import threading
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from bootladder.config.ladder_params import get_ladder_params

from .metrics.registry import ScoreFunction
from .paired import PairedSample
from .types import BootstrapCancelled, InvalidParameters, ScoreComputationError
from .worker.pool import DrawChunk, DrawPool, plan_draw_chunks

logger = logging.getLogger(__name__)


def draw_indices(rng: np.random.Generator, length: int) -> NDArray[np.int64]:
    """Draw ``length`` indices uniformly with replacement from [0, length)."""
    return rng.integers(0, length, size=length)


def score_draw(
    sample: PairedSample,
    indices: NDArray[np.int64],
    score_function: ScoreFunction,
    draw: int = 0,
) -> float:
    """Score one resample of ``sample``.

    Raises:
        ScoreComputationError: If the score function raises or returns a
            non-finite value
    """
    gold = sample.gold[indices]
    predicted = sample.predicted[indices]
    try:
        value = float(score_function(gold, predicted))
    except Exception as e:
        raise ScoreComputationError(
            f"score function {score_function.name!r} failed on draw {draw}: {e}"
        ) from e

    if not math.isfinite(value):
        raise ScoreComputationError(
            f"score function {score_function.name!r} returned {value} on draw {draw}"
        )
    return value


def _run_chunk(
    sample: PairedSample,
    score_function: ScoreFunction,
    chunk: DrawChunk,
    stop: threading.Event,
) -> NDArray[np.float64]:
    rng = chunk.generator()
    length = len(sample)
    scores = np.empty(chunk.size, dtype=np.float64)
    for i in range(chunk.size):
        if stop.is_set():
            raise BootstrapCancelled(f"cancelled at draw {chunk.start + i}")
        scores[i] = score_draw(sample, draw_indices(rng, length), score_function, chunk.start + i)
    return scores


def bootstrap_distribution(
    sample: PairedSample,
    score_function: ScoreFunction,
    n_draws: int,
    seed: int | np.random.SeedSequence | None = None,
    *,
    max_workers: Optional[int] = None,
    chunk_size: Optional[int] = None,
    cancel_event: Optional[threading.Event] = None,
) -> NDArray[np.float64]:
    """Compute a bootstrap score distribution.

    Args:
        sample: Paired sample to resample
        score_function: Score applied to each resample
        n_draws: Number of draws (>= 1)
        seed: Integer or SeedSequence for reproducibility; None uses fresh
            OS entropy
        max_workers: Threads evaluating chunks (default from params)
        chunk_size: Draws per seeded chunk (default from params)
        cancel_event: Checked between draws; when set the run aborts

    Returns:
        Array of ``n_draws`` scores, in draw order

    Raises:
        InvalidParameters: If ``n_draws``, ``max_workers`` or ``chunk_size`` < 1
        InvalidSubmission: If the score function is undefined on ``sample``
        ScoreComputationError: If any draw fails
        BootstrapCancelled: If ``cancel_event`` is set mid-run
    """
    params = get_ladder_params()
    if max_workers is None:
        max_workers = params.worker.max_workers
    if chunk_size is None:
        chunk_size = params.bootstrap.chunk_size

    if n_draws < 1:
        raise InvalidParameters(f"n_draws must be >= 1, got {n_draws}")

    scorer = score_function.bind(sample.gold, sample.predicted)
    chunks = plan_draw_chunks(n_draws, chunk_size, seed)
    pool = DrawPool(max_workers)

    logger.debug(
        f"Bootstrapping {score_function.name} on {len(sample)} pairs: "
        f"{n_draws} draws in {len(chunks)} chunks, {pool.max_workers} workers"
    )

    parts = pool.run(
        chunks,
        lambda chunk, stop: _run_chunk(sample, scorer, chunk, stop),
        cancel_event,
    )
    return np.concatenate(parts)


__all__ = [
    "draw_indices",
    "score_draw",
    "bootstrap_distribution",
]
