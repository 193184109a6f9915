"""bootLadderBoot: the bootstrap-averaged, Bayes-factor-gated ladder.

For each new submission the ladder decides whether to report a freshly
computed score or to repeat the previous best:

1. Pair the submission with the gold standard.
2. First submission (no reference): advance unconditionally.
3. Otherwise bootstrap both the submission and the caller-held reference
   ``bootstrap_n`` times and estimate the Bayes factor that the submission
   is better. Advance if it reaches ``bayes_threshold``, else hold.
4. Report the mean of ``report_bootstrap_n`` draws from whichever sample
   the decision selected.

The ladder keeps no state between calls. The caller passes the previous
reference in as ``prev_predictions`` and stores ``reference_predictions``
from the report for the next call.
"""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, Tuple, Union

import numpy as np

from bootladder.config.ladder_params import get_ladder_params

from .audit.logging import LadderAuditLogger
from .bayes import estimate_bayes_factor
from .bootstrap import bootstrap_distribution
from .determinism import make_seed_sequence, spawn_seed_sequences
from .metrics.registry import ScoreFunction, get_score_function
from .paired import PairedSample, build_paired_sample, build_survival_paired_sample
from .types import Decision, InvalidParameters, ScoreReport, ValidationError
from .validation import check_gold_standard, check_submission, combine_problem_messages

logger = logging.getLogger(__name__)

GoldColumns = Union[str, Tuple[str, str]]


@dataclass
class LadderConfig:
    """Inputs of one ladder call.

    Draw counts, threshold and worker settings left as None fall back to
    ``get_ladder_params()``. ``gold_standard_column`` is a single column for
    scalar scores and a ``(time, event)`` pair for survival scores.
    """

    predictions: Any
    gold_standard: Any
    prediction_column: str = "prediction"
    gold_standard_column: GoldColumns = "validation"
    id_columns: Union[str, Sequence[str]] = ("id",)
    prev_predictions: Any = None
    score_fun: Union[str, ScoreFunction, Callable[..., float]] = "spearman"
    larger_is_better: Optional[bool] = None
    bootstrap_n: Optional[int] = None
    report_bootstrap_n: Optional[int] = None
    bayes_threshold: Optional[float] = None
    verbose: bool = False
    seed: Optional[int] = None
    max_workers: Optional[int] = None
    chunk_size: Optional[int] = None
    cancel_event: Optional[threading.Event] = None
    validate: bool = False


@dataclass(frozen=True)
class _Run:
    """Parameters of a call after defaults and checks."""

    score_function: ScoreFunction
    bootstrap_n: int
    report_bootstrap_n: int
    bayes_threshold: float
    max_workers: int
    chunk_size: int
    id_columns: Tuple[str, ...]


def _positive_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidParameters(f"{name} must be an integer, got {value!r}")
    if value < 1:
        raise InvalidParameters(f"{name} must be >= 1, got {value}")
    return int(value)


def _resolve(config: LadderConfig) -> _Run:
    """Fill defaults and check every parameter before any work starts."""
    params = get_ladder_params()

    def _default(value: Any, fallback: Any) -> Any:
        return fallback if value is None else value

    bootstrap_n = _positive_int(
        "bootstrap_n", _default(config.bootstrap_n, params.bootstrap.bootstrap_n)
    )
    report_bootstrap_n = _positive_int(
        "report_bootstrap_n",
        _default(config.report_bootstrap_n, params.bootstrap.report_bootstrap_n),
    )
    max_workers = _positive_int(
        "max_workers", _default(config.max_workers, params.worker.max_workers)
    )
    chunk_size = _positive_int(
        "chunk_size", _default(config.chunk_size, params.bootstrap.chunk_size)
    )

    threshold = _default(config.bayes_threshold, params.bayes.bayes_threshold)
    try:
        threshold = float(threshold)
    except (TypeError, ValueError) as e:
        raise InvalidParameters(f"bayes_threshold must be a number, got {threshold!r}") from e
    if not (math.isfinite(threshold) and threshold > 0):
        raise InvalidParameters(f"bayes_threshold must be finite and > 0, got {threshold}")

    if config.larger_is_better is not None and not isinstance(config.larger_is_better, bool):
        raise InvalidParameters(
            f"larger_is_better must be True, False or None, got {config.larger_is_better!r}"
        )
    score_function = get_score_function(config.score_fun, config.larger_is_better)

    gold_columns = config.gold_standard_column
    if score_function.kind == "survival":
        if isinstance(gold_columns, str) or len(gold_columns) != 2:
            raise InvalidParameters(
                f"survival score {score_function.name!r} needs gold_standard_column "
                f"as a (time, event) pair, got {gold_columns!r}"
            )
    elif not isinstance(gold_columns, str):
        raise InvalidParameters(
            f"scalar score {score_function.name!r} needs a single gold_standard_column, "
            f"got {gold_columns!r}"
        )

    id_columns = (config.id_columns,) if isinstance(config.id_columns, str) else tuple(config.id_columns)
    if not id_columns:
        raise InvalidParameters("id_columns must name at least one column")

    if config.seed is not None:
        # Reject bad seeds here rather than after pairing.
        make_seed_sequence(config.seed)

    return _Run(
        score_function=score_function,
        bootstrap_n=bootstrap_n,
        report_bootstrap_n=report_bootstrap_n,
        bayes_threshold=threshold,
        max_workers=max_workers,
        chunk_size=chunk_size,
        id_columns=id_columns,
    )


def _validate(config: LadderConfig, run: _Run, predictions: Any, label: str) -> None:
    gold_column = config.gold_standard_column
    if not isinstance(gold_column, str):
        check_gold_standard(config.gold_standard, list(run.id_columns), list(gold_column))
        gold_column = gold_column[0]
    problems = check_submission(
        config.gold_standard,
        predictions,
        list(run.id_columns),
        config.prediction_column,
        gold_column,
    )
    if problems:
        message = combine_problem_messages(problems)
        raise ValidationError(f"{label}: {message}", problems=problems)


def _pair(config: LadderConfig, run: _Run, predictions: Any, label: str) -> PairedSample:
    if run.score_function.kind == "survival":
        time_column, event_column = config.gold_standard_column
        return build_survival_paired_sample(
            predictions,
            config.gold_standard,
            list(run.id_columns),
            config.prediction_column,
            time_column,
            event_column,
            label=label,
        )
    return build_paired_sample(
        predictions,
        config.gold_standard,
        list(run.id_columns),
        config.prediction_column,
        config.gold_standard_column,
        label=label,
    )


def boot_ladder_boot(config: Optional[LadderConfig] = None, **kwargs: Any) -> ScoreReport:
    """Score a submission with the bootLadderBoot policy.

    Accepts a ``LadderConfig`` or the same fields as keyword arguments.

    Returns:
        ScoreReport with the reported score, Bayes factor (None on the first
        call), cutoff flag, decision and the reference for the next call

    Raises:
        InvalidParameters: Malformed configuration, before any sampling
        ValidationError: ``validate=True`` and a submission has integrity problems
        InvalidSubmission: A submission shares no usable pairs with the gold standard,
            or the score is undefined on its full paired sample
        ScoreComputationError: The score function failed on any draw
        BootstrapCancelled: ``cancel_event`` was set during sampling
    """
    if config is None:
        try:
            config = LadderConfig(**kwargs)
        except TypeError as e:
            raise InvalidParameters(str(e)) from e
    elif kwargs:
        raise InvalidParameters("pass either a LadderConfig or keyword arguments, not both")

    run = _resolve(config)
    score_function = run.score_function
    has_reference = config.prev_predictions is not None

    audit = LadderAuditLogger(verbose=config.verbose)
    audit.log_call_start(
        score_name=score_function.name,
        larger_is_better=score_function.larger_is_better,
        bootstrap_n=run.bootstrap_n,
        report_bootstrap_n=run.report_bootstrap_n,
        bayes_threshold=run.bayes_threshold,
        has_reference=has_reference,
        seed=config.seed,
    )

    if config.validate:
        _validate(config, run, config.predictions, "predictions")
        if has_reference:
            _validate(config, run, config.prev_predictions, "previous predictions")

    current = _pair(config, run, config.predictions, "predictions")
    current_scorer = score_function.bind(current.gold, current.predicted)
    current_seed, prev_seed, report_seed = spawn_seed_sequences(config.seed, 3)

    def _sample(
        sample: PairedSample,
        scorer: ScoreFunction,
        n_draws: int,
        seed: np.random.SeedSequence,
        label: str,
    ):
        scores = bootstrap_distribution(
            sample,
            scorer,
            n_draws,
            seed,
            max_workers=run.max_workers,
            chunk_size=run.chunk_size,
            cancel_event=config.cancel_event,
        )
        audit.log_distribution(label, scores, len(sample))
        return scores

    if not has_reference:
        decision = Decision.ADVANCE
        bayes_factor = None
        win_rate = None
        met_cutoff = True
        chosen, chosen_scorer = current, current_scorer
        reference = config.predictions
    else:
        previous = _pair(config, run, config.prev_predictions, "previous predictions")
        previous_scorer = score_function.bind(previous.gold, previous.predicted)

        current_dist = _sample(current, current_scorer, run.bootstrap_n, current_seed, "current")
        prev_dist = _sample(previous, previous_scorer, run.bootstrap_n, prev_seed, "previous")
        result = estimate_bayes_factor(
            current_dist,
            prev_dist,
            larger_is_better=score_function.larger_is_better,
            threshold=run.bayes_threshold,
        )
        audit.log_bayes_factor(
            result.bayes_factor, result.win_rate, run.bayes_threshold, result.met_cutoff
        )

        bayes_factor = result.bayes_factor
        win_rate = result.win_rate
        met_cutoff = result.met_cutoff
        if met_cutoff:
            decision = Decision.ADVANCE
            chosen, chosen_scorer = current, current_scorer
            reference = config.predictions
        else:
            decision = Decision.HOLD
            chosen, chosen_scorer = previous, previous_scorer
            reference = config.prev_predictions

    report_dist = _sample(chosen, chosen_scorer, run.report_bootstrap_n, report_seed, "report")
    score = float(np.mean(report_dist))

    audit.log_decision(decision.value, score, bayes_factor)
    logger.debug(f"Ladder {decision.value}: score={score:.6g} bayes_factor={bayes_factor}")

    return ScoreReport(
        score=score,
        bayes_factor=bayes_factor,
        met_bayes_cutoff=met_cutoff,
        decision=decision,
        reference_predictions=reference,
        win_rate=win_rate,
        n_pairs=len(chosen),
    )


__all__ = [
    "LadderConfig",
    "boot_ladder_boot",
]
