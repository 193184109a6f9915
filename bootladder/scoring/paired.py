"""Paired samples: gold and predicted values aligned by identifier.

A submission and the gold standard are matched with inner-join semantics:
identifiers present on only one side are dropped, as are rows whose value is
missing or non-finite. Pairs keep the gold standard's row order.

Two variants exist:
- PairedSample: scalar gold value per identifier
- SurvivalPairedSample: (time, event) gold row per identifier
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, List, Sequence, Tuple

import numpy as np
import pandas as pd
from numpy.typing import NDArray

from .types import InvalidParameters, InvalidSubmission, SampleKind, ValidationError
from .validation import ValidationProblem, check_gold_standard, get_duplicate_rows_by_id

_GOLD = "__gold__"
_PRED = "__pred__"
_TIME = "__time__"
_EVENT = "__event__"


@dataclass(frozen=True, eq=False)
class PairedSample:
    """Aligned (gold, predicted) values for one submission."""

    ids: Tuple[Any, ...]
    gold: NDArray[np.float64]
    predicted: NDArray[np.float64]

    kind: ClassVar[SampleKind] = "scalar"

    def __post_init__(self) -> None:
        n = len(self.predicted)
        if n == 0:
            raise InvalidSubmission("paired sample is empty")
        if len(self.gold) != n or len(self.ids) != n:
            raise InvalidSubmission(
                f"paired sample lengths differ: ids={len(self.ids)} "
                f"gold={len(self.gold)} predicted={n}"
            )
        if not np.all(np.isfinite(self.predicted)):
            raise InvalidSubmission("paired sample has non-finite predictions")
        if not np.all(np.isfinite(self.gold)):
            raise InvalidSubmission("paired sample has non-finite gold values")
        self._check_gold_shape()

    def _check_gold_shape(self) -> None:
        if self.gold.ndim != 1:
            raise InvalidSubmission(f"scalar gold values must be 1-d, got shape {self.gold.shape}")

    def __len__(self) -> int:
        return len(self.predicted)


@dataclass(frozen=True, eq=False)
class SurvivalPairedSample(PairedSample):
    """Paired sample whose gold rows are (time, event) pairs.

    ``event`` is 1 when the event was observed and 0 when censored.
    """

    kind: ClassVar[SampleKind] = "survival"

    def _check_gold_shape(self) -> None:
        if self.gold.ndim != 2 or self.gold.shape[1] != 2:
            raise InvalidSubmission(
                f"survival gold values must have shape (n, 2), got {self.gold.shape}"
            )
        if not np.all(np.isin(self.gold[:, 1], (0.0, 1.0))):
            raise InvalidSubmission("survival event indicators must be 0 or 1")

    @property
    def time(self) -> NDArray[np.float64]:
        return self.gold[:, 0]

    @property
    def event(self) -> NDArray[np.float64]:
        return self.gold[:, 1]


# ─────────────────────────────────────────────────────────────────────────────
# Builders
# ─────────────────────────────────────────────────────────────────────────────


def _as_list(columns: str | Sequence[str]) -> List[str]:
    if isinstance(columns, str):
        return [columns]
    return list(columns)


def _as_frame(data: Any, label: str) -> pd.DataFrame:
    if isinstance(data, pd.DataFrame):
        return data
    try:
        return pd.DataFrame(data)
    except (TypeError, ValueError) as e:
        raise InvalidParameters(f"{label} cannot be read as a frame: {e}") from e


def _select(df: pd.DataFrame, columns: List[str], renames: dict, label: str) -> pd.DataFrame:
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise InvalidParameters(f"{label} is missing columns: {missing}")
    return df.loc[:, columns].rename(columns=renames)


def _finite(values: pd.Series) -> NDArray[np.float64]:
    return pd.to_numeric(values, errors="coerce").to_numpy(dtype=np.float64)


def _join(
    predictions: Any,
    gold_standard: Any,
    id_columns: List[str],
    prediction_column: str,
    gold_columns: List[str],
    gold_renames: dict,
    label: str,
) -> pd.DataFrame:
    """Inner-join predictions onto the gold standard, gold order preserved."""
    preds = _select(
        _as_frame(predictions, label),
        id_columns + [prediction_column],
        {prediction_column: _PRED},
        label,
    )
    gold_frame = _as_frame(gold_standard, "gold standard")
    check_gold_standard(gold_frame, id_columns, gold_columns)
    gold = _select(
        gold_frame,
        id_columns + gold_columns,
        gold_renames,
        "gold standard",
    )

    duplicates = get_duplicate_rows_by_id(preds, id_columns)
    if duplicates:
        problem = ValidationProblem("duplicate_predictions", tuple(duplicates))
        raise ValidationError(problem.message + ".", problems=[problem])

    try:
        return gold.merge(preds, how="inner", on=id_columns)
    except ValueError as e:
        raise InvalidParameters(f"cannot match {label} to the gold standard: {e}") from e


def _ids(df: pd.DataFrame, id_columns: List[str]) -> Tuple[Any, ...]:
    if len(id_columns) == 1:
        return tuple(df[id_columns[0]].tolist())
    return tuple(df[id_columns].itertuples(index=False, name=None))


def build_paired_sample(
    predictions: Any,
    gold_standard: Any,
    id_columns: str | Sequence[str] = "id",
    prediction_column: str = "prediction",
    gold_column: str = "validation",
    label: str = "predictions",
) -> PairedSample:
    """Align a submission with a scalar gold standard.

    Args:
        predictions: Submission frame
        gold_standard: Gold-standard frame
        id_columns: Identifier column(s) shared by both frames
        prediction_column: Column in ``predictions`` holding predicted values
        gold_column: Column in ``gold_standard`` holding true values
        label: Name of the submission in error messages

    Returns:
        PairedSample in gold-standard order

    Raises:
        InvalidParameters: If a named column is absent or the gold standard
            repeats an identifier
        ValidationError: If the submission repeats an identifier
        InvalidSubmission: If no finite pair remains after matching
    """
    ids = _as_list(id_columns)
    merged = _join(
        predictions, gold_standard, ids, prediction_column,
        [gold_column], {gold_column: _GOLD}, label,
    )

    gold = _finite(merged[_GOLD])
    predicted = _finite(merged[_PRED])
    keep = np.isfinite(gold) & np.isfinite(predicted)

    if not keep.any():
        raise InvalidSubmission(
            f"{label} share no identifiers with finite values with the gold standard"
        )

    return PairedSample(
        ids=_ids(merged.loc[keep], ids),
        gold=gold[keep],
        predicted=predicted[keep],
    )


def build_survival_paired_sample(
    predictions: Any,
    gold_standard: Any,
    id_columns: str | Sequence[str] = "id",
    prediction_column: str = "prediction",
    time_column: str = "time",
    event_column: str = "event",
    label: str = "predictions",
) -> SurvivalPairedSample:
    """Align a submission of risk scores with a (time, event) gold standard.

    Same matching rules as ``build_paired_sample``; rows with a missing time
    or event indicator are dropped.
    """
    ids = _as_list(id_columns)
    merged = _join(
        predictions, gold_standard, ids, prediction_column,
        [time_column, event_column], {time_column: _TIME, event_column: _EVENT}, label,
    )

    time = _finite(merged[_TIME])
    event = _finite(merged[_EVENT])
    predicted = _finite(merged[_PRED])
    keep = np.isfinite(time) & np.isfinite(event) & np.isfinite(predicted)

    if not keep.any():
        raise InvalidSubmission(
            f"{label} share no identifiers with finite values with the gold standard"
        )

    return SurvivalPairedSample(
        ids=_ids(merged.loc[keep], ids),
        gold=np.column_stack([time[keep], event[keep]]),
        predicted=predicted[keep],
    )


__all__ = [
    "PairedSample",
    "SurvivalPairedSample",
    "build_paired_sample",
    "build_survival_paired_sample",
]
