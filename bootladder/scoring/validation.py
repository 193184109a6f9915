"""Submission integrity checks.

Validation happens BEFORE data enters the ladder. A submission with
problems is reported back to the participant, not scored.

Checks:
- Duplicate or missing columns in the prediction frame
- Duplicate predictions for one identifier
- Gold-standard identifiers with a missing or non-finite prediction

Checks return a list of problems (or None when clean) so callers can render
every issue at once; ``validate_submission`` raises instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .types import InvalidParameters, ValidationError

ProblemKind = Literal[
    "duplicate_columns",
    "missing_columns",
    "duplicate_predictions",
    "missing_predictions",
]

VALIDATION_COLUMN = "validation"
PREDICTION_COLUMN = "prediction"
KEY_SEPARATOR = ";"

_MESSAGE_PREFIXES = {
    "duplicate_columns": "Prediction file has duplicate columns: ",
    "missing_columns": "Prediction file is missing columns: ",
    "duplicate_predictions": "Prediction file has duplicate predictions for: ",
    "missing_predictions": "Prediction file is missing predictions: ",
}


def values_to_list_string(values: Sequence[object], sep: str = ", ") -> str:
    """Render values as ``[a, b, c]``."""
    return "[" + sep.join(str(v) for v in values) + "]"


@dataclass(frozen=True)
class ValidationProblem:
    """One integrity problem with the offending names."""

    kind: ProblemKind
    values: Tuple[str, ...]

    @property
    def message(self) -> str:
        return _MESSAGE_PREFIXES[self.kind] + values_to_list_string(self.values)

    def __str__(self) -> str:
        return self.message


def combine_problem_messages(problems: Sequence[ValidationProblem]) -> str:
    """Join problem messages into one sentence."""
    return ", ".join(p.message for p in problems) + "."


def _as_list(columns: str | Sequence[str]) -> List[str]:
    if isinstance(columns, str):
        return [columns]
    return list(columns)


def _format_id(value: object) -> str:
    """Render one identifier value; integral floats print without ``.0``."""
    if isinstance(value, (float, np.floating)) and float(value).is_integer():
        return str(int(value))
    return str(value)


def _row_keys(df: pd.DataFrame, id_columns: Sequence[str]) -> pd.Series:
    """Render identifier columns as one ``a;b`` key per row."""
    if df.empty:
        return pd.Series([], index=df.index, dtype=object)
    parts = df[list(id_columns)].apply(lambda column: column.map(_format_id))
    return parts.agg(KEY_SEPARATOR.join, axis=1)


def get_duplicate_column_names(df: pd.DataFrame) -> List[str]:
    """Column names that appear more than once, in order of first appearance."""
    duplicated = df.columns[df.columns.duplicated()]
    return [str(c) for c in pd.unique(duplicated)]


def check_required_columns(
    df: pd.DataFrame,
    required_columns: Sequence[str],
) -> Optional[List[ValidationProblem]]:
    """Check a prediction frame for duplicate and missing columns.

    Returns:
        List of problems, or None if the columns are fine
    """
    problems: List[ValidationProblem] = []

    duplicated = get_duplicate_column_names(df)
    present = set(df.columns)
    missing = [str(c) for c in required_columns if c not in present]

    if duplicated:
        problems.append(ValidationProblem("duplicate_columns", tuple(duplicated)))
    if missing:
        problems.append(ValidationProblem("missing_columns", tuple(missing)))

    return problems or None


def combine_gold_and_predictions(
    gold_standard: pd.DataFrame,
    predictions: pd.DataFrame,
    id_columns: str | Sequence[str] = "id",
    prediction_column: str = "prediction",
    gold_column: str = "validation",
) -> pd.DataFrame:
    """Left-join predictions onto the gold standard by identifier.

    Every gold-standard row is kept; identifiers without a prediction get
    NaN in the ``prediction`` column.

    Returns:
        Frame with the identifier columns, ``validation`` and ``prediction``
    """
    ids = _as_list(id_columns)
    gold = gold_standard[ids + [gold_column]].rename(columns={gold_column: VALIDATION_COLUMN})
    preds = predictions[ids + [prediction_column]].rename(
        columns={prediction_column: PREDICTION_COLUMN}
    )
    return gold.merge(preds, how="left", on=ids)


def get_duplicate_rows_by_id(
    df: pd.DataFrame,
    id_columns: str | Sequence[str] = "id",
) -> List[str]:
    """Identifier keys that occur on more than one row."""
    keys = _row_keys(df, _as_list(id_columns))
    duplicated = keys[keys.duplicated()]
    return [str(k) for k in pd.unique(duplicated)]


def get_missing_rows_by_id(
    df: pd.DataFrame,
    id_columns: str | Sequence[str] = "id",
    prediction_column: str = PREDICTION_COLUMN,
) -> List[str]:
    """Identifier keys whose prediction is missing or non-finite."""
    values = pd.to_numeric(df[prediction_column], errors="coerce").to_numpy(dtype=np.float64)
    bad = ~np.isfinite(values)
    keys = _row_keys(df, _as_list(id_columns))
    return [str(k) for k in keys[bad]]


def check_combined(
    df: pd.DataFrame,
    id_columns: str | Sequence[str] = "id",
) -> Optional[List[ValidationProblem]]:
    """Check a combined gold/prediction frame for row-level problems.

    Returns:
        List of problems, or None if every gold row has one usable prediction
    """
    problems: List[ValidationProblem] = []

    duplicate_rows = get_duplicate_rows_by_id(df, id_columns)
    missing_rows = get_missing_rows_by_id(df, id_columns)

    if duplicate_rows:
        problems.append(ValidationProblem("duplicate_predictions", tuple(duplicate_rows)))
    if missing_rows:
        problems.append(ValidationProblem("missing_predictions", tuple(missing_rows)))

    return problems or None


def check_gold_standard(
    gold_standard: pd.DataFrame,
    id_columns: str | Sequence[str] = "id",
    value_columns: str | Sequence[str] = "validation",
) -> None:
    """Check that a gold standard can be matched against.

    The gold standard belongs to the caller, not the participant, so its
    problems are configuration errors rather than submission problems.

    Raises:
        InvalidParameters: If a column is missing or an identifier repeats
    """
    ids = _as_list(id_columns)
    missing = [c for c in ids + _as_list(value_columns) if c not in gold_standard.columns]
    if missing:
        raise InvalidParameters(f"gold standard is missing columns: {missing}")

    duplicates = get_duplicate_rows_by_id(gold_standard, ids)
    if duplicates:
        raise InvalidParameters(
            f"gold standard has duplicate identifiers: {values_to_list_string(duplicates)}"
        )


def check_submission(
    gold_standard: pd.DataFrame,
    predictions: pd.DataFrame,
    id_columns: str | Sequence[str] = "id",
    prediction_column: str = "prediction",
    gold_column: str = "validation",
) -> Optional[List[ValidationProblem]]:
    """Run all integrity checks on a submission.

    Column problems short-circuit the row checks, since rows cannot be
    matched without the required columns.

    Returns:
        List of problems, or None if the submission is valid

    Raises:
        InvalidParameters: If the gold standard itself is malformed
    """
    ids = _as_list(id_columns)
    check_gold_standard(gold_standard, ids, gold_column)
    column_problems = check_required_columns(predictions, ids + [prediction_column])
    if column_problems:
        return column_problems

    combined = combine_gold_and_predictions(
        gold_standard, predictions, ids, prediction_column, gold_column
    )
    return check_combined(combined, ids)


def validate_submission(
    gold_standard: pd.DataFrame,
    predictions: pd.DataFrame,
    id_columns: str | Sequence[str] = "id",
    prediction_column: str = "prediction",
    gold_column: str = "validation",
) -> pd.DataFrame:
    """Validate a submission and return the combined frame.

    Raises:
        ValidationError: With every problem found, rendered as one message
    """
    problems = check_submission(
        gold_standard, predictions, id_columns, prediction_column, gold_column
    )
    if problems:
        raise ValidationError(combine_problem_messages(problems), problems=problems)
    return combine_gold_and_predictions(
        gold_standard, predictions, _as_list(id_columns), prediction_column, gold_column
    )


__all__ = [
    "ValidationProblem",
    "values_to_list_string",
    "combine_problem_messages",
    "get_duplicate_column_names",
    "check_required_columns",
    "combine_gold_and_predictions",
    "get_duplicate_rows_by_id",
    "get_missing_rows_by_id",
    "check_gold_standard",
    "check_combined",
    "check_submission",
    "validate_submission",
]
