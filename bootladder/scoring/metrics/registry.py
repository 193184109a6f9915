"""Named registry of score functions.

A score function maps (gold, predicted) arrays of equal length to a single
finite float and carries an orientation flag. Callers select one by name or
supply their own callable.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Union

import numpy as np
from numpy.typing import NDArray

from ..types import InvalidParameters, SampleKind
from .correlation import pearson_correlation, spearman_correlation
from .error import normalized_rmse, normalized_rmse_for_sample, rmse
from .survival import concordance_index

ScoreCallable = Callable[[NDArray[np.float64], NDArray[np.float64]], float]
SampleBinder = Callable[[NDArray[np.float64], NDArray[np.float64]], ScoreCallable]


@dataclass(frozen=True)
class ScoreFunction:
    """A score function with its orientation.

    ``kind`` declares which paired-sample variant the function consumes:
    scalar gold values, or (time, event) survival rows. ``binder``, when set,
    specialises the function to a full paired sample before it is resampled.
    """

    name: str
    func: ScoreCallable
    larger_is_better: bool = True
    kind: SampleKind = "scalar"
    binder: Optional[SampleBinder] = None

    def __call__(self, gold: NDArray[np.float64], predicted: NDArray[np.float64]) -> float:
        return self.func(gold, predicted)

    def with_orientation(self, larger_is_better: bool) -> "ScoreFunction":
        return dataclasses.replace(self, larger_is_better=bool(larger_is_better))

    def bind(self, gold: NDArray[np.float64], predicted: NDArray[np.float64]) -> "ScoreFunction":
        """Score function for resamples of the sample (gold, predicted).

        Raises:
            InvalidSubmission: If the function is undefined on this sample
        """
        if self.binder is None:
            return self
        return dataclasses.replace(self, func=self.binder(gold, predicted), binder=None)


SCORE_FUNCTIONS: Dict[str, ScoreFunction] = {}
_ALIASES: Dict[str, str] = {}


def register_score_function(
    score_function: ScoreFunction,
    aliases: tuple[str, ...] = (),
) -> ScoreFunction:
    """Add a score function to the registry under its name and aliases."""
    SCORE_FUNCTIONS[score_function.name] = score_function
    for alias in aliases:
        _ALIASES[alias] = score_function.name
    return score_function


def list_score_functions() -> List[str]:
    """Registered score function names, sorted."""
    return sorted(SCORE_FUNCTIONS)


def get_score_function(
    score_fun: Union[str, ScoreFunction, ScoreCallable],
    larger_is_better: Optional[bool] = None,
) -> ScoreFunction:
    """Resolve a name, ScoreFunction or callable to a ScoreFunction.

    Args:
        score_fun: Registered name or alias, a ScoreFunction, or a plain
            ``(gold, predicted) -> float`` callable
        larger_is_better: Orientation override; None keeps the library
            default (True for plain callables)

    Raises:
        InvalidParameters: If the name is unknown or the value is not callable
    """
    if isinstance(score_fun, ScoreFunction):
        resolved = score_fun
    elif isinstance(score_fun, str):
        key = score_fun.strip().lower()
        key = _ALIASES.get(key, key)
        if key not in SCORE_FUNCTIONS:
            raise InvalidParameters(
                f"unknown score function {score_fun!r}; "
                f"choose from {list_score_functions() + sorted(_ALIASES)}"
            )
        resolved = SCORE_FUNCTIONS[key]
    elif callable(score_fun):
        name = getattr(score_fun, "__name__", None) or "custom"
        resolved = ScoreFunction(name=name, func=score_fun)
    else:
        raise InvalidParameters(f"score_fun must be a name or callable, got {score_fun!r}")

    if larger_is_better is not None:
        resolved = resolved.with_orientation(larger_is_better)
    return resolved


SPEARMAN = register_score_function(
    ScoreFunction("spearman", spearman_correlation, larger_is_better=True),
    aliases=("rank-correlation", "rank_correlation"),
)
PEARSON = register_score_function(
    ScoreFunction("pearson", pearson_correlation, larger_is_better=True),
    aliases=("linear-correlation", "linear_correlation"),
)
RMSE = register_score_function(
    ScoreFunction("rmse", rmse, larger_is_better=False),
)
NRMSE = register_score_function(
    ScoreFunction("nrmse", normalized_rmse, larger_is_better=False, binder=normalized_rmse_for_sample),
    aliases=("normalized-rmse", "normalized_rmse"),
)
C_INDEX = register_score_function(
    ScoreFunction("c_index", concordance_index, larger_is_better=True, kind="survival"),
    aliases=("survival-concordance", "survival_concordance", "concordance"),
)


__all__ = [
    "ScoreCallable",
    "SampleBinder",
    "ScoreFunction",
    "SCORE_FUNCTIONS",
    "register_score_function",
    "list_score_functions",
    "get_score_function",
    "SPEARMAN",
    "PEARSON",
    "RMSE",
    "NRMSE",
    "C_INDEX",
]
