"""Score function library.

Contains implementations of:
- Spearman and Pearson correlation
- RMSE and range-normalized RMSE
- Harrell's concordance for survival outcomes
- The named registry used to select them
"""

from __future__ import annotations

from .registry import (
    C_INDEX,
    NRMSE,
    PEARSON,
    RMSE,
    SCORE_FUNCTIONS,
    SPEARMAN,
    ScoreFunction,
    get_score_function,
    list_score_functions,
    register_score_function,
)

__all__ = [
    "ScoreFunction",
    "SCORE_FUNCTIONS",
    "get_score_function",
    "list_score_functions",
    "register_score_function",
    "SPEARMAN",
    "PEARSON",
    "RMSE",
    "NRMSE",
    "C_INDEX",
]
