"""bootladder: overfitting-resistant challenge scoring."""

from __future__ import annotations

from .scoring.ladder import LadderConfig, boot_ladder_boot
from .scoring.metrics.registry import (
    ScoreFunction,
    get_score_function,
    list_score_functions,
    register_score_function,
)
from .scoring.types import (
    BootstrapCancelled,
    Decision,
    InvalidParameters,
    InvalidSubmission,
    LadderError,
    ScoreComputationError,
    ScoreReport,
    ValidationError,
)

__version__ = "0.1.0"

__all__ = [
    "LadderConfig",
    "boot_ladder_boot",
    "ScoreFunction",
    "get_score_function",
    "list_score_functions",
    "register_score_function",
    "LadderError",
    "ValidationError",
    "InvalidSubmission",
    "InvalidParameters",
    "ScoreComputationError",
    "BootstrapCancelled",
    "Decision",
    "ScoreReport",
]
