"""Type definitions and errors for the ladder scoring system."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Literal, Optional, Sequence

if TYPE_CHECKING:
    import pandas as pd

    from .validation import ValidationProblem


SampleKind = Literal["scalar", "survival"]


class LadderError(Exception):
    """Base class for every error raised by the ladder core."""

    pass


class ValidationError(LadderError):
    """Raised when a submission fails column/row integrity checks."""

    def __init__(self, message: str, problems: Sequence["ValidationProblem"] = ()):
        super().__init__(message)
        self.problems = list(problems)


class InvalidSubmission(LadderError):
    """Raised when a submission shares no usable pairs with the gold standard."""

    pass


class InvalidParameters(LadderError):
    """Raised when the ladder configuration is malformed."""

    pass


class ScoreComputationError(LadderError):
    """Raised when a score function fails or returns a non-finite value."""

    pass


class BootstrapCancelled(LadderError):
    """Raised when a bootstrap run is cancelled between draws."""

    pass


# ─────────────────────────────────────────────────────────────────────────────
# Ladder decisions and reports
# ─────────────────────────────────────────────────────────────────────────────


class Decision(str, Enum):
    """Outcome of a ladder step."""

    ADVANCE = "advance"  # report the current submission, it becomes the reference
    HOLD = "hold"  # repeat the previous reference


@dataclass(frozen=True)
class ScoreReport:
    """Result of a single bootLadderBoot call.

    ``reference_predictions`` is the frame to pass back as
    ``prev_predictions`` on the next call.
    """

    score: float
    bayes_factor: Optional[float]
    met_bayes_cutoff: bool
    decision: Decision
    reference_predictions: "pd.DataFrame"
    win_rate: Optional[float] = None
    n_pairs: int = 0

    @property
    def advanced(self) -> bool:
        return self.decision is Decision.ADVANCE

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready view of the report, without the reference frame."""
        return {
            "score": self.score,
            "bayes_factor": self.bayes_factor,
            "met_bayes_cutoff": self.met_bayes_cutoff,
            "decision": self.decision.value,
            "win_rate": self.win_rate,
            "n_pairs": self.n_pairs,
        }


__all__ = [
    "SampleKind",
    "LadderError",
    "ValidationError",
    "InvalidSubmission",
    "InvalidParameters",
    "ScoreComputationError",
    "BootstrapCancelled",
    "Decision",
    "ScoreReport",
]
