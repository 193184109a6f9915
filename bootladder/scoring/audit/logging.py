"""Structured audit logging for ladder calls.

Records the inputs, distribution hashes and decision of every ladder call
so that a disputed score can be replayed and compared.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from ..determinism import compute_distribution_hash


class LadderAuditLogger:
    """Structured logger for the ladder audit trail.

    Records go out at DEBUG, or at INFO when ``verbose`` is set, so
    verbose calls surface their diagnostics without changing any result.
    """

    def __init__(self, logger: Optional[logging.Logger] = None, verbose: bool = False):
        """Initialize the audit logger.

        Args:
            logger: Optional logger instance (creates one if not provided)
            verbose: Emit records at INFO instead of DEBUG
        """
        self.logger = logger or logging.getLogger("bootladder.audit")
        self.verbose = verbose

    def _emit(self, record: dict) -> None:
        if self.verbose:
            self.logger.info(record)
        else:
            self.logger.debug(record)

    def log_call_start(
        self,
        score_name: str,
        larger_is_better: bool,
        bootstrap_n: int,
        report_bootstrap_n: int,
        bayes_threshold: float,
        has_reference: bool,
        seed: Optional[int],
    ) -> None:
        """Log the parameters of a ladder call."""
        self._emit({
            "event": "ladder_start",
            "score_function": score_name,
            "larger_is_better": larger_is_better,
            "bootstrap_n": bootstrap_n,
            "report_bootstrap_n": report_bootstrap_n,
            "bayes_threshold": bayes_threshold,
            "has_reference": has_reference,
            "seed": seed,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })

    def log_distribution(
        self,
        label: str,
        scores: NDArray[np.float64],
        n_pairs: int,
    ) -> None:
        """Log a score distribution summary with its hash.

        Args:
            label: Which distribution ("current", "previous", "report")
            scores: Bootstrap scores
            n_pairs: Length of the paired sample that was resampled
        """
        self._emit({
            "event": "distribution",
            "label": label,
            "n_draws": int(len(scores)),
            "n_pairs": n_pairs,
            "mean": float(np.mean(scores)),
            "std": float(np.std(scores)),
            "distribution_hash": compute_distribution_hash(scores, label)[:16] + "...",
        })

    def log_bayes_factor(
        self,
        bayes_factor: float,
        win_rate: float,
        threshold: float,
        met_cutoff: bool,
    ) -> None:
        """Log the Bayes-factor gate result."""
        self._emit({
            "event": "bayes_factor",
            "bayes_factor": round(bayes_factor, 6),
            "win_rate": round(win_rate, 6),
            "threshold": threshold,
            "met_cutoff": met_cutoff,
        })

    def log_decision(
        self,
        decision: str,
        score: float,
        bayes_factor: Optional[float],
    ) -> None:
        """Log the ladder decision and reported score."""
        self._emit({
            "event": "ladder_decision",
            "decision": decision,
            "score": score,
            "bayes_factor": bayes_factor,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })


def get_audit_logger(verbose: bool = False) -> LadderAuditLogger:
    """Create an audit logger on the shared ``bootladder.audit`` logger."""
    return LadderAuditLogger(verbose=verbose)


__all__ = [
    "LadderAuditLogger",
    "get_audit_logger",
]
