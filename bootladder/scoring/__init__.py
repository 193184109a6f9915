"""Ladder scoring system for challenge submissions.

This package contains the bootLadderBoot core:
- Submission validation and gold-standard pairing
- Pluggable score functions with orientation
- Seeded, chunked bootstrap sampling
- Bayes-factor gate between a submission and the previous best
- The stateless ladder controller
"""

from __future__ import annotations

from .bayes import BayesFactorResult, estimate_bayes_factor
from .bootstrap import bootstrap_distribution
from .ladder import LadderConfig, boot_ladder_boot
from .paired import (
    PairedSample,
    SurvivalPairedSample,
    build_paired_sample,
    build_survival_paired_sample,
)
from .types import (
    BootstrapCancelled,
    Decision,
    InvalidParameters,
    InvalidSubmission,
    LadderError,
    ScoreComputationError,
    ScoreReport,
    ValidationError,
)

__all__ = [
    "BayesFactorResult",
    "estimate_bayes_factor",
    "bootstrap_distribution",
    "LadderConfig",
    "boot_ladder_boot",
    "PairedSample",
    "SurvivalPairedSample",
    "build_paired_sample",
    "build_survival_paired_sample",
    "LadderError",
    "ValidationError",
    "InvalidSubmission",
    "InvalidParameters",
    "ScoreComputationError",
    "BootstrapCancelled",
    "Decision",
    "ScoreReport",
]
