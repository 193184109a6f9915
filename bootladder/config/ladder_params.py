"""Ladder hyperparameters and configuration.

All ladder-related defaults live here so that:
1. There is a single source of truth for draw counts and thresholds
2. Reruns with the same params and seed produce the same reports
3. Tuning happens in one place

Per-call values on ``LadderConfig`` override these defaults.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class BootstrapParams(BaseModel):
    """Draw counts for the bootstrap sampler."""

    bootstrap_n: int = Field(
        default=10000,
        ge=1,
        le=10_000_000,
        description="Draws per distribution when comparing current vs previous best.",
    )
    report_bootstrap_n: int = Field(
        default=10,
        ge=1,
        le=1_000_000,
        description="Draws averaged into the publicly reported score.",
    )
    chunk_size: int = Field(
        default=500,
        ge=1,
        le=1_000_000,
        description="Draws per work chunk. Each chunk owns an independently seeded generator.",
    )


class BayesParams(BaseModel):
    """Bayes-factor gate parameters."""

    bayes_threshold: float = Field(
        default=3.0,
        gt=0,
        description="Minimum estimated Bayes factor for a new submission to advance the ladder.",
    )


class WorkerParams(BaseModel):
    """Draw worker pool parameters."""

    max_workers: int = Field(
        default=1,
        ge=1,
        le=256,
        description="Threads evaluating draw chunks. 1 runs chunks sequentially in the caller.",
    )


class LoggingParams(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Root level for the bootladder logger.",
    )
    log_dir: str | None = Field(
        default=None,
        description="Directory for the rotating ladder.log file. None logs to stderr only.",
    )
    max_bytes: int = Field(
        default=10 * 1024 * 1024,
        ge=1024,
        description="Rotate the log file after this many bytes.",
    )
    backup_count: int = Field(
        default=10,
        ge=0,
        le=100,
        description="Rotated log files to keep.",
    )


class LadderParams(BaseModel):
    """Master configuration for all ladder parameters."""

    bootstrap: BootstrapParams = Field(default_factory=BootstrapParams)
    bayes: BayesParams = Field(default_factory=BayesParams)
    worker: WorkerParams = Field(default_factory=WorkerParams)
    logging: LoggingParams = Field(default_factory=LoggingParams)


# Default instance for easy import
DEFAULT_LADDER_PARAMS = LadderParams()


def get_ladder_params() -> LadderParams:
    """Get ladder parameters.

    Returns the defaults unless ``set_ladder_params`` installed others
    (typically the result of ``load_ladder_params``).
    """
    return _active_params


def set_ladder_params(params: LadderParams | None) -> None:
    """Install process-wide ladder parameters; None restores the defaults."""
    global _active_params
    _active_params = params if params is not None else DEFAULT_LADDER_PARAMS


_active_params: LadderParams = DEFAULT_LADDER_PARAMS


__all__ = [
    "BootstrapParams",
    "BayesParams",
    "WorkerParams",
    "LoggingParams",
    "LadderParams",
    "DEFAULT_LADDER_PARAMS",
    "get_ladder_params",
    "set_ladder_params",
]
