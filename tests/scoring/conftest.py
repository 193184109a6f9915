"""Shared fixtures for ladder scoring tests."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest


N_SUBJECTS = 60


@pytest.fixture
def gold_standard() -> pd.DataFrame:
    """Gold standard with 60 scalar outcomes."""
    rng = np.random.default_rng(1234)
    return pd.DataFrame({
        "id": np.arange(N_SUBJECTS),
        "validation": rng.normal(0.0, 1.0, N_SUBJECTS),
    })


@pytest.fixture
def good_predictions(gold_standard: pd.DataFrame) -> pd.DataFrame:
    """Predictions close to the gold standard."""
    rng = np.random.default_rng(99)
    return pd.DataFrame({
        "id": gold_standard["id"].to_numpy(),
        "prediction": gold_standard["validation"].to_numpy() + rng.normal(0.0, 0.1, N_SUBJECTS),
    })


@pytest.fixture
def noise_predictions(gold_standard: pd.DataFrame) -> pd.DataFrame:
    """Predictions unrelated to the gold standard."""
    rng = np.random.default_rng(7)
    return pd.DataFrame({
        "id": gold_standard["id"].to_numpy(),
        "prediction": rng.normal(0.0, 1.0, N_SUBJECTS),
    })


@pytest.fixture
def survival_gold() -> pd.DataFrame:
    """Survival gold standard: distinct times, mostly observed events."""
    times = np.arange(1, 41, dtype=np.float64) * 3.0
    events = np.ones(40)
    events[::5] = 0  # every fifth subject censored
    return pd.DataFrame({"id": [f"s{i}" for i in range(40)], "time": times, "event": events})
