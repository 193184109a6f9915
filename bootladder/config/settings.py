from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .ladder_params import (
    BayesParams,
    BootstrapParams,
    LadderParams,
    LoggingParams,
    WorkerParams,
)

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "BOOTLADDER_CONFIG"


class LadderSettings(BaseSettings):
    """Ladder parameters read from ``BOOTLADDER_*`` environment variables.

    Nested groups use ``__``, e.g. ``BOOTLADDER_BOOTSTRAP__BOOTSTRAP_N=2000``.
    """

    model_config = SettingsConfigDict(
        env_prefix="BOOTLADDER_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    bootstrap: BootstrapParams = Field(default_factory=BootstrapParams)
    bayes: BayesParams = Field(default_factory=BayesParams)
    worker: WorkerParams = Field(default_factory=WorkerParams)
    logging: LoggingParams = Field(default_factory=LoggingParams)


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _load_yaml_overrides(path: str | os.PathLike[str] | None) -> Dict[str, Any]:
    if path is None:
        path = os.getenv(CONFIG_PATH_ENV)
    if not path:
        return {}
    config_path = Path(path)
    if not config_path.exists():
        logger.warning(f"Ladder config file not found: {config_path}")
        return {}
    with config_path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Ladder config {config_path} must contain a mapping")
    section = data.get("ladder")
    if isinstance(section, dict):
        return section
    return data


def load_ladder_params(yaml_path: str | os.PathLike[str] | None = None) -> LadderParams:
    """Build ladder parameters from defaults, a YAML file and the environment.

    Precedence (lowest first): built-in defaults, YAML file (``yaml_path`` or
    ``$BOOTLADDER_CONFIG``; an optional top-level ``ladder:`` section is
    honoured), ``BOOTLADDER_*`` environment variables.
    """
    overrides = _load_yaml_overrides(yaml_path)
    env_values = LadderSettings().model_dump(exclude_unset=True)
    return LadderParams.model_validate(_deep_merge(overrides, env_values))


__all__ = [
    "CONFIG_PATH_ENV",
    "LadderSettings",
    "load_ladder_params",
]
