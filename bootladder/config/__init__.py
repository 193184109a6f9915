from .ladder_params import (
    DEFAULT_LADDER_PARAMS,
    BayesParams,
    BootstrapParams,
    LadderParams,
    LoggingParams,
    WorkerParams,
    get_ladder_params,
    set_ladder_params,
)
from .settings import CONFIG_PATH_ENV, LadderSettings, load_ladder_params

__all__ = [
    "BootstrapParams",
    "BayesParams",
    "WorkerParams",
    "LoggingParams",
    "LadderParams",
    "DEFAULT_LADDER_PARAMS",
    "get_ladder_params",
    "set_ladder_params",
    "CONFIG_PATH_ENV",
    "LadderSettings",
    "load_ladder_params",
]
