"""Utility functions and classes for the Ark game data mirror."""

from .config import get_config, global_config
from .di_container import (
    DIContainer,
    DIContainerError,
    ServiceKeys,
    configure_container,
    get_container,
    reset_container,
)
from .exceptions import (
    ArkMirrorError,
    ConfigurationError,
    DataProviderError,
    GameDataDownloadError,
    GameDataEmptyResponseError,
    GameDataError,
    GameDataParseError,
    ServiceError,
)
from .logging_setup import setup_logging
from .metrics import (
    MetricCategories,
    MetricsCollector,
    get_metrics,
    reset_metrics,
    timed,
)
from .progress_callback import (
    CancelToken,
    ProgressCallback,
    ProgressPhase,
    ProgressUpdate,
)

__all__ = [
    "ArkMirrorError",
    "CancelToken",
    "ConfigurationError",
    "DIContainer",
    "DIContainerError",
    "DataProviderError",
    "GameDataDownloadError",
    "GameDataEmptyResponseError",
    "GameDataError",
    "GameDataParseError",
    "MetricCategories",
    "MetricsCollector",
    "ProgressCallback",
    "ProgressPhase",
    "ProgressUpdate",
    "ServiceError",
    "ServiceKeys",
    "configure_container",
    "get_config",
    "get_container",
    "get_metrics",
    "global_config",
    "reset_container",
    "reset_metrics",
    "setup_logging",
    "timed",
]
