"""Config module - execution options and environment settings."""

from .options import DEFAULT_DEBUG_LEVEL, DebugLevel, ExecutionConfig, validate_options
from .settings import DEFAULT_IDLE_TIMEOUT, RunnerSettings

__all__ = [
    "DEFAULT_DEBUG_LEVEL",
    "DebugLevel",
    "ExecutionConfig",
    "validate_options",
    "DEFAULT_IDLE_TIMEOUT",
    "RunnerSettings",
]
