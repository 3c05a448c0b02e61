"""Configuration module."""

from geoguard.common.config.settings import (
    Config,
    Environment,
    HistoryBackend,
    LogLevel,
    get_config,
    reset_config,
)

__all__ = [
    "Config",
    "Environment",
    "HistoryBackend",
    "LogLevel",
    "get_config",
    "reset_config",
]
