"""Common utilities - logging, config, exceptions."""

from geoguard.common.logging.logger import get_logger
from geoguard.common.config import Config, get_config, reset_config
from geoguard.common.exceptions import (
    GeoGuardException,
    ConfigurationError,
    GeoLookupError,
    HistoryStoreError,
    RuleEvaluationError,
)

__all__ = [
    # Logging
    "get_logger",
    # Config
    "Config",
    "get_config",
    "reset_config",
    # Exceptions
    "GeoGuardException",
    "ConfigurationError",
    "GeoLookupError",
    "HistoryStoreError",
    "RuleEvaluationError",
]
