"""Configuration management - Centralized configuration for GeoGuard.

Provides environment-aware configuration with sensible defaults.
All configuration is loaded from environment variables with fallbacks.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from geoguard.common.constants import StorageConstants
from geoguard.common.exceptions import ConfigurationError


class Environment(str, Enum):
    """Application environment."""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class HistoryBackend(str, Enum):
    """Login history storage backend types."""
    MEMORY = "memory"
    DYNAMODB = "dynamodb"


def _get_project_root() -> Path:
    """Get the project root directory."""
    # settings.py -> config -> common -> geoguard -> src -> project_root
    current = Path(__file__).resolve()
    return current.parent.parent.parent.parent.parent


def _optional_path(name: str) -> Optional[Path]:
    value = os.getenv(name)
    return Path(value) if value else None


@dataclass
class Config:
    """Central configuration object for GeoGuard.

    All settings can be overridden via environment variables prefixed with GEOGUARD_.

    Example:
        GEOGUARD_ENVIRONMENT=production
        GEOGUARD_LOG_LEVEL=INFO
        GEOGUARD_CITY_DB=/var/lib/geoip/GeoLite2-City.mmdb
        GEOGUARD_HISTORY_BACKEND=dynamodb
    """

    # Core settings
    environment: Environment = field(
        default_factory=lambda: Environment(
            os.getenv("GEOGUARD_ENVIRONMENT", "development")
        )
    )
    debug: bool = field(
        default_factory=lambda: os.getenv("GEOGUARD_DEBUG", "false").lower() == "true"
    )
    log_level: LogLevel = field(
        default_factory=lambda: LogLevel(os.getenv("GEOGUARD_LOG_LEVEL", "INFO"))
    )

    # Paths
    project_root: Path = field(default_factory=_get_project_root)

    # MaxMind databases
    city_db_path: Optional[Path] = field(
        default_factory=lambda: _optional_path("GEOGUARD_CITY_DB")
    )
    asn_db_path: Optional[Path] = field(
        default_factory=lambda: _optional_path("GEOGUARD_ASN_DB")
    )

    # Rule set
    rules_file: Path = field(
        default_factory=lambda: Path(
            os.getenv("GEOGUARD_RULES_FILE", "./config/rules.yaml")
        )
    )

    # History settings
    history_backend: HistoryBackend = field(
        default_factory=lambda: HistoryBackend(
            os.getenv("GEOGUARD_HISTORY_BACKEND", "memory")
        )
    )
    dynamodb_table: Optional[str] = field(
        default_factory=lambda: os.getenv("GEOGUARD_DYNAMODB_TABLE")
    )
    record_ttl_days: int = field(
        default_factory=lambda: int(
            os.getenv("GEOGUARD_RECORD_TTL_DAYS", str(StorageConstants.DEFAULT_TTL_DAYS))
        )
    )

    # AWS settings (for DynamoDB/CloudWatch)
    aws_region: str = field(
        default_factory=lambda: os.getenv("AWS_DEFAULT_REGION", "us-east-1")
    )

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.history_backend == HistoryBackend.DYNAMODB and not self.dynamodb_table:
            raise ConfigurationError(
                "GEOGUARD_DYNAMODB_TABLE must be set when using the DynamoDB history backend",
                details={"history_backend": self.history_backend.value},
            )

        if self.record_ttl_days < 0:
            raise ConfigurationError(
                "GEOGUARD_RECORD_TTL_DAYS must be non-negative",
                details={"record_ttl_days": self.record_ttl_days},
            )

        # Warn about debug in production
        if self.environment == Environment.PRODUCTION and self.debug:
            import warnings
            warnings.warn(
                "Debug mode is enabled in production environment",
                RuntimeWarning,
                stacklevel=2
            )

    @property
    def config_dir(self) -> Path:
        """Get the config directory path."""
        return self.project_root / "config"

    @property
    def has_maxmind_databases(self) -> bool:
        """Whether both MaxMind database paths are configured."""
        return self.city_db_path is not None and self.asn_db_path is not None

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PRODUCTION

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == Environment.DEVELOPMENT


# Singleton instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance.

    Returns:
        Config: The global configuration singleton.
    """
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Reset the global configuration (for testing)."""
    global _config
    _config = None
