"""Engine factory - wires ports and rules from a Config."""

import logging
from typing import Optional

from geoguard.common.config.settings import Config, HistoryBackend, get_config
from geoguard.common.exceptions import ConfigurationError
from geoguard.engine.evaluator import GeoGuard
from geoguard.geo.port import GeoLocator
from geoguard.history.store import HistoryStore, InMemoryHistoryStore
from geoguard.monitoring.metrics import MetricsCollector
from geoguard.rules.loader import load_rules


logger = logging.getLogger(__name__)


def build_history_store(config: Config) -> HistoryStore:
    """Create the configured history backend."""
    if config.history_backend == HistoryBackend.DYNAMODB:
        from geoguard.history.dynamodb_store import DynamoDBHistoryStore
        return DynamoDBHistoryStore(
            table_name=config.dynamodb_table,
            region=config.aws_region,
            ttl_days=config.record_ttl_days,
        )
    return InMemoryHistoryStore()


def build_geo_locator(config: Config) -> GeoLocator:
    """Open the configured MaxMind databases.

    Raises:
        ConfigurationError: If database paths are not configured
    """
    if not config.has_maxmind_databases:
        raise ConfigurationError(
            "GEOGUARD_CITY_DB and GEOGUARD_ASN_DB must be set",
            details={
                "city_db_path": str(config.city_db_path or ""),
                "asn_db_path": str(config.asn_db_path or ""),
            },
        )
    from geoguard.geo.maxmind import MaxMindGeoLocator
    return MaxMindGeoLocator(config.city_db_path, config.asn_db_path)


def build_engine(
    config: Optional[Config] = None,
    geo_locator: Optional[GeoLocator] = None,
    history_store: Optional[HistoryStore] = None,
    metrics: Optional[MetricsCollector] = None,
) -> GeoGuard:
    """Build a GeoGuard engine from configuration.

    Explicit ports override the configured ones.

    Args:
        config: Configuration. Uses the global config if not provided.
        geo_locator: Geo backend. Opened from MaxMind paths if not provided.
        history_store: History backend. Built from config if not provided.
        metrics: Optional metrics collector

    Returns:
        Engine with rules loaded from ``config.rules_file``
    """
    config = config or get_config()
    rules = load_rules(config.rules_file)

    engine = GeoGuard(
        geo_locator=geo_locator if geo_locator is not None else build_geo_locator(config),
        history_store=history_store if history_store is not None else build_history_store(config),
        rules=rules,
        metrics=metrics,
    )
    logger.info(
        f"GeoGuard engine built with {len(rules)} rules "
        f"({config.history_backend.value} history, {config.environment.value})"
    )
    return engine
