#!/usr/bin/env python3
"""Main entry point for GeoGuard."""

import sys

from geoguard.common.logging import get_logger
from geoguard.common.config import Config
from geoguard.common.exceptions import ConfigurationError
from geoguard.engine import build_engine
from geoguard.rules import load_rules

logger = get_logger(__name__)


def main() -> int:
    """Main entry point."""
    config = Config()
    logger.info(f"GeoGuard initialized in {config.environment.value} mode")
    logger.info(f"Rules file: {config.rules_file}")

    try:
        if config.has_maxmind_databases:
            rules = build_engine(config).rules
        else:
            logger.warning("GEOGUARD_CITY_DB and GEOGUARD_ASN_DB not set; listing rules only")
            rules = load_rules(config.rules_file)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}", extra={"details": e.details})
        return 1

    for rule in rules:
        logger.info(f"  {rule.name}: {rule.description}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
