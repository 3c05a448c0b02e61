"""MaxMind GeoLite2/GeoIP2 geolocator.

Wraps geoip2 database readers for City and ASN databases. Databases can
be downloaded from https://dev.maxmind.com/geoip/geolite2-free-geolocation-data

Returned coordinates are city centroids, not user locations, and must
only be used ephemerally.
"""

import logging
from pathlib import Path
from typing import Union

import geoip2.database
import geoip2.errors
from maxminddb import InvalidDatabaseError

from geoguard.common.exceptions import ConfigurationError, GeoLookupError
from geoguard.geo.port import AsnData, GeoData, GeoLocator, address_kind


logger = logging.getLogger(__name__)


class MaxMindGeoLocator(GeoLocator):
    """GeoLocator backed by MaxMind .mmdb databases."""

    def __init__(self, city_db_path: Union[str, Path], asn_db_path: Union[str, Path]):
        """Open both databases.

        Args:
            city_db_path: Path to GeoLite2-City.mmdb or GeoIP2-City.mmdb
            asn_db_path: Path to GeoLite2-ASN.mmdb or GeoIP2-ISP.mmdb

        Raises:
            ConfigurationError: If either database cannot be opened
        """
        try:
            self._city_reader = geoip2.database.Reader(str(city_db_path))
        except (OSError, InvalidDatabaseError) as e:
            raise ConfigurationError(
                f"Failed to open city database: {e}",
                details={"path": str(city_db_path)},
            ) from e

        try:
            self._asn_reader = geoip2.database.Reader(str(asn_db_path))
        except (OSError, InvalidDatabaseError) as e:
            self._city_reader.close()
            raise ConfigurationError(
                f"Failed to open ASN database: {e}",
                details={"path": str(asn_db_path)},
            ) from e

        logger.info("MaxMind databases opened: city=%s asn=%s", city_db_path, asn_db_path)

    def locate_ip(self, address: str) -> GeoData:
        try:
            record = self._city_reader.city(str(address).strip())
        except (ValueError, geoip2.errors.GeoIP2Error) as e:
            raise GeoLookupError(
                f"City lookup failed: {type(e).__name__}",
                address_kind=address_kind(address),
            ) from e

        return GeoData(
            country_code=record.country.iso_code or "",
            city_geoname_id=record.city.geoname_id or 0,
            city_name=record.city.names.get("en", ""),
            latitude=record.location.latitude or 0.0,
            longitude=record.location.longitude or 0.0,
            timezone=record.location.time_zone or "",
        )

    def locate_asn(self, address: str) -> AsnData:
        try:
            record = self._asn_reader.asn(str(address).strip())
        except (ValueError, geoip2.errors.GeoIP2Error) as e:
            raise GeoLookupError(
                f"ASN lookup failed: {type(e).__name__}",
                address_kind=address_kind(address),
            ) from e

        return AsnData(
            asn=record.autonomous_system_number or 0,
            org_name=record.autonomous_system_organization or "",
        )

    def close(self) -> None:
        """Release the database file handles."""
        self._city_reader.close()
        self._asn_reader.close()
