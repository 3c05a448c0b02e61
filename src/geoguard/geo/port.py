"""Geo Lookup Port - the engine's only source of location and network data.

Implementations resolve a raw IP address into coarse location (country,
city, city centroid, timezone) and network operator identifiers.
Failures are raised as GeoLookupError; the engine degrades on them.
"""

import ipaddress
from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class GeoData:
    """Geographic information derived from an IP address.

    Latitude/longitude are city centroids for ephemeral use only; only
    ``country_code`` and ``city_geoname_id`` may be persisted.
    """
    country_code: str = ""
    city_geoname_id: int = 0
    city_name: str = ""
    latitude: float = 0.0
    longitude: float = 0.0
    timezone: str = ""


@dataclass(frozen=True)
class AsnData:
    """Network operator for an IP address."""
    asn: int = 0
    org_name: str = ""


def address_kind(address: str) -> str:
    """Classify an address as "ipv4", "ipv6" or "invalid" for error details."""
    try:
        return f"ipv{ipaddress.ip_address(str(address).strip()).version}"
    except ValueError:
        return "invalid"


class GeoLocator(ABC):
    """Abstract base class for geolocation/ASN backends."""

    @abstractmethod
    def locate_ip(self, address: str) -> GeoData:
        """Resolve location data for an address.

        Args:
            address: IP address string

        Returns:
            GeoData for the address

        Raises:
            GeoLookupError: If the address is invalid or unresolvable
        """
        pass

    @abstractmethod
    def locate_asn(self, address: str) -> AsnData:
        """Resolve the autonomous system for an address.

        Raises:
            GeoLookupError: If the address is invalid or unresolvable
        """
        pass

    def close(self) -> None:
        """Release backend resources. No-op by default."""

    def __enter__(self) -> "GeoLocator":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
