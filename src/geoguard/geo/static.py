"""Static geolocator - in-memory network table.

Resolves addresses by longest-prefix match against a fixed set of
networks. Used for tests, demos and benchmarks where no MaxMind
database is available.
"""

import ipaddress
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Tuple, Union

from geoguard.common.exceptions import GeoLookupError
from geoguard.geo.port import AsnData, GeoData, GeoLocator, address_kind


IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]


@dataclass(frozen=True)
class NetworkEntry:
    """Location and operator data for one network."""
    geo: GeoData
    asn: AsnData = AsnData()


class StaticGeoLocator(GeoLocator):
    """GeoLocator backed by an in-memory CIDR table.

    Example:
        locator = StaticGeoLocator({
            "88.230.100.0/24": NetworkEntry(
                geo=GeoData(country_code="TR", city_geoname_id=323786,
                            latitude=39.92, longitude=32.85,
                            timezone="Europe/Istanbul"),
                asn=AsnData(asn=9121, org_name="Turk Telekom"),
            ),
        })
    """

    def __init__(self, networks: Optional[Mapping[str, NetworkEntry]] = None):
        self._networks: List[Tuple[IPNetwork, NetworkEntry]] = []
        for cidr, entry in (networks or {}).items():
            self.add_network(cidr, entry)

    def add_network(self, cidr: str, entry: NetworkEntry) -> None:
        """Register a network. Longer prefixes win on lookup."""
        network = ipaddress.ip_network(cidr, strict=False)
        self._networks.append((network, entry))
        self._networks.sort(key=lambda item: item[0].prefixlen, reverse=True)

    def _lookup(self, address: str) -> NetworkEntry:
        try:
            ip = ipaddress.ip_address(str(address).strip())
        except ValueError:
            raise GeoLookupError("Invalid IP address", address_kind="invalid")

        for network, entry in self._networks:
            if ip.version == network.version and ip in network:
                return entry

        raise GeoLookupError("Address not found in network table", address_kind=address_kind(address))

    def locate_ip(self, address: str) -> GeoData:
        return self._lookup(address).geo

    def locate_asn(self, address: str) -> AsnData:
        return self._lookup(address).asn

    def __len__(self) -> int:
        return len(self._networks)

    @classmethod
    def from_dict(cls, table: Mapping[str, Mapping[str, object]]) -> "StaticGeoLocator":
        """Build from plain dicts, e.g. parsed from YAML.

        Each value may hold GeoData field names plus ``asn`` and ``org_name``.
        """
        networks: Dict[str, NetworkEntry] = {}
        for cidr, values in table.items():
            values = dict(values)
            asn = AsnData(
                asn=int(values.pop("asn", 0)),
                org_name=str(values.pop("org_name", "")),
            )
            networks[cidr] = NetworkEntry(geo=GeoData(**values), asn=asn)
        return cls(networks)
