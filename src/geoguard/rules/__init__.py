"""Built-in rules and rule contracts."""

from geoguard.rules.base import (
    BaseGeoRule,
    BaseRule,
    GeoContextRule,
    Rule,
    is_rule,
    supports_geo_context,
)
from geoguard.rules.country_mismatch import CountryMismatchRule
from geoguard.rules.datacenter import DEFAULT_DATACENTER_ASNS, DataCenterRule
from geoguard.rules.fingerprint import FingerprintRule
from geoguard.rules.geofencing import GeofencingRule
from geoguard.rules.geometry import haversine_km
from geoguard.rules.ip_gps import IPGPSRule
from geoguard.rules.loader import build_rules, load_rules
from geoguard.rules.open_proxy import OpenProxyRule
from geoguard.rules.timezone import TimezoneRule
from geoguard.rules.velocity import VelocityRule

__all__ = [
    # Contracts
    "BaseGeoRule",
    "BaseRule",
    "GeoContextRule",
    "Rule",
    "is_rule",
    "supports_geo_context",
    # Built-in rules
    "CountryMismatchRule",
    "DataCenterRule",
    "DEFAULT_DATACENTER_ASNS",
    "FingerprintRule",
    "GeofencingRule",
    "IPGPSRule",
    "OpenProxyRule",
    "TimezoneRule",
    "VelocityRule",
    # Helpers
    "haversine_km",
    "build_rules",
    "load_rules",
]
