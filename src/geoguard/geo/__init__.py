"""Geo lookup port, adapters and ephemeral context."""

from geoguard.geo.port import AsnData, GeoData, GeoLocator
from geoguard.geo.context import GeoContext, build_geo_context
from geoguard.geo.static import NetworkEntry, StaticGeoLocator

__all__ = [
    "AsnData",
    "GeoData",
    "GeoLocator",
    "GeoContext",
    "build_geo_context",
    "NetworkEntry",
    "StaticGeoLocator",
]
