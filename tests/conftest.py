"""Shared fixtures for GeoGuard tests."""

import pytest
from datetime import datetime, timedelta, timezone

from geoguard.data.schemas import LoginAttempt, LoginRecord
from geoguard.geo.port import AsnData, GeoData
from geoguard.geo.static import NetworkEntry, StaticGeoLocator
from geoguard.history.store import InMemoryHistoryStore


ISTANBUL = NetworkEntry(
    geo=GeoData(
        country_code="TR",
        city_geoname_id=745044,
        city_name="Istanbul",
        latitude=41.0082,
        longitude=28.9784,
        timezone="Europe/Istanbul",
    ),
    asn=AsnData(asn=9121, org_name="Turk Telekom"),
)

ANKARA_MOBILE = NetworkEntry(
    geo=GeoData(
        country_code="TR",
        city_geoname_id=323786,
        city_name="Ankara",
        latitude=39.9334,
        longitude=32.8597,
        timezone="Europe/Istanbul",
    ),
    asn=AsnData(asn=15897, org_name="Vodafone Turkey"),
)

AMSTERDAM_VPN = NetworkEntry(
    geo=GeoData(
        country_code="NL",
        city_geoname_id=2759794,
        city_name="Amsterdam",
        latitude=52.3676,
        longitude=4.9041,
        timezone="Europe/Amsterdam",
    ),
    asn=AsnData(asn=43350, org_name="NForce Entertainment"),
)

AWS_OHIO = NetworkEntry(
    geo=GeoData(
        country_code="US",
        city_geoname_id=4509177,
        city_name="Columbus",
        latitude=39.9612,
        longitude=-82.9988,
        timezone="America/New_York",
    ),
    asn=AsnData(asn=16509, org_name="Amazon.com, Inc."),
)

LONDON = NetworkEntry(
    geo=GeoData(
        country_code="GB",
        city_geoname_id=2643743,
        city_name="London",
        latitude=51.5074,
        longitude=-0.1278,
        timezone="Europe/London",
    ),
    asn=AsnData(asn=20712, org_name="Andrews & Arnold Ltd"),
)

TOR_EXIT = NetworkEntry(
    geo=GeoData(
        country_code="DE",
        city_geoname_id=2950159,
        city_name="Berlin",
        latitude=52.5200,
        longitude=13.4050,
        timezone="Europe/Berlin",
    ),
    asn=AsnData(asn=60729, org_name="Stiftung Erneuerbare Freiheit"),
)

NETWORK_TABLE = {
    "88.230.100.0/24": ISTANBUL,
    "78.180.0.0/16": ANKARA_MOBILE,
    "185.107.56.0/24": AMSTERDAM_VPN,
    "52.94.76.0/24": AWS_OHIO,
    "81.2.69.0/24": LONDON,
    "185.220.101.0/24": TOR_EXIT,
    "2001:db8:1::/48": ISTANBUL,
}

START_TIME = datetime(2026, 1, 25, 14, 30, tzinfo=timezone.utc)


class FakeClock:
    """Deterministic clock for the engine."""

    def __init__(self, start: datetime = START_TIME):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def geo_locator():
    """Static locator over a handful of well-known networks."""
    return StaticGeoLocator(NETWORK_TABLE)


@pytest.fixture
def history_store():
    """Empty in-memory history store."""
    return InMemoryHistoryStore()


@pytest.fixture
def clock():
    """Clock fixed at START_TIME until advanced."""
    return FakeClock()


@pytest.fixture
def make_record():
    """Factory for privacy-safe login records."""
    def _make(**overrides) -> LoginRecord:
        values = {
            "user_id": "user_abc123",
            "timestamp": START_TIME,
            "masked_ip_prefix": "88.230.100.0/24",
            "country_code": "TR",
            "city_geoname_id": 745044,
            "asn": 9121,
            "org_name": "Turk Telekom",
            "fingerprint_hash": "a" * 64,
            "ip_timezone": "Europe/Istanbul",
            "client_timezone": "Europe/Istanbul",
        }
        values.update(overrides)
        return LoginRecord(**values)

    return _make


@pytest.fixture
def istanbul_attempt():
    """Normal login from Istanbul on a Windows desktop."""
    return LoginAttempt(
        user_id="user_abc123",
        ip_address="88.230.100.50",
        device_latitude=41.01,
        device_longitude=28.97,
        user_agent="Mozilla/5.0 (Windows NT 10.0; Win64; x64) Chrome/120.0.0.0",
        accept_language="tr-TR,tr;q=0.9,en;q=0.8",
        client_timezone="Europe/Istanbul",
    )
