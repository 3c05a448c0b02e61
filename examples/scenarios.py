"""Example: security scenarios evaluated end to end.

Runs six login scenarios against the example rule set, using an in-memory
network table in place of MaxMind databases:

1. Normal login from the expected location
2. VPN usage (IP in Amsterdam, browser timezone in Istanbul)
3. Request from cloud infrastructure
4. Impossible travel (Istanbul, then London five minutes later)
5. Same city, different network
6. Device change

Run from the repository root: ``python examples/scenarios.py``
"""

from datetime import datetime, timedelta, timezone
from pathlib import Path

from geoguard import GeoGuard, LoginAttempt, LoginRecord, RiskResult
from geoguard.common.logging import get_logger
from geoguard.geo.static import StaticGeoLocator
from geoguard.history.store import InMemoryHistoryStore
from geoguard.rules import load_rules

logger = get_logger(__name__)

RULES_FILE = Path(__file__).resolve().parent.parent / "config" / "rules.yaml"

BLOCK_THRESHOLD = 100
REVIEW_THRESHOLD = 50

NETWORKS = {
    "88.230.100.0/24": {
        "country_code": "TR", "city_geoname_id": 745044, "city_name": "Istanbul",
        "latitude": 41.0082, "longitude": 28.9784, "timezone": "Europe/Istanbul",
        "asn": 9121, "org_name": "Turk Telekom",
    },
    "78.180.0.0/16": {
        "country_code": "TR", "city_geoname_id": 745044, "city_name": "Istanbul",
        "latitude": 41.0138, "longitude": 28.9497, "timezone": "Europe/Istanbul",
        "asn": 15897, "org_name": "Vodafone Turkey",
    },
    "185.107.56.0/24": {
        "country_code": "NL", "city_geoname_id": 2759794, "city_name": "Amsterdam",
        "latitude": 52.3676, "longitude": 4.9041, "timezone": "Europe/Amsterdam",
        "asn": 43350, "org_name": "NForce Entertainment",
    },
    "52.94.76.0/24": {
        "country_code": "US", "city_geoname_id": 4509177, "city_name": "Columbus",
        "latitude": 39.9612, "longitude": -82.9988, "timezone": "America/New_York",
        "asn": 16509, "org_name": "Amazon.com, Inc.",
    },
    "81.2.69.0/24": {
        "country_code": "GB", "city_geoname_id": 2643743, "city_name": "London",
        "latitude": 51.5074, "longitude": -0.1278, "timezone": "Europe/London",
        "asn": 20712, "org_name": "Andrews & Arnold Ltd",
    },
}

WINDOWS_CHROME = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 Chrome/120.0.0.0"
MAC_SAFARI = "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) Safari/605.1.15"
IPHONE = "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0)"


class SimulatedClock:
    """Lets scenarios jump forward in time."""

    def __init__(self):
        self.now = datetime.now(timezone.utc)

    def __call__(self):
        return self.now


def status_for(result: RiskResult) -> str:
    if result.exceeds(BLOCK_THRESHOLD):
        return "BLOCKED"
    if result.exceeds(REVIEW_THRESHOLD):
        return "REVIEW"
    return "ALLOWED"


def print_result(title: str, result: RiskResult, record: LoginRecord):
    print(f"\n=== {title} ===")
    print(f"Result: {status_for(result)} (risk score {result.total_score})")
    for violation in result.violations:
        print(f"  + {violation.score:>3}  {violation.rule_name}: {violation.reason}")
    print("Stored record:")
    print(f"  masked prefix: {record.masked_ip_prefix}")
    print(f"  country:       {record.country_code}")
    print(f"  timezones:     ip={record.ip_timezone or '-'} client={record.client_timezone or '-'}")


def run_scenarios():
    clock = SimulatedClock()
    store = InMemoryHistoryStore()
    guard = GeoGuard(
        geo_locator=StaticGeoLocator.from_dict(NETWORKS),
        history_store=store,
        rules=load_rules(RULES_FILE),
        clock=clock,
    )
    logger.info(f"Loaded {len(guard.rules)} rules from {RULES_FILE.name}")

    # 1. Normal login
    result, record = guard.validate_and_store(LoginAttempt(
        user_id="user_normal",
        ip_address="88.230.100.50",
        device_latitude=41.01,
        device_longitude=28.97,
        user_agent=WINDOWS_CHROME,
        accept_language="tr-TR,tr;q=0.9,en;q=0.8",
        client_timezone="Europe/Istanbul",
    ))
    print_result("1. Normal login", result, record)

    # 2. VPN usage
    result, record = guard.validate(LoginAttempt(
        user_id="user_vpn",
        ip_address="185.107.56.1",
        device_latitude=39.92,
        device_longitude=32.85,
        user_agent=WINDOWS_CHROME,
        accept_language="tr-TR,tr;q=0.9",
        client_timezone="Europe/Istanbul",
    ))
    print_result("2. VPN usage", result, record)

    # 3. Cloud infrastructure, no GPS or browser timezone
    result, record = guard.validate(LoginAttempt(
        user_id="user_datacenter",
        ip_address="52.94.76.1",
        user_agent="python-requests/2.31.0",
        accept_language="en-US",
    ))
    print_result("3. Data center IP", result, record)

    # 4. Impossible travel
    guard.validate_and_store(LoginAttempt(
        user_id="user_travel",
        ip_address="88.230.100.50",
        user_agent=IPHONE,
        accept_language="tr-TR",
        client_timezone="Europe/Istanbul",
    ))
    clock.now += timedelta(minutes=5)
    result, record = guard.validate(LoginAttempt(
        user_id="user_travel",
        ip_address="81.2.69.142",
        user_agent=IPHONE,
        accept_language="tr-TR",
        client_timezone="Europe/London",
    ))
    print_result("4. Impossible travel", result, record)

    # 5. Home broadband, then mobile data in the same city
    guard.validate_and_store(LoginAttempt(
        user_id="user_roaming",
        ip_address="88.230.100.50",
        user_agent=MAC_SAFARI,
        accept_language="tr-TR",
        client_timezone="Europe/Istanbul",
    ))
    clock.now += timedelta(minutes=20)
    result, record = guard.validate(LoginAttempt(
        user_id="user_roaming",
        ip_address="78.180.50.100",
        user_agent=MAC_SAFARI,
        accept_language="tr-TR",
        client_timezone="Europe/Istanbul",
    ))
    print_result("5. Same city, network change", result, record)

    # 6. Device change
    guard.validate_and_store(LoginAttempt(
        user_id="user_device",
        ip_address="88.230.100.50",
        user_agent=WINDOWS_CHROME,
        accept_language="tr-TR",
        client_timezone="Europe/Istanbul",
    ))
    clock.now += timedelta(hours=1)
    result, record = guard.validate(LoginAttempt(
        user_id="user_device",
        ip_address="88.230.100.50",
        user_agent=MAC_SAFARI,
        accept_language="tr-TR",
        client_timezone="Europe/Istanbul",
    ))
    print_result("6. Device change", result, record)


if __name__ == "__main__":
    run_scenarios()
