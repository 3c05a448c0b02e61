"""Unit tests for the MaxMind geolocator."""

import pytest
from unittest.mock import MagicMock, patch

import geoip2.errors
from maxminddb import InvalidDatabaseError

from geoguard.common.exceptions import ConfigurationError, GeoLookupError
from geoguard.geo.maxmind import MaxMindGeoLocator
from geoguard.geo.port import AsnData


def _city_response():
    response = MagicMock()
    response.country.iso_code = "TR"
    response.city.geoname_id = 745044
    response.city.names = {"en": "Istanbul", "de": "Istanbul"}
    response.location.latitude = 41.0082
    response.location.longitude = 28.9784
    response.location.time_zone = "Europe/Istanbul"
    return response


def _asn_response():
    response = MagicMock()
    response.autonomous_system_number = 9121
    response.autonomous_system_organization = "Turk Telekom"
    return response


class TestMaxMindGeoLocator:
    """Test MaxMind database lookups with mocked readers."""

    @pytest.fixture
    def readers(self):
        """City and ASN reader mocks."""
        return MagicMock(), MagicMock()

    @pytest.fixture
    def locator(self, readers):
        city_reader, asn_reader = readers
        with patch("geoip2.database.Reader", side_effect=[city_reader, asn_reader]):
            return MaxMindGeoLocator("/data/GeoLite2-City.mmdb", "/data/GeoLite2-ASN.mmdb")

    def test_opens_both_databases(self):
        with patch("geoip2.database.Reader") as mock_reader:
            MaxMindGeoLocator("/data/city.mmdb", "/data/asn.mmdb")

        opened = [c.args[0] for c in mock_reader.call_args_list]
        assert opened == ["/data/city.mmdb", "/data/asn.mmdb"]

    def test_locate_ip(self, locator, readers):
        city_reader, _ = readers
        city_reader.city.return_value = _city_response()

        geo = locator.locate_ip("88.230.100.50")

        city_reader.city.assert_called_once_with("88.230.100.50")
        assert geo.country_code == "TR"
        assert geo.city_geoname_id == 745044
        assert geo.city_name == "Istanbul"
        assert geo.latitude == 41.0082
        assert geo.timezone == "Europe/Istanbul"

    def test_locate_ip_with_sparse_record(self, locator, readers):
        """Test missing database fields become empty defaults."""
        city_reader, _ = readers
        response = _city_response()
        response.country.iso_code = None
        response.city.geoname_id = None
        response.city.names = {}
        response.location.latitude = None
        response.location.longitude = None
        response.location.time_zone = None
        city_reader.city.return_value = response

        geo = locator.locate_ip("88.230.100.50")

        assert geo.country_code == ""
        assert geo.city_geoname_id == 0
        assert geo.city_name == ""
        assert (geo.latitude, geo.longitude) == (0.0, 0.0)
        assert geo.timezone == ""

    def test_locate_asn(self, locator, readers):
        _, asn_reader = readers
        asn_reader.asn.return_value = _asn_response()

        assert locator.locate_asn("88.230.100.50") == AsnData(asn=9121, org_name="Turk Telekom")

    def test_address_not_found(self, locator, readers):
        city_reader, _ = readers
        city_reader.city.side_effect = geoip2.errors.AddressNotFoundError("not in database")

        with pytest.raises(GeoLookupError) as exc_info:
            locator.locate_ip("10.0.0.1")

        assert exc_info.value.details["address_kind"] == "ipv4"
        assert "10.0.0.1" not in exc_info.value.message

    def test_invalid_address(self, locator, readers):
        _, asn_reader = readers
        asn_reader.asn.side_effect = ValueError("'garbage' does not appear to be an IPv4 or IPv6 address")

        with pytest.raises(GeoLookupError) as exc_info:
            locator.locate_asn("garbage")

        assert exc_info.value.details["address_kind"] == "invalid"
        assert "garbage" not in exc_info.value.message

    def test_close_closes_both_readers(self, locator, readers):
        locator.close()

        for reader in readers:
            reader.close.assert_called_once()

    def test_missing_city_database(self):
        with patch("geoip2.database.Reader", side_effect=FileNotFoundError("no such file")):
            with pytest.raises(ConfigurationError):
                MaxMindGeoLocator("/missing/city.mmdb", "/data/asn.mmdb")

    def test_corrupt_asn_database_closes_city_reader(self):
        city_reader = MagicMock()
        with patch(
            "geoip2.database.Reader",
            side_effect=[city_reader, InvalidDatabaseError("corrupt metadata")],
        ):
            with pytest.raises(ConfigurationError):
                MaxMindGeoLocator("/data/city.mmdb", "/data/asn.mmdb")

        city_reader.close.assert_called_once()
