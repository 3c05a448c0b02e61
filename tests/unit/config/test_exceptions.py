"""Tests for the GeoGuard exception hierarchy."""

import pytest

from geoguard.common.exceptions import (
    ConfigurationError,
    GeoGuardException,
    GeoLookupError,
    HistoryStoreError,
    RuleEvaluationError,
)


class TestExceptions:
    """Tests for exception codes and serialisation."""

    @pytest.mark.parametrize("exc,code", [
        (ConfigurationError("bad config"), "CONFIG_ERROR"),
        (GeoLookupError("lookup failed"), "GEO_LOOKUP_ERROR"),
        (HistoryStoreError("store down"), "HISTORY_STORE_ERROR"),
        (RuleEvaluationError("rule broke", rule_name="Geofencing"), "RULE_ERROR"),
    ])
    def test_codes(self, exc, code):
        assert isinstance(exc, GeoGuardException)
        assert exc.code == code

    def test_base_to_dict(self):
        exc = GeoGuardException("boom", details={"stage": "geo"})

        assert exc.to_dict() == {
            "error": "GEOGUARD_ERROR",
            "message": "boom",
            "details": {"stage": "geo"},
        }
        assert str(exc) == "boom"

    def test_geo_lookup_error_records_address_kind(self):
        exc = GeoLookupError("not found", address_kind="ipv6")
        assert exc.details == {"address_kind": "ipv6"}

    def test_history_store_error_records_user(self):
        assert HistoryStoreError("down", user_id="u1").details == {"user_id": "u1"}
        assert HistoryStoreError("down").details == {}

    def test_rule_evaluation_error_records_rule(self):
        exc = RuleEvaluationError("bad score", rule_name="Impossible Travel")
        assert exc.to_dict()["details"]["rule_name"] == "Impossible Travel"
