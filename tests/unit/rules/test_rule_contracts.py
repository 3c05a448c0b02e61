"""Tests for rule contracts and capability detection."""

import pytest

from geoguard.common.exceptions import ConfigurationError
from geoguard.rules.base import (
    BaseGeoRule,
    BaseRule,
    GeoContextRule,
    Rule,
    is_rule,
    supports_geo_context,
)
from geoguard.rules import (
    DataCenterRule,
    GeofencingRule,
    TimezoneRule,
    VelocityRule,
)


class DuckRule:
    """A rule that inherits from nothing."""
    name = "Duck"
    description = "Always quacks."

    def score(self, current, previous):
        return 1


class DuckGeoRule(DuckRule):
    def score_with_context(self, context, current, previous):
        return 2


class TestCapabilityDetection:
    """Tests for structural rule detection."""

    def test_plain_rules(self):
        assert is_rule(TimezoneRule(45))
        assert not supports_geo_context(TimezoneRule(45))
        assert not supports_geo_context(DataCenterRule.default(30))

    def test_geo_rules(self):
        assert is_rule(VelocityRule(900.0, 80))
        assert supports_geo_context(VelocityRule(900.0, 80))
        assert supports_geo_context(GeofencingRule(39.0, 35.0, 500.0, 50))

    def test_duck_typed_rules(self):
        """Test inheritance is never required."""
        assert is_rule(DuckRule())
        assert not supports_geo_context(DuckRule())
        assert supports_geo_context(DuckGeoRule())

    def test_protocols_are_runtime_checkable(self):
        assert isinstance(DuckRule(), Rule)
        assert isinstance(DuckGeoRule(), GeoContextRule)
        assert not isinstance(DuckRule(), GeoContextRule)

    @pytest.mark.parametrize("candidate", [
        object(),
        None,
        "Geofencing",
        type("NoScore", (), {"name": "x", "description": "y"})(),
        type("NoName", (), {"description": "y", "score": lambda self, c, p: 0})(),
    ])
    def test_non_rules(self, candidate):
        assert not is_rule(candidate)


class TestBaseRule:
    """Tests for BaseRule risk score validation."""

    @pytest.mark.parametrize("score", [-1, 1.5, "10", True, None])
    def test_invalid_risk_score(self, score):
        with pytest.raises(ConfigurationError):
            TimezoneRule(score)

    def test_repr(self):
        assert repr(TimezoneRule(45)) == "TimezoneRule(risk_score=45)"

    def test_base_cannot_be_instantiated(self):
        with pytest.raises(TypeError):
            BaseRule(10)

    def test_subclass_missing_description_fails_at_construction(self):
        """Test an incomplete rule fails when built, not when registered."""

        class Incomplete(BaseRule):
            name = "Incomplete"

            def score(self, current, previous):
                return 0

        with pytest.raises(TypeError):
            Incomplete(10)

    def test_geo_subclass_must_score_with_context(self):
        class NoContext(BaseGeoRule):
            name = "NoContext"
            description = "Never scores."

        with pytest.raises(TypeError):
            NoContext(10)
