"""Tests for the ephemeral geographic context."""

import dataclasses

import pytest

from geoguard.geo.context import GeoContext, build_geo_context


class TestGeoContext:
    """Tests for GeoContext."""

    def test_defaults_are_unknown(self):
        context = GeoContext()

        assert not context.has_ip_location
        assert not context.has_device_location
        assert not context.has_previous_location

    def test_build_geo_context(self):
        context = build_geo_context(
            ip_location=(41.0082, 28.9784),
            device_location=(41.01, 28.97),
            previous_ip_location=(39.9334, 32.8597),
        )

        assert context.ip_latitude == 41.0082
        assert context.device_longitude == 28.97
        assert context.previous_ip_latitude == 39.9334
        assert context.has_ip_location
        assert context.has_device_location
        assert context.has_previous_location

    def test_previous_location_defaults_to_unknown(self):
        context = build_geo_context((41.0, 29.0), (0.0, 0.0))

        assert context.has_ip_location
        assert not context.has_device_location
        assert not context.has_previous_location

    def test_single_zero_coordinate_is_known(self):
        """Test only the (0, 0) pair means unknown."""
        assert GeoContext(ip_latitude=0.0, ip_longitude=32.85).has_ip_location
        assert GeoContext(ip_latitude=51.48, ip_longitude=0.0).has_ip_location

    def test_is_immutable(self):
        context = GeoContext(ip_latitude=41.0, ip_longitude=29.0)

        with pytest.raises(dataclasses.FrozenInstanceError):
            context.ip_latitude = 0.0

    def test_repr_hides_coordinates(self):
        context = build_geo_context((41.0082, 28.9784), (39.92, 32.85))

        text = repr(context)
        assert "41.0082" not in text
        assert "32.85" not in text
        assert "ip=True" in text
