"""Geofencing - logins must originate within an allowed radius."""

from typing import Optional

from geoguard.data.schemas.login_record import LoginRecord
from geoguard.geo.context import GeoContext
from geoguard.rules.base import BaseGeoRule
from geoguard.rules.geometry import haversine_km


class GeofencingRule(BaseGeoRule):
    """Triggers when the IP centroid lies farther than ``radius_km`` from the center.

    A location exactly on the radius is inside the fence.
    An unknown IP location (0, 0) never triggers.
    """

    name = "Geofencing"

    def __init__(self, center_lat: float, center_lon: float, radius_km: float, risk_score: int):
        super().__init__(risk_score)
        self.center_lat = center_lat
        self.center_lon = center_lon
        self.radius_km = radius_km

    @property
    def description(self) -> str:
        return (
            f"Verifies the login originates within {self.radius_km:.1f} km of "
            f"({self.center_lat:.4f}, {self.center_lon:.4f})."
        )

    def score_with_context(
        self,
        context: GeoContext,
        current: LoginRecord,
        previous: Optional[LoginRecord],
    ) -> int:
        if not context.has_ip_location:
            return 0

        distance = haversine_km(
            self.center_lat, self.center_lon, context.ip_latitude, context.ip_longitude
        )
        if distance > self.radius_km:
            return self.risk_score
        return 0
