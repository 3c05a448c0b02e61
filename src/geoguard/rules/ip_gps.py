"""IP-GPS cross-check - IP location versus device-reported location."""

from typing import Optional

from geoguard.data.schemas.login_record import LoginRecord
from geoguard.geo.context import GeoContext
from geoguard.rules.base import BaseGeoRule
from geoguard.rules.geometry import haversine_km


class IPGPSRule(BaseGeoRule):
    """Triggers when IP centroid and device GPS are more than ``max_distance_km`` apart.

    Skipped when either location is unknown (0, 0).
    """

    name = "IP-GPS Crosscheck"

    def __init__(self, max_distance_km: float, risk_score: int):
        super().__init__(risk_score)
        self.max_distance_km = max_distance_km

    @property
    def description(self) -> str:
        return (
            f"Checks whether the IP location and device GPS location are more than "
            f"{self.max_distance_km:.0f} km apart."
        )

    def score_with_context(
        self,
        context: GeoContext,
        current: LoginRecord,
        previous: Optional[LoginRecord],
    ) -> int:
        if not context.has_device_location or not context.has_ip_location:
            return 0

        distance = haversine_km(
            context.ip_latitude,
            context.ip_longitude,
            context.device_latitude,
            context.device_longitude,
        )
        if distance > self.max_distance_km:
            return self.risk_score
        return 0
