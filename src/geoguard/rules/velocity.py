"""Impossible travel - implied speed between consecutive logins."""

from typing import Optional

from geoguard.common.constants import GeoConstants
from geoguard.data.schemas.login_record import LoginRecord
from geoguard.geo.context import GeoContext
from geoguard.rules.base import BaseGeoRule
from geoguard.rules.geometry import haversine_km


SECONDS_PER_HOUR = 3600.0


class VelocityRule(BaseGeoRule):
    """Triggers when distance / elapsed hours exceeds ``max_speed_kmh``.

    When elapsed time is zero or negative (clock skew, simultaneous logins)
    the rule triggers only if the locations are more than 10 km apart.
    Skipped without a previous record or when either centroid is unknown.
    """

    name = "Impossible Travel"

    def __init__(self, max_speed_kmh: float, risk_score: int):
        super().__init__(risk_score)
        self.max_speed_kmh = max_speed_kmh

    @property
    def description(self) -> str:
        return (
            f"Checks whether travel speed between consecutive logins exceeds "
            f"{self.max_speed_kmh:.0f} km/h."
        )

    def score_with_context(
        self,
        context: GeoContext,
        current: LoginRecord,
        previous: Optional[LoginRecord],
    ) -> int:
        if previous is None:
            return 0
        if not context.has_ip_location or not context.has_previous_location:
            return 0

        distance = haversine_km(
            context.previous_ip_latitude,
            context.previous_ip_longitude,
            context.ip_latitude,
            context.ip_longitude,
        )
        elapsed_hours = (current.timestamp - previous.timestamp).total_seconds() / SECONDS_PER_HOUR

        if elapsed_hours <= 0:
            if distance > GeoConstants.SIMULTANEOUS_LOGIN_TOLERANCE_KM:
                return self.risk_score
            return 0

        if distance / elapsed_hours > self.max_speed_kmh:
            return self.risk_score
        return 0
