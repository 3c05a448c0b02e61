"""Timezone mismatch - IP-derived versus client-reported timezone."""

from typing import Optional

from geoguard.data.schemas.login_record import LoginRecord
from geoguard.rules.base import BaseRule


class TimezoneRule(BaseRule):
    """Triggers when the two timezone names differ. Skipped if either is empty."""

    name = "Timezone Mismatch"

    @property
    def description(self) -> str:
        return "Checks whether the IP-derived timezone differs from the client-reported timezone."

    def score(self, current: LoginRecord, previous: Optional[LoginRecord]) -> int:
        if not current.ip_timezone or not current.client_timezone:
            return 0
        if current.ip_timezone != current.client_timezone:
            return self.risk_score
        return 0
