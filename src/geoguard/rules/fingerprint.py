"""Device fingerprint change between consecutive logins."""

from typing import Optional

from geoguard.data.schemas.login_record import LoginRecord
from geoguard.rules.base import BaseRule


class FingerprintRule(BaseRule):
    name = "Device Fingerprint Change"

    @property
    def description(self) -> str:
        return "Detects a change in device fingerprint (user agent and language) since the previous login."

    def score(self, current: LoginRecord, previous: Optional[LoginRecord]) -> int:
        if previous is None:
            return 0
        if current.fingerprint_hash != previous.fingerprint_hash:
            return self.risk_score
        return 0
