"""Country change between consecutive logins."""

from typing import Optional

from geoguard.data.schemas.login_record import LoginRecord
from geoguard.rules.base import BaseRule


class CountryMismatchRule(BaseRule):
    name = "Country Change"

    @property
    def description(self) -> str:
        return "Detects a login from a different country than the previous login."

    def score(self, current: LoginRecord, previous: Optional[LoginRecord]) -> int:
        if previous is None:
            return 0
        if not current.country_code or not previous.country_code:
            return 0
        if current.country_code != previous.country_code:
            return self.risk_score
        return 0
