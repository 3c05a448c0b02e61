"""Data schemas - canonical Pydantic definitions."""

from geoguard.data.schemas.login_attempt import LoginAttempt
from geoguard.data.schemas.login_record import LoginRecord
from geoguard.data.schemas.risk_result import RiskResult, Violation

__all__ = [
    "LoginAttempt",
    "LoginRecord",
    "RiskResult",
    "Violation",
]
