"""GeoGuard - privacy-preserving login risk scoring."""

__version__ = "0.1.0"
__author__ = "GeoGuard Team"

# Core exports
from geoguard.data.schemas import LoginAttempt, LoginRecord, RiskResult, Violation
from geoguard.engine.evaluator import GeoGuard
from geoguard.geo.context import GeoContext

__all__ = [
    "GeoGuard",
    "GeoContext",
    "LoginAttempt",
    "LoginRecord",
    "RiskResult",
    "Violation",
]
