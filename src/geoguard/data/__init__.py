"""Data layer - schemas."""

from geoguard.data.schemas import LoginAttempt, LoginRecord, RiskResult, Violation

__all__ = ["LoginAttempt", "LoginRecord", "RiskResult", "Violation"]
