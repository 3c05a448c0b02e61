"""Custom exceptions for GeoGuard.

Provides a hierarchy of exceptions for different error types.
All GeoGuard exceptions inherit from GeoGuardException.

None of these exceptions may carry a raw IP address or coordinates
in their message or details.
"""

from typing import Any, Dict, Optional


class GeoGuardException(Exception):
    """Base exception for all GeoGuard errors.

    Attributes:
        message: Human-readable error message
        code: Machine-readable error code
        details: Additional context about the error
    """

    def __init__(
        self,
        message: str,
        code: str = "GEOGUARD_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for host-side error reporting."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(GeoGuardException):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="CONFIG_ERROR", details=details)


class GeoLookupError(GeoGuardException):
    """Raised when an address cannot be geolocated or mapped to an ASN."""

    def __init__(
        self,
        message: str,
        address_kind: str = "invalid",
        details: Optional[Dict[str, Any]] = None
    ):
        details = details or {}
        details["address_kind"] = address_kind
        super().__init__(message, code="GEO_LOOKUP_ERROR", details=details)


class HistoryStoreError(GeoGuardException):
    """Raised when the login history backend fails."""

    def __init__(
        self,
        message: str,
        user_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        details = details or {}
        if user_id is not None:
            details["user_id"] = user_id
        super().__init__(message, code="HISTORY_STORE_ERROR", details=details)


class RuleEvaluationError(GeoGuardException):
    """Raised by a rule that cannot produce a score."""

    def __init__(
        self,
        message: str,
        rule_name: str,
        details: Optional[Dict[str, Any]] = None
    ):
        details = details or {}
        details["rule_name"] = rule_name
        super().__init__(message, code="RULE_ERROR", details=details)
