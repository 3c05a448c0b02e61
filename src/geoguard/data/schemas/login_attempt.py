"""LoginAttempt schema - raw, caller-supplied input."""

from pydantic import BaseModel, Field


class LoginAttempt(BaseModel):
    """A single login attempt as seen by the host application.

    Holds raw, identifying request data. It exists only for the duration
    of one evaluation and is never persisted as-is.

    ``ip_address`` is deliberately not validated: a malformed address
    degrades the evaluation instead of rejecting it.
    """
    user_id: str = Field(..., min_length=1, description="Opaque user identifier")
    ip_address: str = Field(..., description="Raw client IP address")
    device_latitude: float = Field(
        default=0.0, ge=-90, le=90, description="Device GPS latitude (0 = not provided)"
    )
    device_longitude: float = Field(
        default=0.0, ge=-180, le=180, description="Device GPS longitude (0 = not provided)"
    )
    user_agent: str = Field(default="", description="Raw User-Agent header")
    accept_language: str = Field(default="", description="Raw Accept-Language header")
    client_timezone: str = Field(default="", description="Client-reported IANA timezone")

    model_config = {
        "json_schema_extra": {
            "example": {
                "user_id": "user_abc123",
                "ip_address": "88.230.100.50",
                "device_latitude": 39.92,
                "device_longitude": 32.85,
                "user_agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) Chrome/120.0",
                "accept_language": "tr-TR",
                "client_timezone": "Europe/Istanbul",
            }
        }
    }
