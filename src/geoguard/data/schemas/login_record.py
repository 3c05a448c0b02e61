"""LoginRecord schema - the only persisted representation of a login.

No field of this record can be reversed to the original IP address or to
precise coordinates:
- the IP address is stored as its /24 (IPv4) or /64 (IPv6) prefix
- location is stored as country code and city identifier only
- the device is stored as a one-way fingerprint hash

Extra fields are forbidden so nothing else can ride along into storage.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator

from geoguard.privacy.transform import is_masked_prefix


class LoginRecord(BaseModel):
    """Privacy-safe login record."""
    user_id: str = Field(..., min_length=1, description="Opaque user identifier")
    timestamp: datetime = Field(..., description="Login time (UTC)")
    masked_ip_prefix: str = Field(
        default="", description="IPv4 /24 or IPv6 /64 prefix, empty when unknown"
    )
    country_code: str = Field(
        default="", max_length=2, description="ISO 3166-1 alpha-2 country code"
    )
    city_geoname_id: int = Field(default=0, ge=0, description="GeoNames city identifier")
    asn: int = Field(default=0, ge=0, description="Autonomous system number (0 = unknown)")
    org_name: str = Field(default="", description="Network operator name")
    fingerprint_hash: str = Field(default="", description="SHA-256 of user agent + language")
    ip_timezone: str = Field(default="", description="Timezone derived from IP geolocation")
    client_timezone: str = Field(default="", description="Timezone reported by the client")

    model_config = {
        "extra": "forbid",
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "user_id": "user_abc123",
                "timestamp": "2026-01-25T14:30:00Z",
                "masked_ip_prefix": "88.230.100.0/24",
                "country_code": "TR",
                "city_geoname_id": 323786,
                "asn": 9121,
                "org_name": "Turk Telekom",
                "fingerprint_hash": "5e884898da28047151d0e56f8dc6292773603d0d6aabbdd62a11ef721d1542d8",
                "ip_timezone": "Europe/Istanbul",
                "client_timezone": "Europe/Istanbul",
            }
        },
    }

    @field_validator("masked_ip_prefix")
    @classmethod
    def prefix_must_be_masked(cls, v: str) -> str:
        if v and not is_masked_prefix(v):
            raise ValueError("masked_ip_prefix must be a /24 or /64 network prefix")
        return v

    @field_validator("timestamp")
    @classmethod
    def timestamp_must_be_aware(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    def to_storage_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible dict holding exactly the record fields."""
        return self.model_dump(mode="json")

    @classmethod
    def from_storage_dict(cls, data: Dict[str, Any]) -> "LoginRecord":
        """Rebuild a record from a storage dict, ignoring backend bookkeeping keys."""
        fields = {name: data[name] for name in cls.model_fields if name in data}
        return cls.model_validate(fields)
