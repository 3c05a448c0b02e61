"""Centralized constants for GeoGuard."""


# ===== GEOGRAPHY =====
class GeoConstants:
    EARTH_RADIUS_KM = 6371.0

    # Distance a login may "move" between two simultaneous attempts
    # (elapsed time <= 0) before velocity is considered impossible.
    SIMULTANEOUS_LOGIN_TOLERANCE_KM = 10.0


# ===== PRIVACY =====
class PrivacyConstants:
    IPV4_PREFIX_LENGTH = 24
    IPV6_PREFIX_LENGTH = 64
    FINGERPRINT_SEPARATOR = "|"
    HASH_ALGORITHM = "sha256"

    # Broad blacklist networks are expanded into masked prefixes up to this count
    MAX_PREFIX_EXPANSION = 4096


# ===== STORAGE =====
class StorageConstants:
    DEFAULT_TTL_DAYS = 90
    DYNAMODB_USER_PREFIX = "USER#"
    DYNAMODB_LOGIN_PREFIX = "LOGIN#"


# ===== MONITORING =====
class MonitoringConstants:
    DEFAULT_BATCH_SIZE = 20
    CLOUDWATCH_MAX_BATCH = 20
    EVALUATION_LATENCY_WARNING_MS = 50
    PUBLISH_QUEUE_SIZE = 100
    PUBLISH_TIMEOUT_SECONDS = 5.0
    QUEUE_GET_TIMEOUT = 1.0
