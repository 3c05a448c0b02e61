"""Rule set loader - builds configured rules from YAML.

Example document::

    version: "1.0.0"
    rules:
      - type: geofencing
        risk_score: 50
        center_lat: 39.0
        center_lon: 35.0
        radius_km: 500
      - type: open_proxy
        risk_score: 40
        file: ipsum_level3.txt

Rules are returned in document order, which is also evaluation order.
"""

from pathlib import Path
from typing import Any, Callable, Dict, List, Literal, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError

from geoguard.common.exceptions import ConfigurationError
from geoguard.rules.base import BaseRule
from geoguard.rules.country_mismatch import CountryMismatchRule
from geoguard.rules.datacenter import DataCenterRule
from geoguard.rules.fingerprint import FingerprintRule
from geoguard.rules.geofencing import GeofencingRule
from geoguard.rules.ip_gps import IPGPSRule
from geoguard.rules.open_proxy import OpenProxyRule
from geoguard.rules.timezone import TimezoneRule
from geoguard.rules.velocity import VelocityRule


RuleType = Literal[
    "geofencing",
    "datacenter",
    "open_proxy",
    "ip_gps",
    "timezone",
    "velocity",
    "fingerprint",
    "country_mismatch",
]


class RuleConfig(BaseModel):
    """One configured rule. Rule-specific parameters are extra fields."""
    type: RuleType
    risk_score: int = Field(..., ge=0)
    enabled: bool = True

    model_config = {"extra": "allow"}

    @property
    def params(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})


class RuleSetConfig(BaseModel):
    """A versioned, ordered rule set."""
    version: str = "1.0.0"
    rules: List[RuleConfig] = Field(default_factory=list)


def _require(params: Dict[str, Any], rule_type: str, *names: str) -> List[Any]:
    missing = [name for name in names if name not in params]
    if missing:
        raise ConfigurationError(
            f"Rule '{rule_type}' is missing parameters: {', '.join(missing)}",
            details={"rule_type": rule_type, "missing": missing},
        )
    return [params[name] for name in names]


def _build_geofencing(config: RuleConfig, base_dir: Optional[Path]) -> BaseRule:
    lat, lon, radius = _require(config.params, config.type, "center_lat", "center_lon", "radius_km")
    return GeofencingRule(float(lat), float(lon), float(radius), config.risk_score)


def _build_datacenter(config: RuleConfig, base_dir: Optional[Path]) -> BaseRule:
    asns = config.params.get("asns")
    if asns is None:
        return DataCenterRule.default(config.risk_score)
    return DataCenterRule({int(asn): str(org) for asn, org in dict(asns).items()}, config.risk_score)


def _build_open_proxy(config: RuleConfig, base_dir: Optional[Path]) -> BaseRule:
    params = config.params
    if "file" in params:
        path = Path(params["file"])
        if not path.is_absolute() and base_dir is not None:
            path = base_dir / path
        return OpenProxyRule.from_file(path, config.risk_score)
    if "ips" in params:
        return OpenProxyRule([str(ip) for ip in params["ips"]], config.risk_score)
    return OpenProxyRule.default(config.risk_score)


def _build_ip_gps(config: RuleConfig, base_dir: Optional[Path]) -> BaseRule:
    (max_distance,) = _require(config.params, config.type, "max_distance_km")
    return IPGPSRule(float(max_distance), config.risk_score)


def _build_velocity(config: RuleConfig, base_dir: Optional[Path]) -> BaseRule:
    (max_speed,) = _require(config.params, config.type, "max_speed_kmh")
    return VelocityRule(float(max_speed), config.risk_score)


RULE_BUILDERS: Dict[str, Callable[[RuleConfig, Optional[Path]], BaseRule]] = {
    "geofencing": _build_geofencing,
    "datacenter": _build_datacenter,
    "open_proxy": _build_open_proxy,
    "ip_gps": _build_ip_gps,
    "timezone": lambda config, base_dir: TimezoneRule(config.risk_score),
    "velocity": _build_velocity,
    "fingerprint": lambda config, base_dir: FingerprintRule(config.risk_score),
    "country_mismatch": lambda config, base_dir: CountryMismatchRule(config.risk_score),
}


def build_rules(raw_config: Dict[str, Any], base_dir: Optional[Path] = None) -> List[BaseRule]:
    """Build rule instances from a parsed rule-set document.

    Args:
        raw_config: Parsed YAML/JSON mapping
        base_dir: Directory that relative file parameters resolve against

    Raises:
        ConfigurationError: If the document or any rule entry is invalid
    """
    try:
        rule_set = RuleSetConfig.model_validate(raw_config or {})
    except ValidationError as e:
        raise ConfigurationError(
            "Invalid rule set configuration",
            details={"errors": e.errors(include_url=False, include_input=False)},
        ) from e

    rules: List[BaseRule] = []
    for config in rule_set.rules:
        if not config.enabled:
            continue
        try:
            rules.append(RULE_BUILDERS[config.type](config, base_dir))
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Invalid parameters for rule '{config.type}': {e}",
                details={"rule_type": config.type},
            ) from e
    return rules


def load_rules(rules_file: Union[str, Path]) -> List[BaseRule]:
    """Load and build rules from a YAML file."""
    path = Path(rules_file)
    if not path.exists():
        raise ConfigurationError(
            f"Rules file not found: {path}",
            details={"path": str(path)},
        )

    with open(path, "r") as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Rules file is not valid YAML: {e}",
                details={"path": str(path)},
            ) from e

    return build_rules(raw_config, base_dir=path.parent)
