"""Data-center detection - logins from cloud/hosting networks."""

import logging
from typing import Dict, Mapping, Optional

from geoguard.data.schemas.login_record import LoginRecord
from geoguard.rules.base import BaseRule


logger = logging.getLogger(__name__)


# ASN -> provider. Hosting ranges are where most commercial VPN and
# proxy exits live; residential users rarely appear here.
DEFAULT_DATACENTER_ASNS: Dict[int, str] = {
    # Major cloud providers
    16509: "Amazon.com (AWS)",
    14618: "Amazon.com (AWS)",
    15169: "Google Cloud",
    396982: "Google Cloud",
    8075: "Microsoft Azure",
    14061: "DigitalOcean",
    # European hosting
    24940: "Hetzner Online GmbH",
    16276: "OVH SAS",
    12876: "Online S.A.S. (Scaleway)",
    49981: "WorldStream",
    # VPN-heavy networks
    20473: "Choopa, LLC (Vultr)",
    60068: "Datacamp Limited (CDN77)",
    9009: "M247 Europe",
    20940: "Akamai Technologies",
    13335: "Cloudflare",
    # Other hosting
    63949: "Linode",
    46606: "Unified Layer",
    36352: "ColoCrossing",
}


class DataCenterRule(BaseRule):
    """Triggers when the login ASN belongs to a known hosting provider.

    ASN 0 means "unknown" and never triggers.
    """

    name = "Data Center IP"

    def __init__(self, blacklist: Mapping[int, str], risk_score: int):
        super().__init__(risk_score)
        self.blacklisted_asns: Dict[int, str] = {int(asn): str(org) for asn, org in blacklist.items()}

    @classmethod
    def default(cls, risk_score: int) -> "DataCenterRule":
        """Rule preloaded with well-known cloud and hosting ASNs."""
        return cls(DEFAULT_DATACENTER_ASNS, risk_score)

    @property
    def description(self) -> str:
        return "Detects whether the IP address belongs to a known cloud or hosting provider."

    def provider_for(self, asn: int) -> Optional[str]:
        """Provider name for a blacklisted ASN, else None."""
        return self.blacklisted_asns.get(asn)

    def score(self, current: LoginRecord, previous: Optional[LoginRecord]) -> int:
        if current.asn == 0:
            return 0
        provider = self.provider_for(current.asn)
        if provider is None:
            return 0
        logger.debug(
            "Login from hosting network",
            extra={"asn": current.asn, "provider": provider},
        )
        return self.risk_score
