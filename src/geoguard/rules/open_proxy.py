"""Open proxy / Tor exit detection against a masked-prefix blacklist.

Blacklist entries are masked to /24 (IPv4) or /64 (IPv6) when loaded,
so raw addresses never enter the lookup set. Matching is therefore at
subnet granularity, the same granularity the login record keeps.

Lookups run concurrently under the read side of a reader/writer lock;
administrative updates take the write side.
"""

import ipaddress
import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Set, Union

from geoguard.common.constants import PrivacyConstants
from geoguard.common.exceptions import ConfigurationError
from geoguard.data.schemas.login_record import LoginRecord
from geoguard.privacy.transform import mask_ip, mask_network
from geoguard.rules.base import BaseRule


logger = logging.getLogger(__name__)


# Sample Tor exit addresses, enough for demos; production deployments
# load a maintained list with OpenProxyRule.from_file.
DEFAULT_PROXY_IPS = (
    "185.220.101.1",
    "185.220.101.2",
    "185.220.102.1",
)


class ReadWriteLock:
    """Many concurrent readers, one writer. Waiting writers block new readers."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            while self._writer or self._readers:
                self._cond.wait()
            self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


def blacklist_prefixes(entry: str) -> List[str]:
    """Masked prefixes covered by one blacklist entry.

    A plain address yields its containing prefix. A CIDR network at or
    narrower than the mask yields its containing prefix; a broader network
    is expanded into its prefixes, up to MAX_PREFIX_EXPANSION. Anything
    unparseable or too broad yields an empty list.
    """
    entry = entry.strip()
    if "/" not in entry:
        prefix = mask_ip(entry)
        return [prefix] if prefix else []

    try:
        network = ipaddress.ip_network(entry, strict=False)
    except ValueError:
        return []

    target = (
        PrivacyConstants.IPV4_PREFIX_LENGTH
        if network.version == 4
        else PrivacyConstants.IPV6_PREFIX_LENGTH
    )
    if network.prefixlen >= target:
        masked = mask_network(str(network.network_address))
        return [masked.with_prefixlen] if masked is not None else []

    count = 2 ** (target - network.prefixlen)
    if count > PrivacyConstants.MAX_PREFIX_EXPANSION:
        logger.warning(
            "Skipping blacklist network broader than expansion limit",
            extra={"network": network.with_prefixlen, "prefix_count": count},
        )
        return []
    return [subnet.with_prefixlen for subnet in network.subnets(new_prefix=target)]


class OpenProxyRule(BaseRule):
    """Triggers when the login's masked prefix is on the proxy blacklist."""

    name = "Known Proxy/Tor Detection"

    def __init__(self, proxy_ips: Iterable[str], risk_score: int):
        super().__init__(risk_score)
        self._lock = ReadWriteLock()
        self._prefixes: Set[str] = self._build_prefix_set(proxy_ips)

    @staticmethod
    def _build_prefix_set(entries: Iterable[str]) -> Set[str]:
        prefixes: Set[str] = set()
        for entry in entries:
            prefixes.update(blacklist_prefixes(entry))
        return prefixes

    @staticmethod
    def _read_entries(file_path: Union[str, Path]) -> List[str]:
        entries: List[str] = []
        with open(file_path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                # ipsum-style lists carry a hit count after the address
                entries.append(line.split()[0])
        return entries

    @classmethod
    def from_file(cls, file_path: Union[str, Path], risk_score: int) -> "OpenProxyRule":
        """Load a blacklist file with one address or CIDR per line.

        Blank lines and ``#`` comments are ignored; only the first
        whitespace-separated token of a line is used.

        Raises:
            ConfigurationError: If the file cannot be read
        """
        try:
            entries = cls._read_entries(file_path)
        except OSError as e:
            raise ConfigurationError(
                f"Failed to read proxy blacklist: {e}",
                details={"path": str(file_path)},
            ) from e

        rule = cls(entries, risk_score)
        logger.info(f"Loaded proxy blacklist: {len(rule)} prefixes from {file_path}")
        return rule

    @classmethod
    def default(cls, risk_score: int) -> "OpenProxyRule":
        """Rule preloaded with a small sample of Tor exit addresses."""
        return cls(DEFAULT_PROXY_IPS, risk_score)

    @property
    def description(self) -> str:
        return "Checks whether the IP address belongs to a known proxy, VPN, or Tor exit node."

    def score(self, current: LoginRecord, previous: Optional[LoginRecord]) -> int:
        if not current.masked_ip_prefix:
            return 0
        with self._lock.read():
            listed = current.masked_ip_prefix in self._prefixes
        return self.risk_score if listed else 0

    def add_ip(self, entry: str) -> int:
        """Blacklist an address or network. Returns the number of new prefixes."""
        prefixes = blacklist_prefixes(entry)
        with self._lock.write():
            before = len(self._prefixes)
            self._prefixes.update(prefixes)
            return len(self._prefixes) - before

    def remove_ip(self, entry: str) -> int:
        """Remove an address or network. Returns the number of prefixes removed."""
        prefixes = blacklist_prefixes(entry)
        with self._lock.write():
            before = len(self._prefixes)
            self._prefixes.difference_update(prefixes)
            return before - len(self._prefixes)

    def replace_all(self, entries: Iterable[str]) -> None:
        """Swap in a freshly loaded blacklist."""
        prefixes = self._build_prefix_set(entries)
        with self._lock.write():
            self._prefixes = prefixes

    def reload(self, file_path: Union[str, Path]) -> None:
        """Replace the blacklist with the contents of ``file_path``."""
        try:
            entries = self._read_entries(file_path)
        except OSError as e:
            raise ConfigurationError(
                f"Failed to read proxy blacklist: {e}",
                details={"path": str(file_path)},
            ) from e
        self.replace_all(entries)

    def contains(self, entry: str) -> bool:
        """Whether an address (or its prefix) is blacklisted."""
        prefix = mask_ip(entry)
        if not prefix:
            return False
        with self._lock.read():
            return prefix in self._prefixes

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._prefixes)
