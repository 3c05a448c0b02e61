"""Centralized logging configuration.

Handlers created by get_logger carry a MaskingFilter, which reduces IPv4
and IPv6 literals in a rendered log message to their masked prefix.

Package modules log through ``logging.getLogger(__name__)`` and leave
handler setup to the host. Filters only run on the handler they are
attached to, so a host that installs its own handlers should add
``MaskingFilter()`` to them as well.
"""

import logging
import os
import re
from typing import Optional


# Dotted quads not already followed by a prefix length
_IPV4_PATTERN = re.compile(r"\b(?:\d{1,3}\.){3}\d{1,3}\b(?!/)")

# Colon-separated hex groups, optionally ending in a dotted quad
_IPV6_PATTERN = re.compile(
    r"(?<![\w:.])(?:[0-9A-Fa-f]{0,4}:){2,7}"
    r"(?:(?:\d{1,3}\.){3}\d{1,3}|[0-9A-Fa-f]{1,4})?(?![\w:/])"
)


class MaskingFilter(logging.Filter):
    """Rewrite IP literals in log messages to their masked prefix.

    Text that only looks like an address (times, versions) is left as is.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        # geoguard.privacy imports geoguard.common, so resolve lazily
        from geoguard.privacy.transform import mask_ip

        def _mask(match: "re.Match") -> str:
            return mask_ip(match.group(0)) or match.group(0)

        message = record.getMessage()
        masked = _IPV4_PATTERN.sub(_mask, _IPV6_PATTERN.sub(_mask, message))
        if masked != message:
            record.msg = masked
            record.args = None
        return True


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """Get a configured logger instance.

    Args:
        name: Logger name, usually ``__name__``
        level: Level name. Defaults to GEOGUARD_LOG_LEVEL, then INFO.
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, (level or os.getenv("GEOGUARD_LOG_LEVEL", "INFO")).upper()))

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        handler.setFormatter(formatter)
        handler.addFilter(MaskingFilter())
        logger.addHandler(handler)

    return logger
