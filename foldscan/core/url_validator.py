"""Scan target URL validation.

The scanner drives a real browser to whatever URL it is handed, so targets
are restricted to public http(s) hosts unless ALLOW_PRIVATE_URLS is set.
"""

import ipaddress
import logging
from typing import Tuple
from urllib.parse import urlparse

from .config import Config

logger = logging.getLogger(__name__)

_ALLOWED_SCHEMES = frozenset(['http', 'https'])
_LOCAL_HOSTNAMES = frozenset(['localhost', 'localhost.localdomain'])


def validate_scan_url(url: str, allow_private: bool = None) -> Tuple[bool, str, str]:
    """Validate a product page URL before scanning.

    Returns (is_valid, url, reason).
    """
    if allow_private is None:
        allow_private = Config.ALLOW_PRIVATE_URLS

    if not url or not url.strip():
        return False, "", "empty URL"

    url = url.strip()

    try:
        parsed = urlparse(url)
    except ValueError:
        return False, "", "invalid URL format"

    if parsed.scheme.lower() not in _ALLOWED_SCHEMES:
        return False, "", f"unsupported scheme: {parsed.scheme or 'none'}"

    hostname = (parsed.hostname or "").lower()
    if not hostname:
        return False, "", "missing hostname"

    if not allow_private and _is_private_host(hostname):
        logger.warning(f"Rejected private scan target: {hostname}")
        return False, "", f"private host: {hostname}"

    return True, url, "OK"


def _is_private_host(hostname: str) -> bool:
    """Loopback, link-local, and RFC 1918 hosts given as names or literals."""
    if hostname in _LOCAL_HOSTNAMES or hostname.endswith('.localhost'):
        return True
    try:
        address = ipaddress.ip_address(hostname)
    except ValueError:
        return False
    return (
        address.is_private
        or address.is_loopback
        or address.is_link_local
        or address.is_unspecified
    )
