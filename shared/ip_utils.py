"""
Remote IP handling for outbound verification requests.
"""

from __future__ import annotations

import ipaddress
from typing import Optional


def normalize_remote_ip(value: Optional[str]) -> Optional[str]:
    """Return ``value`` unchanged if it is a bare IPv4/IPv6 address.

    The value is checked as given: surrounding whitespace and IPv6 zone
    suffixes (``fe80::1%eth0``) are not accepted. Anything else (``None``,
    ``""``, hostnames, garbage) yields ``None`` so the caller can simply
    leave the address out.

    Args:
        value: Candidate address, typically the end user's client IP.

    Returns:
        The address string, or ``None`` if it does not parse.
    """
    if not value or "%" in value or value != value.strip():
        return None
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return None
    return value
