"""Syntactic address family detection.

No validation is performed: anything that does not look like IPv6 is
routed to the IPv4 lookup.
"""

from __future__ import annotations

import re
from enum import Enum


class AddressFamily(str, Enum):
    IPV4 = "ipv4"
    IPV6 = "ipv6"


_IPV6_SHAPE = re.compile(r"^([0-9a-fA-F]{0,4}:){1,7}[0-9a-fA-F]{0,4}$")


def classify_address(address: str | None) -> AddressFamily:
    if address and _IPV6_SHAPE.fullmatch(address):
        return AddressFamily.IPV6
    return AddressFamily.IPV4
