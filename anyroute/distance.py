"""
Distance functions and address kinds for anyroute.

A distance function scores how close an entry address is to a destination.
Lower is closer, 0 is an exact match, and any negative value means the two
addresses cannot be compared (unreachable). Distance functions must be pure.

Provided schemes:
- unit_distance: exact equality only (the Table default)
- address_distance: delegate to Address.distance()
- suffix_distance: characters left after the first mismatch
- xor_distance: Kademlia XOR metric over ints / node IDs
- prefix_distance: masked longest-prefix match (IP, CIDR)
"""

import ipaddress
from typing import Any, Union

from blake3 import blake3

from .config import NO_ROUTE, ZERO_DISTANCE, CONTENT_ID_LEN
from .interfaces import Address


IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]


def is_unreachable(distance: int) -> bool:
    """True if distance is the unreachable sentinel."""
    return distance < 0


def unit_distance(a: Any, b: Any) -> int:
    """0 if the addresses are equal, unreachable otherwise."""
    if a == b:
        return ZERO_DISTANCE
    return NO_ROUTE


def address_distance(a: Any, b: Any) -> int:
    """Use the entry address's own distance() method."""
    if isinstance(a, Address):
        return a.distance(b)
    return NO_ROUTE


def suffix_distance(a: Any, b: Any) -> int:
    """
    Count the characters of a from the first point where b differs.

    "abc" vs "abc" -> 0, "abc" vs "abd" -> 1, "abc" vs "ddd" -> 3.
    A b shorter than a differs where it runs out.

    Args:
        a: Entry address (str or bytes)
        b: Destination address (same type as a)

    Returns:
        Distance, or NO_ROUTE if the types differ
    """
    if not isinstance(a, (str, bytes)) or type(a) is not type(b):
        return NO_ROUTE

    for i in range(len(a)):
        if i >= len(b) or a[i] != b[i]:
            return len(a) - i
    return ZERO_DISTANCE


def _as_int(value: Any) -> Union[int, None]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, ContentAddress):
        return int.from_bytes(value.digest, "big")
    if isinstance(value, (bytes, bytearray)):
        return int.from_bytes(value, "big")
    return None


def xor_distance(a: Any, b: Any) -> int:
    """
    Kademlia XOR distance.

    Works on non-negative ints and on equal-length byte strings such as
    content addresses. Anything else is unreachable.
    """
    if isinstance(a, (bytes, bytearray, ContentAddress)) or isinstance(
        b, (bytes, bytearray, ContentAddress)
    ):
        if len(_raw(a)) != len(_raw(b)):
            return NO_ROUTE

    ia = _as_int(a)
    ib = _as_int(b)
    if ia is None or ib is None or ia < 0 or ib < 0:
        return NO_ROUTE
    return ia ^ ib


def _raw(value: Any) -> bytes:
    if isinstance(value, ContentAddress):
        return value.digest
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    return b""


def _as_network(value: Any) -> IPNetwork:
    if isinstance(value, (ipaddress.IPv4Network, ipaddress.IPv6Network)):
        return value
    return ipaddress.ip_network(value, strict=False)


def prefix_distance(a: Any, b: Any) -> int:
    """
    Masked longest-prefix match.

    The entry address is a network ("10.0.0.0/8"), the destination an
    address or a network. A longer matching prefix is closer:
    distance = max_prefixlen - prefixlen of the entry.

    Args:
        a: Entry network (ipaddress network or CIDR string)
        b: Destination (ipaddress address/network or string)

    Returns:
        Distance, or NO_ROUTE if b is outside a or unparseable
    """
    try:
        net = _as_network(a)
        dest = _as_network(b)
    except (TypeError, ValueError):
        return NO_ROUTE

    if net.version != dest.version:
        return NO_ROUTE
    if not dest.subnet_of(net):
        return NO_ROUTE
    return net.max_prefixlen - net.prefixlen


# =============================================================================
# Content addressing
# =============================================================================

def content_address(data: bytes, size: int = CONTENT_ID_LEN) -> bytes:
    """
    Derive a content identity from data.

    Args:
        data: Content bytes
        size: Output size in bytes (default 16)

    Returns:
        BLAKE3(data)[:size]
    """
    return blake3(data).digest()[:size]


class ContentAddress(Address):
    """
    Address derived from content, compared with the XOR metric.

    Two ContentAddress values are equal when their digests are equal, so
    they also work with unit_distance.
    """

    __slots__ = ("digest",)

    def __init__(self, digest: bytes):
        self.digest = bytes(digest)

    @classmethod
    def of(cls, data: bytes, size: int = CONTENT_ID_LEN) -> "ContentAddress":
        """Address for the given content."""
        return cls(content_address(data, size))

    @classmethod
    def from_hex(cls, value: str) -> "ContentAddress":
        return cls(bytes.fromhex(value))

    def distance(self, other: Any) -> int:
        return xor_distance(self, other)

    def hex(self) -> str:
        return self.digest.hex()

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, ContentAddress):
            return NotImplemented
        return self.digest == other.digest

    def __hash__(self) -> int:
        return hash(self.digest)

    def __repr__(self) -> str:
        return f"ContentAddress({self.hex()[:16]})"
