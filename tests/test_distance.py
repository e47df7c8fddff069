"""
Tests for anyroute.distance module.
"""

import pytest
import ipaddress

from anyroute.config import NO_ROUTE
from anyroute.distance import (
    ContentAddress,
    address_distance,
    content_address,
    is_unreachable,
    prefix_distance,
    suffix_distance,
    unit_distance,
    xor_distance,
)


class TestUnitDistance:
    """Tests for unit_distance."""

    def test_equal(self):
        assert unit_distance("abc", "abc") == 0

    def test_different(self):
        assert unit_distance("abc", "abd") == NO_ROUTE
        assert is_unreachable(unit_distance(1, "1"))


class TestSuffixDistance:
    """Tests for suffix_distance."""

    @pytest.mark.parametrize("other,expected", [
        ("abc", 0),
        ("abd", 1),
        ("add", 2),
        ("ddd", 3),
    ])
    def test_distances(self, other, expected):
        """Distance counts characters from the first mismatch."""
        assert suffix_distance("abc", other) == expected

    def test_shorter_destination(self):
        """A shorter destination differs where it runs out."""
        assert suffix_distance("abc", "ab") == 1

    def test_bytes(self):
        assert suffix_distance(b"abc", b"abd") == 1

    def test_mismatched_types(self):
        """Incompatible address kinds are unreachable, not an error."""
        assert suffix_distance("abc", b"abc") == NO_ROUTE
        assert suffix_distance("abc", 123) == NO_ROUTE
        assert suffix_distance(None, "abc") == NO_ROUTE


class TestXorDistance:
    """Tests for xor_distance."""

    def test_ints(self):
        assert xor_distance(0b1010, 0b1000) == 0b0010
        assert xor_distance(7, 7) == 0

    def test_bytes(self):
        assert xor_distance(b"\x00\x01", b"\x00\x03") == 2

    def test_length_mismatch(self):
        assert xor_distance(b"\x00", b"\x00\x00") == NO_ROUTE

    def test_mixed_kinds(self):
        assert xor_distance(1, b"\x01") == NO_ROUTE
        assert xor_distance("a", "b") == NO_ROUTE
        assert xor_distance(True, 1) == NO_ROUTE

    def test_negative(self):
        assert xor_distance(-1, 1) == NO_ROUTE


class TestPrefixDistance:
    """Tests for prefix_distance."""

    def test_longer_prefix_is_closer(self):
        """A /24 match beats a /8 match."""
        wide = prefix_distance("10.0.0.0/8", "10.1.2.3")
        narrow = prefix_distance("10.1.2.0/24", "10.1.2.3")

        assert wide == 24
        assert narrow == 8
        assert narrow < wide

    def test_outside_network(self):
        assert prefix_distance("10.0.0.0/8", "192.168.1.1") == NO_ROUTE

    def test_default_route(self):
        assert prefix_distance("0.0.0.0/0", "8.8.8.8") == 32

    def test_ipaddress_objects(self):
        net = ipaddress.ip_network("2001:db8::/32")
        assert prefix_distance(net, ipaddress.ip_address("2001:db8::1")) == 96

    def test_version_mismatch(self):
        assert prefix_distance("10.0.0.0/8", "2001:db8::1") == NO_ROUTE

    def test_unparseable(self):
        assert prefix_distance("not-a-network", "10.0.0.1") == NO_ROUTE
        assert prefix_distance("10.0.0.0/8", object()) == NO_ROUTE


class TestContentAddress:
    """Tests for content addressing."""

    def test_content_address_stable(self, random_content):
        assert content_address(random_content) == content_address(random_content)
        assert len(content_address(random_content)) == 16
        assert len(content_address(random_content, size=32)) == 32

    def test_equality_and_hash(self, random_content):
        a = ContentAddress.of(random_content)
        b = ContentAddress.of(random_content)

        assert a == b
        assert hash(a) == hash(b)
        assert a.distance(b) == 0

    def test_xor_between_addresses(self):
        a = ContentAddress(b"\x00" * 15 + b"\x01")
        b = ContentAddress(b"\x00" * 15 + b"\x03")

        assert a.distance(b) == 2
        assert xor_distance(a, b"\x00" * 15 + b"\x00") == 1

    def test_from_hex(self):
        a = ContentAddress.from_hex("00ff")
        assert a.digest == b"\x00\xff"
        assert a.hex() == "00ff"

    def test_address_distance_delegates(self):
        a = ContentAddress(b"\x01")
        assert address_distance(a, ContentAddress(b"\x01")) == 0
        assert address_distance("plain", "plain") == NO_ROUTE
