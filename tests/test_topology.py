"""
Tests for anyroute.topology module.
"""

import pytest

from anyroute.distance import ContentAddress, prefix_distance, suffix_distance
from anyroute.exceptions import TopologyError, UnknownDistanceError, UnknownNodeError
from anyroute.topology import Topology


TOPOLOGY_YAML = """\
distance: suffix
nodes: [aaa, aba, abc]
switches:
  sw1:
    attach: [aaa, aba]
    neighbors: [aaa, aba]
"""


class TestTopologyBuild:
    """Tests for building topologies."""

    def test_from_dict(self):
        topo = Topology.from_dict({
            "distance": "suffix",
            "nodes": ["aaa", "aba"],
            "switches": {"sw1": {"attach": ["aaa", "aba"], "neighbors": ["aaa"]}},
        })

        table = topo.table("sw1")
        assert table.distance is suffix_distance
        assert [e.address for e in table] == ["aaa", "aba"]
        assert topo.switch("sw1").neighbors == (topo.node("aaa"),)
        assert topo.switch("sw1").address == "sw1"

    def test_from_file(self, tmp_path):
        path = tmp_path / "net.yaml"
        path.write_text(TOPOLOGY_YAML)

        topo = Topology.from_file(str(path))

        assert set(topo.queue_nodes) == {"aaa", "aba", "abc"}
        assert set(topo.switches) == {"sw1"}

    def test_closest_then_exact(self):
        """Routing picks aba until abc is registered."""
        topo = Topology.from_dict({
            "distance": "suffix",
            "nodes": ["aaa", "aba", "abc"],
            "switches": {"sw1": {"attach": ["aaa", "aba"]}},
        })

        topo.send("sw1", "abc", "hello3")
        assert list(topo.deliveries()) == ["aba"]

        topo.table("sw1").add_node(topo.node("abc"))
        topo.send("sw1", "abc", "hello3")
        assert list(topo.deliveries()) == ["abc"]

    def test_node_addresses_mapping(self):
        topo = Topology.from_dict({
            "distance": "prefix",
            "nodes": {"lan": "10.1.2.0/24", "wan": "0.0.0.0/0"},
            "switches": {"gw": {"attach": ["wan", "lan"]}},
        })

        topo.send("gw", "10.1.2.7")
        topo.send("gw", "8.8.8.8")

        delivered = topo.deliveries()
        assert delivered["lan"][0].destination == "10.1.2.7"
        assert delivered["wan"][0].destination == "8.8.8.8"

    def test_routes_through_switches(self):
        """Explicit routes can point at switches declared later."""
        topo = Topology.from_dict({
            "nodes": ["abc"],
            "switches": {
                "edge": {"routes": [{"address": "abc", "via": "core"}]},
                "core": {"attach": ["abc"], "neighbors": ["abc"]},
            },
        })

        topo.send("edge", "abc", "payload")

        [packet] = topo.deliveries()["abc"]
        assert packet.payload == "payload"

    def test_xor_addresses_parsed(self):
        topo = Topology.from_dict({
            "distance": "xor",
            "nodes": {"n1": "00", "n2": "f0"},
            "switches": {"sw": {"attach": ["n1", "n2"]}},
        })

        assert topo.node("n1").address == b"\x00"
        topo.send("sw", "e0")
        assert list(topo.deliveries()) == ["n2"]

    def test_content_addresses_parsed(self):
        topo = Topology.from_dict({
            "distance": "address",
            "nodes": {"n1": "0001", "n2": "ff00"},
            "switches": {"sw": {"attach": ["n1", "n2"]}},
        })

        assert topo.node("n1").address == ContentAddress(b"\x00\x01")
        topo.send("sw", "0003")
        assert list(topo.deliveries()) == ["n1"]

    def test_per_switch_distance(self):
        topo = Topology.from_dict({
            "distance": "unit",
            "nodes": ["abc"],
            "switches": {"sw": {"distance": "prefix"}},
        })

        assert topo.table("sw").distance is prefix_distance

    def test_per_switch_distance_routes(self):
        """Attached nodes are re-parsed with the switch's own scheme."""
        topo = Topology.from_dict({
            "distance": "unit",
            "nodes": {"n1": "00", "n2": "f0"},
            "switches": {"sw": {"distance": "xor", "attach": ["n1", "n2"]}},
        })

        assert topo.node("n1").address == "00"
        assert [e.address for e in topo.table("sw")] == [b"\x00", b"\xf0"]

        topo.send("sw", "01")
        assert list(topo.deliveries()) == ["n1"]

    def test_switch_name_not_parsed(self):
        """Without an explicit address a switch keeps its name as address."""
        topo = Topology.from_dict({
            "distance": "xor",
            "nodes": {"n1": "00"},
            "switches": {"edge": {"attach": ["n1"]}},
        })

        assert topo.switch("edge").address == "edge"

    def test_explicit_switch_address_parsed(self):
        topo = Topology.from_dict({
            "distance": "xor",
            "switches": {"edge": {"address": "0a0b"}},
        })

        assert topo.switch("edge").address == b"\x0a\x0b"

    def test_hop_limit(self):
        topo = Topology.from_dict({
            "nodes": ["abc"],
            "switches": {"sw": {"attach": ["abc"]}},
        })

        packet = topo.send("sw", "abc", hop_limit=3)

        assert packet.hop_limit == 3
        assert topo.deliveries()["abc"][0].hop_limit == 2

    def test_name_of(self):
        topo = Topology.from_dict({"nodes": ["abc"], "switches": {"sw": {}}})

        assert topo.name_of(topo.node("abc")) == "abc"
        assert topo.name_of(topo.switch("sw")) == "sw"
        assert topo.name_of(object()) is None


class TestTopologyErrors:
    """Tests for malformed topologies."""

    def test_unknown_distance(self):
        with pytest.raises(UnknownDistanceError):
            Topology.from_dict({"distance": "manhattan"})

    def test_unknown_node(self):
        with pytest.raises(UnknownNodeError):
            Topology.from_dict({"nodes": ["a"], "switches": {"sw": {"attach": ["b"]}}})

    def test_unknown_switch(self):
        topo = Topology.from_dict({"nodes": ["a"]})

        with pytest.raises(UnknownNodeError):
            topo.send("nope", "a")

    def test_duplicate_name(self):
        with pytest.raises(TopologyError):
            Topology.from_dict({"nodes": ["a"], "switches": {"a": {}}})

    def test_bad_route(self):
        with pytest.raises(TopologyError):
            Topology.from_dict({
                "nodes": ["a"],
                "switches": {"sw": {"routes": [{"address": "a"}]}},
            })

    def test_missing_file(self, tmp_path):
        with pytest.raises(TopologyError):
            Topology.from_file(str(tmp_path / "missing.yaml"))

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "net.yaml"
        path.write_text("- just\n- a list\n")

        with pytest.raises(TopologyError):
            Topology.from_file(str(path))

    def test_bad_hex_address(self):
        with pytest.raises(TopologyError):
            Topology.from_dict({"distance": "xor", "nodes": {"n1": "zz"}})

        with pytest.raises(TopologyError):
            Topology.from_dict({"distance": "address", "switches": {"sw": {"address": "xyz"}}})

    def test_bad_destination(self):
        topo = Topology.from_dict({
            "distance": "xor",
            "nodes": {"n1": "00"},
            "switches": {"sw": {"attach": ["n1"]}},
        })

        with pytest.raises(TopologyError):
            topo.send("sw", "not-hex")

    def test_switch_settings_not_mapping(self):
        with pytest.raises(TopologyError):
            Topology.from_dict({"nodes": ["a"], "switches": {"sw": ["a"]}})

    def test_route_not_mapping(self):
        with pytest.raises(TopologyError):
            Topology.from_dict({"nodes": ["a"], "switches": {"sw": {"routes": [1]}}})

        with pytest.raises(TopologyError):
            Topology.from_dict({"nodes": ["a"], "switches": {"sw": {"routes": "a"}}})

    def test_name_lists_must_be_lists(self):
        with pytest.raises(TopologyError):
            Topology.from_dict({"nodes": ["a"], "switches": {"sw": {"attach": "a"}}})

        with pytest.raises(TopologyError):
            Topology.from_dict({"nodes": "a"})
