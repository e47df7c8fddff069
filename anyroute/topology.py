"""
Declarative network construction for anyroute.

A topology describes queue nodes and switches in a mapping, usually loaded
from YAML:

    distance: suffix
    nodes: [aaa, aba, abc]
    switches:
      sw1:
        attach: [aaa, aba]        # one entry per node, under its address
        routes:                   # explicit entries, in order
          - {address: abc, via: aba}
        neighbors: [aaa, aba]

Queue nodes may also be given as a mapping of name -> address. Switch
neighbors may name queue nodes or switches declared earlier; table entries
may point at any node or switch.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

import yaml

from .config import DEFAULT_DISTANCE
from .distance import (
    ContentAddress,
    address_distance,
    prefix_distance,
    suffix_distance,
    unit_distance,
    xor_distance,
)
from .exceptions import TopologyError, UnknownDistanceError, UnknownNodeError
from .interfaces import DistanceFunc, Node, Packet
from .nodes import BasicSwitch, QueueNode
from .packets import new_packet
from .table import Table

logger = logging.getLogger(__name__)


DISTANCES: Dict[str, DistanceFunc] = {
    "unit": unit_distance,
    "suffix": suffix_distance,
    "xor": xor_distance,
    "prefix": prefix_distance,
    "address": address_distance,
}


def _hex_bytes(value: Any) -> Any:
    if isinstance(value, str):
        return bytes.fromhex(value)
    return value


def _content(value: Any) -> Any:
    if isinstance(value, str):
        return ContentAddress.from_hex(value)
    return value


# How addresses written in a topology are turned into address values
ADDRESS_PARSERS: Dict[str, Callable[[Any], Any]] = {
    "xor": _hex_bytes,
    "address": _content,
}


def resolve_distance(name: str) -> DistanceFunc:
    """Look up a distance function by name."""
    try:
        return DISTANCES[name]
    except KeyError:
        raise UnknownDistanceError(name) from None


def _names(settings: Mapping[str, Any], key: str, switch_name: str) -> List[Any]:
    """List of node names under key in a switch's settings."""
    value = settings.get(key) or []
    if not isinstance(value, list):
        raise TopologyError(f"'{key}' of switch '{switch_name}' must be a list of names")
    return value


class Topology:
    """A built network: named queue nodes, switches and their tables."""

    def __init__(self, distance: str = DEFAULT_DISTANCE):
        resolve_distance(distance)
        self.distance_name = distance
        self._nodes: Dict[str, QueueNode] = {}
        self._switches: Dict[str, BasicSwitch] = {}
        self._tables: Dict[str, Table] = {}
        self._raw_addresses: Dict[str, Any] = {}  # queue node name -> address as written

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    @classmethod
    def from_file(cls, path: str) -> "Topology":
        """
        Build a topology from a YAML file.

        Raises:
            TopologyError: If the file cannot be read or is malformed
        """
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise TopologyError(f"Cannot read topology {path}: {e}") from e
        except yaml.YAMLError as e:
            raise TopologyError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise TopologyError(f"Topology {path} must be a mapping")
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Topology":
        """Build a topology from a mapping."""
        topo = cls(str(data.get("distance", DEFAULT_DISTANCE)))

        nodes = data.get("nodes") or []
        if isinstance(nodes, Mapping):
            items = [(str(name), name if addr is None else addr) for name, addr in nodes.items()]
        elif isinstance(nodes, list):
            items = [(str(name), name) for name in nodes]
        else:
            raise TopologyError("'nodes' must be a list of names or a mapping of name -> address")
        for name, addr in items:
            topo._raw_addresses[name] = addr
            topo.add_queue_node(name, topo._parse(topo.distance_name, addr))

        switches = data.get("switches") or {}
        if not isinstance(switches, Mapping):
            raise TopologyError("'switches' must be a mapping of name -> settings")

        settings_by_name: Dict[str, Mapping[str, Any]] = {}
        for name, settings in switches.items():
            settings = settings or {}
            if not isinstance(settings, Mapping):
                raise TopologyError(f"Settings of switch '{name}' must be a mapping")
            settings_by_name[str(name)] = settings

        # Switches first (neighbors are fixed at construction), entries after
        for name, settings in settings_by_name.items():
            dist_name = str(settings.get("distance", topo.distance_name))
            table = Table(
                distance=resolve_distance(dist_name),
                restrict_to_candidates=bool(settings.get("restrict_to_candidates", False)),
            )
            neighbors = [topo.node(n) for n in _names(settings, "neighbors", name)]
            if "address" in settings:
                address = topo._parse(dist_name, settings["address"])
            else:
                address = name
            topo.add_switch(name, address, table, neighbors)

        for name, settings in settings_by_name.items():
            dist_name = str(settings.get("distance", topo.distance_name))
            table = topo.table(name)
            for attached in _names(settings, "attach", name):
                node = topo.node(attached)
                raw = topo._raw_addresses.get(str(attached))
                if raw is None:
                    table.add_node(node)
                else:
                    # Queue node addresses follow this switch's addressing scheme
                    table.add_entry(topo._parse(dist_name, raw), node)
            routes = settings.get("routes") or []
            if not isinstance(routes, list):
                raise TopologyError(f"Routes on '{name}' must be a list")
            for route in routes:
                if not isinstance(route, Mapping) or "address" not in route or "via" not in route:
                    raise TopologyError(f"Route on '{name}' needs 'address' and 'via': {route!r}")
                table.add_entry(topo._parse(dist_name, route["address"]), topo.node(route["via"]))

        logger.debug(
            f"Built topology: {len(topo._nodes)} nodes, {len(topo._switches)} switches"
        )
        return topo

    @staticmethod
    def _parse(distance_name: str, value: Any) -> Any:
        """Turn an address written in a topology into an address value."""
        parser = ADDRESS_PARSERS.get(distance_name)
        if parser is None:
            return value
        try:
            return parser(value)
        except (TypeError, ValueError) as e:
            raise TopologyError(
                f"Invalid {distance_name} address {value!r}: {e}"
            ) from e

    # -------------------------------------------------------------------------
    # Building
    # -------------------------------------------------------------------------

    def _check_free(self, name: str) -> None:
        if name in self._nodes or name in self._switches:
            raise TopologyError(f"Duplicate node name '{name}'")

    def add_queue_node(self, name: str, address: Any) -> QueueNode:
        """Declare a queue node."""
        self._check_free(name)
        node = QueueNode(address)
        self._nodes[name] = node
        return node

    def add_switch(
        self, name: str, address: Any, table: Table, neighbors: List[Node]
    ) -> BasicSwitch:
        """Declare a switch routed by table."""
        self._check_free(name)
        switch = BasicSwitch(address, table, neighbors)
        self._switches[name] = switch
        self._tables[name] = table
        return switch

    # -------------------------------------------------------------------------
    # Access
    # -------------------------------------------------------------------------

    def node(self, name: str) -> Node:
        """Queue node or switch by name."""
        name = str(name)
        if name in self._nodes:
            return self._nodes[name]
        if name in self._switches:
            return self._switches[name]
        raise UnknownNodeError(name)

    def switch(self, name: str) -> BasicSwitch:
        try:
            return self._switches[str(name)]
        except KeyError:
            raise UnknownNodeError(str(name)) from None

    def table(self, name: str) -> Table:
        try:
            return self._tables[str(name)]
        except KeyError:
            raise UnknownNodeError(str(name)) from None

    @property
    def queue_nodes(self) -> Dict[str, QueueNode]:
        return dict(self._nodes)

    @property
    def switches(self) -> Dict[str, BasicSwitch]:
        return dict(self._switches)

    def name_of(self, node: Node) -> Optional[str]:
        """Reverse lookup of a node's name."""
        for name, candidate in list(self._nodes.items()) + list(self._switches.items()):
            if candidate is node:
                return name
        return None

    # -------------------------------------------------------------------------
    # Traffic
    # -------------------------------------------------------------------------

    def send(
        self,
        switch_name: str,
        destination: Any,
        payload: Any = None,
        hop_limit: Optional[int] = None,
    ) -> Packet:
        """
        Inject a packet at a switch.

        The destination is parsed the same way as the switch's table
        addresses. The packet is handed over with no forwarder.

        Returns:
            The packet that was sent
        """
        switch = self.switch(switch_name)
        address = self._parse(self._distance_name_of(switch_name), destination)
        packet = new_packet(address, payload, hop_limit)
        switch.handle_packet(packet, None)
        return packet

    def _distance_name_of(self, switch_name: str) -> str:
        dist = self.table(switch_name).distance
        for name, func in DISTANCES.items():
            if func is dist:
                return name
        return self.distance_name

    def deliveries(self) -> Dict[str, List[Packet]]:
        """Drain every queue node. Only nodes that received packets appear."""
        result = {}
        for name, node in self._nodes.items():
            packets = node.drain()
            if packets:
                result[name] = packets
        return result
