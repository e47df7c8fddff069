"""
anyroute - generalized packet forwarding.

Build IP-like, content-addressed or purely logical networks out of
addresses, packets, nodes, switches and routers, and route payloads across
them with a pluggable distance function.
"""

__version__ = "1.0.0"
__author__ = "anyroute Contributors"

from .interfaces import Address, DistanceFunc, Node, Packet, Router, Switch
from .packets import BasicPacket, HopLimitedPacket, new_packet
from .distance import (
    ContentAddress,
    address_distance,
    content_address,
    is_unreachable,
    prefix_distance,
    suffix_distance,
    unit_distance,
    xor_distance,
)
from .table import Table, TableEntry
from .nodes import BasicSwitch, QueueNode, new_queue_node, new_switch
from .config import NO_ROUTE

__all__ = [
    "Address",
    "DistanceFunc",
    "Node",
    "Packet",
    "Router",
    "Switch",
    "BasicPacket",
    "HopLimitedPacket",
    "new_packet",
    "ContentAddress",
    "address_distance",
    "content_address",
    "is_unreachable",
    "prefix_distance",
    "suffix_distance",
    "unit_distance",
    "xor_distance",
    "Table",
    "TableEntry",
    "BasicSwitch",
    "QueueNode",
    "new_queue_node",
    "new_switch",
    "NO_ROUTE",
]
