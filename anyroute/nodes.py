"""
Concrete nodes for anyroute.

- QueueNode: terminal node that buffers accepted packets (FIFO sink)
- BasicSwitch: forwards each packet to the next hop chosen by its Router
"""

import logging
from queue import Empty, Queue
from typing import Any, List, Optional, Sequence, Tuple

from .exceptions import InvalidNodeError, InvalidRouterError
from .interfaces import Node, Packet, Router, Switch, is_node, is_router
from .packets import HopLimitedPacket
from .stats import (
    stat_hop_limit_drop,
    stat_packet_dropped,
    stat_packet_enqueued,
    stat_packet_forwarded,
)

logger = logging.getLogger(__name__)


class QueueNode(Node):
    """
    Node that accepts packets into a queue.

    The buffer is a queue.Queue, so any number of switches may deliver into
    it concurrently while one consumer drains it. Arrival order is kept.
    With the default unbounded buffer delivery never blocks; with a bounded
    buffer a full queue blocks the delivering switch until the consumer
    catches up.
    """

    def __init__(self, address: Any, buffer: "Optional[Queue[Packet]]" = None):
        """
        Initialize queue node.

        Args:
            address: The node's address
            buffer: Queue to deliver into (new unbounded Queue if None)
        """
        self._address = address
        self._queue: "Queue[Packet]" = buffer if buffer is not None else Queue()

    @property
    def address(self) -> Any:
        return self._address

    @property
    def queue(self) -> "Queue[Packet]":
        """The packet buffer."""
        return self._queue

    def handle_packet(self, packet: Packet, forwarder: Optional[Node]) -> None:
        """Enqueue the incoming packet."""
        self._queue.put(packet)
        stat_packet_enqueued()

    def get(self, timeout: Optional[float] = None) -> Optional[Packet]:
        """
        Take the oldest packet.

        Args:
            timeout: Seconds to wait (None = wait forever, 0 = don't wait)

        Returns:
            Packet, or None if nothing arrived in time
        """
        try:
            if timeout == 0:
                return self._queue.get_nowait()
            return self._queue.get(timeout=timeout)
        except Empty:
            return None

    def drain(self) -> List[Packet]:
        """Take every packet currently buffered, oldest first."""
        packets = []
        while True:
            try:
                packets.append(self._queue.get_nowait())
            except Empty:
                return packets

    def __repr__(self) -> str:
        return f"QueueNode({self._address!r})"


class BasicSwitch(Switch):
    """
    Switch that forwards packets by asking its Router.

    The switch presents itself as the forwarder to the next hop. There is
    no loop detection: a routing setup that sends packets back around a
    cycle forwards them forever unless they carry a hop limit
    (HopLimitedPacket).
    """

    def __init__(self, address: Any, router: Router, neighbors: Sequence[Node] = ()):
        """
        Initialize switch.

        Args:
            address: The switch's own address
            router: Router that picks next hops
            neighbors: Adjacent nodes, offered to the router as candidates
        """
        if not is_router(router):
            raise InvalidRouterError(router)
        for node in neighbors:
            if not is_node(node):
                raise InvalidNodeError(node)

        self._address = address
        self._router = router
        self._neighbors: Tuple[Node, ...] = tuple(neighbors)

    @property
    def address(self) -> Any:
        return self._address

    @property
    def router(self) -> Router:
        return self._router

    @property
    def neighbors(self) -> Tuple[Node, ...]:
        """Adjacent nodes captured at construction."""
        return self._neighbors

    def handle_packet(self, packet: Packet, forwarder: Optional[Node]) -> None:
        """
        Forward a packet to the next hop, or drop it.

        Args:
            packet: Packet received
            forwarder: Node that sent it here
        """
        if isinstance(packet, HopLimitedPacket):
            if packet.expired:
                stat_hop_limit_drop()
                logger.debug(f"[{self._address!r}] Dropped packet to {packet.destination!r}: hop limit reached")
                return
            packet = packet.next_hop()

        next_hop = self._router.route(packet, self._neighbors)
        if next_hop is None:
            stat_packet_dropped()
            logger.debug(f"[{self._address!r}] Dropped packet to {packet.destination!r}: no route")
            return

        stat_packet_forwarded()
        next_hop.handle_packet(packet, self)

    def __repr__(self) -> str:
        return f"BasicSwitch({self._address!r}, neighbors={len(self._neighbors)})"


def new_queue_node(address: Any, buffer: "Optional[Queue[Packet]]" = None) -> QueueNode:
    """Construct a queue node."""
    return QueueNode(address, buffer)


def new_switch(address: Any, router: Router, neighbors: Sequence[Node] = ()) -> Switch:
    """Construct a switch with a router and its adjacent nodes."""
    return BasicSwitch(address, router, neighbors)
