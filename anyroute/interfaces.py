"""
Capability contracts for anyroute.

An anyroute network is built from five roles:

- Address: an opaque identity. Anything can be an address (an IP, a
  content hash, a file path) as long as a distance function can compare it.
- Packet: a destination Address plus an opaque payload.
- Node: an endpoint that accepts packets from the node that forwarded them.
- Router: the control plane. Given a packet and the candidate nodes it
  picks one next hop, or None to drop.
- Switch: a Node that forwards every packet it receives according to
  its Router.

Static tables, computed routing, URL or protocol muxers all fit behind the
Router contract. Concrete roles are composed by reference: a switch holds
a router, a table holds nodes.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Sequence

# Distance between two addresses. Negative means unreachable.
DistanceFunc = Callable[[Any, Any], int]


class Address(ABC):
    """An identity that knows its distance to other identities."""

    @abstractmethod
    def distance(self, other: Any) -> int:
        """Distance to another address; negative if incomparable."""
        pass


class Packet(ABC):
    """The unit that moves through the network."""

    @property
    @abstractmethod
    def destination(self) -> Any:
        """Address of the endpoint this packet is headed to."""
        pass

    @property
    @abstractmethod
    def payload(self) -> Any:
        """Opaque content. Never inspected by routing."""
        pass


class Node(ABC):
    """An endpoint connected to the network."""

    @property
    @abstractmethod
    def address(self) -> Any:
        """The node's own address."""
        pass

    @abstractmethod
    def handle_packet(self, packet: Packet, forwarder: Optional["Node"]) -> None:
        """
        Accept a packet.

        Args:
            packet: The packet being delivered
            forwarder: The node that handed it over (originator or switch)
        """
        pass


class Router(ABC):
    """Decides where a packet goes next."""

    @abstractmethod
    def route(
        self, packet: Packet, nodes: Optional[Sequence[Node]] = None
    ) -> Optional[Node]:
        """
        Choose the next hop for a packet.

        Args:
            packet: Packet to route (only its destination is read)
            nodes: Candidate next hops known to the caller

        Returns:
            The chosen Node, or None to drop the packet
        """
        pass


class Switch(Node):
    """A Node that forwards packets according to a Router."""

    @property
    @abstractmethod
    def router(self) -> Router:
        """The Router used to pick next hops."""
        pass


def is_node(obj: Any) -> bool:
    """True if obj has an address and can accept packets."""
    return hasattr(obj, "address") and callable(getattr(obj, "handle_packet", None))


def is_router(obj: Any) -> bool:
    """True if obj can route packets."""
    return callable(getattr(obj, "route", None))
