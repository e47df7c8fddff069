"""
Packet types for anyroute.

Packets are immutable. Routing only ever reads the destination.
"""

from dataclasses import dataclass, replace
from typing import Any, Optional

from .config import DEFAULT_HOP_LIMIT
from .exceptions import InvalidHopLimitError
from .interfaces import Packet


@dataclass(frozen=True)
class BasicPacket(Packet):
    """A destination Address paired with an opaque payload."""

    _destination: Any
    _payload: Any = None

    @property
    def destination(self) -> Any:
        return self._destination

    @property
    def payload(self) -> Any:
        return self._payload


@dataclass(frozen=True)
class HopLimitedPacket(BasicPacket):
    """
    A packet carrying a hop budget.

    Switches drop it once the budget is spent and otherwise forward a copy
    with one hop less, which bounds forwarding loops in cyclic topologies.
    """

    hop_limit: int = DEFAULT_HOP_LIMIT

    def __post_init__(self):
        if isinstance(self.hop_limit, bool) or not isinstance(self.hop_limit, int) or self.hop_limit < 0:
            raise InvalidHopLimitError(self.hop_limit)

    @property
    def expired(self) -> bool:
        """True once no hops are left."""
        return self.hop_limit <= 0

    def next_hop(self) -> "HopLimitedPacket":
        """Copy of this packet with one hop less."""
        return replace(self, hop_limit=self.hop_limit - 1)


def new_packet(destination: Any, payload: Any = None, hop_limit: Optional[int] = None) -> Packet:
    """
    Construct a packet.

    Args:
        destination: Destination address
        payload: Opaque payload
        hop_limit: Optional hop budget; a HopLimitedPacket is built when set

    Returns:
        An immutable Packet
    """
    if hop_limit is None:
        return BasicPacket(destination, payload)
    return HopLimitedPacket(destination, payload, hop_limit)
