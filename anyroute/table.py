"""
Distance-based forwarding table for anyroute.

Table is a Router that keeps an ordered list of (address, next hop)
entries and routes a packet to the entry closest to its destination:

    n1 = QueueNode("aaa")
    n2 = QueueNode("aba")
    n3 = QueueNode("abc")

    table = Table(distance=suffix_distance)
    table.add_nodes(n1, n2)

    table.route(new_packet("aaa"))  # n1
    table.route(new_packet("abc"))  # n2, closest while n3 is unknown

    table.add_node(n3)
    table.route(new_packet("abc"))  # n3
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Sequence, Tuple

from .distance import unit_distance
from .exceptions import InvalidDistanceError, InvalidNodeError
from .interfaces import DistanceFunc, Node, Packet, Router, is_node
from .stats import stat_route_missed, stat_route_resolved

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TableEntry:
    """A node reachable via an address."""
    address: Any
    next_hop: Node


class Table(Router):
    """
    Routing table driven by a distance function.

    Entries are kept in insertion order. When several entries are equally
    close to a destination the earliest one wins.

    Writers are serialized by a lock and publish a new entry tuple on every
    change (copy-on-write). route() reads a single snapshot without locking,
    so any number of threads may route while another thread edits the
    table; each lookup sees the table either before or after an edit.

    The table itself takes no lock while routing, but every lookup bumps a
    routes_resolved / routes_missed counter in the process-wide
    StatsCollector, which holds its own RLock for the increment.
    """

    def __init__(
        self,
        distance: Optional[DistanceFunc] = None,
        entries: Sequence[TableEntry] = (),
        restrict_to_candidates: bool = False,
    ):
        """
        Initialize table.

        Args:
            distance: Distance function; exact equality when None
            entries: Initial entries, in order
            restrict_to_candidates: Only consider entries whose next hop is
                among the candidate nodes passed to route()
        """
        if distance is not None and not callable(distance):
            raise InvalidDistanceError(distance)

        self._lock = threading.RLock()
        self._distance = distance
        self._restrict = restrict_to_candidates
        self._entries: Tuple[TableEntry, ...] = ()

        for entry in entries:
            self.add_entry(entry.address, entry.next_hop)

    @property
    def distance(self) -> Optional[DistanceFunc]:
        """Configured distance function (None means exact equality)."""
        return self._distance

    @property
    def entries(self) -> Tuple[TableEntry, ...]:
        """Snapshot of all entries in insertion order."""
        return self._entries

    # -------------------------------------------------------------------------
    # Maintenance
    # -------------------------------------------------------------------------

    def add_entry(self, address: Any, next_hop: Node) -> None:
        """
        Append an (address, next hop) entry.

        Args:
            address: Address the next hop is reachable by
            next_hop: Node to forward matching packets to
        """
        if not is_node(next_hop):
            raise InvalidNodeError(next_hop)

        with self._lock:
            self._entries = self._entries + (TableEntry(address, next_hop),)

    def add_node(self, node: Node) -> None:
        """Append an entry for node under its own address."""
        if not is_node(node):
            raise InvalidNodeError(node)
        self.add_entry(node.address, node)

    def add_nodes(self, *nodes: Node) -> None:
        """Append one entry per node, in order."""
        for node in nodes:
            if not is_node(node):
                raise InvalidNodeError(node)

        with self._lock:
            self._entries = self._entries + tuple(
                TableEntry(node.address, node) for node in nodes
            )

    def replace_entry(self, address: Any, next_hop: Node) -> bool:
        """
        Point an address at a new next hop.

        The first entry with an equal address keeps its position and gets
        the new next hop; later entries with that address are removed. If
        there is none, the entry is appended.

        Args:
            address: Address to update
            next_hop: New next hop

        Returns:
            True if an existing entry was replaced
        """
        if not is_node(next_hop):
            raise InvalidNodeError(next_hop)

        with self._lock:
            updated = []
            replaced = False
            for entry in self._entries:
                if entry.address == address:
                    if not replaced:
                        updated.append(TableEntry(address, next_hop))
                        replaced = True
                    continue
                updated.append(entry)

            if not replaced:
                updated.append(TableEntry(address, next_hop))

            self._entries = tuple(updated)
            return replaced

    def remove_entries(self, address: Any) -> int:
        """
        Remove every entry with an equal address.

        Returns:
            Number of entries removed
        """
        with self._lock:
            kept = tuple(e for e in self._entries if e.address != address)
            removed = len(self._entries) - len(kept)
            self._entries = kept
            return removed

    def clear(self) -> None:
        """Remove all entries."""
        with self._lock:
            self._entries = ()

    # -------------------------------------------------------------------------
    # Routing
    # -------------------------------------------------------------------------

    def route(
        self, packet: Packet, nodes: Optional[Sequence[Node]] = None
    ) -> Optional[Node]:
        """
        Pick the next hop closest to the packet's destination.

        Args:
            packet: Packet to route
            nodes: Candidate next hops. Ignored unless the table was built
                with restrict_to_candidates=True.

        Returns:
            Next hop Node, or None if nothing is reachable (drop)
        """
        entries = self._entries
        if not entries:
            stat_route_missed()
            return None

        dist = unit_distance if self._distance is None else self._distance
        candidates = None
        if self._restrict and nodes is not None:
            candidates = {id(n) for n in nodes}

        dest = packet.destination
        best: Optional[Node] = None
        best_dist = 0

        for entry in entries:
            if candidates is not None and id(entry.next_hop) not in candidates:
                continue
            d = dist(entry.address, dest)
            if d < 0:
                continue
            if best is None or d < best_dist:
                best_dist = d
                best = entry.next_hop

        if best is None:
            stat_route_missed()
            logger.debug(f"No route to {dest!r} ({len(entries)} entries)")
        else:
            stat_route_resolved()
        return best

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[TableEntry]:
        return iter(self._entries)

    def __repr__(self) -> str:
        name = getattr(self._distance, "__name__", "unit_distance")
        return f"Table(entries={len(self._entries)}, distance={name})"
